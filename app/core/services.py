import logging
from typing import Dict, List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.storage import BlobStore
from app.db.models import Board, BoardMember, Card, View
from app.schemas.fields import CardProperty, PropertyOption

logger = logging.getLogger(__name__)

DEFAULT_BOARD_ICON = "📋"
DEFAULT_CARD_ICON = "📝"
DEFAULT_CARD_TITLE = "New card"
DEFAULT_VIEW_TITLE = "New view"
DEFAULT_KANBAN_VIEW_TITLE = "Kanban view"


def default_properties() -> List[CardProperty]:
    """Property schema every new board starts with."""
    return [
        CardProperty(
            id="status",
            name="Status",
            type="select",
            options=[
                PropertyOption(id="todo", value="In progress", color="propColorRed"),
                PropertyOption(id="next", value="Up next", color="propColorPurple"),
                PropertyOption(id="done", value="Ready to report", color="propColorGreen"),
                PropertyOption(id="idea", value="Idea", color="propColorGray"),
                PropertyOption(id="archived", value="Archived", color="propColorBrown"),
            ],
        ),
        CardProperty(
            id="priority",
            name="Priority",
            type="select",
            options=[
                PropertyOption(id="high", value="High", color="propColorRed"),
                PropertyOption(id="medium", value="Medium", color="propColorYellow"),
                PropertyOption(id="low", value="Low", color="propColorGray"),
            ],
        ),
        CardProperty(id="assignee", name="Assignee", type="text"),
        CardProperty(id="dueDate", name="Due date", type="date"),
        CardProperty(id="notes", name="Notes", type="text"),
    ]


# --- Queries shared by the board routes --- #


async def load_members(db: AsyncSession, board_ids: List[str]) -> Dict[str, List[BoardMember]]:
    result = await db.execute(
        select(BoardMember)
        .where(BoardMember.board_id.in_(board_ids))
        .options(selectinload(BoardMember.user))
        .order_by(BoardMember.created_at)
        .execution_options(populate_existing=True)
    )
    members: Dict[str, List[BoardMember]] = {bid: [] for bid in board_ids}
    for member in result.scalars().all():
        members[member.board_id].append(member)
    return members


async def count_cards(db: AsyncSession, board_ids: List[str]) -> Dict[str, int]:
    result = await db.execute(
        select(Card.board_id, func.count(Card.id))
        .where(Card.board_id.in_(board_ids))
        .group_by(Card.board_id)
    )
    return dict(result.all())


async def list_cards(db: AsyncSession, board_id: str) -> List[Card]:
    result = await db.execute(
        select(Card).where(Card.board_id == board_id).order_by(Card.order)
    )
    return list(result.scalars().all())


async def list_views(db: AsyncSession, board_id: str) -> List[View]:
    result = await db.execute(
        select(View).where(View.board_id == board_id).order_by(View.created_at)
    )
    return list(result.scalars().all())


async def next_card_order(db: AsyncSession, board_id: str) -> int:
    result = await db.execute(
        select(func.max(Card.order)).where(Card.board_id == board_id)
    )
    current = result.scalar()
    return 0 if current is None else current + 1


# --- Blob cleanup --- #


async def redis_purge_board_files(redis, board_id: str):
    await redis.enqueue_job("purge_board_files", board_id)


async def schedule_blob_purge(redis, blobs: BlobStore, board_id: str):
    """Hand the purge to the worker when a queue is available, else do it now."""
    if redis is None:
        blobs.purge(board_id)
        return
    try:
        await redis_purge_board_files(redis, board_id)
    except Exception as e:
        logger.warning(f"Could not enqueue blob purge for board {board_id}: {e}")
        blobs.purge(board_id)
