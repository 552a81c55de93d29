import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.access import ADMINS, ANY_MEMBER, EDITORS, Role, require_board
from app.core.errors import ValidationError
from app.core.security import get_current_user
from app.core.services import (
    DEFAULT_BOARD_ICON,
    DEFAULT_KANBAN_VIEW_TITLE,
    count_cards,
    default_properties,
    list_cards,
    list_views,
    load_members,
    schedule_blob_purge,
)
from app.core.storage import BlobStore, get_blob_store
from app.db.session import get_db
from app.db.models import Board, BoardMember, Card, File, User, View
from app.schemas.board import (
    BoardBase,
    BoardCreate,
    BoardListResponse,
    BoardRead,
    BoardResponse,
    BoardSummary,
    BoardUpdate,
    MessageResponse,
)
from app.schemas.card import CardRead
from app.schemas.file import FileListResponse, FileRead
from app.schemas.member import MemberRead
from app.schemas.view import ViewRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/boards", tags=["boards"])


async def build_board_read(db: AsyncSession, board: Board) -> BoardRead:
    members = await load_members(db, [board.id])
    return BoardRead(
        **BoardBase.model_validate(board).model_dump(),
        members=[MemberRead.model_validate(m) for m in members[board.id]],
        cards=[CardRead.model_validate(c) for c in await list_cards(db, board.id)],
        views=[ViewRead.model_validate(v) for v in await list_views(db, board.id)],
    )


@router.get("", response_model=BoardListResponse)
async def list_boards(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List the boards the caller is a member of, most recently updated first."""
    result = await db.execute(
        select(Board)
        .join(BoardMember, BoardMember.board_id == Board.id)
        .where(BoardMember.user_id == user.id)
        .order_by(Board.updated_at.desc())
    )
    boards = result.scalars().all()
    board_ids = [b.id for b in boards]
    members = await load_members(db, board_ids)
    card_counts = await count_cards(db, board_ids)

    return {
        "boards": [
            BoardSummary(
                **BoardBase.model_validate(board).model_dump(),
                members=[MemberRead.model_validate(m) for m in members[board.id]],
                card_count=card_counts.get(board.id, 0),
            )
            for board in boards
        ]
    }


@router.post("", response_model=BoardResponse, status_code=201)
async def create_board(
    data: BoardCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a board with the default schema and one Kanban view."""
    if not data.title or not data.title.strip():
        raise ValidationError("Board title is required")

    board = Board(
        title=data.title.strip(),
        description=data.description,
        icon=data.icon or DEFAULT_BOARD_ICON,
        properties=default_properties(),
        created_by_id=user.id,
    )
    db.add(board)
    await db.flush()
    db.add(BoardMember(user_id=user.id, board_id=board.id, role=Role.ADMIN.value))
    db.add(View(board_id=board.id, title=DEFAULT_KANBAN_VIEW_TITLE, type="BOARD"))
    await db.commit()
    await db.refresh(board)
    logger.info(f"User {user.id} created board {board.id}")

    return {"board": await build_board_read(db, board)}


@router.get("/{board_id}", response_model=BoardResponse)
async def get_board(
    board_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Fetch a board with its members, cards and views."""
    board = await require_board(db, user.id, board_id, ANY_MEMBER, "You do not have access to this board")
    return {"board": await build_board_read(db, board)}


@router.put("/{board_id}", response_model=BoardResponse)
async def update_board(
    board_id: str,
    data: BoardUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    board = await require_board(db, user.id, board_id, EDITORS, "You do not have permission to edit this board")

    if data.title:
        board.title = data.title
    if data.description is not None:
        board.description = data.description
    if data.icon:
        board.icon = data.icon
    if data.properties is not None:
        board.properties = data.properties
    if data.show_description is not None:
        board.show_description = data.show_description

    await db.commit()
    await db.refresh(board)

    return {"board": await build_board_read(db, board)}


@router.delete("/{board_id}", response_model=MessageResponse)
async def delete_board(
    board_id: str,
    request: Request,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
):
    """Delete a board along with its cards, views, members and files."""
    board = await require_board(db, user.id, board_id, ADMINS, "Only board admins can delete this board")

    for model in (Card, View, File, BoardMember):
        await db.execute(delete(model).where(model.board_id == board_id))

    await db.delete(board)
    await db.commit()
    logger.info(f"User {user.id} deleted board {board_id}")

    await schedule_blob_purge(getattr(request.app.state, "redis", None), blobs, board_id)

    return {"message": f"Board {board_id} deleted"}


@router.get("/{board_id}/files", response_model=FileListResponse)
async def list_files(
    board_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await require_board(db, user.id, board_id, ANY_MEMBER, "You do not have access to this board")
    result = await db.execute(
        select(File).where(File.board_id == board_id).order_by(File.created_at)
    )
    return {"files": [FileRead.model_validate(f) for f in result.scalars().all()]}
