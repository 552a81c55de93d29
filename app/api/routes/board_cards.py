import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.access import ANY_MEMBER, EDITORS, require_board
from app.core.errors import NotFound, ValidationError
from app.core.grouping import pick_grouping_property, plan_move
from app.core.security import get_current_user
from app.core.services import (
    DEFAULT_CARD_ICON,
    DEFAULT_CARD_TITLE,
    list_cards,
    next_card_order,
)
from app.db.session import get_db
from app.db.models import Card, User
from app.schemas.board import MessageResponse
from app.schemas.card import (
    CardCreate,
    CardListResponse,
    CardRead,
    CardResponse,
    CardUpdate,
    MoveRequest,
    MoveResponse,
    ReorderEntry,
    ReorderRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/boards/{board_id}", tags=["cards"])

REQUIRED_CARD_FIELDS = {"title", "properties", "icon", "order"}


async def get_card_or_404(db: AsyncSession, board_id: str, card_id: str) -> Card:
    result = await db.execute(
        select(Card).where(Card.id == card_id, Card.board_id == board_id)
    )
    card = result.scalar_one_or_none()
    if not card:
        raise NotFound("Card not found")
    return card


async def apply_reorder(db: AsyncSession, board_id: str, entries: List[ReorderEntry]):
    """Write a batch of order/property updates in one commit.

    Every id must belong to the board; nothing is written otherwise.
    """
    ids = [e.id for e in entries]
    result = await db.execute(
        select(Card).where(Card.board_id == board_id, Card.id.in_(ids))
    )
    cards = {c.id: c for c in result.scalars().all()}
    missing = [cid for cid in ids if cid not in cards]
    if missing:
        raise NotFound(f"Cards not found: {', '.join(missing)}")

    for entry in entries:
        card = cards[entry.id]
        card.order = entry.order
        if entry.properties is not None:
            card.properties = entry.properties
    await db.commit()


@router.get("/cards", response_model=CardListResponse)
async def get_cards(
    board_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await require_board(db, user.id, board_id, ANY_MEMBER, "You do not have access to this board")
    return {"cards": [CardRead.model_validate(c) for c in await list_cards(db, board_id)]}


@router.post("/cards", response_model=CardResponse, status_code=201)
async def create_card(
    board_id: str,
    data: CardCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await require_board(db, user.id, board_id, EDITORS, "You do not have permission to add cards")

    card = Card(
        board_id=board_id,
        title=data.title or DEFAULT_CARD_TITLE,
        content=data.content,
        properties=data.properties or {},
        icon=data.icon or DEFAULT_CARD_ICON,
        order=await next_card_order(db, board_id),
        parent_id=data.parent_id,
        created_by_id=user.id,
    )
    db.add(card)
    await db.commit()
    await db.refresh(card)

    return {"card": CardRead.model_validate(card)}


@router.get("/cards/{card_id}", response_model=CardResponse)
async def get_card(
    board_id: str,
    card_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await require_board(db, user.id, board_id, ANY_MEMBER, "You do not have access to this board")
    card = await get_card_or_404(db, board_id, card_id)
    return {"card": CardRead.model_validate(card)}


@router.put("/cards/{card_id}", response_model=CardResponse)
async def update_card(
    board_id: str,
    card_id: str,
    data: CardUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await require_board(db, user.id, board_id, EDITORS, "You do not have permission to edit cards")
    card = await get_card_or_404(db, board_id, card_id)

    # Only fields present in the request body are applied
    for name, value in data.model_dump(exclude_unset=True).items():
        if value is None and name in REQUIRED_CARD_FIELDS:
            continue
        setattr(card, name, value)

    await db.commit()
    await db.refresh(card)

    return {"card": CardRead.model_validate(card)}


@router.delete("/cards/{card_id}", response_model=MessageResponse)
async def delete_card(
    board_id: str,
    card_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await require_board(db, user.id, board_id, EDITORS, "You do not have permission to delete cards")
    card = await get_card_or_404(db, board_id, card_id)

    await db.delete(card)
    await db.commit()

    return {"message": f"Card {card_id} deleted"}


@router.put("/cards-reorder", response_model=MessageResponse)
async def reorder_cards(
    board_id: str,
    data: ReorderRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await require_board(db, user.id, board_id, EDITORS, "You do not have permission to edit cards")
    await apply_reorder(db, board_id, data.cards)
    return {"message": f"Reordered {len(data.cards)} cards"}


@router.post("/cards/{card_id}/move", response_model=MoveResponse)
async def move_card(
    board_id: str,
    card_id: str,
    data: MoveRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Drop a card onto another card or into a column and persist the result."""
    board = await require_board(db, user.id, board_id, EDITORS, "You do not have permission to edit cards")

    if data.group_property_id:
        prop = next((p for p in board.properties if p.id == data.group_property_id), None)
        if prop is None:
            raise NotFound("Grouping property not found")
    else:
        prop = pick_grouping_property(board.properties)
        if prop is None:
            raise ValidationError("Board has no property to group cards by")

    cards = await list_cards(db, board_id)
    entries = plan_move(cards, prop, card_id, data.over_card_id, data.target_group)
    await apply_reorder(db, board_id, entries)
    logger.info(f"Moved card {card_id} on board {board_id}: {len(entries)} cards updated")

    return {"cards": entries}
