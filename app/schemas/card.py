from datetime import datetime
from typing import Dict, List, Optional

from app.schemas.base import CamelModel

class CardCreate(CamelModel):
    title: Optional[str] = None
    content: Optional[str] = None
    properties: Optional[Dict[str, str]] = None
    icon: Optional[str] = None
    parent_id: Optional[str] = None

class CardUpdate(CamelModel):
    title: Optional[str] = None
    content: Optional[str] = None
    properties: Optional[Dict[str, str]] = None
    icon: Optional[str] = None
    order: Optional[int] = None
    parent_id: Optional[str] = None

class CardRead(CamelModel):
    id: str
    board_id: str
    title: str
    content: Optional[str] = None
    properties: Dict[str, str]
    icon: str
    order: int
    parent_id: Optional[str] = None
    created_by_id: str
    created_at: datetime
    updated_at: datetime

class ReorderEntry(CamelModel):
    id: str
    order: int
    properties: Optional[Dict[str, str]] = None

class ReorderRequest(CamelModel):
    cards: List[ReorderEntry]

class MoveRequest(CamelModel):
    """Drop of a card onto another card, or directly into a group."""

    group_property_id: Optional[str] = None
    target_group: Optional[str] = None
    over_card_id: Optional[str] = None

class MoveResponse(CamelModel):
    cards: List[ReorderEntry]

class CardListResponse(CamelModel):
    cards: List[CardRead]

class CardResponse(CamelModel):
    card: CardRead
