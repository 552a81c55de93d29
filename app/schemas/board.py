from datetime import datetime
from typing import List, Optional

from app.schemas.base import CamelModel
from app.schemas.card import CardRead
from app.schemas.fields import CardProperty
from app.schemas.member import MemberRead
from app.schemas.view import ViewRead

class BoardCreate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None

class BoardUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    properties: Optional[List[CardProperty]] = None
    show_description: Optional[bool] = None

class BoardBase(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    icon: str
    show_description: bool
    properties: List[CardProperty]
    created_by_id: str
    created_at: datetime
    updated_at: datetime

class BoardSummary(BoardBase):
    members: List[MemberRead] = []
    card_count: int = 0

class BoardRead(BoardBase):
    members: List[MemberRead] = []
    cards: List[CardRead] = []
    views: List[ViewRead] = []

class BoardListResponse(CamelModel):
    boards: List[BoardSummary]

class BoardResponse(CamelModel):
    board: BoardRead

class MessageResponse(CamelModel):
    message: str
