"""Board membership gate used by every board-scoped operation."""
from enum import Enum
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFound, PermissionDenied
from app.db.models.board import Board
from app.db.models.board_member import BoardMember


class Role(str, Enum):
    ADMIN = "ADMIN"
    EDITOR = "EDITOR"
    VIEWER = "VIEWER"


ANY_MEMBER = frozenset({Role.ADMIN, Role.EDITOR, Role.VIEWER})
EDITORS = frozenset({Role.ADMIN, Role.EDITOR})
ADMINS = frozenset({Role.ADMIN})


async def get_membership(
    db: AsyncSession, user_id: str, board_id: str
) -> Optional[BoardMember]:
    result = await db.execute(
        select(BoardMember).where(
            BoardMember.user_id == user_id, BoardMember.board_id == board_id
        )
    )
    return result.scalar_one_or_none()


async def authorize(
    db: AsyncSession, user_id: str, board_id: str, allowed_roles: Iterable[Role]
) -> bool:
    """True iff the user is a member of the board with one of ``allowed_roles``."""
    member = await get_membership(db, user_id, board_id)
    if member is None:
        return False
    return member.role in {Role(r).value for r in allowed_roles}


async def require_board(
    db: AsyncSession,
    user_id: str,
    board_id: str,
    allowed_roles: Iterable[Role],
    message: str = "You do not have permission to perform this action",
) -> Board:
    """Load the board and check the caller's role, before any write happens."""
    board = await db.get(Board, board_id)
    if not board:
        raise NotFound("Board not found")
    if not await authorize(db, user_id, board_id, allowed_roles):
        raise PermissionDenied(message)
    return board
