import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.access import ADMINS, require_board
from app.core.errors import NotFound, ValidationError
from app.core.security import get_current_user
from app.db.session import get_db
from app.db.models import BoardMember, User
from app.schemas.board import MessageResponse
from app.schemas.member import MemberAdd, MemberRead, MemberResponse, MemberRoleUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/boards/{board_id}/members", tags=["members"])


async def get_member_or_404(db: AsyncSession, board_id: str, member_id: str) -> BoardMember:
    result = await db.execute(
        select(BoardMember)
        .where(BoardMember.id == member_id, BoardMember.board_id == board_id)
        .options(selectinload(BoardMember.user))
        .execution_options(populate_existing=True)
    )
    member = result.scalar_one_or_none()
    if not member:
        raise NotFound("Member not found")
    return member


@router.post("", response_model=MemberResponse, status_code=201)
async def add_member(
    board_id: str,
    data: MemberAdd,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await require_board(db, user.id, board_id, ADMINS, "Only board admins can add members")

    result = await db.execute(select(User).where(User.email == data.email.strip().lower()))
    invitee = result.scalar_one_or_none()
    if not invitee:
        raise NotFound("No user with that email")

    existing = await db.execute(
        select(BoardMember).where(
            BoardMember.user_id == invitee.id, BoardMember.board_id == board_id
        )
    )
    if existing.scalar_one_or_none():
        raise ValidationError("User is already a member of this board")

    member = BoardMember(user_id=invitee.id, board_id=board_id, role=data.role)
    db.add(member)
    await db.commit()
    logger.info(f"User {invitee.id} added to board {board_id} as {data.role}")

    member = await get_member_or_404(db, board_id, member.id)
    return {"member": MemberRead.model_validate(member)}


@router.put("/{member_id}", response_model=MemberResponse)
async def update_member_role(
    board_id: str,
    member_id: str,
    data: MemberRoleUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await require_board(db, user.id, board_id, ADMINS, "Only board admins can change roles")
    member = await get_member_or_404(db, board_id, member_id)

    member.role = data.role
    await db.commit()

    return {"member": MemberRead.model_validate(member)}


@router.delete("/{member_id}", response_model=MessageResponse)
async def remove_member(
    board_id: str,
    member_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await require_board(db, user.id, board_id, ADMINS, "Only board admins can remove members")
    member = await get_member_or_404(db, board_id, member_id)

    await db.delete(member)
    await db.commit()
    logger.info(f"Member {member_id} removed from board {board_id}")

    return {"message": f"Member {member_id} removed"}
