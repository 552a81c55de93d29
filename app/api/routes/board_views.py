import logging

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.access import ANY_MEMBER, EDITORS, require_board
from app.core.errors import NotFound, ValidationError
from app.core.security import get_current_user
from app.core.services import DEFAULT_VIEW_TITLE, list_views
from app.db.session import get_db
from app.db.models import User, View
from app.schemas.board import MessageResponse
from app.schemas.view import ViewCreate, ViewListResponse, ViewRead, ViewResponse, ViewUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/boards/{board_id}/views", tags=["views"])


async def get_view_or_404(db: AsyncSession, board_id: str, view_id: str) -> View:
    result = await db.execute(
        select(View).where(View.id == view_id, View.board_id == board_id)
    )
    view = result.scalar_one_or_none()
    if not view:
        raise NotFound("View not found")
    return view


@router.get("", response_model=ViewListResponse)
async def get_views(
    board_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await require_board(db, user.id, board_id, ANY_MEMBER, "You do not have access to this board")
    return {"views": [ViewRead.model_validate(v) for v in await list_views(db, board_id)]}


@router.post("", response_model=ViewResponse, status_code=201)
async def create_view(
    board_id: str,
    data: ViewCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await require_board(db, user.id, board_id, EDITORS, "You do not have permission to create views")

    view = View(
        board_id=board_id,
        title=data.title or DEFAULT_VIEW_TITLE,
        type=data.type or "BOARD",
        parent_id=data.parent_id,
        filter=data.filter or {},
        sort_options=data.sort_options or [],
        visible_property_ids=data.visible_property_ids or [],
    )
    db.add(view)
    await db.commit()
    await db.refresh(view)

    return {"view": ViewRead.model_validate(view)}


@router.put("/{view_id}", response_model=ViewResponse)
async def update_view(
    board_id: str,
    view_id: str,
    data: ViewUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await require_board(db, user.id, board_id, EDITORS, "You do not have permission to edit views")
    view = await get_view_or_404(db, board_id, view_id)

    for name, value in data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(view, name, value)

    await db.commit()
    await db.refresh(view)

    return {"view": ViewRead.model_validate(view)}


@router.delete("/{view_id}", response_model=MessageResponse)
async def delete_view(
    board_id: str,
    view_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await require_board(db, user.id, board_id, EDITORS, "You do not have permission to delete views")
    view = await get_view_or_404(db, board_id, view_id)

    # A board always keeps at least one view
    result = await db.execute(
        select(func.count(View.id)).where(View.board_id == board_id)
    )
    if result.scalar() <= 1:
        raise ValidationError("Cannot delete the last view of a board")

    await db.delete(view)
    await db.commit()

    return {"message": f"View {view_id} deleted"}
