import logging

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.archive_import import import_board_archive
from app.core.config import ARCHIVE_EXTENSION, MAX_IMPORT_BYTES
from app.core.errors import PayloadTooLarge, ValidationError
from app.core.security import get_current_user
from app.core.storage import BlobStore, get_blob_store
from app.db.session import get_db
from app.db.models import User
from app.schemas.imports import ImportResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/import", tags=["import"])


@router.post("/archive", response_model=ImportResponse, status_code=201)
async def import_archive(
    file: UploadFile = File(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
):
    """Import a board archive upload as a new board owned by the caller."""
    if file is None or not file.filename:
        raise ValidationError(f"Upload a {ARCHIVE_EXTENSION} file in the 'file' field")
    if not file.filename.lower().endswith(ARCHIVE_EXTENSION):
        raise ValidationError(f"Only {ARCHIVE_EXTENSION} files are supported")

    # Read one byte past the ceiling to detect oversized uploads
    data = await file.read(MAX_IMPORT_BYTES + 1)
    if len(data) > MAX_IMPORT_BYTES:
        raise PayloadTooLarge(f"Archive exceeds the {MAX_IMPORT_BYTES} byte limit")

    logger.info(f"User {user.id} importing '{file.filename}' ({len(data)} bytes)")
    summary = await import_board_archive(db, blobs, data, user.id)

    return {"message": "Board imported", **summary.model_dump()}
