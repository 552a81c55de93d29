from datetime import datetime
from typing import List

from app.schemas.base import CamelModel

class FileRead(CamelModel):
    id: str
    board_id: str
    filename: str
    mimetype: str
    size: int
    path: str
    created_at: datetime

class FileListResponse(CamelModel):
    files: List[FileRead]
