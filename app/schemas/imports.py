from typing import List, Optional

from app.schemas.base import CamelModel

class SkippedRecord(CamelModel):
    line: Optional[int] = None
    reason: str

class ImportSummary(CamelModel):
    board_id: str
    board_title: str
    cards_imported: int
    views_imported: int
    files_imported: int
    skipped: List[SkippedRecord] = []

class ImportResponse(ImportSummary):
    message: str
