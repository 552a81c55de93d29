from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Union

from app.schemas.base import CamelModel
from app.schemas.fields import SortOption

ViewType = Literal["BOARD", "TABLE", "CALENDAR", "GALLERY"]

class ViewCreate(CamelModel):
    title: Optional[str] = None
    type: Optional[ViewType] = None
    parent_id: Optional[str] = None
    filter: Optional[Dict[str, Any]] = None
    sort_options: Optional[List[SortOption]] = None
    visible_property_ids: Optional[List[str]] = None

class ViewUpdate(CamelModel):
    title: Optional[str] = None
    type: Optional[ViewType] = None
    filter: Optional[Dict[str, Any]] = None
    sort_options: Optional[List[SortOption]] = None
    visible_property_ids: Optional[List[str]] = None
    column_widths: Optional[Dict[str, Union[int, float]]] = None
    kanban_calculations: Optional[Dict[str, Any]] = None

class ViewRead(CamelModel):
    id: str
    board_id: str
    title: str
    type: ViewType
    parent_id: Optional[str] = None
    filter: Dict[str, Any]
    sort_options: List[SortOption]
    visible_property_ids: List[str]
    column_widths: Dict[str, Union[int, float]]
    kanban_calculations: Dict[str, Any]
    created_at: datetime

class ViewListResponse(CamelModel):
    views: List[ViewRead]

class ViewResponse(CamelModel):
    view: ViewRead
