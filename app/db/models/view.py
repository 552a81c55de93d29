from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import Base
from app.db.json_types import JSONText
from app.db.models.user import new_id, utcnow
from app.schemas.fields import ColumnWidths, OpaqueObject, PropertyIdList, SortOptions

class View(Base):
    __tablename__ = "views"

    id = Column(String(36), primary_key=True, default=new_id)
    board_id = Column(String(36), ForeignKey("boards.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    type = Column(String, nullable=False, default="BOARD")  # BOARD, TABLE, CALENDAR or GALLERY
    parent_id = Column(String(36), nullable=True)
    filter = Column(JSONText(OpaqueObject), nullable=False, default=dict)
    sort_options = Column(JSONText(SortOptions), nullable=False, default=list)
    visible_property_ids = Column(JSONText(PropertyIdList), nullable=False, default=list)
    column_widths = Column(JSONText(ColumnWidths), nullable=False, default=dict)
    kanban_calculations = Column(JSONText(OpaqueObject), nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    board = relationship("Board", back_populates="views")
