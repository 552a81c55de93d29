from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import Base
from app.db.json_types import JSONText
from app.db.models.user import new_id, utcnow
from app.schemas.fields import CardValues

class Card(Base):
    __tablename__ = "cards"

    id = Column(String(36), primary_key=True, default=new_id)
    board_id = Column(String(36), ForeignKey("boards.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=True)
    properties = Column(JSONText(CardValues), nullable=False, default=dict)  # property id -> value
    icon = Column(String, nullable=False, default="📝")
    order = Column(Integer, nullable=False, default=0)
    parent_id = Column(String(36), nullable=True)
    created_by_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    board = relationship("Board", back_populates="cards")
