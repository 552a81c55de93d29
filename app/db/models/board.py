from sqlalchemy import Column, String, Text, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import Base
from app.db.json_types import JSONText
from app.db.models.user import new_id, utcnow
from app.schemas.fields import BoardProperties

class Board(Base):
    __tablename__ = "boards"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String, nullable=False, default="📋")
    show_description = Column(Boolean, nullable=False, default=False)
    properties = Column(JSONText(BoardProperties), nullable=False, default=list)
    created_by_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    members = relationship("BoardMember", back_populates="board", cascade="all, delete-orphan", passive_deletes=True)
    cards = relationship("Card", back_populates="board", cascade="all, delete-orphan", passive_deletes=True)
    views = relationship("View", back_populates="board", cascade="all, delete-orphan", passive_deletes=True)
    files = relationship("File", back_populates="board", cascade="all, delete-orphan", passive_deletes=True)
