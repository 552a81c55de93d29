from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import Base
from app.db.models.user import new_id, utcnow

class File(Base):
    __tablename__ = "files"

    id = Column(String(36), primary_key=True, default=new_id)
    board_id = Column(String(36), ForeignKey("boards.id", ondelete="CASCADE"), nullable=False, index=True)
    filename = Column(String, nullable=False)
    mimetype = Column(String, nullable=False)
    size = Column(Integer, nullable=False)
    path = Column(String, nullable=False)  # public path under /uploads
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    board = relationship("Board", back_populates="files")
