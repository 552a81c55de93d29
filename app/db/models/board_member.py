from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.base import Base
from app.db.models.user import new_id, utcnow

class BoardMember(Base):
    __tablename__ = "board_members"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    board_id = Column(String(36), ForeignKey("boards.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String, nullable=False, default="EDITOR")  # ADMIN, EDITOR or VIEWER
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    user = relationship("User", back_populates="memberships")
    board = relationship("Board", back_populates="members")

    __table_args__ = (
        UniqueConstraint("user_id", "board_id", name="uq_board_member_user"),
    )
