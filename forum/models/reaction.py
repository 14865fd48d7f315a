from datetime import datetime, UTC
import enum
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, SmallInteger, UniqueConstraint, CheckConstraint

from forum.db.database import Base

class ReactionValue(enum.IntEnum):
    """Reaction value"""
    LIKE = 1
    DISLIKE = -1

class TargetType(str, enum.Enum):
    """Target type"""
    POST = "post"
    COMMENT = "comment"

class Reaction(Base):
    """Reaction model"""
    __tablename__ = "reactions"
    __table_args__ = (
        UniqueConstraint("user_id", "target_type", "target_id", name="uq_reaction_user_target"),
        CheckConstraint("value IN (1, -1)", name="ck_reaction_value"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    target_type = Column(String(16), nullable=False)
    target_id = Column(Integer, nullable=False, index=True)
    value = Column(SmallInteger, nullable=False)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(UTC))
