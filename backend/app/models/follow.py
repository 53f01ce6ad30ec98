"""
Follow and block relationships between users.
"""
import enum
from sqlalchemy import Column, ForeignKey, Integer, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class FollowStatus(str, enum.Enum):
    """Follow status enumeration."""
    PENDING = "pending"
    ACCEPTED = "accepted"


class Follow(BaseModel):
    """Directed follow edge; pending until a private account accepts it."""
    __tablename__ = "follows"

    follower_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    following_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(SQLEnum(FollowStatus), default=FollowStatus.ACCEPTED, nullable=False)

    follower = relationship("User", foreign_keys=[follower_id])
    following = relationship("User", foreign_keys=[following_id])

    __table_args__ = (
        UniqueConstraint('follower_id', 'following_id', name='uq_follower_following'),
    )


class BlockedUser(BaseModel):
    """A user hiding another user from follows and suggestions."""
    __tablename__ = "blocked_users"

    blocker_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    blocked_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint('blocker_id', 'blocked_id', name='uq_blocker_blocked'),
    )
