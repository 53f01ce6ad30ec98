"""
Ephemeral stories that expire after a fixed duration.
"""
import enum
from sqlalchemy import Column, String, Text, DateTime, Enum as SQLEnum, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class MediaType(str, enum.Enum):
    IMAGE = "image"
    VIDEO = "video"


class Story(BaseModel):
    __tablename__ = "stories"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    media_url = Column(Text, nullable=False)
    media_type = Column(SQLEnum(MediaType), default=MediaType.IMAGE, nullable=False)
    caption = Column(String(500), nullable=True)
    expires_at = Column(DateTime, nullable=False, index=True)
    views_count = Column(Integer, default=0, nullable=False)

    user = relationship("User", back_populates="stories")
    views = relationship("StoryView", cascade="all, delete-orphan")


class StoryView(BaseModel):
    """One row per (story, viewer); keeps views_count unique per viewer."""
    __tablename__ = "story_views"

    story_id = Column(Integer, ForeignKey("stories.id", ondelete="CASCADE"), nullable=False, index=True)
    viewer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint('story_id', 'viewer_id', name='uq_story_viewer'),
    )
