"""
Journey model for long-form travel stories.
"""
from sqlalchemy import Column, String, Boolean, Text, JSON, Enum as SQLEnum, ForeignKey, Integer, Numeric, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.base import BaseModel
from app.models.trip import TripDifficulty


class Journey(BaseModel):
    """Published travel write-up with read-time metadata."""
    __tablename__ = "journeys"

    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    description = Column(String(500), nullable=False)
    content = Column(Text, nullable=False)
    is_public = Column(Boolean, default=True, nullable=False)
    tags = Column(JSON, nullable=False, default=list)
    destinations = Column(JSON, nullable=False, default=list)
    season = Column(JSON, nullable=False, default=list)
    images = Column(JSON, nullable=False, default=list)
    duration = Column(Integer, nullable=True)  # days
    budget = Column(Numeric(12, 2), nullable=True)
    difficulty = Column(SQLEnum(TripDifficulty), default=TripDifficulty.MODERATE, nullable=False)
    word_count = Column(Integer, default=0, nullable=False)
    read_time = Column(Integer, default=1, nullable=False)  # minutes
    views = Column(Integer, default=0, nullable=False)
    featured = Column(Boolean, default=False, nullable=False)

    author = relationship("User", back_populates="journeys")
    likes = relationship("JourneyLike", cascade="all, delete-orphan")
    comments = relationship("JourneyComment", back_populates="journey", cascade="all, delete-orphan")


class JourneyLike(BaseModel):
    __tablename__ = "journey_likes"

    journey_id = Column(Integer, ForeignKey("journeys.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint('journey_id', 'user_id', name='uq_journey_like'),
    )


class JourneyComment(BaseModel):
    __tablename__ = "journey_comments"

    journey_id = Column(Integer, ForeignKey("journeys.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(String(500), nullable=False)

    journey = relationship("Journey", back_populates="comments")
    user = relationship("User")
