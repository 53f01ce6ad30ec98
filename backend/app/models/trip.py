"""
Trip model for group travel planning.
"""
import enum
from sqlalchemy import (
    Column, String, Date, Boolean, Text, JSON, Enum as SQLEnum,
    ForeignKey, Integer, UniqueConstraint
)
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class TripCategory(str, enum.Enum):
    ADVENTURE = "adventure"
    RELAXATION = "relaxation"
    CULTURAL = "cultural"
    BUSINESS = "business"
    FAMILY = "family"
    ROMANTIC = "romantic"
    SOLO = "solo"
    GROUP = "group"


class TripDifficulty(str, enum.Enum):
    EASY = "easy"
    MODERATE = "moderate"
    CHALLENGING = "challenging"
    EXTREME = "extreme"


class TripStatus(str, enum.Enum):
    """Trip status enumeration."""
    PLANNING = "planning"
    CONFIRMED = "confirmed"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TripVisibility(str, enum.Enum):
    PUBLIC = "public"
    FRIENDS = "friends"
    PRIVATE = "private"


class ParticipantStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class ParticipantRole(str, enum.Enum):
    ORGANIZER = "organizer"
    CO_ORGANIZER = "co-organizer"
    PARTICIPANT = "participant"


def default_budget() -> dict:
    return {
        "total": 0,
        "currency": "USD",
        "breakdown": {
            "accommodation": 0,
            "transportation": 0,
            "food": 0,
            "activities": 0,
            "shopping": 0,
            "miscellaneous": 0,
        },
        "spent": 0,
    }


class Trip(BaseModel):
    """Trip model representing a planned group travel event."""
    __tablename__ = "trips"

    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False, default="")
    destination = Column(JSON, nullable=False)  # {"country", "city", "coordinates"}
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=False, index=True)
    duration = Column(Integer, nullable=False)  # days, inclusive
    budget = Column(JSON, nullable=False, default=default_budget)
    organizer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    max_participants = Column(Integer, nullable=False, default=10)
    itinerary = Column(JSON, nullable=False, default=list)
    images = Column(JSON, nullable=False, default=list)
    tags = Column(JSON, nullable=False, default=list)
    category = Column(SQLEnum(TripCategory), nullable=False, index=True)
    difficulty = Column(SQLEnum(TripDifficulty), default=TripDifficulty.EASY, nullable=False)
    status = Column(SQLEnum(TripStatus), default=TripStatus.PLANNING, nullable=False, index=True)
    visibility = Column(SQLEnum(TripVisibility), default=TripVisibility.PUBLIC, nullable=False)
    views = Column(Integer, default=0, nullable=False)
    shares = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    featured = Column(Boolean, default=False, nullable=False)

    # Relationships
    organizer = relationship("User", back_populates="organized_trips")
    participants = relationship("TripParticipant", back_populates="trip", cascade="all, delete-orphan")
    likes = relationship("TripLike", cascade="all, delete-orphan")
    comments = relationship("TripComment", back_populates="trip", cascade="all, delete-orphan")


class TripParticipant(BaseModel):
    """Membership of a user in a trip; pending rows are join requests."""
    __tablename__ = "trip_participants"

    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(SQLEnum(ParticipantStatus), default=ParticipantStatus.PENDING, nullable=False)
    role = Column(SQLEnum(ParticipantRole), default=ParticipantRole.PARTICIPANT, nullable=False)
    message = Column(String(500), nullable=True)

    # Relationships
    trip = relationship("Trip", back_populates="participants")
    user = relationship("User", back_populates="trip_participations")

    __table_args__ = (
        UniqueConstraint('trip_id', 'user_id', name='uq_trip_participant'),
    )


class TripLike(BaseModel):
    __tablename__ = "trip_likes"

    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint('trip_id', 'user_id', name='uq_trip_like'),
    )


class TripComment(BaseModel):
    __tablename__ = "trip_comments"

    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(String(500), nullable=False)

    trip = relationship("Trip", back_populates="comments")
    user = relationship("User")
