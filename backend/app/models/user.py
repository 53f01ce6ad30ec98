"""
User model for authentication and profiles.
"""
from sqlalchemy import Column, String, Boolean, Text, DateTime, JSON
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


def default_preferences() -> dict:
    return {
        "travelStyle": "mid-range",
        "interests": [],
        "notifications": {
            "email": True,
            "push": True,
            "tripUpdates": True,
            "socialActivity": True,
        },
        "privacy": {
            "showEmail": False,
            "showPhone": False,
        },
    }


class User(BaseModel):
    """User model with unique username and email."""
    __tablename__ = "users"

    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False, default="")
    avatar = Column(Text, nullable=True)
    bio = Column(String(500), nullable=False, default="")
    location = Column(String(200), nullable=False, default="")
    phone = Column(String(20), nullable=False, default="")
    is_private = Column(Boolean, default=False, nullable=False)
    preferences = Column(JSON, nullable=False, default=default_preferences)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime, nullable=True)

    # Relationships
    organized_trips = relationship("Trip", back_populates="organizer")
    trip_participations = relationship("TripParticipant", back_populates="user", cascade="all, delete-orphan")
    journeys = relationship("Journey", back_populates="author", cascade="all, delete-orphan")
    stories = relationship("Story", back_populates="user", cascade="all, delete-orphan")
    notifications = relationship(
        "Notification", foreign_keys="Notification.user_id",
        back_populates="user", cascade="all, delete-orphan"
    )
    budgets = relationship("Budget", back_populates="user", cascade="all, delete-orphan")
    wallet = relationship("Wallet", back_populates="user", uselist=False, cascade="all, delete-orphan")
    bookings = relationship("Booking", back_populates="user", cascade="all, delete-orphan")

    @property
    def full_name(self) -> str:
        name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return name or self.username
