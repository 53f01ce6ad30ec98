"""
Pydantic schemas for Trip entity.
"""
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import date, datetime
from decimal import Decimal
from app.models.trip import (
    TripCategory, TripDifficulty, TripStatus, TripVisibility,
    ParticipantStatus, ParticipantRole
)
from app.schemas.common import UserSummary, PaginationMeta


class Coordinates(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class Destination(BaseModel):
    country: str = Field(..., min_length=1, max_length=100)
    city: str = Field(..., min_length=1, max_length=100)
    coordinates: Optional[Coordinates] = None


class TripBudget(BaseModel):
    total: Decimal = Field(Decimal(0), ge=0)
    currency: str = Field("USD", min_length=3, max_length=3)
    breakdown: Dict[str, Decimal] = {}
    spent: Decimal = Field(Decimal(0), ge=0)


class TripBase(BaseModel):
    """Base trip schema."""
    title: str = Field(..., min_length=3, max_length=100)
    description: str = Field("", max_length=2000)
    destination: Destination
    start_date: date
    end_date: date
    max_participants: int = Field(10, ge=1, le=50)
    itinerary: List[Dict[str, Any]] = []
    images: List[str] = []
    tags: List[str] = []
    category: TripCategory
    difficulty: TripDifficulty = TripDifficulty.EASY
    visibility: TripVisibility = TripVisibility.PUBLIC


class TripCreate(TripBase):
    """Schema for trip creation."""
    budget: Optional[TripBudget] = None


class TripUpdate(BaseModel):
    """Schema for trip update."""
    title: Optional[str] = Field(None, min_length=3, max_length=100)
    description: Optional[str] = Field(None, max_length=2000)
    destination: Optional[Destination] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    budget: Optional[TripBudget] = None
    max_participants: Optional[int] = Field(None, ge=1, le=50)
    itinerary: Optional[List[Dict[str, Any]]] = None
    images: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    category: Optional[TripCategory] = None
    difficulty: Optional[TripDifficulty] = None
    status: Optional[TripStatus] = None
    visibility: Optional[TripVisibility] = None


class TripResponse(BaseModel):
    """Schema for trip response."""
    id: int
    title: str
    description: str
    destination: Dict[str, Any]
    start_date: date
    end_date: date
    duration: int
    budget: Dict[str, Any]
    organizer_id: int
    max_participants: int
    itinerary: List[Dict[str, Any]]
    images: List[str]
    tags: List[str]
    category: TripCategory
    difficulty: TripDifficulty
    status: TripStatus
    visibility: TripVisibility
    views: int
    shares: int
    featured: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TripListResponse(BaseModel):
    trips: List[TripResponse]
    pagination: PaginationMeta


class TripParticipantResponse(BaseModel):
    """Schema for trip participant response."""
    id: int
    trip_id: int
    user_id: int
    status: ParticipantStatus
    role: ParticipantRole
    message: Optional[str] = None
    created_at: datetime
    user: UserSummary

    class Config:
        from_attributes = True


class TripDetailResponse(TripResponse):
    """Schema for detailed trip response with participants."""
    organizer: UserSummary
    participants: List[TripParticipantResponse] = []
    participant_count: int = 0
    like_count: int = 0
    comment_count: int = 0
    is_liked: bool = False


class LikeResult(BaseModel):
    is_liked: bool
    like_count: int


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=500)


class CommentResponse(BaseModel):
    id: int
    content: str
    created_at: datetime
    user: UserSummary

    class Config:
        from_attributes = True


class TripRequestCreate(BaseModel):
    message: Optional[str] = Field(None, max_length=500)


class TripSummary(BaseModel):
    id: int
    title: str
    destination: Dict[str, Any]
    start_date: date
    end_date: date

    class Config:
        from_attributes = True


class TripRequestResponse(TripParticipantResponse):
    trip: TripSummary
