"""
Pydantic schemas for Journey entity.
"""
import enum
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from app.models.trip import TripDifficulty
from app.schemas.common import UserSummary, PaginationMeta


class Season(str, enum.Enum):
    SPRING = "spring"
    SUMMER = "summer"
    AUTUMN = "autumn"
    WINTER = "winter"


class JourneyBase(BaseModel):
    title: str = Field(..., min_length=5, max_length=100)
    description: str = Field(..., min_length=20, max_length=500)
    content: str = Field(..., min_length=100)
    is_public: bool = True
    tags: List[str] = []
    destinations: List[str] = []
    season: List[Season] = []
    images: List[str] = []
    duration: Optional[int] = Field(None, ge=1)
    budget: Optional[Decimal] = Field(None, ge=0)
    difficulty: TripDifficulty = TripDifficulty.MODERATE


class JourneyCreate(JourneyBase):
    pass


class JourneyUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=5, max_length=100)
    description: Optional[str] = Field(None, min_length=20, max_length=500)
    content: Optional[str] = Field(None, min_length=100)
    is_public: Optional[bool] = None
    tags: Optional[List[str]] = None
    destinations: Optional[List[str]] = None
    season: Optional[List[Season]] = None
    images: Optional[List[str]] = None
    duration: Optional[int] = Field(None, ge=1)
    budget: Optional[Decimal] = Field(None, ge=0)
    difficulty: Optional[TripDifficulty] = None


class JourneyResponse(JourneyBase):
    id: int
    author_id: int
    word_count: int
    read_time: int
    views: int
    featured: bool
    created_at: datetime
    updated_at: datetime
    author: UserSummary
    like_count: int = 0
    comment_count: int = 0
    is_liked: bool = False

    class Config:
        from_attributes = True


class JourneyListResponse(BaseModel):
    journeys: List[JourneyResponse]
    pagination: PaginationMeta
