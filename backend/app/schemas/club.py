"""
Pydantic schemas for Club entity.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from app.models.club import ClubRole
from app.schemas.common import UserSummary


class ClubCreate(BaseModel):
    name: str = Field(..., min_length=3, max_length=100)
    description: str = Field("", max_length=1000)
    image_url: Optional[str] = None
    category: Optional[str] = Field(None, max_length=50)
    is_private: bool = False


class ClubResponse(BaseModel):
    id: int
    name: str
    description: str
    image_url: Optional[str] = None
    category: Optional[str] = None
    is_private: bool
    created_by: Optional[int] = None
    created_at: datetime
    member_count: int = 0
    is_member: bool = False

    class Config:
        from_attributes = True


class ClubOrganizer(BaseModel):
    id: Optional[int] = None
    name: str
    avatar: Optional[str] = None


class ClubDetailResponse(ClubResponse):
    organizer: ClubOrganizer
    role: Optional[ClubRole] = None


class ClubMemberResponse(BaseModel):
    user: UserSummary
    role: ClubRole
    joined_at: datetime


class ClubPostCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)
    images: List[str] = []


class ClubPostResponse(BaseModel):
    id: int
    club_id: int
    content: str
    images: List[str]
    created_at: datetime
    author: UserSummary

    class Config:
        from_attributes = True
