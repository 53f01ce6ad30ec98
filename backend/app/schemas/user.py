"""
Pydantic schemas for User entity.
"""
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime
from app.schemas.common import UserSummary, PaginationMeta


class UserBase(BaseModel):
    """Base user schema."""
    username: str = Field(..., min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.]+$")
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field("", max_length=50)


class UserCreate(UserBase):
    """Schema for user registration."""
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v):
        return v.lower()


class UserLogin(BaseModel):
    """Schema for user login; identifier is an email or a username."""
    identifier: str
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class TokenPair(BaseModel):
    """Schema for JWT token response."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class UserResponse(UserBase):
    """Schema for user response."""
    id: int
    avatar: Optional[str] = None
    bio: str = ""
    location: str = ""
    phone: str = ""
    is_private: bool
    preferences: Dict[str, Any] = {}
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class AuthResponse(TokenPair):
    user: UserResponse


class UserUpdate(BaseModel):
    """Schema for profile update."""
    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, max_length=50)
    avatar: Optional[str] = None
    bio: Optional[str] = Field(None, max_length=500)
    location: Optional[str] = Field(None, max_length=200)
    phone: Optional[str] = Field(None, max_length=20)


class PreferencesUpdate(BaseModel):
    """Partial preferences; nested dicts are merged into the stored ones."""
    travelStyle: Optional[str] = None
    interests: Optional[List[str]] = None
    notifications: Optional[Dict[str, bool]] = None
    privacy: Optional[Dict[str, bool]] = None


class PrivacyUpdate(BaseModel):
    is_private: bool


class UserStats(BaseModel):
    trips_organized: int
    trips_joined: int
    followers: int
    following: int
    journeys: int


class ProfileResponse(UserResponse):
    stats: UserStats


class PublicProfileResponse(BaseModel):
    """Public profile; stats and bio are withheld from a limited view."""
    id: int
    username: str
    first_name: str
    last_name: str = ""
    avatar: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    is_private: bool
    is_following: bool = False
    is_limited: bool = False
    stats: Optional[UserStats] = None
    created_at: datetime


class UserListResponse(BaseModel):
    users: List[UserSummary]
    pagination: PaginationMeta
