"""
Pydantic schemas for Story entity.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from app.models.story import MediaType
from app.schemas.common import UserSummary


class StoryCreate(BaseModel):
    media_url: str = Field(..., min_length=1)
    media_type: MediaType = MediaType.IMAGE
    caption: Optional[str] = Field(None, max_length=500)
    duration_hours: Optional[int] = Field(None, ge=1, le=48)


class StoryResponse(BaseModel):
    id: int
    user_id: int
    media_url: str
    media_type: MediaType
    caption: Optional[str] = None
    expires_at: datetime
    views_count: int
    created_at: datetime
    user: UserSummary
    is_viewed: bool = False
    is_owner: bool = False
    view_count: int = 0

    class Config:
        from_attributes = True


class UserStories(BaseModel):
    """Active stories of one user."""
    user: UserSummary
    stories: List[StoryResponse]
    has_unviewed: bool


class StoryViewResult(BaseModel):
    views_count: int
    counted: bool
