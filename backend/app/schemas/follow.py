"""
Pydantic schemas for follow relationships.
"""
from pydantic import BaseModel
from typing import List
from datetime import datetime
from app.models.follow import FollowStatus
from app.schemas.common import UserSummary, PaginationMeta


class FollowResult(BaseModel):
    """Outcome of a follow/unfollow call."""
    status: FollowStatus
    is_following: bool
    is_pending: bool
    follower_count: int


class UnfollowResult(BaseModel):
    follower_count: int


class FollowRelation(BaseModel):
    is_following: bool
    is_pending: bool
    follows_you: bool


class FollowStats(BaseModel):
    followers: int
    following: int


class FollowEntry(BaseModel):
    user: UserSummary
    status: FollowStatus
    since: datetime


class FollowListResponse(BaseModel):
    users: List[FollowEntry]
    pagination: PaginationMeta
