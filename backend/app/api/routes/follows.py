"""
Follow routes.
"""
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.models.user import User
from app.schemas.common import UserSummary, MessageResponse
from app.schemas.follow import FollowResult, UnfollowResult, FollowRelation, FollowStats, FollowListResponse
from app.core.utils import pagination_meta
from app.services import follow_service, user_service
from app.api.dependencies import get_current_user, Pagination

router = APIRouter(prefix="/follows", tags=["follows"])


@router.get("/requests", response_model=FollowListResponse)
async def get_follow_requests(
    pagination: Pagination = Depends(),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Pending follow requests addressed to you."""
    rows, total = follow_service.pending_requests(current_user.id, pagination.page, pagination.limit, db)
    return {"users": rows, "pagination": pagination_meta(total, pagination.page, pagination.limit)}


@router.post("/requests/{follower_id}/accept", response_model=UnfollowResult)
async def accept_follow_request(
    follower_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return follow_service.accept_request(current_user, follower_id, db)


@router.post("/requests/{follower_id}/reject", response_model=MessageResponse)
async def reject_follow_request(
    follower_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    follow_service.reject_request(current_user, follower_id, db)
    return {"message": "Follow request rejected"}


@router.get("/suggested", response_model=List[UserSummary])
async def get_suggested(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return user_service.suggestions(current_user, db)


@router.get("/followers/{user_id}", response_model=FollowListResponse)
async def get_followers(
    user_id: int,
    pagination: Pagination = Depends(),
    db: Session = Depends(get_db)
):
    rows, total = follow_service.list_followers(user_id, pagination.page, pagination.limit, db)
    return {"users": rows, "pagination": pagination_meta(total, pagination.page, pagination.limit)}


@router.get("/following/{user_id}", response_model=FollowListResponse)
async def get_following(
    user_id: int,
    pagination: Pagination = Depends(),
    db: Session = Depends(get_db)
):
    rows, total = follow_service.list_following(user_id, pagination.page, pagination.limit, db)
    return {"users": rows, "pagination": pagination_meta(total, pagination.page, pagination.limit)}


@router.get("/stats/{user_id}", response_model=FollowStats)
async def get_follow_stats(user_id: int, db: Session = Depends(get_db)):
    return follow_service.stats(user_id, db)


@router.get("/{user_id}/status", response_model=FollowRelation)
async def get_follow_status(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return follow_service.relation(current_user.id, user_id, db)


@router.post("/{user_id}", response_model=FollowResult, status_code=status.HTTP_201_CREATED)
async def follow_user(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Follow a user, or request to follow a private account."""
    return follow_service.follow_user(current_user, user_id, db)


@router.delete("/{user_id}", response_model=UnfollowResult)
async def unfollow_user(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Unfollow a user or cancel a pending request."""
    return follow_service.unfollow_user(current_user, user_id, db)
