"""
User profile routes.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.models.user import User
from app.schemas.common import UserSummary, MessageResponse
from app.schemas.trip import TripListResponse
from app.schemas.user import (
    UserResponse, UserUpdate, PreferencesUpdate, PrivacyUpdate, ProfileResponse,
    PublicProfileResponse, UserStats, UserListResponse
)
from app.core.utils import pagination_meta
from app.services import user_service
from app.api.dependencies import get_current_user, get_optional_user, Pagination

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get your own profile with stats."""
    profile = UserResponse.model_validate(current_user).model_dump()
    return {**profile, "stats": user_service.get_stats(current_user.id, db)}


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    data: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update profile fields."""
    return user_service.update_profile(current_user, data, db)


@router.delete("/profile", response_model=MessageResponse)
async def delete_account(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Deactivate your account."""
    user_service.deactivate(current_user, db)
    return {"message": "Account deactivated"}


@router.put("/preferences", response_model=UserResponse)
async def update_preferences(
    data: PreferencesUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return user_service.update_preferences(current_user, data, db)


@router.put("/profile/privacy", response_model=UserResponse)
async def update_privacy(
    data: PrivacyUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return user_service.set_privacy(current_user, data.is_private, db)


@router.get("/profile/stats", response_model=UserStats)
async def get_profile_stats(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return user_service.get_stats(current_user.id, db)


@router.get("/profile/{user_id}", response_model=PublicProfileResponse)
async def get_public_profile(
    user_id: int,
    viewer: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """Get another user's public profile."""
    return user_service.get_public_profile(user_id, viewer, db)


@router.get("/search", response_model=UserListResponse)
async def search_users(
    q: str = Query(..., min_length=1),
    pagination: Pagination = Depends(),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    users, total = user_service.search_users(q, pagination.page, pagination.limit, db)
    return {"users": users, "pagination": pagination_meta(total, pagination.page, pagination.limit)}


@router.get("/suggestions", response_model=List[UserSummary])
async def get_suggestions(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Users you might want to follow."""
    return user_service.suggestions(current_user, db)


@router.get("/{user_id}/trips", response_model=TripListResponse)
async def get_user_trips(
    user_id: int,
    pagination: Pagination = Depends(),
    viewer: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    trips, total = user_service.user_trips(user_id, viewer, pagination.page, pagination.limit, db)
    return {"trips": trips, "pagination": pagination_meta(total, pagination.page, pagination.limit)}


@router.post("/block/{user_id}", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def block_user(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user_service.block_user(current_user, user_id, db)
    return {"message": "User blocked"}


@router.delete("/block/{user_id}", response_model=MessageResponse)
async def unblock_user(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user_service.unblock_user(current_user, user_id, db)
    return {"message": "User unblocked"}
