"""
Club routes.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.club import (
    ClubCreate, ClubResponse, ClubDetailResponse, ClubMemberResponse, ClubPostCreate, ClubPostResponse
)
from app.services import club_service
from app.api.dependencies import get_current_user, get_optional_user, Pagination

router = APIRouter(prefix="/clubs", tags=["clubs"])


@router.get("", response_model=List[ClubResponse])
async def list_clubs(
    viewer: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    return club_service.list_clubs(viewer, db)


@router.get("/my-created", response_model=List[ClubResponse])
async def my_created_clubs(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return club_service.my_created(current_user, db)


@router.post("", response_model=ClubResponse, status_code=status.HTTP_201_CREATED)
async def create_club(
    data: ClubCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return club_service.create_club(current_user, data, db)


@router.get("/{club_id}", response_model=ClubDetailResponse)
async def get_club(
    club_id: int,
    viewer: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    return club_service.club_detail(club_id, viewer, db)


@router.delete("/{club_id}", response_model=MessageResponse)
async def delete_club(
    club_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    club_service.delete_club(current_user, club_id, db)
    return {"message": "Club deleted successfully"}


@router.post("/{club_id}/join", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def join_club(
    club_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    club_service.join_club(current_user, club_id, db)
    return {"message": "Joined club successfully"}


@router.post("/{club_id}/leave", response_model=MessageResponse)
async def leave_club(
    club_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    club_service.leave_club(current_user, club_id, db)
    return {"message": "Left club successfully"}


@router.get("/{club_id}/members", response_model=List[ClubMemberResponse])
async def get_members(club_id: int, db: Session = Depends(get_db)):
    return club_service.list_members(club_id, db)


@router.get("/{club_id}/posts", response_model=List[ClubPostResponse])
async def get_posts(
    club_id: int,
    pagination: Pagination = Depends(),
    db: Session = Depends(get_db)
):
    posts, _ = club_service.list_posts(club_id, pagination.page, pagination.limit, db)
    return posts


@router.post("/{club_id}/posts", response_model=ClubPostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    club_id: int,
    data: ClubPostCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Post in a club (members only)."""
    return club_service.create_post(current_user, club_id, data.content, data.images, db)
