"""
Trip management routes.
"""
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.models.user import User
from app.models.trip import TripCategory, TripStatus, TripVisibility
from app.schemas.common import MessageResponse
from app.schemas.trip import (
    TripCreate, TripUpdate, TripResponse, TripDetailResponse, TripListResponse,
    TripParticipantResponse, LikeResult, CommentCreate, CommentResponse,
    TripRequestCreate, TripRequestResponse
)
from app.core.utils import pagination_meta
from app.services import trip_service
from app.api.dependencies import get_current_user, get_optional_user, Pagination

router = APIRouter(prefix="/trips", tags=["trips"])


@router.post("", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
async def create_trip(
    trip_data: TripCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a new trip."""
    return trip_service.create_trip(current_user, trip_data, db)


@router.get("", response_model=TripListResponse)
async def list_trips(
    pagination: Pagination = Depends(),
    category: Optional[TripCategory] = None,
    trip_status: Optional[TripStatus] = Query(None, alias="status"),
    visibility: Optional[TripVisibility] = None,
    featured: Optional[bool] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    country: Optional[str] = None,
    city: Optional[str] = None,
    organizer_id: Optional[int] = None,
    tag: Optional[str] = None,
    sort: Optional[str] = Query(None, description="field:asc|desc"),
    viewer: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """List trips visible to the caller."""
    trips, total = trip_service.list_trips(
        viewer, pagination.page, pagination.limit,
        category=category,
        status=trip_status,
        visibility=visibility,
        featured=featured,
        start_date=start_date,
        end_date=end_date,
        country=country,
        city=city,
        organizer_id=organizer_id,
        tag=tag,
        sort=sort,
        db=db,
    )
    return {"trips": trips, "pagination": pagination_meta(total, pagination.page, pagination.limit)}


@router.get("/featured", response_model=List[TripResponse])
async def featured_trips(
    limit: int = Query(6, ge=1, le=20),
    db: Session = Depends(get_db)
):
    return trip_service.featured_trips(limit, db)


@router.get("/requests/mine", response_model=List[TripRequestResponse])
async def my_trip_requests(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Your pending join requests."""
    return trip_service.my_requests(current_user, db)


@router.post("/requests/{request_id}/approve", response_model=TripParticipantResponse)
async def approve_trip_request(
    request_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return trip_service.approve_request(current_user, request_id, db)


@router.post("/requests/{request_id}/reject", response_model=TripParticipantResponse)
async def reject_trip_request(
    request_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return trip_service.reject_request(current_user, request_id, db)


@router.get("/{trip_id}", response_model=TripDetailResponse)
async def get_trip(
    trip_id: int,
    viewer: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """Get trip details."""
    return trip_service.get_trip_detail(trip_id, viewer, db)


@router.put("/{trip_id}", response_model=TripResponse)
async def update_trip(
    trip_id: int,
    trip_data: TripUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update trip (organizer only)."""
    return trip_service.update_trip(current_user, trip_id, trip_data, db)


@router.delete("/{trip_id}", response_model=MessageResponse)
async def delete_trip(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete trip (organizer only)."""
    trip_service.delete_trip(current_user, trip_id, db)
    return {"message": "Trip deleted successfully"}


@router.post("/{trip_id}/join", response_model=TripParticipantResponse, status_code=status.HTTP_201_CREATED)
async def join_trip(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return trip_service.join_trip(current_user, trip_id, db)


@router.post("/{trip_id}/leave", response_model=MessageResponse)
async def leave_trip(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    trip_service.leave_trip(current_user, trip_id, db)
    return {"message": "Left trip successfully"}


@router.get("/{trip_id}/participants", response_model=List[TripParticipantResponse])
async def get_participants(
    trip_id: int,
    viewer: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    return trip_service.list_participants(trip_id, viewer, db)


@router.post("/{trip_id}/like", response_model=LikeResult)
async def like_trip(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Toggle like on a trip."""
    return trip_service.toggle_like(current_user, trip_id, db)


@router.post("/{trip_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(
    trip_id: int,
    body: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return trip_service.add_comment(current_user, trip_id, body.content, db)


@router.get("/{trip_id}/comments", response_model=List[CommentResponse])
async def get_comments(
    trip_id: int,
    pagination: Pagination = Depends(),
    viewer: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    comments, _ = trip_service.list_comments(trip_id, viewer, pagination.page, pagination.limit, db)
    return comments


@router.post("/{trip_id}/share")
async def share_trip(
    trip_id: int,
    viewer: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    return {"shares": trip_service.share_trip(trip_id, viewer, db)}


@router.post("/{trip_id}/invite/{user_id}", response_model=MessageResponse)
async def invite_to_trip(
    trip_id: int,
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Invite a user to your trip (organizer only)."""
    trip_service.invite_user(current_user, trip_id, user_id, db)
    return {"message": "Invitation sent"}


@router.post("/{trip_id}/requests", response_model=TripParticipantResponse, status_code=status.HTTP_201_CREATED)
async def request_to_join(
    trip_id: int,
    body: TripRequestCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Ask the organizer to join a trip."""
    return trip_service.create_request(current_user, trip_id, body.message, db)


@router.get("/{trip_id}/requests", response_model=List[TripParticipantResponse])
async def get_trip_requests(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Pending join requests (organizer only)."""
    return trip_service.list_requests(current_user, trip_id, db)
