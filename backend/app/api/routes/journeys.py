"""
Journey routes.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.models.user import User
from app.models.trip import TripDifficulty
from app.schemas.common import MessageResponse
from app.schemas.journey import JourneyCreate, JourneyUpdate, JourneyResponse, JourneyListResponse
from app.schemas.trip import LikeResult, CommentCreate, CommentResponse
from app.core.utils import pagination_meta
from app.services import journey_service
from app.api.dependencies import get_current_user, get_optional_user, Pagination

router = APIRouter(prefix="/journeys", tags=["journeys"])


@router.get("", response_model=JourneyListResponse)
async def list_journeys(
    pagination: Pagination = Depends(),
    tag: Optional[str] = None,
    destination: Optional[str] = None,
    difficulty: Optional[TripDifficulty] = None,
    author_id: Optional[int] = None,
    q: Optional[str] = Query(None, min_length=1),
    viewer: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    journeys, total = journey_service.list_journeys(
        pagination.page, pagination.limit,
        tag=tag, destination=destination, difficulty=difficulty, author_id=author_id, q=q, db=db
    )
    return {
        "journeys": [journey_service.to_response(j, viewer, db) for j in journeys],
        "pagination": pagination_meta(total, pagination.page, pagination.limit),
    }


@router.get("/my-journeys", response_model=JourneyListResponse)
async def my_journeys(
    pagination: Pagination = Depends(),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    journeys, total = journey_service.my_journeys(current_user, pagination.page, pagination.limit, db)
    return {
        "journeys": [journey_service.to_response(j, current_user, db) for j in journeys],
        "pagination": pagination_meta(total, pagination.page, pagination.limit),
    }


@router.get("/featured", response_model=List[JourneyResponse])
async def featured_journeys(
    viewer: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    return [journey_service.to_response(j, viewer, db) for j in journey_service.featured_journeys(db)]


@router.get("/{journey_id}", response_model=JourneyResponse)
async def get_journey(
    journey_id: int,
    viewer: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    journey = journey_service.get_journey(journey_id, viewer, db)
    return journey_service.to_response(journey, viewer, db)


@router.post("", response_model=JourneyResponse, status_code=status.HTTP_201_CREATED)
async def create_journey(
    data: JourneyCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    journey = journey_service.create_journey(current_user, data, db)
    return journey_service.to_response(journey, current_user, db)


@router.put("/{journey_id}", response_model=JourneyResponse)
async def update_journey(
    journey_id: int,
    data: JourneyUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    journey = journey_service.update_journey(current_user, journey_id, data, db)
    return journey_service.to_response(journey, current_user, db)


@router.delete("/{journey_id}", response_model=MessageResponse)
async def delete_journey(
    journey_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    journey_service.delete_journey(current_user, journey_id, db)
    return {"message": "Journey deleted successfully"}


@router.post("/{journey_id}/like", response_model=LikeResult)
async def like_journey(
    journey_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return journey_service.toggle_like(current_user, journey_id, db)


@router.post("/{journey_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(
    journey_id: int,
    body: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return journey_service.add_comment(current_user, journey_id, body.content, db)


@router.get("/{journey_id}/comments", response_model=List[CommentResponse])
async def get_comments(
    journey_id: int,
    pagination: Pagination = Depends(),
    viewer: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    comments, _ = journey_service.list_comments(journey_id, viewer, pagination.page, pagination.limit, db)
    return comments
