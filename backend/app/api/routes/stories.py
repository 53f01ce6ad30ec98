"""
Story routes.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.story import StoryCreate, StoryResponse, UserStories, StoryViewResult
from app.services import story_service
from app.api.dependencies import get_current_user, get_optional_user

router = APIRouter(prefix="/stories", tags=["stories"])


@router.post("", response_model=StoryResponse, status_code=status.HTTP_201_CREATED)
async def create_story(
    data: StoryCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    story = story_service.create_story(current_user, data, db)
    return story_service.decorate([story], current_user, db)[0]


@router.get("/feed", response_model=List[StoryResponse])
async def story_feed(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Active stories from you and the people you follow."""
    return story_service.decorate(story_service.feed(current_user, db), current_user, db)


@router.get("", response_model=List[UserStories])
async def all_stories(
    viewer: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """All active stories grouped by user."""
    stories = story_service.decorate(story_service.all_active(db), viewer, db)
    return story_service.group_by_user(stories)


@router.get("/user/{user_id}", response_model=List[StoryResponse])
async def user_stories(
    user_id: int,
    viewer: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    return story_service.decorate(story_service.user_stories(user_id, db), viewer, db)


@router.get("/{story_id}", response_model=StoryResponse)
async def get_story(
    story_id: int,
    viewer: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    story = story_service.get_active_story(story_id, db)
    return story_service.decorate([story], viewer, db)[0]


@router.post("/{story_id}/view", response_model=StoryViewResult)
async def view_story(
    story_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return story_service.record_view(current_user, story_id, db)


@router.delete("/{story_id}", response_model=MessageResponse)
async def delete_story(
    story_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    story_service.delete_story(current_user, story_id, db)
    return {"message": "Story deleted successfully"}
