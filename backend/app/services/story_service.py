"""
Story service: 24-hour media posts and their view tracking.
"""
import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.core.config import settings
from app.core.errors import NotFoundError, PermissionDeniedError, service_operation
from app.models.story import Story, StoryView
from app.models.user import User
from app.schemas.story import StoryCreate
from app.services.follow_service import following_ids

logger = logging.getLogger(__name__)


def _active(query):
    return query.filter(Story.expires_at > datetime.utcnow())


def _viewed_ids(viewer: Optional[User], story_ids: List[int], db: Session) -> set:
    if viewer is None or not story_ids:
        return set()
    rows = db.query(StoryView.story_id).filter(
        StoryView.viewer_id == viewer.id,
        StoryView.story_id.in_(story_ids)
    ).all()
    return {row.story_id for row in rows}


def decorate(stories: List[Story], viewer: Optional[User], db: Session) -> List[dict]:
    """Add per-viewer flags to stories."""
    viewed = _viewed_ids(viewer, [s.id for s in stories], db)
    return [
        {
            "id": s.id,
            "user_id": s.user_id,
            "user": s.user,
            "media_url": s.media_url,
            "media_type": s.media_type,
            "caption": s.caption,
            "expires_at": s.expires_at,
            "views_count": s.views_count,
            "view_count": s.views_count,
            "created_at": s.created_at,
            "is_viewed": s.id in viewed,
            "is_owner": viewer is not None and viewer.id == s.user_id,
        }
        for s in stories
    ]


@service_operation("create story")
def create_story(user: User, data: StoryCreate, db: Session) -> Story:
    hours = data.duration_hours or settings.STORY_DEFAULT_DURATION_HOURS
    story = Story(
        user_id=user.id,
        media_url=data.media_url,
        media_type=data.media_type,
        caption=data.caption,
        expires_at=datetime.utcnow() + timedelta(hours=hours),
    )
    db.add(story)
    db.commit()
    db.refresh(story)
    return story


@service_operation("fetch story feed")
def feed(user: User, db: Session) -> List[Story]:
    """Active stories from the user and everyone they follow."""
    author_ids = following_ids(user.id, db) + [user.id]
    return _active(db.query(Story)).options(joinedload(Story.user)).filter(
        Story.user_id.in_(author_ids)
    ).order_by(Story.created_at.desc(), Story.id.desc()).all()


@service_operation("fetch stories")
def all_active(db: Session) -> List[Story]:
    return _active(db.query(Story)).options(joinedload(Story.user)).join(User).filter(
        User.is_active.is_(True)
    ).order_by(Story.created_at.desc(), Story.id.desc()).all()


def group_by_user(stories: List[dict]) -> List[dict]:
    """Group decorated stories per author, keeping the newest-first author order."""
    groups = {}
    for story in stories:
        group = groups.setdefault(story["user_id"], {"user": story["user"], "stories": [], "has_unviewed": False})
        group["stories"].append(story)
        if not story["is_viewed"] and not story["is_owner"]:
            group["has_unviewed"] = True
    return list(groups.values())


@service_operation("fetch user stories")
def user_stories(user_id: int, db: Session) -> List[Story]:
    return _active(db.query(Story)).options(joinedload(Story.user)).filter(
        Story.user_id == user_id
    ).order_by(Story.created_at.desc(), Story.id.desc()).all()


def get_active_story(story_id: int, db: Session) -> Story:
    story = _active(db.query(Story)).filter(Story.id == story_id).first()
    if not story:
        raise NotFoundError("Story not found or expired")
    return story


@service_operation("record story view")
def record_view(viewer: User, story_id: int, db: Session) -> dict:
    """Count each viewer once; the owner's own views are not counted."""
    story = get_active_story(story_id, db)
    if story.user_id == viewer.id:
        return {"views_count": story.views_count, "counted": False}

    existing = db.query(StoryView).filter(
        StoryView.story_id == story_id, StoryView.viewer_id == viewer.id
    ).first()
    if existing:
        return {"views_count": story.views_count, "counted": False}

    try:
        db.add(StoryView(story_id=story_id, viewer_id=viewer.id))
        story.views_count = (story.views_count or 0) + 1
        db.commit()
    except IntegrityError:
        # concurrent first view from the same viewer
        db.rollback()
        db.refresh(story)
        return {"views_count": story.views_count, "counted": False}
    db.refresh(story)
    return {"views_count": story.views_count, "counted": True}


@service_operation("delete story")
def delete_story(user: User, story_id: int, db: Session) -> None:
    story = db.query(Story).filter(Story.id == story_id).first()
    if not story:
        raise NotFoundError("Story not found")
    if story.user_id != user.id:
        raise PermissionDeniedError("You can only delete your own stories")
    db.delete(story)
    db.commit()


@service_operation("delete expired stories")
def delete_expired_stories(db: Session) -> int:
    """Remove stories past their expiry. Returns the number deleted."""
    expired_ids = [
        row.id for row in db.query(Story.id).filter(Story.expires_at <= datetime.utcnow()).all()
    ]
    if not expired_ids:
        return 0
    db.query(StoryView).filter(StoryView.story_id.in_(expired_ids)).delete(synchronize_session=False)
    count = db.query(Story).filter(Story.id.in_(expired_ids)).delete(synchronize_session=False)
    db.commit()
    logger.info(f"Deleted {count} expired stories")
    return count
