"""
Journey service for long-form travel posts.
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import String, cast, func, or_
from sqlalchemy.orm import Session, joinedload

from app.core.cache import response_cache, CacheKeys
from app.core.errors import NotFoundError, PermissionDeniedError, service_operation
from app.core.utils import estimate_read_time, json_element_pattern, normalize_tags, paginate
from app.models.journey import Journey, JourneyLike, JourneyComment
from app.models.user import User
from app.schemas.journey import JourneyCreate, JourneyUpdate
from app.services import notification_service

logger = logging.getLogger(__name__)

FEATURED_LIMIT = 6


def _apply_read_metadata(journey: Journey) -> None:
    meta = estimate_read_time(journey.content)
    journey.word_count = meta["word_count"]
    journey.read_time = meta["read_time"]


def to_response(journey: Journey, viewer: Optional[User], db: Session) -> dict:
    """Attach like/comment counts and the viewer's like state."""
    like_count = db.query(JourneyLike).filter(JourneyLike.journey_id == journey.id).count()
    comment_count = db.query(JourneyComment).filter(JourneyComment.journey_id == journey.id).count()
    is_liked = viewer is not None and db.query(JourneyLike).filter(
        JourneyLike.journey_id == journey.id, JourneyLike.user_id == viewer.id
    ).first() is not None
    return {
        "id": journey.id,
        "author_id": journey.author_id,
        "author": journey.author,
        "title": journey.title,
        "description": journey.description,
        "content": journey.content,
        "is_public": journey.is_public,
        "tags": journey.tags,
        "destinations": journey.destinations,
        "season": journey.season,
        "images": journey.images,
        "duration": journey.duration,
        "budget": journey.budget,
        "difficulty": journey.difficulty,
        "word_count": journey.word_count,
        "read_time": journey.read_time,
        "views": journey.views,
        "featured": journey.featured,
        "created_at": journey.created_at,
        "updated_at": journey.updated_at,
        "like_count": like_count,
        "comment_count": comment_count,
        "is_liked": is_liked,
    }


@service_operation("fetch journeys")
def list_journeys(
    page: int,
    limit: int,
    tag: Optional[str] = None,
    destination: Optional[str] = None,
    difficulty=None,
    author_id: Optional[int] = None,
    q: Optional[str] = None,
    db: Session = None
) -> Tuple[List[Journey], int]:
    query = db.query(Journey).filter(Journey.is_public.is_(True))
    if tag:
        query = query.filter(cast(Journey.tags, String).like(json_element_pattern(tag.strip().lower()), escape="\\"))
    if destination:
        query = query.filter(func.lower(cast(Journey.destinations, String)).like(f"%{destination.strip().lower()}%"))
    if difficulty is not None:
        query = query.filter(Journey.difficulty == difficulty)
    if author_id is not None:
        query = query.filter(Journey.author_id == author_id)
    if q:
        pattern = f"%{q.strip()}%"
        query = query.filter(or_(Journey.title.ilike(pattern), Journey.description.ilike(pattern)))

    total = query.count()
    rows = paginate(
        query.options(joinedload(Journey.author)).order_by(Journey.created_at.desc(), Journey.id.desc()),
        page, limit
    )
    return rows, total


@service_operation("fetch my journeys")
def my_journeys(user: User, page: int, limit: int, db: Session) -> Tuple[List[Journey], int]:
    query = db.query(Journey).filter(Journey.author_id == user.id)
    total = query.count()
    rows = paginate(query.order_by(Journey.created_at.desc(), Journey.id.desc()), page, limit)
    return rows, total


@service_operation("fetch featured journeys")
def featured_journeys(db: Session) -> List[Journey]:
    """Featured journeys, or the most liked public ones when none are featured."""
    featured = db.query(Journey).filter(
        Journey.is_public.is_(True), Journey.featured.is_(True)
    ).order_by(Journey.created_at.desc()).limit(FEATURED_LIMIT).all()
    if featured:
        return featured

    like_counts = db.query(
        JourneyLike.journey_id, func.count(JourneyLike.id).label("likes")
    ).group_by(JourneyLike.journey_id).subquery()
    return db.query(Journey).outerjoin(
        like_counts, like_counts.c.journey_id == Journey.id
    ).filter(Journey.is_public.is_(True)).order_by(
        func.coalesce(like_counts.c.likes, 0).desc(), Journey.created_at.desc()
    ).limit(FEATURED_LIMIT).all()


def get_visible_journey(journey_id: int, viewer: Optional[User], db: Session) -> Journey:
    journey = db.query(Journey).filter(Journey.id == journey_id).first()
    if not journey:
        raise NotFoundError("Journey not found")
    if not journey.is_public and (viewer is None or viewer.id != journey.author_id):
        raise NotFoundError("Journey not found")
    return journey


def _get_own_journey(journey_id: int, user: User, db: Session) -> Journey:
    journey = db.query(Journey).filter(Journey.id == journey_id).first()
    if not journey:
        raise NotFoundError("Journey not found")
    if journey.author_id != user.id:
        raise PermissionDeniedError("Only the author can modify this journey")
    return journey


@service_operation("fetch journey")
def get_journey(journey_id: int, viewer: Optional[User], db: Session) -> Journey:
    journey = get_visible_journey(journey_id, viewer, db)
    journey.views = (journey.views or 0) + 1
    db.commit()
    db.refresh(journey)
    return journey


@service_operation("create journey")
def create_journey(author: User, data: JourneyCreate, db: Session) -> Journey:
    values = data.model_dump(mode="json")
    values["budget"] = data.budget
    values["tags"] = normalize_tags(data.tags)
    values["difficulty"] = data.difficulty
    journey = Journey(author_id=author.id, **values)
    _apply_read_metadata(journey)
    db.add(journey)
    db.commit()
    db.refresh(journey)
    response_cache.remove_prefix(CacheKeys.SEARCH_PREFIX)
    logger.info(f"User {author.id} published journey {journey.id}")
    return journey


@service_operation("update journey")
def update_journey(user: User, journey_id: int, data: JourneyUpdate, db: Session) -> Journey:
    journey = _get_own_journey(journey_id, user, db)
    changes = data.model_dump(mode="json", exclude_unset=True)
    for field, value in changes.items():
        if value is None:
            continue
        if field == "tags":
            value = normalize_tags(value)
        elif field == "budget":
            value = data.budget
        elif field == "difficulty":
            value = data.difficulty
        setattr(journey, field, value)
    _apply_read_metadata(journey)
    db.commit()
    db.refresh(journey)
    response_cache.remove_prefix(CacheKeys.SEARCH_PREFIX)
    return journey


@service_operation("delete journey")
def delete_journey(user: User, journey_id: int, db: Session) -> None:
    journey = _get_own_journey(journey_id, user, db)
    db.delete(journey)
    db.commit()
    response_cache.remove_prefix(CacheKeys.SEARCH_PREFIX)


@service_operation("toggle journey like")
def toggle_like(user: User, journey_id: int, db: Session) -> dict:
    journey = get_visible_journey(journey_id, user, db)
    like = db.query(JourneyLike).filter(
        JourneyLike.journey_id == journey_id, JourneyLike.user_id == user.id
    ).first()
    if like:
        db.delete(like)
        is_liked = False
    else:
        db.add(JourneyLike(journey_id=journey_id, user_id=user.id))
        is_liked = True
    db.commit()

    if is_liked and journey.author_id != user.id:
        notification_service.send_like(db, journey.author_id, user, journey.title, journey_id=journey.id)

    return {
        "is_liked": is_liked,
        "like_count": db.query(JourneyLike).filter(JourneyLike.journey_id == journey_id).count(),
    }


@service_operation("add journey comment")
def add_comment(user: User, journey_id: int, content: str, db: Session) -> JourneyComment:
    journey = get_visible_journey(journey_id, user, db)
    comment = JourneyComment(journey_id=journey_id, user_id=user.id, content=content.strip())
    db.add(comment)
    db.commit()
    db.refresh(comment)

    if journey.author_id != user.id:
        notification_service.send_comment(
            db, journey.author_id, user, journey.title, comment.id, journey_id=journey.id
        )
    return comment


@service_operation("fetch journey comments")
def list_comments(journey_id: int, viewer: Optional[User], page: int, limit: int, db: Session):
    get_visible_journey(journey_id, viewer, db)
    query = db.query(JourneyComment).filter(JourneyComment.journey_id == journey_id)
    total = query.count()
    rows = paginate(
        query.options(joinedload(JourneyComment.user)).order_by(
            JourneyComment.created_at.desc(), JourneyComment.id.desc()
        ),
        page, limit
    )
    return rows, total
