"""
Trip service for trip lifecycle, participation and social interactions.
"""
import logging
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy import String, and_, cast, func, or_
from sqlalchemy.orm import Session, joinedload

from app.core.cache import response_cache, CacheKeys, CacheTTL
from app.core.errors import BadRequestError, ConflictError, NotFoundError, PermissionDeniedError, service_operation
from app.core.utils import json_element_pattern, normalize_tags, paginate
from app.models.follow import Follow, FollowStatus
from app.models.trip import (
    Trip, TripParticipant, TripLike, TripComment, TripStatus, TripVisibility,
    ParticipantStatus, ParticipantRole, default_budget
)
from app.models.user import User
from app.schemas.common import UserSummary
from app.schemas.trip import TripCreate, TripUpdate, TripResponse, TripParticipantResponse
from app.services import notification_service
from app.services.follow_service import following_ids, is_following

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    "created_at": Trip.created_at,
    "start_date": Trip.start_date,
    "views": Trip.views,
    "title": Trip.title,
}


def trip_duration(start_date: date, end_date: date) -> int:
    """Inclusive length of a trip in days."""
    return (end_date - start_date).days + 1


def _check_dates(start_date: date, end_date: date) -> None:
    if end_date < start_date:
        raise BadRequestError("End date must be on or after start date")


def _budget_json(budget) -> dict:
    if budget is None:
        return default_budget()
    return budget.model_dump(mode="json")


def invalidate_trip(trip_id: int) -> None:
    response_cache.remove(CacheKeys.trip_detail(trip_id))


def accepted_count(trip_id: int, db: Session) -> int:
    return db.query(TripParticipant).filter(
        TripParticipant.trip_id == trip_id,
        TripParticipant.status == ParticipantStatus.ACCEPTED
    ).count()


def get_participant(trip_id: int, user_id: int, db: Session) -> Optional[TripParticipant]:
    return db.query(TripParticipant).filter(
        TripParticipant.trip_id == trip_id,
        TripParticipant.user_id == user_id
    ).first()


def is_accepted_participant(trip_id: int, user_id: int, db: Session) -> bool:
    participant = get_participant(trip_id, user_id, db)
    return participant is not None and participant.status == ParticipantStatus.ACCEPTED


def can_view(trip: Trip, viewer: Optional[User], db: Session) -> bool:
    """Visibility rules: public to all, friends to followers, private to members."""
    if trip.visibility == TripVisibility.PUBLIC:
        return True
    if viewer is None:
        return False
    if viewer.id == trip.organizer_id or is_accepted_participant(trip.id, viewer.id, db):
        return True
    if trip.visibility == TripVisibility.FRIENDS:
        return is_following(viewer.id, trip.organizer_id, db)
    return False


def get_active_trip(trip_id: int, db: Session) -> Trip:
    trip = db.query(Trip).filter(Trip.id == trip_id, Trip.is_active.is_(True)).first()
    if not trip:
        raise NotFoundError("Trip not found")
    return trip


def get_visible_trip(trip_id: int, viewer: Optional[User], db: Session) -> Trip:
    """Trips the viewer may not see are reported exactly like missing ones."""
    trip = get_active_trip(trip_id, db)
    if not can_view(trip, viewer, db):
        raise NotFoundError("Trip not found")
    return trip


def get_organized_trip(trip_id: int, user: User, db: Session) -> Trip:
    trip = get_active_trip(trip_id, db)
    if trip.organizer_id != user.id:
        raise PermissionDeniedError("Only the trip organizer can perform this action")
    return trip


@service_operation("create trip")
def create_trip(organizer: User, data: TripCreate, db: Session) -> Trip:
    """Create a trip and enrol the organizer in the same transaction."""
    _check_dates(data.start_date, data.end_date)
    trip = Trip(
        title=data.title,
        description=data.description,
        destination=data.destination.model_dump(mode="json"),
        start_date=data.start_date,
        end_date=data.end_date,
        duration=trip_duration(data.start_date, data.end_date),
        budget=_budget_json(data.budget),
        organizer_id=organizer.id,
        max_participants=data.max_participants,
        itinerary=data.itinerary,
        images=data.images,
        tags=normalize_tags(data.tags),
        category=data.category,
        difficulty=data.difficulty,
        visibility=data.visibility,
    )
    db.add(trip)
    db.flush()

    db.add(TripParticipant(
        trip_id=trip.id,
        user_id=organizer.id,
        status=ParticipantStatus.ACCEPTED,
        role=ParticipantRole.ORGANIZER,
    ))
    db.commit()
    db.refresh(trip)
    response_cache.remove_prefix(CacheKeys.SEARCH_PREFIX)
    logger.info(f"User {organizer.id} created trip {trip.id}")
    return trip


def _parse_sort(sort: Optional[str]):
    if not sort:
        return Trip.created_at.desc()
    field, _, direction = sort.partition(":")
    column = SORT_FIELDS.get(field)
    if column is None or direction not in ("", "asc", "desc"):
        raise BadRequestError(f"Invalid sort: {sort}")
    return column.asc() if direction == "asc" else column.desc()


def _visibility_clause(viewer: Optional[User], db: Session):
    if viewer is None:
        return Trip.visibility == TripVisibility.PUBLIC
    followed = following_ids(viewer.id, db)
    return or_(
        Trip.visibility == TripVisibility.PUBLIC,
        Trip.organizer_id == viewer.id,
        and_(Trip.visibility == TripVisibility.FRIENDS, Trip.organizer_id.in_(followed)),
    )


@service_operation("fetch trips")
def list_trips(
    viewer: Optional[User],
    page: int,
    limit: int,
    category=None,
    status=None,
    visibility=None,
    featured: Optional[bool] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    country: Optional[str] = None,
    city: Optional[str] = None,
    organizer_id: Optional[int] = None,
    tag: Optional[str] = None,
    sort: Optional[str] = None,
    db: Session = None
) -> Tuple[List[Trip], int]:
    query = db.query(Trip).filter(Trip.is_active.is_(True), _visibility_clause(viewer, db))

    if category is not None:
        query = query.filter(Trip.category == category)
    if status is not None:
        query = query.filter(Trip.status == status)
    if visibility is not None:
        query = query.filter(Trip.visibility == visibility)
    if featured is not None:
        query = query.filter(Trip.featured.is_(featured))
    if start_date is not None:
        query = query.filter(Trip.start_date >= start_date)
    if end_date is not None:
        query = query.filter(Trip.end_date <= end_date)
    if country:
        query = query.filter(func.lower(Trip.destination["country"].as_string()) == country.lower())
    if city:
        query = query.filter(func.lower(Trip.destination["city"].as_string()) == city.lower())
    if organizer_id is not None:
        query = query.filter(Trip.organizer_id == organizer_id)
    if tag:
        query = query.filter(cast(Trip.tags, String).like(json_element_pattern(tag.strip().lower()), escape="\\"))

    total = query.count()
    return paginate(query.order_by(_parse_sort(sort), Trip.id.desc()), page, limit), total


@service_operation("fetch featured trips")
def featured_trips(limit: int, db: Session) -> List[Trip]:
    return db.query(Trip).filter(
        Trip.is_active.is_(True),
        Trip.featured.is_(True),
        Trip.visibility == TripVisibility.PUBLIC
    ).order_by(Trip.views.desc(), Trip.created_at.desc()).limit(limit).all()


def _detail_body(trip: Trip, db: Session) -> dict:
    participants = db.query(TripParticipant).options(
        joinedload(TripParticipant.user)
    ).filter(
        TripParticipant.trip_id == trip.id,
        TripParticipant.status == ParticipantStatus.ACCEPTED
    ).order_by(TripParticipant.created_at).all()

    body = TripResponse.model_validate(trip).model_dump()
    body.update(
        organizer=UserSummary.model_validate(trip.organizer).model_dump(),
        participants=[TripParticipantResponse.model_validate(p).model_dump() for p in participants],
        participant_count=len(participants),
        like_count=db.query(TripLike).filter(TripLike.trip_id == trip.id).count(),
        comment_count=db.query(TripComment).filter(TripComment.trip_id == trip.id).count(),
    )
    return body


@service_operation("fetch trip")
def get_trip_detail(trip_id: int, viewer: Optional[User], db: Session) -> dict:
    """Trip detail; counts a view on every read. The heavy body is cached."""
    trip = get_visible_trip(trip_id, viewer, db)
    trip.views = (trip.views or 0) + 1
    db.commit()

    key = CacheKeys.trip_detail(trip_id)
    body = response_cache.get(key)
    if body is None:
        db.refresh(trip)
        body = _detail_body(trip, db)
        response_cache.set(key, body, ttl=CacheTTL.MEDIUM)

    is_liked = viewer is not None and db.query(TripLike).filter(
        TripLike.trip_id == trip_id, TripLike.user_id == viewer.id
    ).first() is not None
    return dict(body, views=trip.views, is_liked=is_liked)


def _update_type(trip: Trip, changes: dict) -> str:
    if ("start_date" in changes and changes["start_date"] != trip.start_date) or \
            ("end_date" in changes and changes["end_date"] != trip.end_date):
        return "date_change"
    if "status" in changes and changes["status"] != trip.status:
        return "status_change"
    if "itinerary" in changes and changes["itinerary"] != trip.itinerary:
        return "itinerary_change"
    return "general"


@service_operation("update trip")
def update_trip(user: User, trip_id: int, data: TripUpdate, db: Session) -> Trip:
    trip = get_organized_trip(trip_id, user, db)
    changes = data.model_dump(exclude_unset=True)
    changes = {k: v for k, v in changes.items() if v is not None}

    start_date = changes.get("start_date", trip.start_date)
    end_date = changes.get("end_date", trip.end_date)
    _check_dates(start_date, end_date)

    if "max_participants" in changes and changes["max_participants"] < accepted_count(trip.id, db):
        raise BadRequestError("max_participants cannot be below the current participant count")

    update_type = _update_type(trip, changes)

    for field, value in changes.items():
        if field == "destination":
            value = data.destination.model_dump(mode="json")
        elif field == "budget":
            value = _budget_json(data.budget)
        elif field == "tags":
            value = normalize_tags(value)
        setattr(trip, field, value)
    trip.duration = trip_duration(start_date, end_date)
    db.commit()
    db.refresh(trip)
    invalidate_trip(trip.id)
    response_cache.remove_prefix(CacheKeys.SEARCH_PREFIX)

    participant_ids = [
        p.user_id for p in db.query(TripParticipant).filter(
            TripParticipant.trip_id == trip.id,
            TripParticipant.status == ParticipantStatus.ACCEPTED,
            TripParticipant.user_id != user.id
        ).all()
    ]
    for participant_id in participant_ids:
        notification_service.send_trip_update(db, participant_id, trip.title, trip.id, update_type, actor_id=user.id)
    return trip


@service_operation("delete trip")
def delete_trip(user: User, trip_id: int, db: Session) -> None:
    trip = get_organized_trip(trip_id, user, db)
    trip.is_active = False
    db.commit()
    invalidate_trip(trip_id)
    response_cache.remove_prefix(CacheKeys.SEARCH_PREFIX)
    logger.info(f"Trip {trip_id} deactivated by user {user.id}")


@service_operation("join trip")
def join_trip(user: User, trip_id: int, db: Session) -> TripParticipant:
    trip = get_visible_trip(trip_id, user, db)
    if trip.status in (TripStatus.COMPLETED, TripStatus.CANCELLED):
        raise BadRequestError("This trip is no longer accepting participants")
    if get_participant(trip_id, user.id, db):
        raise ConflictError("You are already a participant of this trip")
    if accepted_count(trip_id, db) >= trip.max_participants:
        raise BadRequestError("Trip is full")

    participant = TripParticipant(
        trip_id=trip_id,
        user_id=user.id,
        status=ParticipantStatus.ACCEPTED,
        role=ParticipantRole.PARTICIPANT,
    )
    db.add(participant)
    db.commit()
    db.refresh(participant)
    invalidate_trip(trip_id)

    notification_service.send_trip_update(
        db, trip.organizer_id, trip.title, trip.id, "participant_joined", actor_id=user.id
    )
    return participant


@service_operation("leave trip")
def leave_trip(user: User, trip_id: int, db: Session) -> None:
    trip = get_active_trip(trip_id, db)
    if trip.organizer_id == user.id:
        raise BadRequestError("The organizer cannot leave the trip")
    participant = get_participant(trip_id, user.id, db)
    if not participant or participant.status != ParticipantStatus.ACCEPTED:
        raise NotFoundError("You are not a participant of this trip")
    db.delete(participant)
    db.commit()
    invalidate_trip(trip_id)

    notification_service.send_trip_update(
        db, trip.organizer_id, trip.title, trip.id, "participant_left", actor_id=user.id
    )


@service_operation("fetch participants")
def list_participants(trip_id: int, viewer: Optional[User], db: Session) -> List[TripParticipant]:
    get_visible_trip(trip_id, viewer, db)
    return db.query(TripParticipant).options(joinedload(TripParticipant.user)).filter(
        TripParticipant.trip_id == trip_id,
        TripParticipant.status == ParticipantStatus.ACCEPTED
    ).order_by(TripParticipant.created_at).all()


@service_operation("toggle trip like")
def toggle_like(user: User, trip_id: int, db: Session) -> dict:
    trip = get_visible_trip(trip_id, user, db)
    like = db.query(TripLike).filter(TripLike.trip_id == trip_id, TripLike.user_id == user.id).first()
    if like:
        db.delete(like)
        is_liked = False
    else:
        db.add(TripLike(trip_id=trip_id, user_id=user.id))
        is_liked = True
    db.commit()
    invalidate_trip(trip_id)

    if is_liked and trip.organizer_id != user.id:
        notification_service.send_like(db, trip.organizer_id, user, trip.title, trip_id=trip.id)

    return {
        "is_liked": is_liked,
        "like_count": db.query(TripLike).filter(TripLike.trip_id == trip_id).count(),
    }


@service_operation("add trip comment")
def add_comment(user: User, trip_id: int, content: str, db: Session) -> TripComment:
    trip = get_visible_trip(trip_id, user, db)
    comment = TripComment(trip_id=trip_id, user_id=user.id, content=content.strip())
    db.add(comment)
    db.commit()
    db.refresh(comment)
    invalidate_trip(trip_id)

    if trip.organizer_id != user.id:
        notification_service.send_comment(db, trip.organizer_id, user, trip.title, comment.id, trip_id=trip.id)
    return comment


@service_operation("fetch trip comments")
def list_comments(trip_id: int, viewer: Optional[User], page: int, limit: int, db: Session) -> Tuple[List[TripComment], int]:
    get_visible_trip(trip_id, viewer, db)
    query = db.query(TripComment).filter(TripComment.trip_id == trip_id)
    total = query.count()
    rows = paginate(
        query.options(joinedload(TripComment.user)).order_by(TripComment.created_at.desc(), TripComment.id.desc()),
        page, limit
    )
    return rows, total


@service_operation("share trip")
def share_trip(trip_id: int, viewer: Optional[User], db: Session) -> int:
    trip = get_visible_trip(trip_id, viewer, db)
    trip.shares = (trip.shares or 0) + 1
    db.commit()
    invalidate_trip(trip_id)
    return trip.shares


@service_operation("invite to trip")
def invite_user(user: User, trip_id: int, invitee_id: int, db: Session) -> None:
    """Organizer-only: send a trip invitation notification to another user."""
    trip = get_organized_trip(trip_id, user, db)
    if invitee_id == user.id:
        raise BadRequestError("You cannot invite yourself")
    invitee = db.query(User).filter(User.id == invitee_id, User.is_active.is_(True)).first()
    if not invitee:
        raise NotFoundError("User not found")
    if get_participant(trip_id, invitee_id, db):
        raise ConflictError("User is already part of this trip")
    notification_service.send_trip_invite(db, invitee_id, user, trip.title, trip.id)


# --- Join requests ---

@service_operation("create trip request")
def create_request(user: User, trip_id: int, message: Optional[str], db: Session) -> TripParticipant:
    trip = get_visible_trip(trip_id, user, db)
    if trip.organizer_id == user.id:
        raise BadRequestError("You cannot request to join your own trip")
    if get_participant(trip_id, user.id, db):
        raise ConflictError("You have already requested to join this trip")

    request = TripParticipant(
        trip_id=trip_id,
        user_id=user.id,
        status=ParticipantStatus.PENDING,
        role=ParticipantRole.PARTICIPANT,
        message=message,
    )
    db.add(request)
    db.commit()
    db.refresh(request)

    notification_service.send_trip_request(db, trip.organizer_id, user, trip.title, trip.id, request.id)
    return request


@service_operation("fetch trip requests")
def list_requests(user: User, trip_id: int, db: Session) -> List[TripParticipant]:
    get_organized_trip(trip_id, user, db)
    return db.query(TripParticipant).options(joinedload(TripParticipant.user)).filter(
        TripParticipant.trip_id == trip_id,
        TripParticipant.status == ParticipantStatus.PENDING
    ).order_by(TripParticipant.created_at.desc()).all()


@service_operation("fetch my trip requests")
def my_requests(user: User, db: Session) -> List[TripParticipant]:
    return db.query(TripParticipant).options(
        joinedload(TripParticipant.user), joinedload(TripParticipant.trip)
    ).join(Trip).filter(
        TripParticipant.user_id == user.id,
        TripParticipant.status == ParticipantStatus.PENDING,
        Trip.is_active.is_(True)
    ).order_by(TripParticipant.created_at.desc()).all()


def _pending_for_organizer(user: User, request_id: int, db: Session) -> Tuple[TripParticipant, Trip]:
    request = db.query(TripParticipant).filter(TripParticipant.id == request_id).first()
    if not request:
        raise NotFoundError("Trip request not found")
    trip = get_organized_trip(request.trip_id, user, db)
    if request.status != ParticipantStatus.PENDING:
        raise BadRequestError(f"Request has already been {request.status.value}")
    return request, trip


@service_operation("approve trip request")
def approve_request(user: User, request_id: int, db: Session) -> TripParticipant:
    request, trip = _pending_for_organizer(user, request_id, db)
    if accepted_count(trip.id, db) >= trip.max_participants:
        raise BadRequestError("Trip is full")
    request.status = ParticipantStatus.ACCEPTED
    db.commit()
    db.refresh(request)
    invalidate_trip(trip.id)

    notification_service.send_trip_request_result(db, request.user_id, trip.title, trip.id, True, actor_id=user.id)
    return request


@service_operation("reject trip request")
def reject_request(user: User, request_id: int, db: Session) -> TripParticipant:
    request, trip = _pending_for_organizer(user, request_id, db)
    request.status = ParticipantStatus.REJECTED
    db.commit()
    db.refresh(request)

    notification_service.send_trip_request_result(db, request.user_id, trip.title, trip.id, False, actor_id=user.id)
    return request
