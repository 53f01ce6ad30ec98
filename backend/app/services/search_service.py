"""
Search service across users, trips, journeys and clubs.
"""
import logging
from collections import Counter
from typing import List

from sqlalchemy import String, cast, or_
from sqlalchemy.orm import Session

from app.core.cache import response_cache, CacheKeys, CacheTTL
from app.core.errors import BadRequestError, service_operation
from app.models.booking import BookingType
from app.models.club import Club
from app.models.journey import Journey
from app.models.trip import Trip, TripCategory, TripDifficulty, TripStatus, TripVisibility
from app.models.user import User
from app.schemas.journey import Season

logger = logging.getLogger(__name__)

SEARCH_TYPES = ("all", "users", "trips", "journeys", "clubs")
MIN_QUERY_LENGTH = 2
SUGGESTION_LIMIT = 8
POPULAR_LIMIT = 10


def _validate_query(q: str) -> str:
    q = (q or "").strip()
    if len(q) < MIN_QUERY_LENGTH:
        raise BadRequestError(f"Search query must be at least {MIN_QUERY_LENGTH} characters")
    return q


def _users(pattern: str, limit: int, db: Session) -> List[dict]:
    rows = db.query(User).filter(
        User.is_active.is_(True),
        or_(User.username.ilike(pattern), User.first_name.ilike(pattern), User.last_name.ilike(pattern))
    ).order_by(User.username).limit(limit).all()
    return [
        {"id": u.id, "username": u.username, "first_name": u.first_name, "last_name": u.last_name, "avatar": u.avatar}
        for u in rows
    ]


def _trips(pattern: str, limit: int, db: Session) -> List[dict]:
    rows = db.query(Trip).filter(
        Trip.is_active.is_(True),
        Trip.visibility == TripVisibility.PUBLIC,
        or_(Trip.title.ilike(pattern), Trip.description.ilike(pattern), cast(Trip.destination, String).ilike(pattern))
    ).order_by(Trip.views.desc(), Trip.created_at.desc()).limit(limit).all()
    return [
        {
            "id": t.id,
            "title": t.title,
            "destination": t.destination,
            "start_date": t.start_date.isoformat(),
            "end_date": t.end_date.isoformat(),
            "category": t.category.value,
            "images": t.images,
        }
        for t in rows
    ]


def _journeys(pattern: str, limit: int, db: Session) -> List[dict]:
    rows = db.query(Journey).filter(
        Journey.is_public.is_(True),
        or_(Journey.title.ilike(pattern), Journey.description.ilike(pattern), cast(Journey.tags, String).ilike(pattern))
    ).order_by(Journey.created_at.desc()).limit(limit).all()
    return [
        {
            "id": j.id,
            "title": j.title,
            "description": j.description,
            "tags": j.tags,
            "author_id": j.author_id,
            "read_time": j.read_time,
        }
        for j in rows
    ]


def _clubs(pattern: str, limit: int, db: Session) -> List[dict]:
    rows = db.query(Club).filter(
        or_(Club.name.ilike(pattern), Club.description.ilike(pattern))
    ).order_by(Club.name).limit(limit).all()
    return [
        {"id": c.id, "name": c.name, "description": c.description, "category": c.category, "image_url": c.image_url}
        for c in rows
    ]


SEARCHERS = {
    "users": _users,
    "trips": _trips,
    "journeys": _journeys,
    "clubs": _clubs,
}


@service_operation("search")
def search(q: str, search_type: str, limit: int, db: Session) -> dict:
    """Search one or all resource types; results are cached briefly per (type, query)."""
    q = _validate_query(q)
    if search_type not in SEARCH_TYPES:
        raise BadRequestError(f"Invalid search type: {search_type}")

    key = CacheKeys.search_results(q, search_type, limit)
    cached = response_cache.get(key)
    if cached is not None:
        return cached

    pattern = f"%{q}%"
    results = {"query": q, "type": search_type, "users": [], "trips": [], "journeys": [], "clubs": []}
    for name, searcher in SEARCHERS.items():
        if search_type in ("all", name):
            results[name] = searcher(pattern, limit, db)
    results["total"] = sum(len(results[name]) for name in SEARCHERS)

    response_cache.set(key, results, ttl=CacheTTL.SHORT)
    return results


@service_operation("fetch search suggestions")
def suggestions(q: str, db: Session) -> List[dict]:
    q = _validate_query(q)
    pattern = f"%{q}%"
    found = []
    found += [{"type": "trip", "id": t["id"], "text": t["title"]} for t in _trips(pattern, SUGGESTION_LIMIT, db)]
    found += [{"type": "journey", "id": j["id"], "text": j["title"]} for j in _journeys(pattern, SUGGESTION_LIMIT, db)]
    found += [{"type": "club", "id": c["id"], "text": c["name"]} for c in _clubs(pattern, SUGGESTION_LIMIT, db)]
    found += [{"type": "user", "id": u["id"], "text": u["username"]} for u in _users(pattern, SUGGESTION_LIMIT, db)]
    return found[:SUGGESTION_LIMIT]


@service_operation("fetch popular searches")
def popular(db: Session) -> dict:
    """Most used tags over public content and the most planned destinations."""
    tags = Counter()
    destinations = Counter()
    for trip in db.query(Trip).filter(Trip.is_active.is_(True), Trip.visibility == TripVisibility.PUBLIC).all():
        tags.update(trip.tags or [])
        destination = trip.destination or {}
        if destination.get("city"):
            destinations[(destination.get("city"), destination.get("country"))] += 1
    for journey in db.query(Journey).filter(Journey.is_public.is_(True)).all():
        tags.update(journey.tags or [])

    return {
        "tags": [{"tag": tag, "count": count} for tag, count in tags.most_common(POPULAR_LIMIT)],
        "destinations": [
            {"city": city, "country": country, "trip_count": count}
            for (city, country), count in destinations.most_common(POPULAR_LIMIT)
        ],
    }


def filters() -> dict:
    return {
        "categories": [c.value for c in TripCategory],
        "difficulties": [d.value for d in TripDifficulty],
        "statuses": [s.value for s in TripStatus],
        "seasons": [s.value for s in Season],
        "booking_types": [b.value for b in BookingType],
    }
