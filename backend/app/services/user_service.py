"""
User service for account and profile logic.
"""
import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.cache import response_cache, CacheKeys, CacheTTL
from app.core.errors import BadRequestError, ConflictError, NotFoundError, service_operation
from app.core.security import get_password_hash, verify_password
from app.core.utils import paginate
from app.models.follow import Follow, FollowStatus, BlockedUser
from app.models.journey import Journey
from app.models.trip import Trip, TripParticipant, TripVisibility, ParticipantStatus, ParticipantRole
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate, PreferencesUpdate

logger = logging.getLogger(__name__)


@service_operation("register user")
def register_user(data: UserCreate, db: Session) -> User:
    """Create an account; username and email must both be unused."""
    if db.query(User).filter(User.username == data.username).first():
        raise ConflictError("Username already exists")
    if db.query(User).filter(User.email == data.email.lower()).first():
        raise ConflictError("Email already exists")

    user = User(
        username=data.username,
        email=data.email.lower(),
        first_name=data.first_name,
        last_name=data.last_name,
        hashed_password=get_password_hash(data.password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Registered user {user.id} ({user.username})")
    return user


def authenticate(identifier: str, password: str, db: Session) -> Optional[User]:
    """Look up a user by email or username and check the password."""
    identifier = identifier.strip()
    if "@" in identifier:
        user = db.query(User).filter(User.email == identifier.lower()).first()
    else:
        user = db.query(User).filter(User.username == identifier).first()
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user


@service_operation("record login")
def record_login(user: User, db: Session) -> User:
    user.last_login = datetime.utcnow()
    db.commit()
    db.refresh(user)
    return user


def get_active_user(user_id: int, db: Session) -> User:
    user = db.query(User).filter(User.id == user_id, User.is_active.is_(True)).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def invalidate_profile(user_id: int) -> None:
    response_cache.remove(CacheKeys.user_profile(user_id))


@service_operation("update profile")
def update_profile(user: User, data: UserUpdate, db: Session) -> User:
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(user, field, value)
    db.commit()
    db.refresh(user)
    invalidate_profile(user.id)
    return user


@service_operation("update preferences")
def update_preferences(user: User, data: PreferencesUpdate, db: Session) -> User:
    """Merge the given preferences into the stored JSON (nested dicts merge one level)."""
    merged = dict(user.preferences or {})
    for key, value in data.model_dump(exclude_none=True).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    # reassign so the JSON column is flagged dirty
    user.preferences = merged
    db.commit()
    db.refresh(user)
    return user


@service_operation("update privacy")
def set_privacy(user: User, is_private: bool, db: Session) -> User:
    user.is_private = is_private
    db.commit()
    db.refresh(user)
    invalidate_profile(user.id)
    return user


@service_operation("deactivate account")
def deactivate(user: User, db: Session) -> None:
    user.is_active = False
    db.commit()
    invalidate_profile(user.id)
    logger.info(f"Deactivated user {user.id}")


@service_operation("fetch user stats")
def get_stats(user_id: int, db: Session) -> dict:
    trips_organized = db.query(Trip).filter(
        Trip.organizer_id == user_id, Trip.is_active.is_(True)
    ).count()
    trips_joined = db.query(TripParticipant).join(Trip).filter(
        TripParticipant.user_id == user_id,
        TripParticipant.status == ParticipantStatus.ACCEPTED,
        TripParticipant.role != ParticipantRole.ORGANIZER,
        Trip.is_active.is_(True),
    ).count()
    followers = db.query(Follow).filter(
        Follow.following_id == user_id, Follow.status == FollowStatus.ACCEPTED
    ).count()
    following = db.query(Follow).filter(
        Follow.follower_id == user_id, Follow.status == FollowStatus.ACCEPTED
    ).count()
    journeys = db.query(Journey).filter(Journey.author_id == user_id).count()
    return {
        "trips_organized": trips_organized,
        "trips_joined": trips_joined,
        "followers": followers,
        "following": following,
        "journeys": journeys,
    }


def _follow_row(follower_id: int, following_id: int, db: Session) -> Optional[Follow]:
    return db.query(Follow).filter(
        Follow.follower_id == follower_id,
        Follow.following_id == following_id
    ).first()


def get_public_profile(user_id: int, viewer: Optional[User], db: Session) -> dict:
    """
    Public profile of a user. The viewer-independent part is cached per user;
    stats, follow state and the private-profile restriction are applied per
    request.
    """
    key = CacheKeys.user_profile(user_id)
    profile = response_cache.get(key)
    if profile is None:
        user = get_active_user(user_id, db)
        profile = {
            "id": user.id,
            "username": user.username,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "avatar": user.avatar,
            "bio": user.bio,
            "location": user.location,
            "is_private": user.is_private,
            "created_at": user.created_at,
        }
        response_cache.set(key, profile, ttl=CacheTTL.MEDIUM)

    profile = dict(profile)
    is_self = viewer is not None and viewer.id == user_id
    follow = _follow_row(viewer.id, user_id, db) if viewer is not None and not is_self else None
    is_following = follow is not None and follow.status == FollowStatus.ACCEPTED
    profile["is_following"] = is_following

    if profile["is_private"] and not is_self and not is_following:
        profile.update(is_limited=True, stats=None, bio=None, location=None)
    else:
        profile["stats"] = get_stats(user_id, db)
    return profile


@service_operation("search users")
def search_users(q: str, page: int, limit: int, db: Session) -> Tuple[List[User], int]:
    pattern = f"%{q.strip()}%"
    query = db.query(User).filter(
        User.is_active.is_(True),
        or_(
            User.username.ilike(pattern),
            User.first_name.ilike(pattern),
            User.last_name.ilike(pattern),
        )
    )
    total = query.count()
    return paginate(query.order_by(User.username), page, limit), total


def blocked_ids(user_id: int, db: Session) -> set:
    """Ids of users blocked by, or blocking, the given user."""
    rows = db.query(BlockedUser).filter(
        or_(BlockedUser.blocker_id == user_id, BlockedUser.blocked_id == user_id)
    ).all()
    return {r.blocked_id if r.blocker_id == user_id else r.blocker_id for r in rows}


@service_operation("fetch user suggestions")
def suggestions(user: User, db: Session, limit: int = 10) -> List[User]:
    """Active users the given user does not follow (or has requested), minus blocks."""
    followed = {
        f.following_id for f in db.query(Follow).filter(Follow.follower_id == user.id).all()
    }
    excluded = followed | blocked_ids(user.id, db) | {user.id}
    return db.query(User).filter(
        User.is_active.is_(True),
        User.id.notin_(excluded)
    ).order_by(User.created_at.desc()).limit(limit).all()


@service_operation("fetch user trips")
def user_trips(user_id: int, viewer: Optional[User], page: int, limit: int, db: Session) -> Tuple[List[Trip], int]:
    get_active_user(user_id, db)
    query = db.query(Trip).filter(Trip.organizer_id == user_id, Trip.is_active.is_(True))
    if viewer is None or viewer.id != user_id:
        query = query.filter(Trip.visibility == TripVisibility.PUBLIC)
    total = query.count()
    return paginate(query.order_by(Trip.created_at.desc()), page, limit), total


@service_operation("block user")
def block_user(user: User, target_id: int, db: Session) -> None:
    """Block a user and drop follow rows in both directions."""
    if target_id == user.id:
        raise BadRequestError("You cannot block yourself")
    get_active_user(target_id, db)
    existing = db.query(BlockedUser).filter(
        BlockedUser.blocker_id == user.id, BlockedUser.blocked_id == target_id
    ).first()
    if existing:
        raise ConflictError("User is already blocked")

    db.query(Follow).filter(
        or_(
            (Follow.follower_id == user.id) & (Follow.following_id == target_id),
            (Follow.follower_id == target_id) & (Follow.following_id == user.id),
        )
    ).delete(synchronize_session=False)
    db.add(BlockedUser(blocker_id=user.id, blocked_id=target_id))
    db.commit()
    invalidate_profile(user.id)
    invalidate_profile(target_id)


@service_operation("unblock user")
def unblock_user(user: User, target_id: int, db: Session) -> None:
    block = db.query(BlockedUser).filter(
        BlockedUser.blocker_id == user.id, BlockedUser.blocked_id == target_id
    ).first()
    if not block:
        raise NotFoundError("User is not blocked")
    db.delete(block)
    db.commit()
