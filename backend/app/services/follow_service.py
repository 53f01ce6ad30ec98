"""
Follow service: follow requests, acceptance and follower queries.
"""
import logging
from typing import List, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from app.core.errors import BadRequestError, ConflictError, NotFoundError, PermissionDeniedError, service_operation
from app.core.utils import paginate
from app.models.follow import Follow, FollowStatus, BlockedUser
from app.models.user import User
from app.services import notification_service
from app.services.user_service import get_active_user, invalidate_profile

logger = logging.getLogger(__name__)


def follower_count(user_id: int, db: Session) -> int:
    return db.query(Follow).filter(
        Follow.following_id == user_id, Follow.status == FollowStatus.ACCEPTED
    ).count()


def following_count(user_id: int, db: Session) -> int:
    return db.query(Follow).filter(
        Follow.follower_id == user_id, Follow.status == FollowStatus.ACCEPTED
    ).count()


def is_blocked_between(a: int, b: int, db: Session) -> bool:
    return db.query(BlockedUser).filter(
        or_(
            (BlockedUser.blocker_id == a) & (BlockedUser.blocked_id == b),
            (BlockedUser.blocker_id == b) & (BlockedUser.blocked_id == a),
        )
    ).first() is not None


def get_follow(follower_id: int, following_id: int, db: Session):
    return db.query(Follow).filter(
        Follow.follower_id == follower_id,
        Follow.following_id == following_id
    ).first()


def is_following(follower_id: int, following_id: int, db: Session) -> bool:
    follow = get_follow(follower_id, following_id, db)
    return follow is not None and follow.status == FollowStatus.ACCEPTED


@service_operation("follow user")
def follow_user(follower: User, target_id: int, db: Session) -> dict:
    """
    Follow a user. Private targets get a pending request instead.
    The follow commits before the notification is sent.
    """
    if target_id == follower.id:
        raise BadRequestError("You cannot follow yourself")
    target = get_active_user(target_id, db)
    if is_blocked_between(follower.id, target_id, db):
        raise PermissionDeniedError("You cannot follow this user")
    if get_follow(follower.id, target_id, db):
        raise ConflictError("Already following or requested to follow this user")

    status = FollowStatus.PENDING if target.is_private else FollowStatus.ACCEPTED
    follow = Follow(follower_id=follower.id, following_id=target_id, status=status)
    db.add(follow)
    db.commit()
    invalidate_profile(target_id)
    invalidate_profile(follower.id)

    if status == FollowStatus.PENDING:
        notification_service.send_follow_request(db, target_id, follower)
    else:
        notification_service.send_follow(db, target_id, follower)

    return {
        "status": status,
        "is_following": status == FollowStatus.ACCEPTED,
        "is_pending": status == FollowStatus.PENDING,
        "follower_count": follower_count(target_id, db),
    }


@service_operation("unfollow user")
def unfollow_user(follower: User, target_id: int, db: Session) -> dict:
    """Remove a follow, or cancel a pending request."""
    follow = get_follow(follower.id, target_id, db)
    if not follow:
        raise NotFoundError("You are not following this user")
    db.delete(follow)
    db.commit()
    invalidate_profile(target_id)
    invalidate_profile(follower.id)
    return {"follower_count": follower_count(target_id, db)}


def relation(viewer_id: int, user_id: int, db: Session) -> dict:
    outgoing = get_follow(viewer_id, user_id, db)
    incoming = get_follow(user_id, viewer_id, db)
    return {
        "is_following": outgoing is not None and outgoing.status == FollowStatus.ACCEPTED,
        "is_pending": outgoing is not None and outgoing.status == FollowStatus.PENDING,
        "follows_you": incoming is not None and incoming.status == FollowStatus.ACCEPTED,
    }


@service_operation("fetch followers")
def list_followers(user_id: int, page: int, limit: int, db: Session) -> Tuple[List[dict], int]:
    get_active_user(user_id, db)
    query = db.query(Follow).join(User, User.id == Follow.follower_id).filter(
        Follow.following_id == user_id,
        Follow.status == FollowStatus.ACCEPTED,
        User.is_active.is_(True),
    )
    total = query.count()
    rows = paginate(
        query.options(joinedload(Follow.follower)).order_by(Follow.created_at.desc()),
        page, limit
    )
    return [{"user": f.follower, "status": f.status, "since": f.created_at} for f in rows], total


@service_operation("fetch following")
def list_following(user_id: int, page: int, limit: int, db: Session) -> Tuple[List[dict], int]:
    get_active_user(user_id, db)
    query = db.query(Follow).join(User, User.id == Follow.following_id).filter(
        Follow.follower_id == user_id,
        Follow.status == FollowStatus.ACCEPTED,
        User.is_active.is_(True),
    )
    total = query.count()
    rows = paginate(
        query.options(joinedload(Follow.following)).order_by(Follow.created_at.desc()),
        page, limit
    )
    return [{"user": f.following, "status": f.status, "since": f.created_at} for f in rows], total


@service_operation("fetch follow requests")
def pending_requests(user_id: int, page: int, limit: int, db: Session) -> Tuple[List[dict], int]:
    query = db.query(Follow).filter(
        Follow.following_id == user_id,
        Follow.status == FollowStatus.PENDING,
    )
    total = query.count()
    rows = paginate(
        query.options(joinedload(Follow.follower)).order_by(Follow.created_at.desc()),
        page, limit
    )
    return [{"user": f.follower, "status": f.status, "since": f.created_at} for f in rows], total


def _pending_request(follower_id: int, user_id: int, db: Session) -> Follow:
    follow = get_follow(follower_id, user_id, db)
    if not follow or follow.status != FollowStatus.PENDING:
        raise NotFoundError("Follow request not found")
    return follow


@service_operation("accept follow request")
def accept_request(user: User, follower_id: int, db: Session) -> dict:
    follow = _pending_request(follower_id, user.id, db)
    follow.status = FollowStatus.ACCEPTED
    db.commit()
    invalidate_profile(user.id)
    invalidate_profile(follower_id)
    notification_service.send_follow_accepted(db, follower_id, user)
    return {"follower_count": follower_count(user.id, db)}


@service_operation("reject follow request")
def reject_request(user: User, follower_id: int, db: Session) -> None:
    follow = _pending_request(follower_id, user.id, db)
    db.delete(follow)
    db.commit()


def stats(user_id: int, db: Session) -> dict:
    get_active_user(user_id, db)
    return {
        "followers": follower_count(user_id, db),
        "following": following_count(user_id, db),
    }


def following_ids(user_id: int, db: Session) -> List[int]:
    """Ids of users the given user follows (accepted only)."""
    return [
        row.following_id for row in db.query(Follow.following_id).filter(
            Follow.follower_id == user_id,
            Follow.status == FollowStatus.ACCEPTED
        ).all()
    ]
