"""
Notification service: persistence plus the typed helpers other services call.

Helpers are side effects of an already committed operation. They go through
``notify_safely`` so a failed insert is logged and never propagates.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.core.errors import NotFoundError, ServiceError, service_operation
from app.core.utils import paginate
from app.models.notification import Notification, NotificationType
from app.models.user import User

logger = logging.getLogger(__name__)

SOCIAL_TYPES = {
    NotificationType.LIKE,
    NotificationType.COMMENT,
    NotificationType.FOLLOW,
    NotificationType.FOLLOW_REQUEST,
}

TRIP_UPDATE_MESSAGES = {
    "status_change": 'Trip "{title}" status has been updated',
    "itinerary_change": 'Itinerary for "{title}" has been updated',
    "participant_joined": 'Someone joined your trip "{title}"',
    "participant_left": 'Someone left your trip "{title}"',
    "date_change": 'Dates for "{title}" have been updated',
}
DEFAULT_TRIP_UPDATE_MESSAGE = 'Your trip "{title}" has been updated'


def _wants(recipient: Optional[User], notification_type: NotificationType) -> bool:
    """Check the recipient's notification preferences."""
    if recipient is None:
        return False
    prefs = (recipient.preferences or {}).get("notifications", {})
    if notification_type in SOCIAL_TYPES:
        return prefs.get("socialActivity", True)
    if notification_type == NotificationType.TRIP_UPDATE:
        return prefs.get("tripUpdates", True)
    return True


@service_operation("create notification")
def create_notification(
    user_id: int,
    type: NotificationType,
    title: str,
    message: str,
    data: Optional[Dict[str, Any]] = None,
    action_url: Optional[str] = None,
    actor_id: Optional[int] = None,
    db: Session = None
) -> Notification:
    notification = Notification(
        user_id=user_id,
        actor_id=actor_id,
        type=type,
        title=title,
        message=message,
        data=data or {},
        action_url=action_url,
    )
    db.add(notification)
    db.commit()
    db.refresh(notification)
    return notification


def notify_safely(db: Session, user_id: int, type: NotificationType, **fields) -> Optional[Notification]:
    """
    Create a notification unless the recipient opted out.
    Failures are logged and swallowed; returns None in that case.
    """
    recipient = db.query(User).filter(User.id == user_id).first()
    if not _wants(recipient, type):
        logger.debug(f"Skipping {type.value} notification for user {user_id} (preferences)")
        return None
    try:
        return create_notification(user_id=user_id, type=type, db=db, **fields)
    except (ServiceError, SQLAlchemyError) as e:
        db.rollback()
        logger.warning(f"Failed to send {type.value} notification to user {user_id}: {e}")
        return None


# --- Helpers ---

def send_like(db: Session, user_id: int, liker: User, title: str, trip_id: int = None, journey_id: int = None):
    target = "journey" if journey_id else "trip"
    target_id = journey_id or trip_id
    return notify_safely(
        db, user_id, NotificationType.LIKE,
        title="New Like",
        message=f'{liker.full_name} liked your {target} "{title}"',
        data={f"{target}Id": target_id, "likerName": liker.full_name},
        action_url=f"/{target}s/{target_id}",
        actor_id=liker.id,
    )


def send_comment(db: Session, user_id: int, commenter: User, title: str, comment_id: int,
                 trip_id: int = None, journey_id: int = None):
    target = "journey" if journey_id else "trip"
    target_id = journey_id or trip_id
    return notify_safely(
        db, user_id, NotificationType.COMMENT,
        title="New Comment",
        message=f'{commenter.full_name} commented on your {target} "{title}"',
        data={f"{target}Id": target_id, "commentId": comment_id, "commenterName": commenter.full_name},
        action_url=f"/{target}s/{target_id}#comment-{comment_id}",
        actor_id=commenter.id,
    )


def send_follow(db: Session, user_id: int, follower: User):
    return notify_safely(
        db, user_id, NotificationType.FOLLOW,
        title="New Follower",
        message=f"{follower.full_name} started following you",
        data={"followerId": follower.id, "followerName": follower.full_name},
        action_url=f"/profile/{follower.id}",
        actor_id=follower.id,
    )


def send_follow_request(db: Session, user_id: int, requester: User):
    return notify_safely(
        db, user_id, NotificationType.FOLLOW_REQUEST,
        title="Follow Request",
        message=f"{requester.full_name} wants to follow you",
        data={"requesterId": requester.id, "requesterName": requester.full_name},
        action_url=f"/profile/{requester.id}",
        actor_id=requester.id,
    )


def send_follow_accepted(db: Session, user_id: int, accepter: User):
    return notify_safely(
        db, user_id, NotificationType.FOLLOW_ACCEPTED,
        title="Request Accepted",
        message=f"{accepter.full_name} accepted your follow request",
        data={"followingId": accepter.id, "followingName": accepter.full_name},
        action_url=f"/profile/{accepter.id}",
        actor_id=accepter.id,
    )


def trip_update_message(title: str, update_type: str) -> str:
    template = TRIP_UPDATE_MESSAGES.get(update_type, DEFAULT_TRIP_UPDATE_MESSAGE)
    return template.format(title=title)


def send_trip_update(db: Session, user_id: int, trip_title: str, trip_id: int, update_type: str,
                     actor_id: Optional[int] = None):
    return notify_safely(
        db, user_id, NotificationType.TRIP_UPDATE,
        title="Trip Update",
        message=trip_update_message(trip_title, update_type),
        data={"tripId": trip_id, "updateType": update_type},
        action_url=f"/trips/{trip_id}",
        actor_id=actor_id,
    )


def send_trip_invite(db: Session, user_id: int, inviter: User, trip_title: str, trip_id: int):
    return notify_safely(
        db, user_id, NotificationType.TRIP_INVITE,
        title="Trip Invitation",
        message=f'{inviter.full_name} invited you to join "{trip_title}"',
        data={"tripId": trip_id, "inviterName": inviter.full_name},
        action_url=f"/trips/{trip_id}",
        actor_id=inviter.id,
    )


def send_trip_request(db: Session, user_id: int, requester: User, trip_title: str, trip_id: int, request_id: int):
    return notify_safely(
        db, user_id, NotificationType.TRIP_REQUEST,
        title="Trip Join Request",
        message=f'{requester.full_name} wants to join your trip "{trip_title}"',
        data={"tripId": trip_id, "requestId": request_id, "requesterName": requester.full_name},
        action_url=f"/trips/{trip_id}/requests",
        actor_id=requester.id,
    )


def send_trip_request_result(db: Session, user_id: int, trip_title: str, trip_id: int, approved: bool,
                             actor_id: Optional[int] = None):
    outcome = "approved" if approved else "declined"
    return notify_safely(
        db, user_id, NotificationType.TRIP_REQUEST,
        title=f"Request {outcome.capitalize()}",
        message=f'Your request to join "{trip_title}" was {outcome}',
        data={"tripId": trip_id, "approved": approved},
        action_url=f"/trips/{trip_id}",
        actor_id=actor_id,
    )


def send_system(db: Session, user_id: int, title: str, message: str, data: Optional[Dict[str, Any]] = None):
    return notify_safely(
        db, user_id, NotificationType.SYSTEM,
        title=title,
        message=message,
        data=data or {},
    )


# --- Queries ---

@service_operation("fetch notifications")
def list_notifications(
    user_id: int,
    page: int,
    limit: int,
    type: Optional[NotificationType] = None,
    is_read: Optional[bool] = None,
    db: Session = None
) -> Tuple[List[Notification], int]:
    query = db.query(Notification).filter(Notification.user_id == user_id)
    if type is not None:
        query = query.filter(Notification.type == type)
    if is_read is not None:
        query = query.filter(Notification.is_read == is_read)
    total = query.count()
    items = paginate(
        query.options(joinedload(Notification.actor)).order_by(
            Notification.created_at.desc(), Notification.id.desc()
        ),
        page, limit
    )
    return items, total


@service_operation("count unread notifications")
def unread_count(user_id: int, db: Session) -> int:
    return db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.is_read.is_(False)
    ).count()


def _get_owned(notification_id: int, user_id: int, db: Session) -> Notification:
    notification = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.user_id == user_id
    ).first()
    if not notification:
        raise NotFoundError("Notification not found")
    return notification


@service_operation("mark notification as read")
def mark_as_read(notification_id: int, user_id: int, db: Session) -> Notification:
    notification = _get_owned(notification_id, user_id, db)
    notification.is_read = True
    db.commit()
    db.refresh(notification)
    return notification


@service_operation("mark all notifications as read")
def mark_all_as_read(user_id: int, db: Session) -> int:
    count = db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.is_read.is_(False)
    ).update({Notification.is_read: True}, synchronize_session=False)
    db.commit()
    return count


@service_operation("delete notification")
def delete_notification(notification_id: int, user_id: int, db: Session) -> None:
    notification = _get_owned(notification_id, user_id, db)
    db.delete(notification)
    db.commit()


@service_operation("clear notifications")
def clear_notifications(user_id: int, db: Session) -> int:
    count = db.query(Notification).filter(
        Notification.user_id == user_id
    ).delete(synchronize_session=False)
    db.commit()
    return count
