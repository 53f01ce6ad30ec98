"""
Notification routes.
"""
from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.models.user import User
from app.models.notification import NotificationType
from app.schemas.common import MessageResponse
from app.schemas.notification import NotificationResponse, NotificationListResponse, UnreadCount, BulkResult
from app.core.utils import pagination_meta
from app.services import notification_service
from app.api.dependencies import get_current_user, Pagination

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    pagination: Pagination = Depends(),
    type: Optional[NotificationType] = None,
    is_read: Optional[bool] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    items, total = notification_service.list_notifications(
        current_user.id, pagination.page, pagination.limit, type=type, is_read=is_read, db=db
    )
    return {
        "notifications": items,
        "unread_count": notification_service.unread_count(current_user.id, db),
        "pagination": pagination_meta(total, pagination.page, pagination.limit),
    }


@router.get("/unread-count", response_model=UnreadCount)
async def get_unread_count(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return {"unread_count": notification_service.unread_count(current_user.id, db)}


@router.put("/read-all", response_model=BulkResult)
async def mark_all_read(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return {"count": notification_service.mark_all_as_read(current_user.id, db)}


@router.post("/test", response_model=NotificationResponse, status_code=status.HTTP_201_CREATED)
async def create_test_notification(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Send yourself a system notification."""
    return notification_service.create_notification(
        user_id=current_user.id,
        type=NotificationType.SYSTEM,
        title="Test Notification",
        message="This is a test notification",
        data={"test": True},
        db=db,
    )


@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return notification_service.mark_as_read(notification_id, current_user.id, db)


@router.delete("/{notification_id}", response_model=MessageResponse)
async def delete_notification(
    notification_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    notification_service.delete_notification(notification_id, current_user.id, db)
    return {"message": "Notification deleted"}


@router.delete("", response_model=BulkResult)
async def clear_notifications(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return {"count": notification_service.clear_notifications(current_user.id, db)}
