"""
Pydantic schemas for Notification entity.
"""
from pydantic import BaseModel
from typing import Any, Dict, List, Optional
from datetime import datetime
from app.models.notification import NotificationType
from app.schemas.common import UserSummary, PaginationMeta


class NotificationResponse(BaseModel):
    id: int
    type: NotificationType
    title: str
    message: str
    data: Dict[str, Any] = {}
    action_url: Optional[str] = None
    is_read: bool
    actor: Optional[UserSummary] = None
    created_at: datetime

    class Config:
        from_attributes = True


class NotificationListResponse(BaseModel):
    notifications: List[NotificationResponse]
    unread_count: int
    pagination: PaginationMeta


class UnreadCount(BaseModel):
    unread_count: int


class BulkResult(BaseModel):
    count: int
