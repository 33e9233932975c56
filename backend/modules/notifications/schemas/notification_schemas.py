# backend/modules/notifications/schemas/notification_schemas.py

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Union
from datetime import datetime

from core.response_models import PaginationMeta
from modules.notifications.models.notification_models import NotificationType


class NotificationOut(BaseModel):
    """Notification as rendered to its recipient"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    type: str
    title: str
    message: str
    related_id: Optional[int] = None
    icon: str
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime


class NotificationListResponse(BaseModel):
    """Page of notifications"""

    notifications: List[NotificationOut]
    pagination: PaginationMeta


class UnreadCountResponse(BaseModel):
    unread_count: int


class MarkReadResponse(BaseModel):
    id: int
    is_read: bool
    read_at: Optional[datetime]


class NotificationDraft(BaseModel):
    """One item of a bulk write"""

    recipient_id: int
    # Unknown types are stored as given and get the default icon
    type: Union[NotificationType, str] = NotificationType.SYSTEM
    title: str
    message: str
    related_id: Optional[int] = None


# Admin payloads
class SendNotificationRequest(BaseModel):
    """Send a notification to a single business owner"""

    title: str = Field(..., min_length=3, max_length=100)
    message: str = Field(..., min_length=10, max_length=500)
    type: NotificationType = NotificationType.SYSTEM
    feedback_id: Optional[int] = Field(None, description="Related feedback ID")


class SendBulkNotificationRequest(BaseModel):
    """Send the same notification to an explicit list of owners"""

    user_ids: List[int] = Field(..., min_length=1)
    title: str = Field(..., min_length=3, max_length=100)
    message: str = Field(..., min_length=10, max_length=500)
    type: NotificationType = NotificationType.SYSTEM


class SendToAllNotificationRequest(BaseModel):
    """Broadcast to every eligible owner"""

    title: str = Field(..., min_length=3, max_length=100)
    message: str = Field(..., min_length=10, max_length=500)
    type: NotificationType = NotificationType.SYSTEM


class SentNotificationResponse(BaseModel):
    notification_id: int
    user_id: int
    sent_at: datetime


class BulkSendResponse(BaseModel):
    sent_count: int
    user_ids: List[int] = []
