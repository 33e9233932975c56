# backend/modules/notifications/services/broadcast_service.py

"""
Manual and broadcast notifications sent by platform admins.

``broadcast`` snapshots the eligible recipients (active, unblocked) once and
writes to that list; an owner deactivated or blocked after the snapshot is
still notified.
"""

from sqlalchemy.orm import Session
from typing import List, Optional, Sequence, Union
import logging

from core.exceptions import NotFoundError
from modules.businesses.services.directory_service import BusinessDirectory
from modules.feedback.models.feedback_models import Feedback
from modules.notifications.models.notification_models import (
    Notification,
    NotificationType,
)
from modules.notifications.schemas.notification_schemas import NotificationDraft
from modules.notifications.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class BroadcastDispatcher:
    """Fans one notification payload out to one, many or all owners"""

    def __init__(self, db: Session, notification_service: Optional[NotificationService] = None):
        self.db = db
        self.directory = BusinessDirectory(db)
        self.notifications = notification_service or NotificationService(db)

    def broadcast(
        self,
        notification_type: Union[NotificationType, str],
        title: str,
        message: str,
    ) -> int:
        """Notify every eligible owner; returns how many were notified"""

        recipient_ids = self.directory.list_eligible_recipient_ids()
        if not recipient_ids:
            logger.info("Broadcast skipped: no eligible recipients")
            return 0

        created = self._send(recipient_ids, notification_type, title, message)
        logger.info(
            f"Broadcast {notification_type} delivered to "
            f"{len(created)}/{len(recipient_ids)} owners"
        )
        return len(created)

    def send_to_user(
        self,
        user_id: int,
        title: str,
        message: str,
        notification_type: Union[NotificationType, str] = NotificationType.SYSTEM,
        feedback_id: Optional[int] = None,
    ) -> Notification:
        """Notify one owner, optionally linking an existing feedback"""

        self.directory.get_business(user_id)
        if feedback_id is not None:
            exists = self.db.query(Feedback.id).filter(Feedback.id == feedback_id).first()
            if not exists:
                raise NotFoundError("Feedback not found", error_code="FEEDBACK_NOT_FOUND")

        return self.notifications.create_notification(
            user_id, notification_type, title, message, related_id=feedback_id
        )

    def send_to_users(
        self,
        user_ids: Sequence[int],
        title: str,
        message: str,
        notification_type: Union[NotificationType, str] = NotificationType.SYSTEM,
    ) -> List[int]:
        """Notify an explicit list of owners; unknown IDs are skipped"""

        unique_ids = list(dict.fromkeys(user_ids))
        recipient_ids = self.directory.existing_ids(unique_ids)
        skipped = set(unique_ids) - set(recipient_ids)
        if skipped:
            logger.warning(f"Skipping unknown notification recipients: {sorted(skipped)}")

        created = self._send(recipient_ids, notification_type, title, message)
        return [notification.recipient_id for notification in created]

    def _send(
        self,
        recipient_ids: Sequence[int],
        notification_type: Union[NotificationType, str],
        title: str,
        message: str,
    ) -> List[Notification]:
        drafts = [
            NotificationDraft(
                recipient_id=recipient_id,
                type=notification_type,
                title=title,
                message=message,
            )
            for recipient_id in recipient_ids
        ]
        return self.notifications.create_bulk_notifications(drafts)
