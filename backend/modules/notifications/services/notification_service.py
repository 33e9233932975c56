# backend/modules/notifications/services/notification_service.py

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import desc
from typing import Optional, List, Iterable, Union
from datetime import datetime
import logging

from core.config import settings
from core.exceptions import NotFoundError
from core.response_models import PaginationMeta, page_offset
from modules.notifications.models.notification_models import (
    Notification,
    NotificationType,
)
from modules.notifications.schemas.notification_schemas import (
    NotificationDraft,
    NotificationListResponse,
    NotificationOut,
)
from modules.notifications.services.notification_icons import get_icon_for_type

logger = logging.getLogger(__name__)


class NotificationService:
    """Owns the notification lifecycle: creation, read state, deletion and listing"""

    def __init__(self, db: Session):
        self.db = db

    # Creation

    def create_notification(
        self,
        recipient_id: int,
        notification_type: Union[NotificationType, str],
        title: str,
        message: str,
        related_id: Optional[int] = None,
        commit: bool = True,
    ) -> Notification:
        """
        Persist a notification for one recipient.

        With ``commit=False`` the row is only flushed so the caller can commit
        it together with its own writes.
        """
        notification = self._build(recipient_id, notification_type, title, message, related_id)
        self.db.add(notification)

        if commit:
            self.db.commit()
            self.db.refresh(notification)
        else:
            self.db.flush()

        logger.info(
            f"Created {notification.type} notification {notification.id} "
            f"for recipient {recipient_id}"
        )
        return notification

    def create_bulk_notifications(
        self, drafts: Iterable[NotificationDraft]
    ) -> List[Notification]:
        """
        Persist many notifications, as one batch when possible.

        If the batch write fails, each item is retried on its own; items that
        still fail are logged and skipped so the others are delivered.
        """
        drafts = list(drafts)
        if not drafts:
            return []

        notifications = [self._build_from_draft(draft) for draft in drafts]
        try:
            self.db.add_all(notifications)
            self.db.commit()
            logger.info(f"Created {len(notifications)} notifications in one batch")
            return notifications
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning(
                f"Batch write of {len(drafts)} notifications failed, retrying per recipient: {e}"
            )

        created = []
        for draft in drafts:
            notification = self._build_from_draft(draft)
            try:
                self.db.add(notification)
                self.db.commit()
                created.append(notification)
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(
                    f"Failed to create notification for recipient {draft.recipient_id}: {e}"
                )

        logger.info(f"Created {len(created)}/{len(drafts)} notifications")
        return created

    # Reading

    def list_notifications(
        self,
        recipient_id: int,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> NotificationListResponse:
        """Newest first, offset pagination"""

        limit = limit or settings.notifications_default_page_size
        query = self.db.query(Notification).filter(
            Notification.recipient_id == recipient_id
        )

        total = query.count()
        notifications = (
            query.order_by(desc(Notification.created_at), desc(Notification.id))
            .offset(page_offset(page, limit))
            .limit(limit)
            .all()
        )

        return NotificationListResponse(
            notifications=[NotificationOut.model_validate(n) for n in notifications],
            pagination=PaginationMeta.build(page=page, limit=limit, total=total),
        )

    def get_unread_count(self, recipient_id: int) -> int:
        return (
            self.db.query(Notification)
            .filter(
                Notification.recipient_id == recipient_id,
                Notification.is_read.is_(False),
            )
            .count()
        )

    # Read state

    def mark_as_read(self, recipient_id: int, notification_id: int) -> Notification:
        """Mark one of the recipient's notifications as read"""

        notification = self._get_owned(recipient_id, notification_id)
        if notification.is_read:
            return notification

        notification.is_read = True
        notification.read_at = datetime.utcnow()
        self.db.commit()

        logger.info(f"Notification {notification_id} marked as read by {recipient_id}")
        return notification

    def mark_all_as_read(self, recipient_id: int) -> int:
        """Mark every unread notification of the recipient as read"""

        updated = (
            self.db.query(Notification)
            .filter(
                Notification.recipient_id == recipient_id,
                Notification.is_read.is_(False),
            )
            .update(
                {Notification.is_read: True, Notification.read_at: datetime.utcnow()},
                synchronize_session=False,
            )
        )
        self.db.commit()

        logger.info(f"Marked {updated} notifications as read for {recipient_id}")
        return updated

    # Deletion

    def delete_notification(self, recipient_id: int, notification_id: int) -> None:
        notification = self._get_owned(recipient_id, notification_id)
        self.db.delete(notification)
        self.db.commit()

        logger.info(f"Deleted notification {notification_id} of {recipient_id}")

    # Helpers

    def _get_owned(self, recipient_id: int, notification_id: int) -> Notification:
        notification = (
            self.db.query(Notification)
            .filter(
                Notification.id == notification_id,
                Notification.recipient_id == recipient_id,
            )
            .first()
        )
        if not notification:
            raise NotFoundError("Notification not found")
        return notification

    @staticmethod
    def _build(
        recipient_id: int,
        notification_type: Union[NotificationType, str],
        title: str,
        message: str,
        related_id: Optional[int] = None,
    ) -> Notification:
        type_value = (
            notification_type.value
            if isinstance(notification_type, NotificationType)
            else notification_type
        )
        return Notification(
            recipient_id=recipient_id,
            type=type_value,
            title=title,
            message=message,
            related_id=related_id,
            icon=get_icon_for_type(notification_type),
            is_read=False,
        )

    def _build_from_draft(self, draft: NotificationDraft) -> Notification:
        return self._build(
            draft.recipient_id, draft.type, draft.title, draft.message, draft.related_id
        )
