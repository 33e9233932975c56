# backend/modules/notifications/services/notification_router.py

"""
Decides which notifications an event produces.

A new feedback produces up to two notifications: a critical keywords alert
when its comment matches the lexicon, and exactly one rating notification
(critical, positive or neutral). The two are independent and never merged.
Account and moderation events each map to a single notification type.
"""

from sqlalchemy.orm import Session
from typing import List, Optional, Sequence
import logging

from core.config import settings
from modules.feedback.models.feedback_models import Feedback, FeedbackSentiment
from modules.feedback.services.sentiment_service import classify_rating
from modules.notifications.models.notification_models import (
    Notification,
    NotificationType,
)
from modules.notifications.schemas.notification_schemas import NotificationDraft
from modules.notifications.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

KEYWORD_SEPARATOR = ", "
COMMENT_EXCERPT_LENGTH = 120

RATING_NOTIFICATION_TYPES = {
    FeedbackSentiment.NEGATIVE: NotificationType.CRITICAL_NEGATIVE_FEEDBACK,
    FeedbackSentiment.POSITIVE: NotificationType.POSITIVE_FEEDBACK,
    FeedbackSentiment.NEUTRAL: NotificationType.NEW_FEEDBACK,
}

RATING_TITLES = {
    NotificationType.CRITICAL_NEGATIVE_FEEDBACK: "Critical negative feedback",
    NotificationType.POSITIVE_FEEDBACK: "Positive feedback",
    NotificationType.NEW_FEEDBACK: "New feedback",
}


def format_rating(rating: float) -> str:
    """5.0 -> "5", 3.5 -> "3.5" """
    rating = float(rating)
    return str(int(rating)) if rating.is_integer() else f"{rating:.1f}"


def _excerpt(comment: Optional[str]) -> str:
    if not comment:
        return ""
    comment = " ".join(comment.split())
    if len(comment) <= COMMENT_EXCERPT_LENGTH:
        return comment
    return comment[: COMMENT_EXCERPT_LENGTH - 3].rstrip() + "..."


def plan_feedback_notifications(
    recipient_id: int,
    feedback_id: int,
    rating: float,
    comment: Optional[str],
    matched_keywords: Sequence[str],
    keyword_limit: Optional[int] = None,
) -> List[NotificationDraft]:
    """Notifications produced by one new feedback, keyword alert first"""

    if keyword_limit is None:
        keyword_limit = settings.critical_keywords_message_limit
    drafts = []

    if matched_keywords:
        shown = KEYWORD_SEPARATOR.join(list(matched_keywords)[:keyword_limit])
        drafts.append(
            NotificationDraft(
                recipient_id=recipient_id,
                type=NotificationType.CRITICAL_KEYWORDS,
                title="Critical keywords detected",
                message=f"A new feedback mentions: {shown}. Please review it quickly.",
                related_id=feedback_id,
            )
        )

    rating_type = RATING_NOTIFICATION_TYPES[classify_rating(rating)]
    stars = format_rating(rating)
    excerpt = _excerpt(comment)
    message = f"A customer left a {stars}★ review."
    if rating_type == NotificationType.POSITIVE_FEEDBACK:
        message = f"{message} Keep it up!"
    if excerpt:
        message = f"{message} \"{excerpt}\""

    drafts.append(
        NotificationDraft(
            recipient_id=recipient_id,
            type=rating_type,
            title=RATING_TITLES[rating_type],
            message=message,
            related_id=feedback_id,
        )
    )
    return drafts


class NotificationRouter:
    """Turns feedback and account events into persisted notifications"""

    def __init__(self, db: Session, notification_service: Optional[NotificationService] = None):
        self.db = db
        self.notifications = notification_service or NotificationService(db)

    def route_new_feedback(
        self,
        feedback: Feedback,
        matched_keywords: Sequence[str],
        commit: bool = True,
    ) -> List[Notification]:
        """Create the notifications for a freshly submitted feedback"""

        drafts = plan_feedback_notifications(
            recipient_id=feedback.business_id,
            feedback_id=feedback.id,
            rating=feedback.rating,
            comment=feedback.comment,
            matched_keywords=matched_keywords,
        )

        created = [
            self.notifications.create_notification(
                draft.recipient_id,
                draft.type,
                draft.title,
                draft.message,
                related_id=draft.related_id,
                commit=False,
            )
            for draft in drafts
        ]
        if commit:
            self.db.commit()

        logger.info(
            f"Feedback {feedback.id} routed to {[n.type for n in created]} "
            f"for business {feedback.business_id}"
        )
        return created

    def notify_admin_reply(self, feedback: Feedback, commit: bool = True) -> Notification:
        return self.notifications.create_notification(
            feedback.business_id,
            NotificationType.ADMIN_REPLY,
            "Reply from the support team",
            f"Our team replied to a {format_rating(feedback.rating)}★ feedback you received.",
            related_id=feedback.id,
            commit=commit,
        )

    def notify_account_blocked(
        self, business_id: int, reason: Optional[str] = None, commit: bool = True
    ) -> Notification:
        message = "Your account has been blocked. Please contact support or complete your payment."
        if reason:
            message = f"{message} Reason: {reason}"
        return self.notifications.create_notification(
            business_id,
            NotificationType.ACCOUNT_BLOCKED,
            "Account blocked",
            message,
            commit=commit,
        )

    def notify_account_unblocked(self, business_id: int, commit: bool = True) -> Notification:
        return self.notifications.create_notification(
            business_id,
            NotificationType.ACCOUNT_UNBLOCKED,
            "Account unblocked",
            "Your account has been unblocked. You can now log in and use all features.",
            commit=commit,
        )

    def notify_password_changed(self, business_id: int, commit: bool = True) -> Notification:
        return self.notifications.create_notification(
            business_id,
            NotificationType.PASSWORD_CHANGED,
            "Password changed",
            "Your password was changed. If this wasn't you, contact support immediately.",
            commit=commit,
        )
