# backend/modules/notifications/services/notification_icons.py

"""Icon keys for notification types.

The mapping is total over ``NotificationType``; a type added without an icon
makes this module fail at import time. Values outside the enum (rows written
by another release, free-form strings) get ``DEFAULT_ICON``.
"""

from typing import Dict, Union

from modules.notifications.models.notification_models import NotificationType


DEFAULT_ICON = "notifications-outline"

NOTIFICATION_ICONS: Dict[NotificationType, str] = {
    # Critical alerts
    NotificationType.CRITICAL_NEGATIVE_FEEDBACK: "alert-circle",
    NotificationType.CRITICAL_KEYWORDS: "warning",
    NotificationType.LOW_SATISFACTION_SCORE: "trending-down",
    # Positive feedback
    NotificationType.POSITIVE_FEEDBACK: "happy-outline",
    NotificationType.COMPLIMENT: "heart-outline",
    # Admin, subscription and account
    NotificationType.SUBSCRIPTION_EXPIRING: "time-outline",
    NotificationType.PAYMENT_CONFIRMED: "card-outline",
    NotificationType.TRIAL_ENDING: "hourglass-outline",
    NotificationType.ACCOUNT_BLOCKED: "lock-closed-outline",
    NotificationType.ACCOUNT_UNBLOCKED: "lock-open-outline",
    NotificationType.PASSWORD_CHANGED: "key-outline",
    NotificationType.ADMIN_REPLY: "chatbox-ellipses-outline",
    # Performance trends
    NotificationType.PERFORMANCE_DROP: "trending-down-outline",
    NotificationType.PERFORMANCE_IMPROVEMENT: "trending-up-outline",
    NotificationType.SHIFT_PERFORMANCE: "swap-horizontal-outline",
    # Insights and reports
    NotificationType.REPORT_READY: "document-outline",
    NotificationType.WEEKLY_SUMMARY: "calendar-outline",
    NotificationType.INSIGHT_ALERT: "bulb-outline",
    # System
    NotificationType.QR_FIRST_SCAN: "qr-code-outline",
    NotificationType.QR_SCAN_MILESTONE: "podium-outline",
    NotificationType.APP_UPDATE: "cloud-download-outline",
    NotificationType.SYSTEM: DEFAULT_ICON,
    # Legacy
    NotificationType.NEW_FEEDBACK: "chatbubble-outline",
    NotificationType.ACHIEVEMENT_UNLOCKED: "star",
    NotificationType.RATING_ALERT: "alert-circle",
}


def _check_exhaustive() -> None:
    missing = [t.value for t in NotificationType if t not in NOTIFICATION_ICONS]
    if missing:
        raise RuntimeError(f"Notification types without an icon: {', '.join(missing)}")


_check_exhaustive()


def get_icon_for_type(notification_type: Union[NotificationType, str, None]) -> str:
    """Icon key for a type; never raises."""
    try:
        return NOTIFICATION_ICONS[NotificationType(notification_type)]
    except (ValueError, KeyError):
        return DEFAULT_ICON
