# backend/modules/notifications/models/notification_models.py

from sqlalchemy import (
    Column, Integer, String, Text, Boolean, DateTime, ForeignKey, Index,
)
from sqlalchemy.orm import relationship
import enum

from core.database import Base
from core.mixins import CreatedAtMixin


class NotificationType(str, enum.Enum):
    """Closed set of notification kinds addressed to business owners"""

    # Critical alerts
    CRITICAL_NEGATIVE_FEEDBACK = "critical_negative_feedback"  # 1-2 star reviews
    CRITICAL_KEYWORDS = "critical_keywords"
    LOW_SATISFACTION_SCORE = "low_satisfaction_score"

    # Positive feedback
    POSITIVE_FEEDBACK = "positive_feedback"  # 4-5 star reviews
    COMPLIMENT = "compliment"

    # Admin, subscription and account
    SUBSCRIPTION_EXPIRING = "subscription_expiring"
    PAYMENT_CONFIRMED = "payment_confirmed"
    TRIAL_ENDING = "trial_ending"
    ACCOUNT_BLOCKED = "account_blocked"
    ACCOUNT_UNBLOCKED = "account_unblocked"
    PASSWORD_CHANGED = "password_changed"
    ADMIN_REPLY = "admin_reply"

    # Performance trends
    PERFORMANCE_DROP = "performance_drop"
    PERFORMANCE_IMPROVEMENT = "performance_improvement"
    SHIFT_PERFORMANCE = "shift_performance"

    # Insights and reports
    REPORT_READY = "report_ready"
    WEEKLY_SUMMARY = "weekly_summary"
    INSIGHT_ALERT = "insight_alert"

    # System
    QR_FIRST_SCAN = "qr_first_scan"
    QR_SCAN_MILESTONE = "qr_scan_milestone"
    APP_UPDATE = "app_update"
    SYSTEM = "system"

    # Legacy
    NEW_FEEDBACK = "new_feedback"
    ACHIEVEMENT_UNLOCKED = "achievement_unlocked"
    RATING_ALERT = "rating_alert"


class Notification(Base, CreatedAtMixin):
    """An alert addressed to exactly one business owner"""
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    recipient_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)

    # Raw enum value; unknown values render with the default icon
    type = Column(String(50), default=NotificationType.SYSTEM.value, nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    related_id = Column(Integer, nullable=True)  # Usually a feedback ID; not a foreign key
    icon = Column(String(64), nullable=False)

    is_read = Column(Boolean, default=False, nullable=False)
    read_at = Column(DateTime, nullable=True)

    # Relationships
    recipient = relationship("Business", back_populates="notifications")

    __table_args__ = (
        Index('idx_notification_recipient_created', 'recipient_id', 'created_at'),
        Index('idx_notification_recipient_read', 'recipient_id', 'is_read'),
    )
