# backend/modules/businesses/services/account_service.py

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session
from typing import Callable, Optional
from datetime import datetime
import logging

from core.background_tasks import TaskOutcome, run_best_effort
from core.database import SessionLocal
from modules.businesses.models.business_models import Business
from modules.businesses.services.directory_service import BusinessDirectory
from modules.notifications.services.notification_router import NotificationRouter

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_REASON = "Payment required. Please contact support."


class AccountService:
    """Admin account actions on business owners"""

    def __init__(self, db: Session):
        self.db = db
        self.directory = BusinessDirectory(db)
        self.router = NotificationRouter(db)

    def block(self, business_id: int, reason: Optional[str] = None) -> Business:
        """Block an owner and tell them why, in one commit"""
        business = self.directory.get_business(business_id)

        business.is_blocked = True
        business.blocked_reason = (reason or "").strip() or DEFAULT_BLOCK_REASON
        business.blocked_at = datetime.utcnow()
        self.router.notify_account_blocked(
            business.id, reason=business.blocked_reason, commit=False
        )
        self.db.commit()
        self.db.refresh(business)

        logger.info(f"Business {business_id} blocked: {business.blocked_reason}")
        return business

    def unblock(self, business_id: int) -> Business:
        business = self.directory.get_business(business_id)

        business.is_blocked = False
        business.blocked_reason = None
        business.blocked_at = None
        self.router.notify_account_unblocked(business.id, commit=False)
        self.db.commit()
        self.db.refresh(business)

        logger.info(f"Business {business_id} unblocked")
        return business


def _notify_password_changed(db: Session, business_id: int) -> int:
    notification = NotificationRouter(db).notify_password_changed(business_id, commit=False)
    return notification.id


def record_password_change(
    business_id: int, session_factory: Callable[[], Session] = SessionLocal
) -> TaskOutcome:
    """
    Audit a password change with a PASSWORD_CHANGED notification.

    Meant to run as a background task after the password itself is saved;
    a failure here is logged on the outcome and never reaches the caller.
    """
    return run_best_effort(
        f"password-change-audit:{business_id}",
        _notify_password_changed,
        business_id,
        session_factory=session_factory,
    )


def schedule_password_change_audit(background_tasks: BackgroundTasks, business_id: int) -> None:
    """Queue the audit to run after the response has been sent"""
    background_tasks.add_task(record_password_change, business_id)
    logger.info(f"Password change audit queued for business {business_id}")
