# backend/modules/feedback/services/submission_guard.py

"""
Gate applied to a public submission before anything is persisted.

The abuse window is a lookback query followed by a separate insert, so two
submissions from the same IP landing in the same instant can both pass.
A unique constraint on (business, ip, time bucket) would close that gap.
"""

from sqlalchemy.orm import Session
from typing import Optional
from datetime import datetime, timedelta
import logging

from core.config import settings
from core.exceptions import RateLimitedError
from modules.businesses.models.business_models import Business
from modules.businesses.services.directory_service import BusinessDirectory
from modules.feedback.models.feedback_models import Feedback

logger = logging.getLogger(__name__)


class SubmissionGuard:
    """Resolves the target business and applies the per-IP abuse window"""

    def __init__(
        self,
        db: Session,
        rate_limit_enabled: Optional[bool] = None,
        window_hours: Optional[int] = None,
    ):
        self.db = db
        self.directory = BusinessDirectory(db)
        self.rate_limit_enabled = (
            settings.feedback_rate_limit_enabled
            if rate_limit_enabled is None
            else rate_limit_enabled
        )
        self.window = timedelta(
            hours=window_hours or settings.feedback_rate_limit_window_hours
        )

    def check(
        self, business_code: str, ip_address: Optional[str], now: Optional[datetime] = None
    ) -> Business:
        """
        Return the business a submission is addressed to.

        Raises NotFoundError for an unknown or inactive business and
        RateLimitedError when the same IP already submitted to the same
        business inside the window. Submissions without an IP are never
        rate limited.
        """
        business = self.directory.get_active_by_code(business_code)

        if self.rate_limit_enabled and ip_address:
            if self.has_recent_submission(business.id, ip_address, now=now):
                logger.warning(
                    f"Rate limited feedback for business {business.id} from {ip_address}"
                )
                raise RateLimitedError(
                    "You have already submitted feedback for this business recently. "
                    "Please try again later."
                )

        return business

    def has_recent_submission(
        self, business_id: int, ip_address: str, now: Optional[datetime] = None
    ) -> bool:
        since = (now or datetime.utcnow()) - self.window
        recent = (
            self.db.query(Feedback.id)
            .filter(
                Feedback.business_id == business_id,
                Feedback.ip_address == ip_address,
                Feedback.created_at >= since,
            )
            .first()
        )
        return recent is not None
