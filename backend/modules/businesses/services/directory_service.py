# backend/modules/businesses/services/directory_service.py

from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from core.exceptions import NotFoundError
from modules.businesses.models.business_models import Business

logger = logging.getLogger(__name__)


class BusinessDirectory:
    """Lookups over registered businesses"""

    def __init__(self, db: Session):
        self.db = db

    def resolve_by_public_code(self, code: str) -> Optional[Business]:
        """Business behind a public (QR) code, whatever its status"""
        if not code:
            return None
        return self.db.query(Business).filter(Business.unique_code == code.strip()).first()

    def get_business(self, business_id: int) -> Business:
        business = self.db.query(Business).filter(Business.id == business_id).first()
        if not business:
            raise NotFoundError("User not found", error_code="USER_NOT_FOUND")
        return business

    def get_active_by_code(self, code: str) -> Business:
        """Business behind a public code; NotFound when missing or inactive"""
        business = self.resolve_by_public_code(code)
        if not business or not business.is_active:
            logger.info(f"Rejected lookup for unknown or inactive business code {code!r}")
            raise NotFoundError(
                "Business not found or inactive", error_code="BUSINESS_NOT_FOUND"
            )
        return business

    def list_eligible_recipient_ids(self) -> List[int]:
        """IDs of active, unblocked businesses at call time"""
        rows = (
            self.db.query(Business.id)
            .filter(Business.is_active.is_(True), Business.is_blocked.is_(False))
            .order_by(Business.id)
            .all()
        )
        return [row.id for row in rows]

    def existing_ids(self, business_ids: List[int]) -> List[int]:
        """The subset of ``business_ids`` that resolve, in the given order"""
        if not business_ids:
            return []
        found = {
            row.id
            for row in self.db.query(Business.id).filter(Business.id.in_(business_ids)).all()
        }
        return [business_id for business_id in business_ids if business_id in found]
