# backend/modules/businesses/models/business_models.py

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Index
from sqlalchemy.orm import relationship
import enum

from core.database import Base
from core.mixins import TimestampMixin


class BusinessType(str, enum.Enum):
    """Kinds of businesses collecting feedback"""
    RESTAURANT = "RESTAURANT"
    BEACH = "BEACH"
    CLINIC = "CLINIC"
    CAFE = "CAFE"
    HOTEL = "HOTEL"
    RETAIL = "RETAIL"
    OTHER = "OTHER"


class Business(Base, TimestampMixin):
    """A business owner account; also the recipient of notifications"""
    __tablename__ = "businesses"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False)

    # Business info
    business_name = Column(String(255), nullable=False)
    business_type = Column(String(20), default=BusinessType.OTHER.value, nullable=False)
    unique_code = Column(String(32), unique=True, nullable=False, index=True)

    # Settings
    language = Column(String(8), default="fr")
    notifications_enabled = Column(Boolean, default=True)

    # Status
    is_active = Column(Boolean, default=False, nullable=False, index=True)
    is_blocked = Column(Boolean, default=False, nullable=False, index=True)
    blocked_reason = Column(String(255), nullable=True)
    blocked_at = Column(DateTime, nullable=True)

    # Relationships
    feedbacks = relationship("Feedback", back_populates="business")
    notifications = relationship(
        "Notification", back_populates="recipient", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index('idx_business_active_blocked', 'is_active', 'is_blocked'),
    )

    @property
    def is_eligible_recipient(self) -> bool:
        """Active, unblocked owners receive broadcasts"""
        return bool(self.is_active and not self.is_blocked)
