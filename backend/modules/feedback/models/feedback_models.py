# backend/modules/feedback/models/feedback_models.py

from sqlalchemy import (
    Column, Integer, String, Text, Float, DateTime, JSON, Boolean, ForeignKey, Index,
    Enum as SAEnum,
)
from sqlalchemy.orm import relationship
import enum

from core.database import Base
from core.mixins import TimestampMixin


def enum_values(enum_cls):
    return [member.value for member in enum_cls]


class FeedbackSentiment(str, enum.Enum):
    """Coarse sentiment derived from the rating"""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class FeedbackCategory(str, enum.Enum):
    """Suggested categories; the column itself accepts any tag"""
    SERVICE = "service"
    PRODUCT_QUALITY = "product_quality"
    AMBIANCE = "ambiance"
    PRICING = "pricing"
    CLEANLINESS = "cleanliness"
    OTHER = "other"


class FeedbackStatus(str, enum.Enum):
    """Owner-side lifecycle of a feedback"""
    NEW = "new"
    VIEWED = "viewed"
    RESPONDED = "responded"
    ARCHIVED = "archived"


class Feedback(Base, TimestampMixin):
    """Anonymous customer feedback addressed to one business"""
    __tablename__ = "feedbacks"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)

    # Feedback content
    rating = Column(Float, nullable=False, index=True)
    comment = Column(Text, nullable=True)
    category = Column(String(100), default=FeedbackCategory.OTHER.value, nullable=False)
    location = Column(String(255), nullable=True)
    images = Column(JSON, nullable=True)
    tags = Column(JSON, nullable=True)

    # Unverified customer details
    customer_name = Column(String(100), nullable=True)
    customer_email = Column(String(255), nullable=True)
    ip_address = Column(String(45), nullable=True)

    # Classification
    sentiment = Column(
        SAEnum(FeedbackSentiment, native_enum=False, values_callable=enum_values, length=16),
        nullable=False,
        index=True,
    )
    status = Column(
        SAEnum(FeedbackStatus, native_enum=False, values_callable=enum_values, length=16),
        default=FeedbackStatus.NEW,
        nullable=False,
        index=True,
    )

    # Owner side
    is_hidden = Column(Boolean, default=False, nullable=False)
    response_text = Column(Text, nullable=True)
    responded_at = Column(DateTime, nullable=True)

    # Admin side
    admin_reply = Column(Text, nullable=True)
    admin_reply_at = Column(DateTime, nullable=True)
    admin_reply_by = Column(Integer, nullable=True)  # Admin ID
    deleted_at = Column(DateTime, nullable=True, index=True)
    deleted_by = Column(Integer, nullable=True)  # Admin ID

    # Relationships
    business = relationship("Business", back_populates="feedbacks")

    __table_args__ = (
        Index('idx_feedback_business_created', 'business_id', 'created_at'),
        Index('idx_feedback_business_ip_created', 'business_id', 'ip_address', 'created_at'),
        Index('idx_feedback_sentiment_rating', 'sentiment', 'rating'),
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
