# backend/modules/feedback/schemas/feedback_schemas.py

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional, List, Dict
from datetime import datetime

from core.config import settings
from core.response_models import PaginationMeta
from modules.feedback.models.feedback_models import (
    FeedbackCategory,
    FeedbackSentiment,
    FeedbackStatus,
)


def validate_rating_value(value: float) -> float:
    """Reject ratings outside the configured bound or off the configured step"""
    low, high, step = (
        settings.feedback_rating_min,
        settings.feedback_rating_max,
        settings.feedback_rating_step,
    )
    if value < low or value > high:
        raise ValueError(f"Rating must be between {low:g} and {high:g}")
    steps = (value - low) / step
    if abs(steps - round(steps)) > 1e-6:
        raise ValueError(f"Rating must be a multiple of {step:g}")
    return round(value, 1)


# Public submission
class FeedbackCreate(BaseModel):
    """Payload of a public feedback submission"""

    rating: float
    comment: Optional[str] = Field(None, max_length=5000)
    category: str = Field(FeedbackCategory.OTHER.value, max_length=100)
    location: Optional[str] = Field(None, max_length=255)
    images: List[str] = Field(default_factory=list, max_length=10)
    tags: List[str] = Field(default_factory=list, max_length=20)
    customer_name: Optional[str] = Field(None, max_length=100)
    customer_email: Optional[EmailStr] = None

    @field_validator("rating")
    @classmethod
    def validate_rating(cls, v):
        return validate_rating_value(v)

    @field_validator("comment")
    @classmethod
    def validate_comment(cls, v):
        if v is None:
            return v
        v = v.strip()
        if len(v) > settings.feedback_comment_max_length:
            raise ValueError(
                f"Comment must be at most {settings.feedback_comment_max_length} characters"
            )
        return v or None

    @field_validator("category")
    @classmethod
    def validate_category(cls, v):
        v = (v or "").strip().lower()
        return v or FeedbackCategory.OTHER.value


class FeedbackSubmitted(BaseModel):
    id: int
    message: str = "Thank you for your feedback!"


# Owner side
class FeedbackOut(BaseModel):
    """Feedback as seen by the business owner"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    rating: float
    comment: Optional[str]
    category: str
    sentiment: FeedbackSentiment
    status: FeedbackStatus
    location: Optional[str] = None
    images: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    is_hidden: bool
    response_text: Optional[str] = None
    responded_at: Optional[datetime] = None
    admin_reply: Optional[str] = None
    admin_reply_at: Optional[datetime] = None
    created_at: datetime


class FeedbackListResponse(BaseModel):
    feedbacks: List[FeedbackOut]
    pagination: PaginationMeta


class FeedbackFilters(BaseModel):
    """Optional listing filters"""

    rating: Optional[float] = None
    sentiment: Optional[FeedbackSentiment] = None
    status: Optional[FeedbackStatus] = None
    category: Optional[str] = None


class FeedbackRespond(BaseModel):
    response: str = Field(..., min_length=1, max_length=2000)


class FeedbackStatusUpdate(BaseModel):
    status: FeedbackStatus


# Admin side
class BusinessSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    business_name: str
    email: str


class AdminFeedbackOut(FeedbackOut):
    """Feedback as seen by platform admins, including moderation fields"""

    business_id: int
    admin_reply_by: Optional[int] = None
    is_deleted: bool
    deleted_at: Optional[datetime] = None
    deleted_by: Optional[int] = None
    business: Optional[BusinessSummary] = None


class AdminFeedbackListResponse(BaseModel):
    feedbacks: List[AdminFeedbackOut]
    pagination: PaginationMeta


class AdminFeedbackFilters(FeedbackFilters):
    business_id: Optional[int] = None
    has_admin_reply: Optional[bool] = None
    search: Optional[str] = Field(None, max_length=100)
    include_deleted: bool = False


class ReplyFeedback(BaseModel):
    reply: str = Field(..., min_length=1, max_length=2000)

    @field_validator("reply")
    @classmethod
    def validate_reply(cls, v):
        if not v.strip():
            raise ValueError("Reply cannot be empty")
        return v.strip()


class AdminReplyOut(BaseModel):
    id: int
    admin_reply: Optional[str]
    admin_reply_at: Optional[datetime]


# Statistics
class FeedbackStats(BaseModel):
    """Read-only aggregates over visible feedback"""

    average_rating: float
    total_reviews: int
    rating_distribution: Dict[int, int]
    sentiment_distribution: Dict[str, int] = Field(default_factory=dict)


class TrendPoint(BaseModel):
    date: str
    count: int
    average_rating: float


class OwnerFeedbackStats(FeedbackStats):
    recent_trend: List[TrendPoint] = Field(default_factory=list)
