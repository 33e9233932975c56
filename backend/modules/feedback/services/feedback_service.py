# backend/modules/feedback/services/feedback_service.py

from sqlalchemy.orm import Session, Query
from sqlalchemy import desc
from typing import Optional
from datetime import datetime
import logging

from core.exceptions import NotFoundError, ValidationError
from core.response_models import PaginationMeta, page_offset
from modules.feedback.models.feedback_models import Feedback, FeedbackStatus
from modules.feedback.schemas.feedback_schemas import (
    FeedbackCreate,
    FeedbackFilters,
    FeedbackListResponse,
    FeedbackOut,
    validate_rating_value,
)
from modules.feedback.services.keyword_service import KeywordDetector
from modules.feedback.services.sentiment_service import classify_rating
from modules.feedback.services.submission_guard import SubmissionGuard
from modules.notifications.services.notification_router import NotificationRouter

logger = logging.getLogger(__name__)


class FeedbackService:
    """Public submission pipeline and owner-side feedback management"""

    def __init__(
        self,
        db: Session,
        guard: Optional[SubmissionGuard] = None,
        detector: Optional[KeywordDetector] = None,
        router: Optional[NotificationRouter] = None,
    ):
        self.db = db
        self.guard = guard or SubmissionGuard(db)
        self.detector = detector or KeywordDetector()
        self.router = router or NotificationRouter(db)

    # Public submission

    def submit_feedback(
        self,
        business_code: str,
        feedback_data: FeedbackCreate,
        ip_address: Optional[str] = None,
    ) -> Feedback:
        """
        Validate, persist and route one public submission.

        The feedback and its notifications are committed together; a failure
        anywhere leaves nothing behind.
        """
        try:
            rating = validate_rating_value(feedback_data.rating)
        except ValueError as e:
            raise ValidationError(str(e), error_code="INVALID_RATING")

        business = self.guard.check(business_code, ip_address)

        try:
            feedback = Feedback(
                business_id=business.id,
                rating=rating,
                comment=feedback_data.comment,
                category=feedback_data.category,
                location=feedback_data.location,
                images=feedback_data.images or [],
                tags=feedback_data.tags or [],
                customer_name=feedback_data.customer_name,
                customer_email=feedback_data.customer_email,
                ip_address=ip_address,
                sentiment=classify_rating(rating),
                status=FeedbackStatus.NEW,
            )
            self.db.add(feedback)
            self.db.flush()

            matched = self.detector.detect(feedback.comment)
            self.router.route_new_feedback(feedback, matched, commit=False)

            self.db.commit()
            self.db.refresh(feedback)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error submitting feedback for business {business.id}: {e}")
            raise

        logger.info(
            f"Created feedback {feedback.id} for business {business.id} "
            f"(rating {rating}, sentiment {feedback.sentiment.value}, "
            f"{len(matched)} critical keywords)"
        )
        return feedback

    # Owner side

    def list_feedbacks(
        self,
        business_id: int,
        page: int = 1,
        limit: int = 20,
        filters: Optional[FeedbackFilters] = None,
    ) -> FeedbackListResponse:
        """Visible feedback of one business, newest first"""

        query = self._visible_query(business_id)
        if filters:
            query = self._apply_filters(query, filters)

        total = query.count()
        feedbacks = (
            query.order_by(desc(Feedback.created_at), desc(Feedback.id))
            .offset(page_offset(page, limit))
            .limit(limit)
            .all()
        )

        return FeedbackListResponse(
            feedbacks=[FeedbackOut.model_validate(f) for f in feedbacks],
            pagination=PaginationMeta.build(page, limit, total),
        )

    def get_feedback(self, business_id: int, feedback_id: int) -> Feedback:
        """Fetch an owned feedback; the first read moves it from NEW to VIEWED"""
        feedback = self._get_owned(business_id, feedback_id)

        if feedback.status == FeedbackStatus.NEW:
            feedback.status = FeedbackStatus.VIEWED
            self.db.commit()
            self.db.refresh(feedback)

        return feedback

    def respond(self, business_id: int, feedback_id: int, response_text: str) -> Feedback:
        feedback = self._get_owned(business_id, feedback_id)

        feedback.response_text = response_text.strip()
        feedback.responded_at = datetime.utcnow()
        feedback.status = FeedbackStatus.RESPONDED
        self.db.commit()
        self.db.refresh(feedback)

        logger.info(f"Business {business_id} responded to feedback {feedback_id}")
        return feedback

    def update_status(
        self, business_id: int, feedback_id: int, new_status: FeedbackStatus
    ) -> Feedback:
        """Explicit override; any status may be set from any other"""
        feedback = self._get_owned(business_id, feedback_id)

        old_status = feedback.status
        feedback.status = new_status
        self.db.commit()
        self.db.refresh(feedback)

        logger.info(
            f"Feedback {feedback_id} status changed from {old_status.value} to {new_status.value}"
        )
        return feedback

    def set_hidden(self, business_id: int, feedback_id: int, hidden: bool) -> Feedback:
        feedback = self._get_owned(business_id, feedback_id, include_hidden=True)

        feedback.is_hidden = hidden
        self.db.commit()
        self.db.refresh(feedback)

        logger.info(f"Feedback {feedback_id} {'hidden' if hidden else 'unhidden'}")
        return feedback

    # Helpers

    def _visible_query(self, business_id: int) -> Query:
        return self.db.query(Feedback).filter(
            Feedback.business_id == business_id,
            Feedback.is_hidden.is_(False),
            Feedback.deleted_at.is_(None),
        )

    def _get_owned(
        self, business_id: int, feedback_id: int, include_hidden: bool = False
    ) -> Feedback:
        query = self.db.query(Feedback).filter(
            Feedback.id == feedback_id,
            Feedback.business_id == business_id,
            Feedback.deleted_at.is_(None),
        )
        if not include_hidden:
            query = query.filter(Feedback.is_hidden.is_(False))

        feedback = query.first()
        if not feedback:
            raise NotFoundError("Feedback not found", error_code="FEEDBACK_NOT_FOUND")
        return feedback

    @staticmethod
    def _apply_filters(query: Query, filters: FeedbackFilters) -> Query:
        if filters.rating is not None:
            query = query.filter(Feedback.rating == filters.rating)
        if filters.sentiment:
            query = query.filter(Feedback.sentiment == filters.sentiment)
        if filters.status:
            query = query.filter(Feedback.status == filters.status)
        if filters.category:
            query = query.filter(Feedback.category == filters.category.lower())
        return query

