# backend/modules/feedback/services/moderation_service.py

"""
Admin-side bookkeeping on feedback records.

Moderation works on any feedback regardless of the owning business's state.
Only an admin reply notifies the owner; deleting a reply, soft-deleting and
restoring change listing visibility and nothing else.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import desc, or_
from sqlalchemy.orm import Session, Query, joinedload

from core.auth_context import CallerIdentity
from core.exceptions import NotFoundError
from core.response_models import PaginationMeta, page_offset
from modules.feedback.models.feedback_models import Feedback
from modules.feedback.schemas.feedback_schemas import (
    AdminFeedbackFilters,
    AdminFeedbackListResponse,
    AdminFeedbackOut,
)
from modules.notifications.services.notification_router import NotificationRouter

logger = logging.getLogger(__name__)


class ModerationLedger:
    """Reply, soft-delete and restore operations for platform admins"""

    def __init__(self, db: Session, router: Optional[NotificationRouter] = None):
        self.db = db
        self.router = router or NotificationRouter(db)

    # Listing

    def list_feedbacks(
        self,
        page: int = 1,
        limit: int = 20,
        filters: Optional[AdminFeedbackFilters] = None,
    ) -> AdminFeedbackListResponse:
        """All businesses' feedback, newest first; soft-deleted only on request"""

        filters = filters or AdminFeedbackFilters()
        query = self._apply_filters(
            self.db.query(Feedback).options(joinedload(Feedback.business)), filters
        )

        total = query.count()
        feedbacks = (
            query.order_by(desc(Feedback.created_at), desc(Feedback.id))
            .offset(page_offset(page, limit))
            .limit(limit)
            .all()
        )

        return AdminFeedbackListResponse(
            feedbacks=[AdminFeedbackOut.model_validate(f) for f in feedbacks],
            pagination=PaginationMeta.build(page, limit, total),
        )

    def get_feedback(self, feedback_id: int) -> Feedback:
        """Any feedback by id, soft-deleted included"""
        feedback = (
            self.db.query(Feedback)
            .options(joinedload(Feedback.business))
            .filter(Feedback.id == feedback_id)
            .first()
        )
        if not feedback:
            raise NotFoundError("Feedback not found", error_code="FEEDBACK_NOT_FOUND")
        return feedback

    # Replies

    def reply(self, feedback_id: int, text: str, admin: CallerIdentity) -> Feedback:
        feedback = self.get_feedback(feedback_id)

        feedback.admin_reply = text
        feedback.admin_reply_at = datetime.utcnow()
        feedback.admin_reply_by = admin.id
        self.router.notify_admin_reply(feedback, commit=False)
        self.db.commit()
        self.db.refresh(feedback)

        logger.info(f"Admin {admin.id} replied to feedback {feedback_id}")
        return feedback

    def delete_reply(self, feedback_id: int) -> Feedback:
        feedback = self.get_feedback(feedback_id)

        feedback.admin_reply = None
        feedback.admin_reply_at = None
        feedback.admin_reply_by = None
        self.db.commit()
        self.db.refresh(feedback)

        logger.info(f"Admin reply removed from feedback {feedback_id}")
        return feedback

    # Soft deletion

    def soft_delete(self, feedback_id: int, admin: CallerIdentity) -> Feedback:
        feedback = self.get_feedback(feedback_id)

        feedback.deleted_at = datetime.utcnow()
        feedback.deleted_by = admin.id
        self.db.commit()
        self.db.refresh(feedback)

        logger.info(f"Feedback {feedback_id} soft-deleted by admin {admin.id}")
        return feedback

    def restore(self, feedback_id: int) -> Feedback:
        feedback = self.get_feedback(feedback_id)

        feedback.deleted_at = None
        feedback.deleted_by = None
        self.db.commit()
        self.db.refresh(feedback)

        logger.info(f"Feedback {feedback_id} restored")
        return feedback

    @staticmethod
    def _apply_filters(query: Query, filters: AdminFeedbackFilters) -> Query:
        if not filters.include_deleted:
            query = query.filter(Feedback.deleted_at.is_(None))
        if filters.business_id is not None:
            query = query.filter(Feedback.business_id == filters.business_id)
        if filters.rating is not None:
            query = query.filter(Feedback.rating == filters.rating)
        if filters.sentiment:
            query = query.filter(Feedback.sentiment == filters.sentiment)
        if filters.status:
            query = query.filter(Feedback.status == filters.status)
        if filters.category:
            query = query.filter(Feedback.category == filters.category.lower())
        if filters.has_admin_reply is True:
            query = query.filter(Feedback.admin_reply.isnot(None))
        elif filters.has_admin_reply is False:
            query = query.filter(Feedback.admin_reply.is_(None))
        if filters.search:
            pattern = f"%{filters.search.strip()}%"
            query = query.filter(
                or_(Feedback.comment.ilike(pattern), Feedback.customer_name.ilike(pattern))
            )
        return query
