# backend/modules/feedback/routers/admin_feedback_router.py

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session
from typing import Optional
import logging

from core.auth import require_admin
from core.auth_context import CallerIdentity
from core.database import get_db
from modules.feedback.models.feedback_models import FeedbackSentiment
from modules.feedback.schemas.feedback_schemas import (
    AdminFeedbackFilters,
    AdminFeedbackListResponse,
    AdminFeedbackOut,
    AdminReplyOut,
    ReplyFeedback,
)
from modules.feedback.services.moderation_service import ModerationLedger

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/feedbacks", tags=["Admin Feedback"])


@router.get("", response_model=AdminFeedbackListResponse)
async def list_all_feedbacks(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    business_id: Optional[int] = Query(None),
    rating: Optional[float] = Query(None, ge=0),
    sentiment: Optional[FeedbackSentiment] = Query(None),
    has_admin_reply: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, max_length=100),
    include_deleted: bool = Query(False, description="Include soft-deleted feedback"),
    db: Session = Depends(get_db),
    admin: CallerIdentity = Depends(require_admin),
):
    """List feedback across all businesses"""

    filters = AdminFeedbackFilters(
        business_id=business_id,
        rating=rating,
        sentiment=sentiment,
        has_admin_reply=has_admin_reply,
        search=search,
        include_deleted=include_deleted,
    )
    return ModerationLedger(db).list_feedbacks(page=page, limit=limit, filters=filters)


@router.get("/{feedback_id}", response_model=AdminFeedbackOut)
async def get_feedback_detail(
    feedback_id: int = Path(...),
    db: Session = Depends(get_db),
    admin: CallerIdentity = Depends(require_admin),
):
    return ModerationLedger(db).get_feedback(feedback_id)


@router.post("/{feedback_id}/reply", response_model=AdminReplyOut)
async def reply_to_feedback(
    payload: ReplyFeedback,
    feedback_id: int = Path(...),
    db: Session = Depends(get_db),
    admin: CallerIdentity = Depends(require_admin),
):
    """Reply as the platform; the business owner is notified"""

    feedback = ModerationLedger(db).reply(feedback_id, payload.reply, admin)
    return AdminReplyOut(
        id=feedback.id,
        admin_reply=feedback.admin_reply,
        admin_reply_at=feedback.admin_reply_at,
    )


@router.delete("/{feedback_id}/reply", response_model=AdminReplyOut)
async def delete_reply(
    feedback_id: int = Path(...),
    db: Session = Depends(get_db),
    admin: CallerIdentity = Depends(require_admin),
):
    feedback = ModerationLedger(db).delete_reply(feedback_id)
    return AdminReplyOut(id=feedback.id, admin_reply=None, admin_reply_at=None)


@router.delete("/{feedback_id}", response_model=AdminFeedbackOut)
async def soft_delete_feedback(
    feedback_id: int = Path(...),
    db: Session = Depends(get_db),
    admin: CallerIdentity = Depends(require_admin),
):
    """Hide a feedback from every default listing; reversible"""
    return ModerationLedger(db).soft_delete(feedback_id, admin)


@router.post("/{feedback_id}/restore", response_model=AdminFeedbackOut)
async def restore_feedback(
    feedback_id: int = Path(...),
    db: Session = Depends(get_db),
    admin: CallerIdentity = Depends(require_admin),
):
    return ModerationLedger(db).restore(feedback_id)
