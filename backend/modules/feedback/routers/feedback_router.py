# backend/modules/feedback/routers/feedback_router.py

from fastapi import APIRouter, Depends, Path, Query, Request, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from core.auth import require_owner
from core.auth_context import CallerIdentity
from core.database import get_db
from modules.feedback.models.feedback_models import FeedbackSentiment, FeedbackStatus
from modules.feedback.schemas.feedback_schemas import (
    FeedbackCreate,
    FeedbackFilters,
    FeedbackListResponse,
    FeedbackOut,
    FeedbackRespond,
    FeedbackStats,
    FeedbackStatusUpdate,
    FeedbackSubmitted,
    OwnerFeedbackStats,
)
from modules.feedback.services.feedback_service import FeedbackService
from modules.feedback.services.stats_service import FeedbackStatsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/feedbacks", tags=["Feedback"])


def get_client_ip(request: Request) -> Optional[str]:
    """First address of X-Forwarded-For, else the socket peer"""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip() or None
    return request.client.host if request.client else None


# Public endpoints


@router.post(
    "/{business_code}",
    response_model=FeedbackSubmitted,
    status_code=status.HTTP_201_CREATED,
)
async def submit_feedback(
    feedback_data: FeedbackCreate,
    request: Request,
    business_code: str = Path(..., max_length=32, description="Public business code"),
    db: Session = Depends(get_db),
):
    """Submit anonymous feedback for a business (reached through its QR code)"""

    feedback = FeedbackService(db).submit_feedback(
        business_code, feedback_data, ip_address=get_client_ip(request)
    )
    return FeedbackSubmitted(id=feedback.id)


@router.get("/business/{business_code}/stats", response_model=FeedbackStats)
async def get_public_stats(
    business_code: str = Path(..., max_length=32),
    db: Session = Depends(get_db),
):
    """Public rating summary of a business"""
    return FeedbackStatsService(db).get_public_stats(business_code)


# Owner endpoints


@router.get("", response_model=FeedbackListResponse)
async def list_feedbacks(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    rating: Optional[float] = Query(None, ge=0),
    sentiment: Optional[FeedbackSentiment] = Query(None),
    feedback_status: Optional[FeedbackStatus] = Query(None, alias="status"),
    category: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    owner: CallerIdentity = Depends(require_owner),
):
    """List the caller's visible feedback, newest first"""

    filters = FeedbackFilters(
        rating=rating, sentiment=sentiment, status=feedback_status, category=category
    )
    return FeedbackService(db).list_feedbacks(owner.id, page=page, limit=limit, filters=filters)


@router.get("/stats", response_model=OwnerFeedbackStats)
async def get_owner_stats(
    db: Session = Depends(get_db),
    owner: CallerIdentity = Depends(require_owner),
):
    return FeedbackStatsService(db).get_owner_stats(owner.id)


@router.get("/{feedback_id}", response_model=FeedbackOut)
async def get_feedback(
    feedback_id: int = Path(..., description="Feedback ID"),
    db: Session = Depends(get_db),
    owner: CallerIdentity = Depends(require_owner),
):
    """Get one feedback; marks it as viewed"""
    return FeedbackService(db).get_feedback(owner.id, feedback_id)


@router.post("/{feedback_id}/respond", response_model=FeedbackOut)
async def respond_to_feedback(
    payload: FeedbackRespond,
    feedback_id: int = Path(...),
    db: Session = Depends(get_db),
    owner: CallerIdentity = Depends(require_owner),
):
    return FeedbackService(db).respond(owner.id, feedback_id, payload.response)


@router.patch("/{feedback_id}/status", response_model=FeedbackOut)
async def update_feedback_status(
    payload: FeedbackStatusUpdate,
    feedback_id: int = Path(...),
    db: Session = Depends(get_db),
    owner: CallerIdentity = Depends(require_owner),
):
    """Set any status, e.g. re-open an archived feedback"""
    return FeedbackService(db).update_status(owner.id, feedback_id, payload.status)


@router.post("/{feedback_id}/hide", response_model=FeedbackOut)
async def hide_feedback(
    feedback_id: int = Path(...),
    db: Session = Depends(get_db),
    owner: CallerIdentity = Depends(require_owner),
):
    return FeedbackService(db).set_hidden(owner.id, feedback_id, True)


@router.post("/{feedback_id}/unhide", response_model=FeedbackOut)
async def unhide_feedback(
    feedback_id: int = Path(...),
    db: Session = Depends(get_db),
    owner: CallerIdentity = Depends(require_owner),
):
    return FeedbackService(db).set_hidden(owner.id, feedback_id, False)
