# backend/modules/notifications/routers/notifications_router.py

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from core.auth import require_owner
from core.auth_context import CallerIdentity
from core.config import settings
from core.database import get_db
from modules.notifications.schemas.notification_schemas import (
    MarkReadResponse,
    NotificationListResponse,
    UnreadCountResponse,
)
from modules.notifications.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(
        settings.notifications_default_page_size,
        ge=1,
        le=settings.notifications_max_page_size,
    ),
    db: Session = Depends(get_db),
    owner: CallerIdentity = Depends(require_owner),
):
    """The caller's notifications, newest first"""
    return NotificationService(db).list_notifications(owner.id, page=page, limit=limit)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    db: Session = Depends(get_db),
    owner: CallerIdentity = Depends(require_owner),
):
    return UnreadCountResponse(unread_count=NotificationService(db).get_unread_count(owner.id))


@router.patch("/read-all")
async def mark_all_as_read(
    db: Session = Depends(get_db),
    owner: CallerIdentity = Depends(require_owner),
):
    updated = NotificationService(db).mark_all_as_read(owner.id)
    return {"updated": updated, "message": "All notifications marked as read"}


@router.patch("/{notification_id}/read", response_model=MarkReadResponse)
async def mark_as_read(
    notification_id: int = Path(...),
    db: Session = Depends(get_db),
    owner: CallerIdentity = Depends(require_owner),
):
    notification = NotificationService(db).mark_as_read(owner.id, notification_id)
    return MarkReadResponse(
        id=notification.id, is_read=notification.is_read, read_at=notification.read_at
    )


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: int = Path(...),
    db: Session = Depends(get_db),
    owner: CallerIdentity = Depends(require_owner),
):
    NotificationService(db).delete_notification(owner.id, notification_id)
