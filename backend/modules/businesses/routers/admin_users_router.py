# backend/modules/businesses/routers/admin_users_router.py

from fastapi import APIRouter, BackgroundTasks, Depends, Path, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from core.auth import require_admin
from core.auth_context import CallerIdentity
from core.database import get_db
from modules.businesses.schemas.business_schemas import (
    BlockUserRequest,
    BusinessStatusOut,
    PasswordChangeAccepted,
)
from modules.businesses.services.account_service import (
    AccountService,
    schedule_password_change_audit,
)
from modules.businesses.services.directory_service import BusinessDirectory
from modules.notifications.schemas.notification_schemas import (
    BulkSendResponse,
    SendBulkNotificationRequest,
    SendNotificationRequest,
    SendToAllNotificationRequest,
    SentNotificationResponse,
)
from modules.notifications.services.broadcast_service import BroadcastDispatcher

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/users", tags=["Admin Users"])


@router.patch("/{user_id}/block", response_model=BusinessStatusOut)
async def block_user(
    user_id: int = Path(...),
    payload: Optional[BlockUserRequest] = None,
    db: Session = Depends(get_db),
    admin: CallerIdentity = Depends(require_admin),
):
    """Block a business owner; they are notified and excluded from broadcasts"""

    reason = payload.reason if payload else None
    business = AccountService(db).block(user_id, reason=reason)
    logger.info(f"Admin {admin.id} blocked business {user_id}")
    return business


@router.patch("/{user_id}/unblock", response_model=BusinessStatusOut)
async def unblock_user(
    user_id: int = Path(...),
    db: Session = Depends(get_db),
    admin: CallerIdentity = Depends(require_admin),
):
    business = AccountService(db).unblock(user_id)
    logger.info(f"Admin {admin.id} unblocked business {user_id}")
    return business


@router.post(
    "/{user_id}/password-changed",
    response_model=PasswordChangeAccepted,
    status_code=status.HTTP_202_ACCEPTED,
)
async def password_changed(
    background_tasks: BackgroundTasks,
    user_id: int = Path(...),
    db: Session = Depends(get_db),
    admin: CallerIdentity = Depends(require_admin),
):
    """
    Hook for the credential service once an owner's password is saved.

    The PASSWORD_CHANGED notification is written after the response; a
    failure there is only logged.
    """

    BusinessDirectory(db).get_business(user_id)
    schedule_password_change_audit(background_tasks, user_id)
    return PasswordChangeAccepted(user_id=user_id)


# Manual notifications


@router.post("/notify/bulk", response_model=BulkSendResponse)
async def send_bulk_notification(
    payload: SendBulkNotificationRequest,
    db: Session = Depends(get_db),
    admin: CallerIdentity = Depends(require_admin),
):
    """Send the same notification to several owners"""

    sent_to = BroadcastDispatcher(db).send_to_users(
        payload.user_ids, payload.title, payload.message, notification_type=payload.type
    )
    return BulkSendResponse(sent_count=len(sent_to), user_ids=sent_to)


@router.post("/notify/all", response_model=BulkSendResponse)
async def send_notification_to_all(
    payload: SendToAllNotificationRequest,
    db: Session = Depends(get_db),
    admin: CallerIdentity = Depends(require_admin),
):
    """Broadcast to every active, unblocked owner"""

    count = BroadcastDispatcher(db).broadcast(payload.type, payload.title, payload.message)
    return BulkSendResponse(sent_count=count)


@router.post("/{user_id}/notify", response_model=SentNotificationResponse)
async def send_notification_to_user(
    payload: SendNotificationRequest,
    user_id: int = Path(...),
    db: Session = Depends(get_db),
    admin: CallerIdentity = Depends(require_admin),
):
    notification = BroadcastDispatcher(db).send_to_user(
        user_id,
        payload.title,
        payload.message,
        notification_type=payload.type,
        feedback_id=payload.feedback_id,
    )
    return SentNotificationResponse(
        notification_id=notification.id,
        user_id=user_id,
        sent_at=notification.created_at,
    )
