# backend/modules/businesses/tests/test_account_service.py

import asyncio
import logging

import pytest
from fastapi import BackgroundTasks
from unittest.mock import patch
from sqlalchemy.exc import SQLAlchemyError

from core.database import SessionLocal
from core.exceptions import NotFoundError
from modules.businesses.services.account_service import (
    DEFAULT_BLOCK_REASON,
    AccountService,
    record_password_change,
    schedule_password_change_audit,
)
from modules.businesses.services.directory_service import BusinessDirectory
from modules.notifications.models.notification_models import (
    Notification,
    NotificationType,
)
from tests.factories import BusinessFactory


@pytest.fixture
def account_service(db_session) -> AccountService:
    return AccountService(db_session)


class TestBlocking:

    def test_block_notifies_owner(self, account_service, db_session):
        business = BusinessFactory()

        blocked = account_service.block(business.id, reason="Facture impayée")

        assert blocked.is_blocked is True
        assert blocked.blocked_reason == "Facture impayée"
        assert blocked.blocked_at is not None
        notification = db_session.query(Notification).one()
        assert notification.type == NotificationType.ACCOUNT_BLOCKED.value
        assert notification.recipient_id == business.id

    def test_block_without_reason(self, account_service):
        business = BusinessFactory()

        assert account_service.block(business.id).blocked_reason == DEFAULT_BLOCK_REASON

    def test_unblock_notifies_owner(self, account_service, db_session):
        business = BusinessFactory(blocked=True)

        unblocked = account_service.unblock(business.id)

        assert unblocked.is_blocked is False
        assert unblocked.blocked_reason is None
        assert db_session.query(Notification).one().type == NotificationType.ACCOUNT_UNBLOCKED.value

    def test_unknown_business(self, account_service, db_session):
        with pytest.raises(NotFoundError):
            account_service.block(4242)

    def test_blocked_owner_leaves_broadcast_audience(self, account_service, db_session):
        business = BusinessFactory()
        directory = BusinessDirectory(db_session)
        assert directory.list_eligible_recipient_ids() == [business.id]

        account_service.block(business.id)

        assert directory.list_eligible_recipient_ids() == []


class TestPasswordChangeAudit:

    def test_records_notification(self, db_session):
        business = BusinessFactory()

        outcome = record_password_change(business.id, session_factory=SessionLocal)

        assert outcome.succeeded is True
        assert outcome.error is None
        notification = db_session.query(Notification).filter_by(id=outcome.result).one()
        assert notification.type == NotificationType.PASSWORD_CHANGED.value
        assert notification.recipient_id == business.id

    def test_failure_is_reported_not_raised(self, db_session):
        business = BusinessFactory()

        with patch(
            "modules.businesses.services.account_service.NotificationRouter.notify_password_changed",
            side_effect=SQLAlchemyError("database unavailable"),
        ):
            outcome = record_password_change(business.id, session_factory=SessionLocal)

        assert outcome.succeeded is False
        assert "database unavailable" in outcome.error
        assert db_session.query(Notification).count() == 0


class TestPasswordChangeScheduling:

    def test_audit_runs_after_the_caller_returns(self, db_session):
        business = BusinessFactory()
        background_tasks = BackgroundTasks()

        schedule_password_change_audit(background_tasks, business.id)

        assert len(background_tasks.tasks) == 1
        assert db_session.query(Notification).count() == 0

        asyncio.run(background_tasks())

        notification = db_session.query(Notification).one()
        assert notification.type == NotificationType.PASSWORD_CHANGED.value

    def test_failing_audit_is_only_logged(self, db_session, caplog):
        business = BusinessFactory()
        background_tasks = BackgroundTasks()
        schedule_password_change_audit(background_tasks, business.id)

        with patch(
            "modules.businesses.services.account_service.NotificationRouter.notify_password_changed",
            side_effect=SQLAlchemyError("database unavailable"),
        ), caplog.at_level(logging.ERROR, logger="core.background_tasks"):
            asyncio.run(background_tasks())

        assert db_session.query(Notification).count() == 0
        assert f"password-change-audit:{business.id} failed" in caplog.text
