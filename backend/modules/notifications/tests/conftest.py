# backend/modules/notifications/tests/conftest.py

import pytest
from sqlalchemy.orm import Session

from modules.notifications.services.broadcast_service import BroadcastDispatcher
from modules.notifications.services.notification_router import NotificationRouter
from modules.notifications.services.notification_service import NotificationService
from tests.factories import BusinessFactory


@pytest.fixture
def owner(db_session):
    return BusinessFactory()


@pytest.fixture
def other_owner(db_session):
    return BusinessFactory()


@pytest.fixture
def notification_service(db_session: Session) -> NotificationService:
    return NotificationService(db_session)


@pytest.fixture
def notification_router(db_session: Session) -> NotificationRouter:
    return NotificationRouter(db_session)


@pytest.fixture
def dispatcher(db_session: Session) -> BroadcastDispatcher:
    return BroadcastDispatcher(db_session)
