# backend/modules/feedback/tests/conftest.py

import pytest
from sqlalchemy.orm import Session

from modules.feedback.services.feedback_service import FeedbackService
from modules.feedback.services.keyword_service import KeywordDetector
from modules.feedback.services.moderation_service import ModerationLedger
from modules.feedback.services.stats_service import FeedbackStatsService
from modules.feedback.services.submission_guard import SubmissionGuard
from tests.factories import BusinessFactory


@pytest.fixture
def business(db_session):
    """An active business owner."""
    return BusinessFactory(unique_code="CAFE01", business_name="Café du Port")


@pytest.fixture
def detector() -> KeywordDetector:
    return KeywordDetector()


@pytest.fixture
def guard(db_session: Session) -> SubmissionGuard:
    """Guard with the abuse window switched on regardless of settings."""
    return SubmissionGuard(db_session, rate_limit_enabled=True, window_hours=24)


@pytest.fixture
def feedback_service(db_session: Session, guard: SubmissionGuard) -> FeedbackService:
    return FeedbackService(db_session, guard=guard)


@pytest.fixture
def moderation_ledger(db_session: Session) -> ModerationLedger:
    return ModerationLedger(db_session)


@pytest.fixture
def stats_service(db_session: Session) -> FeedbackStatsService:
    return FeedbackStatsService(db_session)
