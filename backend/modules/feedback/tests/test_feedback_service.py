# backend/modules/feedback/tests/test_feedback_service.py

from datetime import datetime

import pytest
from unittest.mock import patch

from core.exceptions import NotFoundError, RateLimitedError
from modules.feedback.models.feedback_models import (
    Feedback,
    FeedbackSentiment,
    FeedbackStatus,
)
from modules.feedback.schemas.feedback_schemas import FeedbackCreate, FeedbackFilters
from modules.notifications.models.notification_models import (
    Notification,
    NotificationType,
)
from tests.factories import BusinessFactory, FeedbackFactory


def notifications_for(db_session, business_id):
    return (
        db_session.query(Notification)
        .filter(Notification.recipient_id == business_id)
        .order_by(Notification.id)
        .all()
    )


class TestSubmitFeedback:

    def test_positive_submission(self, feedback_service, db_session, business):
        feedback = feedback_service.submit_feedback(
            "CAFE01",
            FeedbackCreate(rating=5, comment="Accueil parfait, merci !"),
            ip_address="10.0.0.1",
        )

        assert feedback.id is not None
        assert feedback.business_id == business.id
        assert feedback.sentiment == FeedbackSentiment.POSITIVE
        assert feedback.status == FeedbackStatus.NEW
        assert feedback.category == "other"
        assert feedback.ip_address == "10.0.0.1"

        notifications = notifications_for(db_session, business.id)
        assert [n.type for n in notifications] == [NotificationType.POSITIVE_FEEDBACK.value]
        assert notifications[0].related_id == feedback.id
        assert "Keep it up!" in notifications[0].message

    def test_neutral_submission(self, feedback_service, db_session, business):
        feedback_service.submit_feedback("CAFE01", FeedbackCreate(rating=3), "10.0.0.1")

        notifications = notifications_for(db_session, business.id)
        assert [n.type for n in notifications] == [NotificationType.NEW_FEEDBACK.value]

    def test_negative_submission_without_keywords(self, feedback_service, db_session, business):
        feedback = feedback_service.submit_feedback(
            "CAFE01", FeedbackCreate(rating=2, comment="Attente trop longue"), "10.0.0.1"
        )

        assert feedback.sentiment == FeedbackSentiment.NEGATIVE
        notifications = notifications_for(db_session, business.id)
        assert [n.type for n in notifications] == [
            NotificationType.CRITICAL_NEGATIVE_FEEDBACK.value
        ]

    def test_one_star_with_keyword_produces_two_notifications(
        self, feedback_service, db_session, business
    ):
        feedback = feedback_service.submit_feedback(
            "CAFE01", FeedbackCreate(rating=1, comment="C'est une arnaque."), "10.0.0.1"
        )

        notifications = notifications_for(db_session, business.id)
        assert [n.type for n in notifications] == [
            NotificationType.CRITICAL_KEYWORDS.value,
            NotificationType.CRITICAL_NEGATIVE_FEEDBACK.value,
        ]
        assert all(n.related_id == feedback.id for n in notifications)

    def test_keyword_alert_on_positive_rating(self, feedback_service, db_session, business):
        feedback_service.submit_feedback(
            "CAFE01",
            FeedbackCreate(rating=4, comment="Bon repas mais une souris sous la table"),
            "10.0.0.1",
        )

        types = [n.type for n in notifications_for(db_session, business.id)]
        assert types == [
            NotificationType.CRITICAL_KEYWORDS.value,
            NotificationType.POSITIVE_FEEDBACK.value,
        ]

    def test_keyword_message_shows_first_three_terms(
        self, feedback_service, db_session, business
    ):
        feedback_service.submit_feedback(
            "CAFE01",
            FeedbackCreate(
                rating=1,
                comment=(
                    "Remboursement exigé: inadmissible, une arnaque, "
                    "j'appelle mon avocat après cette intoxication."
                ),
            ),
            "10.0.0.1",
        )

        alert = notifications_for(db_session, business.id)[0]
        assert alert.type == NotificationType.CRITICAL_KEYWORDS.value
        assert "intoxication, arnaque, avocat." in alert.message
        assert "inadmissible" not in alert.message.split("mentions:")[1].split(".")[0]

    def test_inactive_business_is_rejected(self, feedback_service, db_session):
        BusinessFactory(unique_code="SLEEPY", inactive=True)

        with pytest.raises(NotFoundError):
            feedback_service.submit_feedback(
                "SLEEPY", FeedbackCreate(rating=5, comment="Parfait"), "10.0.0.1"
            )

        assert db_session.query(Feedback).count() == 0
        assert db_session.query(Notification).count() == 0

    def test_second_submission_from_same_ip_is_rate_limited(
        self, feedback_service, db_session, business
    ):
        feedback_service.submit_feedback("CAFE01", FeedbackCreate(rating=5), "10.0.0.1")

        with pytest.raises(RateLimitedError):
            feedback_service.submit_feedback("CAFE01", FeedbackCreate(rating=1), "10.0.0.1")

        assert db_session.query(Feedback).count() == 1

    def test_routing_failure_rolls_back_feedback(self, feedback_service, db_session, business):
        with patch.object(
            feedback_service.router, "route_new_feedback", side_effect=RuntimeError("boom")
        ):
            with pytest.raises(RuntimeError):
                feedback_service.submit_feedback("CAFE01", FeedbackCreate(rating=5), "10.0.0.1")

        assert db_session.query(Feedback).count() == 0

    def test_optional_fields_are_stored(self, feedback_service, business):
        feedback = feedback_service.submit_feedback(
            "CAFE01",
            FeedbackCreate(
                rating=4,
                category="Service",
                location="Terrasse",
                images=["https://cdn.example.com/1.jpg"],
                tags=["terrasse", "midi"],
                customer_name="Camille",
                customer_email="camille@example.com",
            ),
            "10.0.0.1",
        )

        assert feedback.category == "service"
        assert feedback.location == "Terrasse"
        assert feedback.images == ["https://cdn.example.com/1.jpg"]
        assert feedback.tags == ["terrasse", "midi"]
        assert feedback.customer_email == "camille@example.com"


class TestRatingValidation:

    @pytest.mark.parametrize("rating", [0, 0.5, 5.5, 6])
    def test_out_of_bounds(self, rating):
        with pytest.raises(ValueError):
            FeedbackCreate(rating=rating)

    def test_off_step_with_whole_star_deployment(self):
        with pytest.raises(ValueError):
            FeedbackCreate(rating=3.5)

    def test_decimal_step(self):
        with patch("modules.feedback.schemas.feedback_schemas.settings") as mock_settings:
            mock_settings.feedback_rating_min = 1.0
            mock_settings.feedback_rating_max = 5.0
            mock_settings.feedback_rating_step = 0.1
            mock_settings.feedback_comment_max_length = 2000

            assert FeedbackCreate(rating=3.7).rating == 3.7


class TestOwnerFeedback:

    def test_list_excludes_hidden_and_deleted(self, feedback_service, business):
        visible = FeedbackFactory(business=business)
        FeedbackFactory(business=business, is_hidden=True)
        FeedbackFactory(business=business, deleted_at=datetime.utcnow(), deleted_by=1)
        FeedbackFactory(business=BusinessFactory())

        result = feedback_service.list_feedbacks(business.id)

        assert [f.id for f in result.feedbacks] == [visible.id]
        assert result.pagination.total == 1

    def test_list_is_newest_first_and_paginated(self, feedback_service, business):
        older = FeedbackFactory(business=business, created_at=datetime(2026, 1, 1, 10))
        newer = FeedbackFactory(business=business, created_at=datetime(2026, 1, 2, 10))
        newest = FeedbackFactory(business=business, created_at=datetime(2026, 1, 3, 10))

        first = feedback_service.list_feedbacks(business.id, page=1, limit=2)
        second = feedback_service.list_feedbacks(business.id, page=2, limit=2)

        assert [f.id for f in first.feedbacks] == [newest.id, newer.id]
        assert [f.id for f in second.feedbacks] == [older.id]
        assert first.pagination.total_pages == 2
        assert first.pagination.has_next is True
        assert second.pagination.has_next is False

    def test_list_filters(self, feedback_service, business):
        FeedbackFactory(business=business, rating=5.0)
        low = FeedbackFactory(business=business, rating=1.0)

        result = feedback_service.list_feedbacks(
            business.id, filters=FeedbackFilters(sentiment=FeedbackSentiment.NEGATIVE)
        )

        assert [f.id for f in result.feedbacks] == [low.id]

    def test_first_read_marks_viewed(self, feedback_service, business):
        feedback = FeedbackFactory(business=business)

        assert feedback_service.get_feedback(business.id, feedback.id).status == FeedbackStatus.VIEWED

    def test_read_keeps_later_status(self, feedback_service, business):
        feedback = FeedbackFactory(business=business, status=FeedbackStatus.RESPONDED)

        assert (
            feedback_service.get_feedback(business.id, feedback.id).status
            == FeedbackStatus.RESPONDED
        )

    def test_other_owner_cannot_read(self, feedback_service, business):
        feedback = FeedbackFactory(business=business)
        other = BusinessFactory()

        with pytest.raises(NotFoundError):
            feedback_service.get_feedback(other.id, feedback.id)

    def test_respond(self, feedback_service, business):
        feedback = FeedbackFactory(business=business)

        updated = feedback_service.respond(business.id, feedback.id, "  Merci beaucoup !  ")

        assert updated.response_text == "Merci beaucoup !"
        assert updated.responded_at is not None
        assert updated.status == FeedbackStatus.RESPONDED

    def test_owner_response_and_admin_reply_coexist(self, feedback_service, business):
        feedback = FeedbackFactory(business=business, admin_reply="Nous avons contacté l'équipe")

        updated = feedback_service.respond(business.id, feedback.id, "Merci")

        assert updated.admin_reply == "Nous avons contacté l'équipe"
        assert updated.response_text == "Merci"

    def test_status_override_reopens_archived(self, feedback_service, business):
        feedback = FeedbackFactory(business=business, status=FeedbackStatus.ARCHIVED)

        updated = feedback_service.update_status(business.id, feedback.id, FeedbackStatus.NEW)

        assert updated.status == FeedbackStatus.NEW

    def test_hide_and_unhide(self, feedback_service, business):
        feedback = FeedbackFactory(business=business)

        feedback_service.set_hidden(business.id, feedback.id, True)
        assert feedback_service.list_feedbacks(business.id).pagination.total == 0
        with pytest.raises(NotFoundError):
            feedback_service.get_feedback(business.id, feedback.id)

        feedback_service.set_hidden(business.id, feedback.id, False)
        assert feedback_service.list_feedbacks(business.id).pagination.total == 1
