# backend/modules/businesses/tests/test_admin_users_api.py

from unittest.mock import patch

from sqlalchemy.exc import SQLAlchemyError

from modules.notifications.models.notification_models import Notification
from tests.factories import BusinessFactory, FeedbackFactory


class TestAccountEndpoints:

    def test_block_and_unblock(self, client, admin_headers, db_session):
        business = BusinessFactory()

        blocked = client.patch(
            f"/admin/users/{business.id}/block",
            json={"reason": "Paiement en retard"},
            headers=admin_headers,
        )
        assert blocked.status_code == 200
        assert blocked.json()["is_blocked"] is True
        assert blocked.json()["blocked_reason"] == "Paiement en retard"

        unblocked = client.patch(f"/admin/users/{business.id}/unblock", headers=admin_headers)
        assert unblocked.json()["is_blocked"] is False
        assert db_session.query(Notification).count() == 2

    def test_block_without_body(self, client, admin_headers):
        business = BusinessFactory()

        response = client.patch(f"/admin/users/{business.id}/block", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["blocked_reason"]

    def test_owner_cannot_block(self, client, auth_headers):
        business = BusinessFactory()

        response = client.patch(f"/admin/users/{business.id}/block", headers=auth_headers(business.id))

        assert response.status_code == 403


class TestManualNotifications:

    def test_notify_one_user(self, client, admin_headers):
        business = BusinessFactory()
        feedback = FeedbackFactory(business=business)

        response = client.post(
            f"/admin/users/{business.id}/notify",
            json={
                "title": "Bienvenue",
                "message": "Votre QR code est prêt à être imprimé.",
                "feedback_id": feedback.id,
            },
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["user_id"] == business.id

    def test_notify_validates_payload(self, client, admin_headers):
        business = BusinessFactory()

        response = client.post(
            f"/admin/users/{business.id}/notify",
            json={"title": "Hi", "message": "short"},
            headers=admin_headers,
        )

        assert response.status_code == 422

    def test_notify_unknown_user(self, client, admin_headers, db_session):
        response = client.post(
            "/admin/users/4242/notify",
            json={"title": "Bienvenue", "message": "Votre QR code est prêt."},
            headers=admin_headers,
        )

        assert response.status_code == 404

    def test_notify_bulk(self, client, admin_headers):
        first, second = BusinessFactory.create_batch(2)

        response = client.post(
            "/admin/users/notify/bulk",
            json={
                "user_ids": [first.id, second.id],
                "title": "Nouveautés",
                "message": "Découvrez les rapports hebdomadaires.",
                "type": "weekly_summary",
            },
            headers=admin_headers,
        )

        assert response.json() == {"sent_count": 2, "user_ids": [first.id, second.id]}

    def test_notify_all(self, client, admin_headers, db_session):
        BusinessFactory.create_batch(3)
        BusinessFactory(blocked=True)

        response = client.post(
            "/admin/users/notify/all",
            json={"title": "Maintenance", "message": "Coupure prévue ce soir à 23h."},
            headers=admin_headers,
        )

        assert response.json()["sent_count"] == 3
        types = {n.type for n in db_session.query(Notification).all()}
        assert types == {"system"}

    def test_notify_all_without_recipients(self, client, admin_headers, db_session):
        response = client.post(
            "/admin/users/notify/all",
            json={"title": "Maintenance", "message": "Coupure prévue ce soir à 23h."},
            headers=admin_headers,
        )

        assert response.json() == {"sent_count": 0, "user_ids": []}


class TestPasswordChangeHook:

    def test_accepted_then_audited(self, client, admin_headers, db_session):
        business = BusinessFactory()

        response = client.post(f"/admin/users/{business.id}/password-changed", headers=admin_headers)

        assert response.status_code == 202
        assert response.json()["user_id"] == business.id
        # TestClient runs background tasks before returning
        notification = db_session.query(Notification).one()
        assert notification.type == "password_changed"

    def test_failing_audit_does_not_fail_the_request(self, client, admin_headers, db_session):
        business = BusinessFactory()

        with patch(
            "modules.businesses.services.account_service.NotificationRouter.notify_password_changed",
            side_effect=SQLAlchemyError("database unavailable"),
        ):
            response = client.post(
                f"/admin/users/{business.id}/password-changed", headers=admin_headers
            )

        assert response.status_code == 202
        assert db_session.query(Notification).count() == 0

    def test_unknown_user(self, client, admin_headers, db_session):
        response = client.post("/admin/users/4242/password-changed", headers=admin_headers)

        assert response.status_code == 404
        assert db_session.query(Notification).count() == 0

    def test_owner_cannot_call_hook(self, client, auth_headers):
        business = BusinessFactory()

        response = client.post(
            f"/admin/users/{business.id}/password-changed", headers=auth_headers(business.id)
        )

        assert response.status_code == 403
