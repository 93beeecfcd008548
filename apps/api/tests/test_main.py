"""
HTTP-level tests for error rendering and role checks.

The lifespan is not run, so no database, Redis or scheduler is needed;
``get_db`` is overridden with a mock session.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from hr_portal.core.auth import ROLE_ADMIN, ROLE_PUBLISHER, ROLE_REVIEWER
from hr_portal.core.config import settings
from hr_portal.core.database import get_db
from hr_portal.core.security import create_access_token
from hr_portal.main import app
from hr_portal.modules.offers.service import OfferNotFoundError


def auth_header(role: str, user_id: str = "user-1") -> dict[str, str]:
    token = create_access_token(
        user_id,
        additional_claims={"name": "Test User", "email": "user@x.com", "role": role},
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(mock_db):
    app.dependency_overrides[get_db] = lambda: mock_db
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealth:
    """Tests for the health endpoints."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestAuthErrors:
    """Tests for authentication and role failures."""

    def test_missing_token(self, client):
        response = client.get("/applications")
        assert response.status_code == 401
        assert response.json()["detail"]["error"] == "MISSING_TOKEN"

    def test_garbage_token(self, client):
        response = client.get("/applications", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401
        assert response.json()["detail"]["error"] == "INVALID_TOKEN"

    def test_publisher_cannot_manage_users(self, client):
        response = client.get("/users", headers=auth_header(ROLE_PUBLISHER))
        assert response.status_code == 403
        assert response.json()["detail"]["error"] == "FORBIDDEN"

    def test_reviewer_cannot_create_offers(self, client):
        response = client.post("/offers", headers=auth_header(ROLE_REVIEWER), data={"title": "x"})
        assert response.status_code == 403


class TestErrorRendering:
    """Tests for the exception handlers."""

    def test_portal_error_body(self, client):
        with patch(
            "hr_portal.modules.offers.service.get_offer",
            new_callable=AsyncMock,
            side_effect=OfferNotFoundError("missing"),
        ):
            response = client.get("/offers/3d6f1a2b-4c5e-4f70-8a91-b2c3d4e5f601")

        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "OFFER_NOT_FOUND"

    def test_request_validation_is_400(self, client):
        response = client.post(
            "/users",
            headers=auth_header(ROLE_ADMIN),
            json={"name": "", "email": "not-an-email", "role": "admin"},
        )
        assert response.status_code == 400
        body = response.json()["detail"]
        assert body["error"] == "VALIDATION_ERROR"
        assert "email" in body["message"]


class TestMalformedIds:
    """Ids that are not UUIDs are rejected before any database access."""

    def test_offer_path_id(self, client, mock_db):
        response = client.get("/offers/xyz")

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "VALIDATION_ERROR"
        mock_db.execute.assert_not_called()
        mock_db.get.assert_not_called()

    def test_archive_offer_id(self, client):
        response = client.post("/applications/archive/abc", headers=auth_header(ROLE_REVIEWER))

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "VALIDATION_ERROR"

    def test_user_path_id(self, client):
        response = client.delete("/users/42", headers=auth_header(ROLE_ADMIN))

        assert response.status_code == 400

    def test_apply_offer_id(self, client, mock_db):
        response = client.post(
            "/apply",
            data={
                "offer_id": "foo",
                "full_name": "Jane Doe",
                "email": "jane@x.com",
                "tel_number": "+221 77 000 00 00",
                "applicant_country": "Senegal",
            },
        )

        assert response.status_code == 400
        body = response.json()["detail"]
        assert body["error"] == "VALIDATION_ERROR"
        assert "offer_id" in body["message"]
        mock_db.execute.assert_not_called()


@pytest.mark.skipif(not settings.is_development, reason="debug routes exist only in development")
def test_debug_db_hides_connection_error(client):
    with patch(
        "hr_portal.main.async_session_maker",
        MagicMock(side_effect=OSError("password authentication failed for user postgres")),
    ):
        response = client.get("/debug/db")

    assert response.status_code == 200
    assert response.json() == {"database": "error", "message": "Database connection failed."}
