"""
HTTP-level tests: register, login and the protected routes.
"""

from datetime import datetime, timedelta, timezone

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from api.routes import get_session_factory
from auth.dependencies import db_session
from auth.errors import StoreFailure
from auth.tokens import create_token

ANA = {"name": "Ana", "email": "a@x.com", "password": "p@ss1"}


def _register_and_login(client, body=ANA):
    assert client.post("/api/register", json=body).status_code == 201
    resp = client.post("/api/login", json={"email": body["email"], "password": body["password"]})
    assert resp.status_code == 200, resp.text
    return resp.json()["token"]


class TestRegisterEndpoint:
    def test_created(self, client, store):
        resp = client.post("/api/register", json=ANA)

        assert resp.status_code == 201
        assert resp.json() == {"message": "Registration successful"}
        assert "a@x.com" in store.accounts

    def test_missing_field(self, client):
        resp = client.post("/api/register", json={"name": "Ana", "email": "a@x.com"})

        assert resp.status_code == 400
        assert "password" in resp.json()["message"]

    def test_duplicate_email(self, client):
        client.post("/api/register", json=ANA)
        resp = client.post("/api/register", json={**ANA, "name": "Someone else"})

        assert resp.status_code == 400
        assert resp.json() == {"message": "Email already in use"}

    def test_malformed_body_is_400(self, client):
        resp = client.post(
            "/api/register", content="not json", headers={"Content-Type": "application/json"}
        )
        assert resp.status_code == 400
        assert "message" in resp.json()

    def test_store_failure_is_generic_500(self, client, store):
        store.create = AsyncMock(side_effect=StoreFailure())

        resp = client.post("/api/register", json=ANA)

        assert resp.status_code == 500
        assert resp.json() == {"message": "Internal server error"}


class TestLoginEndpoint:
    def test_returns_token(self, client):
        token = _register_and_login(client)
        assert token.count(".") == 2

    def test_invalid_credentials_share_one_shape(self, client):
        client.post("/api/register", json=ANA)

        wrong_password = client.post("/api/login", json={"email": "a@x.com", "password": "nope"})
        unknown_email = client.post("/api/login", json={"email": "b@x.com", "password": "p@ss1"})

        assert wrong_password.status_code == unknown_email.status_code == 400
        assert wrong_password.json() == unknown_email.json() == {
            "message": "Invalid email or password"
        }

    def test_missing_field(self, client):
        resp = client.post("/api/login", json={"email": "a@x.com"})
        assert resp.status_code == 400


class TestProtectedRoutes:
    def test_ana_scenario(self, client, store):
        token = _register_and_login(client)

        ok = client.get("/api/me", headers={"Authorization": token})
        assert ok.status_code == 200
        assert ok.json() == {"id": store.accounts["a@x.com"].id, "name": "Ana", "email": "a@x.com"}

        garbage = client.get("/api/me", headers={"Authorization": "garbage"})
        assert garbage.status_code == 403

        missing = client.get("/api/me")
        assert missing.status_code == 401

    def test_bearer_prefix_is_accepted(self, client):
        token = _register_and_login(client)
        resp = client.get("/api/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 200

    def test_expired_and_garbage_tokens_look_identical(self, client):
        _register_and_login(client)
        expired = create_token(1, now=datetime.now(timezone.utc) - timedelta(hours=2))

        expired_resp = client.get("/api/me", headers={"Authorization": expired})
        garbage_resp = client.get("/api/me", headers={"Authorization": "garbage"})

        assert expired_resp.status_code == garbage_resp.status_code == 403
        assert expired_resp.json() == garbage_resp.json()

    def test_blank_header_is_unauthenticated(self, client):
        resp = client.get("/api/me", headers={"Authorization": "   "})
        assert resp.status_code == 401


class TestScheduleEndpoint:
    @pytest.fixture
    def session_client(self, app):
        async def fake_session():
            yield MagicMock()

        app.dependency_overrides[db_session] = fake_session
        with TestClient(app) as test_client:
            yield test_client

    def test_returns_rows_for_token_subject(self, session_client):
        rows = [{"course_name": "Algebra", "course_time": "Mon 08:00"}]
        token = create_token(5)

        with patch("api.routes.fetch_schedule", AsyncMock(return_value=rows)) as fetch:
            resp = session_client.get("/api/schedule", headers={"Authorization": token})

        assert resp.status_code == 200
        assert resp.json() == rows
        assert fetch.await_args.args[1] == 5

    def test_empty_schedule_is_404(self, session_client):
        with patch("api.routes.fetch_schedule", AsyncMock(return_value=[])):
            resp = session_client.get("/api/schedule", headers={"Authorization": create_token(5)})

        assert resp.status_code == 404
        assert resp.json() == {"message": "No schedule found"}

    def test_requires_token(self, session_client):
        assert session_client.get("/api/schedule").status_code == 401
        assert session_client.get(
            "/api/schedule", headers={"Authorization": "garbage"}
        ).status_code == 403


class TestStudentLookup:
    def test_public_profile(self, client, store):
        client.post("/api/register", json=ANA)
        student_id = store.accounts["a@x.com"].id

        resp = client.get(f"/api/student/{student_id}")

        assert resp.status_code == 200
        body = resp.json()
        assert body == {"id": student_id, "name": "Ana", "email": "a@x.com"}
        assert "password" not in resp.text

    def test_unknown_student(self, client):
        resp = client.get("/api/student/404")
        assert resp.status_code == 404
        assert resp.json() == {"message": "Student not found"}


class TestExportEndpoint:
    @pytest.fixture
    def export_client(self, app):
        app.dependency_overrides[get_session_factory] = lambda: MagicMock()
        with TestClient(app) as test_client:
            yield test_client

    def test_export_document(self, export_client):
        document = {"type": "header", "data": []}
        with patch("api.routes.export_tables", AsyncMock(return_value=document)):
            resp = export_client.get("/api/export", headers={"Authorization": create_token(1)})

        assert resp.status_code == 200
        assert resp.json() == document

    def test_export_failure(self, export_client):
        failure = OperationalError("SELECT", {}, Exception("db down"))
        with patch("api.routes.export_tables", AsyncMock(side_effect=failure)):
            resp = export_client.get("/api/export", headers={"Authorization": create_token(1)})

        assert resp.status_code == 500
        assert resp.json() == {"message": "Failed to export data"}
        assert "db down" not in resp.text

    def test_requires_token(self, export_client):
        assert export_client.get("/api/export").status_code == 401


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
    assert "X-Process-Time" in resp.headers
