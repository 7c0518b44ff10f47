"""Tests for /auth endpoints and session handling."""

from models.session import Session
from tests.conftest import PASSWORD
from utils.roles import Role


class TestRegister:
    def test_register_member(self, client):
        resp = client.post("/auth/register", json={
            "email": " New@Example.com ", "password": "Passw0rdOK", "full_name": "Brian",
        })
        assert resp.status_code == 201
        user = resp.get_json()["user"]
        assert user["email"] == "new@example.com"
        assert user["role"] == "member"
        assert "password_hash" not in user

    def test_duplicate_email(self, client, make_user):
        make_user("taken@example.com")
        resp = client.post("/auth/register", json={"email": "taken@example.com", "password": "Passw0rdOK"})
        assert resp.status_code == 409

    def test_invalid_email(self, client):
        assert client.post("/auth/register", json={"email": "nope", "password": "Passw0rdOK"}).status_code == 400

    def test_weak_password(self, client):
        resp = client.post("/auth/register", json={"email": "a@example.com", "password": "short"})
        assert resp.status_code == 400
        details = resp.get_json()["details"]
        assert any("at least 8" in d for d in details)
        assert any("uppercase" in d for d in details)


class TestLogin:
    def test_wrong_password(self, client, make_user):
        make_user()
        resp = client.post("/auth/login", json={"email": "member@example.com", "password": "Wrong1234"})
        assert resp.status_code == 401
        assert resp.get_json()["error"] == "Invalid email or password"

    def test_unknown_user(self, client):
        resp = client.post("/auth/login", json={"email": "ghost@example.com", "password": PASSWORD})
        assert resp.status_code == 401

    def test_sets_session_and_csrf_cookies(self, client, make_user):
        make_user()
        resp = client.post("/auth/login", json={"email": "member@example.com", "password": PASSWORD})
        assert resp.status_code == 200
        assert client.get_cookie("btc_session") is not None
        assert client.get_cookie("csrf_token") is not None

    def test_login_rotates_sessions(self, app, client, make_user):
        uid = make_user()
        for _ in range(2):
            client.post("/auth/login", json={"email": "member@example.com", "password": PASSWORD})
        with app.app_context():
            assert Session.query.filter_by(user_id=uid, revoked=False).count() == 1


class TestMe:
    def test_requires_session(self, client):
        assert client.get("/auth/me").status_code == 401

    def test_role_and_dashboard(self, login):
        body = login(role=Role.COACH).get("/auth/me").get_json()
        assert body["role"] == "coach"
        assert body["dashboard"] == "/coach/dashboard"

    def test_update_profile(self, login):
        member = login()
        resp = member.post("/auth/profile", json={"full_name": "Sarah", "phone_number": "+256 700 000000"})
        assert resp.status_code == 200
        assert member.get("/auth/me").get_json()["user"]["full_name"] == "Sarah"


class TestLogout:
    def test_logout_revokes_session(self, login):
        member = login()
        assert member.post("/auth/logout").status_code == 200
        assert member.get("/auth/me").status_code == 401


class TestSecurityHeaders:
    def test_headers_present(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.get_json()["status"] == "ok"
        assert resp.headers["X-Frame-Options"] == "DENY"
        assert resp.headers["X-Content-Type-Options"] == "nosniff"


class TestPayloadTypes:
    def test_login_numeric_email(self, client):
        assert client.post("/auth/login", json={"email": 5, "password": PASSWORD}).status_code == 400

    def test_login_numeric_password(self, client, make_user):
        make_user()
        resp = client.post("/auth/login", json={"email": "member@example.com", "password": 12345678})
        assert resp.status_code == 400

    def test_register_list_body(self, client):
        assert client.post("/auth/register", json=["a@example.com"]).status_code == 400
