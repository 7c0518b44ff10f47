"""
Shared test fixtures.

Provides a Flask app wired to:
  • a temporary SQLite database with the two default courts
  • a frozen club clock (NOW)
  • cheap bcrypt rounds

`login` creates a user with a given role and returns a logged-in test
client that already sends the CSRF header.
"""

from datetime import datetime

import pytest

from app import create_app
from models import db
from models.booking import Booking
from models.court import Court
from models.user import User
from security.password import hash_password
from utils.roles import Role
from utils.seed import seed_courts

# Tuesday mid-morning, club-local
NOW = datetime(2026, 3, 10, 9, 30)
PASSWORD = "Secret123"


@pytest.fixture()
def app(tmp_path, monkeypatch):
    monkeypatch.setattr("utils.booking_context.club_now", lambda tz: NOW)

    flask_app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'test.db'}",
        "SEED_ON_STARTUP": False,
        "BCRYPT_ROUNDS": 4,
        "CHAT_API_KEY": "test-key",
        "CHAT_GATEWAY_URL": "https://gateway.test/v1/chat/completions",
    })

    with flask_app.app_context():
        db.create_all()
        seed_courts()

    yield flask_app

    with flask_app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def courts(app):
    with app.app_context():
        return {c.name: c.id for c in Court.query.all()}


@pytest.fixture()
def make_user(app):
    def _make(email="member@example.com", role=Role.MEMBER, password=PASSWORD):
        with app.app_context():
            user = User(email=email, password_hash=hash_password(password), role=role.value)
            db.session.add(user)
            db.session.commit()
            return user.id
    return _make


@pytest.fixture()
def login(app, make_user):
    def _login(email="member@example.com", role=Role.MEMBER):
        user_id = make_user(email=email, role=role)
        c = app.test_client()
        resp = c.post("/auth/login", json={"email": email, "password": PASSWORD})
        assert resp.status_code == 200, resp.get_json()
        c.environ_base["HTTP_X_CSRF_TOKEN"] = c.get_cookie("csrf_token").value
        c.user_id = user_id
        return c
    return _login


@pytest.fixture()
def add_booking(app):
    """Insert a booking row directly, bypassing the booking rules."""
    def _add(user_id, court_id, booking_date, start_time, status="confirmed"):
        with app.app_context():
            b = Booking(
                user_id=user_id,
                court_id=court_id,
                booking_date=booking_date,
                start_time=start_time,
                status=status,
            )
            db.session.add(b)
            db.session.commit()
            return b.id
    return _add
