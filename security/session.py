import hashlib
import secrets
from datetime import datetime, timedelta
from typing import Optional

from flask import request, current_app

from models import db
from models.session import Session

DEFAULT_COOKIE_NAME = "btc_session"


def _hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def cookie_name() -> str:
    return current_app.config.get("AUTH_COOKIE_NAME", DEFAULT_COOKIE_NAME)


def _client_fingerprint():
    ip = request.headers.get("X-Forwarded-For", request.remote_addr)
    user_agent = (request.headers.get("User-Agent") or "")[:255]
    return ip, user_agent or None


def create_session(user_id: int) -> str:
    """Open a session for ``user_id`` and return the raw cookie token."""
    raw_token = secrets.token_urlsafe(32)
    lifetime = current_app.config.get("SESSION_LIFETIME_SECONDS", 86400)
    ip, user_agent = _client_fingerprint()

    db.session.add(Session(
        user_id=user_id,
        token_hash=_hash_token(raw_token),
        expires_at=datetime.utcnow() + timedelta(seconds=lifetime),
        ip=ip,
        user_agent=user_agent,
    ))
    db.session.commit()
    return raw_token


def get_session_from_request() -> Optional[Session]:
    raw_token = request.cookies.get(cookie_name())
    if not raw_token:
        return None

    sess = Session.query.filter_by(token_hash=_hash_token(raw_token)).first()
    now = datetime.utcnow()
    if sess is None or not sess.is_live(now, current_app.config.get("IDLE_TIMEOUT_SECONDS", 7200)):
        return None

    sess.last_seen_at = now
    db.session.commit()
    return sess


def revoke_session(raw_token: str) -> bool:
    if not raw_token:
        return False
    sess = Session.query.filter_by(token_hash=_hash_token(raw_token)).first()
    if sess is None:
        return False
    sess.revoked = True
    db.session.commit()
    return True


def revoke_all_sessions(user_id: int) -> int:
    """Revoke every live session of a user; login calls this to rotate."""
    count = (
        Session.query
        .filter_by(user_id=user_id, revoked=False)
        .update({Session.revoked: True}, synchronize_session=False)
    )
    db.session.commit()
    return count
