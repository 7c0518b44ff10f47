import re

from flask import Blueprint, request, jsonify, current_app, g

from models import db
from models.user import User
from security.password import hash_password, verify_password
from security.session import cookie_name, create_session, revoke_session, revoke_all_sessions
from security.csrf import issue_csrf_token, CSRF_COOKIE
from security.password_policy import validate_password
from utils.audit import log_event
from utils.auth_context import login_required
from utils.payloads import user_payload
from utils.request_data import PayloadError, json_object, optional_text
from utils.roles import Role, dashboard_path

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# field -> max length for the editable profile
PROFILE_FIELDS = {
    "full_name": 120,
    "phone_number": 30,
}


def _credentials(data):
    email = optional_text(data, "email", 256) or ""
    password = data.get("password")
    if password is not None and not isinstance(password, str):
        raise PayloadError("password must be a string")
    return email.lower(), password or ""


def _clean_profile(data):
    """Return (changes, error) for the editable profile fields present in data."""
    changes = {}
    for field, max_len in PROFILE_FIELDS.items():
        value = data.get(field)
        if value is None:
            continue
        if not isinstance(value, str) or len(value.strip()) > max_len:
            return None, f"Invalid {field}"
        changes[field] = value.strip() or None
    return changes, None


def _set_session_cookie(resp, raw_token):
    resp.set_cookie(
        cookie_name(),
        raw_token,
        httponly=True,
        secure=current_app.config.get("SESSION_COOKIE_SECURE", False),
        samesite=current_app.config.get("SESSION_COOKIE_SAMESITE", "Lax"),
        max_age=current_app.config.get("SESSION_LIFETIME_SECONDS", 24 * 60 * 60),
        path="/",
    )
    return issue_csrf_token(resp)


@auth_bp.post("/register")
def register():
    data = json_object()
    email, password = _credentials(data)

    if len(email) > 255 or not _EMAIL_RE.match(email):
        return jsonify(error="Invalid email"), 400
    valid, errors = validate_password(password)
    if not valid:
        return jsonify(error="Password does not meet policy", details=errors), 400
    profile, error = _clean_profile(data)
    if error:
        return jsonify(error=error), 400

    if User.query.filter_by(email=email).first():
        log_event("REGISTER_FAIL_EMAIL_EXISTS", metadata={"email": email})
        return jsonify(error="Email already registered"), 409

    # everyone joins as a member; coaches and admins are promoted later
    user = User(email=email, password_hash=hash_password(password), role=Role.MEMBER.value, **profile)
    db.session.add(user)
    db.session.commit()
    log_event("REGISTER_SUCCESS", user_id=user.id)

    return jsonify(message="Registered successfully", user=user_payload(user)), 201


@auth_bp.post("/login")
def login():
    email, password = _credentials(json_object())

    user = User.query.filter_by(email=email).first()
    if not user or not verify_password(password, user.password_hash):
        log_event("LOGIN_FAIL", user_id=user.id if user else None, metadata={"email": email})
        return jsonify(error="Invalid email or password"), 401

    revoked_count = revoke_all_sessions(user.id)
    resp = _set_session_cookie(
        jsonify(message="Login OK", user=user_payload(user), dashboard=dashboard_path(user.club_role)),
        create_session(user.id),
    )

    log_event("LOGIN_SUCCESS", user_id=user.id, metadata={"revoked_sessions": revoked_count})
    return resp, 200


@auth_bp.get("/me")
@login_required
def me():
    return jsonify(user=user_payload(g.user), role=g.role.value, dashboard=dashboard_path(g.role)), 200


@auth_bp.post("/logout")
@login_required
def logout():
    revoke_session(request.cookies.get(cookie_name()))
    log_event("LOGOUT", user_id=g.user.id)

    resp = jsonify(message="Logged out")
    resp.delete_cookie(cookie_name(), path="/")
    resp.delete_cookie(CSRF_COOKIE, path="/")
    return resp, 200


@auth_bp.post("/profile")
@login_required
def update_profile():
    changes, error = _clean_profile(json_object())
    if error:
        return jsonify(error=error), 400

    for field, value in changes.items():
        setattr(g.user, field, value)
    db.session.commit()

    log_event("PROFILE_UPDATE", user_id=g.user.id, metadata={"fields": sorted(changes)})
    return jsonify(message="Profile updated", user=user_payload(g.user)), 200
