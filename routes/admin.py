from datetime import date
from flask import Blueprint, jsonify, g, request
from security.rbac import require_roles
from utils.audit import log_event
from models import db
from models.audit_log import AuditLog
from models.user import User
from models.court import Court, COURT_STATUSES
from models.booking import Booking
from services.booking_status import BookingStatus, transition
from services.errors import BookingError
from utils.booking_context import current_now
from utils.payloads import booking_payload, court_payload, user_payload
from utils.request_data import json_object, optional_text
from utils.roles import Role

admin_bp = Blueprint("admin", __name__, url_prefix="/admin")

# action -> (target status, audit action)
BOOKING_ACTIONS = {
    "confirm": (BookingStatus.CONFIRMED, "ADMIN_BOOKING_CONFIRM"),
    "complete": (BookingStatus.COMPLETED, "ADMIN_BOOKING_COMPLETE"),
    "cancel": (BookingStatus.CANCELLED, "ADMIN_BOOKING_CANCEL"),
}


@admin_bp.get("/bookings")
@require_roles(Role.ADMIN)
def list_all_bookings():
    status = (request.args.get("status") or "").strip().lower()
    date_str = request.args.get("date")  # YYYY-MM-DD

    q = Booking.query
    if status:
        if status not in {s.value for s in BookingStatus}:
            return jsonify(error="Invalid status"), 400
        q = q.filter(Booking.status == status)

    if date_str:
        try:
            day = date.fromisoformat(date_str)
        except ValueError:
            return jsonify(error="Invalid date. Use YYYY-MM-DD"), 400
        q = q.filter(Booking.booking_date == day)

    rows = q.order_by(Booking.booking_date.desc(), Booking.start_time.asc()).limit(200).all()
    return jsonify([booking_payload(b) for b in rows]), 200


@admin_bp.post("/bookings/<int:booking_id>/<action>")
@require_roles(Role.ADMIN)
def update_booking_status(booking_id: int, action: str):
    if action not in BOOKING_ACTIONS:
        return jsonify(error="Unknown action"), 404

    booking = db.session.get(Booking, booking_id)
    if not booking:
        return jsonify(error="Booking not found"), 404

    data = json_object()
    target, audit_action = BOOKING_ACTIONS[action]
    reason = None
    if target is BookingStatus.CANCELLED:
        reason = optional_text(data, "reason", 120) or "Admin cancellation"

    try:
        transition(booking, target, current_now(), reason=reason)
    except BookingError as err:
        return jsonify(err.to_dict()), err.status_code

    db.session.commit()
    log_event(audit_action, user_id=g.user.id, entity="booking", entity_id=booking.id, metadata={"reason": reason})
    return jsonify(booking_payload(booking)), 200


@admin_bp.get("/users")
@require_roles(Role.ADMIN)
def list_users():
    q = User.query
    role_filter = request.args.get("role")
    if role_filter:
        role = Role.parse(role_filter)
        if role is None:
            return jsonify(error="Invalid role"), 400
        q = q.filter(User.role == role.value)

    users = q.order_by(User.created_at.desc()).limit(200).all()
    return jsonify([user_payload(u) for u in users]), 200


@admin_bp.post("/users/<int:user_id>/role")
@require_roles(Role.ADMIN)
def update_user_role(user_id: int):
    data = json_object()
    role = Role.parse(data.get("role"))
    if role is None:
        return jsonify(error=f"role must be one of {', '.join(r.value for r in Role)}"), 400

    user = db.session.get(User, user_id)
    if not user:
        return jsonify(error="User not found"), 404
    if user.id == g.user.id and role is not Role.ADMIN:
        return jsonify(error="Admins cannot demote themselves"), 400

    old = user.role
    user.role = role.value
    db.session.commit()

    log_event("ADMIN_USER_ROLE_UPDATE", user_id=g.user.id, entity="user", entity_id=user.id,
              metadata={"from": old, "to": role.value})
    return jsonify(user_payload(user)), 200


@admin_bp.get("/courts")
@require_roles(Role.ADMIN)
def list_courts():
    courts = Court.query.order_by(Court.id.asc()).all()
    return jsonify([court_payload(c) for c in courts]), 200


@admin_bp.post("/courts/<int:court_id>/status")
@require_roles(Role.ADMIN)
def update_court_status(court_id: int):
    status = (optional_text(json_object(), "status", 20) or "").lower()
    if status not in COURT_STATUSES:
        return jsonify(error=f"status must be one of {', '.join(COURT_STATUSES)}"), 400

    court = db.session.get(Court, court_id)
    if not court:
        return jsonify(error="Court not found"), 404

    court.status = status
    db.session.commit()

    log_event("ADMIN_COURT_STATUS_UPDATE", user_id=g.user.id, entity="court", entity_id=court.id,
              metadata={"status": status})
    return jsonify(court_payload(court)), 200


@admin_bp.get("/audit-logs")
@require_roles(Role.ADMIN)
def list_audit_logs():
    limit = max(1, min(request.args.get("limit", type=int) or 200, 500))
    action = request.args.get("action")
    user_id = request.args.get("user_id", type=int)

    q = AuditLog.query
    if action:
        q = q.filter(AuditLog.action == action.strip().upper())
    if user_id is not None:
        q = q.filter(AuditLog.user_id == user_id)

    rows = q.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).limit(limit).all()
    return jsonify([r.to_dict() for r in rows]), 200
