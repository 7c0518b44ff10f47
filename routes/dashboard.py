from flask import Blueprint, jsonify, g
from sqlalchemy import func

from models import db
from models.booking import Booking
from models.court import Court
from models.user import User
from routes.booking import active_bookings_for
from services.availability import compute_availability
from services.booking_status import BookingStatus
from utils.auth_context import login_required
from utils.booking_context import current_now, current_policy
from utils.payloads import booking_payload, court_payload
from utils.roles import Role, dashboard_path

dashboard_bp = Blueprint("dashboard", __name__)


def _member_summary(user, now):
    rows = (
        Booking.query
        .filter(Booking.user_id == user.id, Booking.status != BookingStatus.CANCELLED.value)
        .order_by(Booking.booking_date.asc(), Booking.start_time.asc())
        .all()
    )
    upcoming = [b for b in rows if (b.booking_date, b.start_time) > (now.date(), now.time())]
    return {
        "upcoming_bookings": [booking_payload(b) for b in upcoming[:10]],
        "upcoming_count": len(upcoming),
        "played_count": len(rows) - len(upcoming),
    }


def _coach_summary(user, now):
    # today's grid across all courts, for planning lessons
    policy = current_policy()
    today = now.date()
    schedule = []
    for court in Court.query.order_by(Court.id.asc()).all():
        views = compute_availability(court.id, today, active_bookings_for(court.id, today), now, policy)
        schedule.append({
            "court": court_payload(court),
            "slots": [v.to_dict(court.is_bookable) for v in views],
            "free_slots": sum(1 for v in views if v.selectable) if court.is_bookable else 0,
        })
    return {"date": today.isoformat(), "schedule": schedule}


def _admin_summary(user, now):
    by_status = dict(
        db.session.query(Booking.status, func.count(Booking.id)).group_by(Booking.status).all()
    )
    by_role = dict(db.session.query(User.role, func.count(User.id)).group_by(User.role).all())
    todays = (
        Booking.query
        .filter(Booking.booking_date == now.date(), Booking.status != BookingStatus.CANCELLED.value)
        .count()
    )
    return {
        "bookings_by_status": {s.value: by_status.get(s.value, 0) for s in BookingStatus},
        "users_by_role": {r.value: by_role.get(r.value, 0) for r in Role},
        "bookings_today": todays,
        "courts": [court_payload(c) for c in Court.query.order_by(Court.id.asc()).all()],
    }


SUMMARIES = {
    Role.MEMBER: _member_summary,
    Role.COACH: _coach_summary,
    Role.ADMIN: _admin_summary,
}


@dashboard_bp.get("/dashboard")
@login_required
def dashboard():
    summary = SUMMARIES[g.role](g.user, current_now())
    return jsonify(role=g.role.value, path=dashboard_path(g.role), summary=summary), 200
