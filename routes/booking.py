from datetime import date
from sqlalchemy.exc import IntegrityError

from flask import Blueprint, request, jsonify, current_app, g
from models import db
from models.court import Court
from models.booking import Booking
from services.availability import cancel_booking, compute_availability, validate_booking_request
from services.booking_status import BookingStatus
from services.errors import BookingError, CourtUnavailableError, SlotAlreadyBookedError
from services.slots import parse_start_time
from utils.auth_context import login_required
from utils.audit import log_event
from utils.booking_context import current_now, current_policy
from utils.payloads import booking_payload, court_payload
from utils.request_data import json_object, optional_text

booking_bp = Blueprint("booking", __name__)

BOOKING_FILTERS = ("all", "upcoming", "past", "cancelled")


def _parse_date(value):
    # Expect ISO format like "2026-01-20"
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def _court_id(source):
    raw = source.get("court_id", source.get("court"))
    if isinstance(raw, bool):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def active_bookings_for(court_id: int, day: date):
    return (
        Booking.query
        .filter(
            Booking.court_id == court_id,
            Booking.booking_date == day,
            Booking.status != BookingStatus.CANCELLED.value,
        )
        .all()
    )


def _error(err: BookingError):
    return jsonify(err.to_dict()), err.status_code


# ---------- PUBLIC: courts and availability ----------
@booking_bp.get("/courts")
def list_courts():
    courts = Court.query.order_by(Court.id.asc()).all()
    return jsonify([court_payload(c) for c in courts]), 200


@booking_bp.get("/availability")
def availability():
    court_id = _court_id(request.args)
    day = _parse_date(request.args.get("date"))
    if court_id is None:
        return jsonify(error="court_id required"), 400
    if day is None:
        return jsonify(error="Invalid date. Use YYYY-MM-DD"), 400

    court = db.session.get(Court, court_id)
    if not court:
        return jsonify(error="Court not found"), 404

    views = compute_availability(
        court.id, day, active_bookings_for(court.id, day), current_now(), current_policy()
    )
    return jsonify([v.to_dict(court.is_bookable) for v in views]), 200


# ---------- MEMBERS: book slot (DOUBLE-BOOKING SAFE) ----------
@booking_bp.post("/bookings")
@login_required
def create_booking():
    data = json_object()
    notes = optional_text(data, "notes", 500)
    court_id = _court_id(data)
    day = _parse_date(data.get("date"))
    start = parse_start_time(data.get("start_time"))

    if court_id is None or day is None or start is None:
        return jsonify(error="court_id, date (YYYY-MM-DD) and start_time (HH:MM) are required"), 400

    court = db.session.get(Court, court_id)
    if not court:
        return jsonify(error="Court not found"), 404

    try:
        if not court.is_bookable:
            raise CourtUnavailableError(f"{court.name} is {court.status}")
        draft = validate_booking_request(
            court.id, day, start, g.user.id, current_now(),
            active_bookings_for(court.id, day), current_policy(),
        )
    except BookingError as err:
        log_event(
            "BOOKING_REJECTED", user_id=g.user.id, entity="court", entity_id=court.id,
            metadata={"code": err.code, "date": day, "start_time": start},
        )
        return _error(err)

    booking = Booking(
        user_id=draft.user_id,
        court_id=draft.court_id,
        booking_date=draft.booking_date,
        start_time=draft.start_time,
        duration_minutes=draft.duration_minutes,
        is_prime_time=draft.is_prime_time,
        status=draft.status,
        notes=notes,
    )
    db.session.add(booking)

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        # Partial unique index uq_bookings_active_slot triggers here
        log_event(
            "BOOKING_FAIL_ALREADY_BOOKED", user_id=g.user.id, entity="court", entity_id=court.id,
            metadata={"date": day, "start_time": start},
        )
        return _error(SlotAlreadyBookedError())

    log_event("BOOKING_CREATE", user_id=g.user.id, entity="booking", entity_id=booking.id,
              metadata={"court_id": court.id, "date": day, "start_time": start})
    current_app.logger.info("Booking %s created for court %s on %s %s", booking.id, court.id, day, start)
    return jsonify(booking_payload(booking, court)), 201


# ---------- MEMBERS: view my bookings ----------
@booking_bp.get("/bookings/me")
@login_required
def my_bookings():
    which = (request.args.get("filter") or "all").strip().lower()
    if which not in BOOKING_FILTERS:
        return jsonify(error=f"filter must be one of {', '.join(BOOKING_FILTERS)}"), 400

    now = current_now()
    today, hour = now.date(), now.time()

    q = Booking.query.filter_by(user_id=g.user.id)
    if which == "cancelled":
        q = q.filter(Booking.status == BookingStatus.CANCELLED.value)
    elif which in ("upcoming", "past"):
        q = q.filter(Booking.status != BookingStatus.CANCELLED.value)

    rows = q.order_by(Booking.booking_date.desc(), Booking.start_time.desc()).all()
    if which == "upcoming":
        rows = [b for b in rows if (b.booking_date, b.start_time) > (today, hour)]
    elif which == "past":
        rows = [b for b in rows if (b.booking_date, b.start_time) <= (today, hour)]

    return jsonify([booking_payload(b) for b in rows]), 200


# ---------- MEMBERS: cancel booking (policy window) ----------
@booking_bp.delete("/bookings/<int:booking_id>")
@login_required
def delete_booking(booking_id: int):
    reason = optional_text(json_object(), "reason", 120)

    booking = db.session.get(Booking, booking_id)
    try:
        cancel_booking(booking_id, g.user.id, current_now(), booking, current_policy(), reason=reason)
    except BookingError as err:
        return _error(err)

    db.session.commit()

    log_event("BOOKING_CANCEL", user_id=g.user.id, entity="booking", entity_id=booking.id, metadata={"reason": reason})
    return jsonify(message="Cancelled", booking=booking_payload(booking)), 200
