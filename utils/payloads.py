def court_payload(c):
    return {
        "id": c.id,
        "name": c.name,
        "surface": c.surface,
        "description": c.description,
        "status": c.status,
    }


def booking_payload(b, court=None):
    court = court or b.court
    return {
        "id": b.id,
        "user_id": b.user_id,
        "court_id": b.court_id,
        "court_name": court.name if court else None,
        "date": b.booking_date.isoformat(),
        "start_time": b.start_time.strftime("%H:%M"),
        "duration_minutes": b.duration_minutes,
        "is_prime_time": b.is_prime_time,
        "status": b.status,
        "created_at": b.created_at.isoformat() if b.created_at else None,
        "cancelled_at": b.cancelled_at.isoformat() if b.cancelled_at else None,
        "cancel_reason": b.cancel_reason,
    }


def user_payload(u):
    return {
        "id": u.id,
        "email": u.email,
        "full_name": u.full_name,
        "phone_number": u.phone_number,
        "role": u.role,
        "created_at": u.created_at.isoformat() if u.created_at else None,
    }
