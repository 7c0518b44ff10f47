from datetime import datetime
from models.db import db

class Booking(db.Model):
    __tablename__ = "bookings"

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    court_id = db.Column(db.Integer, db.ForeignKey("courts.id"), nullable=False, index=True)

    booking_date = db.Column(db.Date, nullable=False, index=True)
    start_time = db.Column(db.Time, nullable=False)
    duration_minutes = db.Column(db.Integer, nullable=False, default=60)
    is_prime_time = db.Column(db.Boolean, nullable=False, default=False)

    status = db.Column(db.String(20), nullable=False, default="pending")
    # status values: pending, confirmed, cancelled, completed

    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    cancelled_at = db.Column(db.DateTime, nullable=True)
    cancel_reason = db.Column(db.String(120), nullable=True)

    court = db.relationship("Court")
    user = db.relationship("User", back_populates="bookings")

    __table_args__ = (
        # One active booking per court slot; cancelled rows free the slot again
        db.Index(
            "uq_bookings_active_slot",
            "court_id", "booking_date", "start_time",
            unique=True,
            sqlite_where=db.text("status != 'cancelled'"),
            postgresql_where=db.text("status != 'cancelled'"),
        ),
    )
