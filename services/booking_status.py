from datetime import datetime
from enum import Enum

from services.errors import InvalidStatusTransitionError


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.CANCELLED: set(),
    BookingStatus.COMPLETED: set(),
}


def is_active(status) -> bool:
    """Anything but a cancelled booking still holds its slot."""
    return BookingStatus(status) is not BookingStatus.CANCELLED


def can_transition(current, new) -> bool:
    return BookingStatus(new) in ALLOWED_TRANSITIONS[BookingStatus(current)]


def transition(booking, new_status, now: datetime, reason: str = None):
    """Move `booking` to `new_status` in place and return it.

    Raises InvalidStatusTransitionError for anything outside
    pending -> confirmed -> completed and pending|confirmed -> cancelled.
    """
    current = BookingStatus(booking.status)
    target = BookingStatus(new_status)
    if target not in ALLOWED_TRANSITIONS[current]:
        raise InvalidStatusTransitionError(
            f"Booking is {current.value} and cannot become {target.value}"
        )

    booking.status = target.value
    if target is BookingStatus.CANCELLED:
        booking.cancelled_at = now
        booking.cancel_reason = reason
    return booking
