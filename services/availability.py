"""Slot availability and booking validation.

Everything here is a pure function of its arguments: the current instant is
passed in as `now` (naive, club-local wall clock) and existing bookings are
passed in as plain objects exposing ``court_id``, ``booking_date``,
``start_time``, ``duration_minutes`` and ``status``. Persistence and the
final uniqueness check belong to the caller.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from services import slots as grid
from services.booking_status import BookingStatus, is_active, transition
from services.errors import (
    AdvanceNoticeError,
    CancellationWindowError,
    InvalidSlotError,
    InvalidStatusTransitionError,
    NotFoundError,
    SlotAlreadyBookedError,
    SlotInPastError,
)


# a new booking either waits for an admin or is confirmed straight away
INITIAL_STATUSES = frozenset({BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value})


class SlotState(str, Enum):
    AVAILABLE = "available"
    BOOKED = "booked"
    PAST = "past"


@dataclass(frozen=True)
class BookingPolicy:
    opening_hour: int = grid.OPENING_HOUR
    closing_hour: int = grid.CLOSING_HOUR
    prime_time_windows: Tuple[Tuple[int, int], ...] = grid.PRIME_TIME_WINDOWS
    advance_notice_hours: int = 24
    cancellation_window_hours: int = 2
    enforce_advance_notice: bool = True
    enforce_cancellation_window: bool = True
    initial_status: str = BookingStatus.PENDING.value

    def __post_init__(self):
        if self.initial_status not in INITIAL_STATUSES:
            raise ValueError(
                f"initial_status must be one of {', '.join(sorted(INITIAL_STATUSES))}, got {self.initial_status!r}"
            )

    @classmethod
    def from_config(cls, config: Mapping) -> "BookingPolicy":
        defaults = cls()
        windows = config.get("PRIME_TIME_WINDOWS", defaults.prime_time_windows)
        return cls(
            opening_hour=int(config.get("OPENING_HOUR", defaults.opening_hour)),
            closing_hour=int(config.get("CLOSING_HOUR", defaults.closing_hour)),
            prime_time_windows=tuple((int(lo), int(hi)) for lo, hi in windows),
            advance_notice_hours=int(config.get("ADVANCE_NOTICE_HOURS", defaults.advance_notice_hours)),
            cancellation_window_hours=int(
                config.get("CANCELLATION_WINDOW_HOURS", defaults.cancellation_window_hours)
            ),
            enforce_advance_notice=bool(config.get("ENFORCE_ADVANCE_NOTICE", defaults.enforce_advance_notice)),
            enforce_cancellation_window=bool(
                config.get("ENFORCE_CANCELLATION_WINDOW", defaults.enforce_cancellation_window)
            ),
            initial_status=str(config.get("BOOKING_INITIAL_STATUS", defaults.initial_status)).strip().lower(),
        )

    def slot_grid(self) -> List[grid.TimeSlot]:
        return grid.build_slot_grid(self.opening_hour, self.closing_hour, self.prime_time_windows)


DEFAULT_POLICY = BookingPolicy()


@dataclass(frozen=True)
class SlotAvailability:
    start_time: time
    end_time: time
    state: SlotState
    is_prime_time: bool

    @property
    def selectable(self) -> bool:
        return self.state is SlotState.AVAILABLE

    def to_dict(self, court_open: bool = True) -> dict:
        # a closed court keeps its states but offers nothing to book
        return {
            "start_time": self.start_time.strftime("%H:%M"),
            "end_time": self.end_time.strftime("%H:%M"),
            "state": self.state.value,
            "is_prime_time": self.is_prime_time,
            "selectable": self.selectable and court_open,
        }


@dataclass
class BookingDraft:
    """A validated booking that has not been stored yet."""

    court_id: int
    booking_date: date
    start_time: time
    user_id: int
    status: str
    is_prime_time: bool
    duration_minutes: int = grid.SLOT_MINUTES
    id: Optional[int] = None
    cancelled_at: Optional[datetime] = field(default=None, repr=False)
    cancel_reason: Optional[str] = field(default=None, repr=False)


def _interval(booking_date: date, start: time, minutes: int) -> Tuple[datetime, datetime]:
    begin = grid.slot_start(booking_date, start)
    return begin, begin + timedelta(minutes=minutes)


def _occupied_intervals(court_id, booking_date: date, bookings: Iterable) -> List[Tuple[datetime, datetime]]:
    out = []
    for b in bookings:
        if b.court_id != court_id or b.booking_date != booking_date or not is_active(b.status):
            continue
        minutes = getattr(b, "duration_minutes", None) or grid.SLOT_MINUTES
        out.append(_interval(b.booking_date, b.start_time, minutes))
    return out


def _is_past(booking_date: date, start: time, now: datetime) -> bool:
    today = now.date()
    if booking_date < today:
        return True
    if booking_date > today:
        return False
    return start.hour <= now.hour


def compute_availability(
    court_id,
    booking_date: date,
    existing_bookings: Iterable,
    now: datetime,
    policy: BookingPolicy = DEFAULT_POLICY,
) -> List[SlotAvailability]:
    """Classify every slot of the day for one court.

    Evaluated in order: past, then booked, then available.
    """
    occupied = _occupied_intervals(court_id, booking_date, existing_bookings)

    result = []
    for slot in policy.slot_grid():
        start, end = _interval(booking_date, slot.start_time, grid.SLOT_MINUTES)
        if _is_past(booking_date, slot.start_time, now):
            state = SlotState.PAST
        elif any(b_start < end and start < b_end for b_start, b_end in occupied):
            state = SlotState.BOOKED
        else:
            state = SlotState.AVAILABLE
        result.append(SlotAvailability(slot.start_time, slot.end_time, state, slot.is_prime_time))
    return result


def validate_booking_request(
    court_id,
    booking_date: date,
    start_time: time,
    requester_id,
    now: datetime,
    existing_bookings: Sequence,
    policy: BookingPolicy = DEFAULT_POLICY,
) -> BookingDraft:
    if not isinstance(start_time, time):
        raise InvalidSlotError()

    views = compute_availability(court_id, booking_date, existing_bookings, now, policy)
    view = next((v for v in views if v.start_time == start_time), None)
    if view is None:
        first, last = views[0].start_time, views[-1].start_time
        raise InvalidSlotError(
            f"Slots start on the hour between {first:%H:%M} and {last:%H:%M}"
        )

    if view.state is SlotState.PAST:
        raise SlotInPastError()
    if view.state is SlotState.BOOKED:
        raise SlotAlreadyBookedError()

    if policy.enforce_advance_notice:
        lead = grid.slot_start(booking_date, start_time) - now
        if lead < timedelta(hours=policy.advance_notice_hours):
            raise AdvanceNoticeError(
                f"Bookings must be made at least {policy.advance_notice_hours} hours in advance"
            )

    return BookingDraft(
        court_id=court_id,
        booking_date=booking_date,
        start_time=start_time,
        user_id=requester_id,
        status=policy.initial_status,
        is_prime_time=view.is_prime_time,
    )


def cancel_booking(
    booking_id,
    requester_id,
    now: datetime,
    booking,
    policy: BookingPolicy = DEFAULT_POLICY,
    reason: str = None,
):
    """Cancel a member's own booking, returning it with status cancelled.

    A booking owned by someone else is reported exactly like a missing one.
    """
    if booking is None or booking.id != booking_id or booking.user_id != requester_id:
        raise NotFoundError()

    if not is_active(booking.status) or booking.status == BookingStatus.COMPLETED.value:
        raise InvalidStatusTransitionError("Booking not cancellable")

    if policy.enforce_cancellation_window:
        lead = grid.slot_start(booking.booking_date, booking.start_time) - now
        if lead < timedelta(hours=policy.cancellation_window_hours):
            raise CancellationWindowError(
                f"Cancellation not allowed within {policy.cancellation_window_hours} hours of start"
            )

    return transition(booking, BookingStatus.CANCELLED, now, reason=reason)
