"""Fixed daily slot grid for the club's courts.

Slots are one hour long and start on the hour between opening and closing.
Whether a slot is prime time depends only on its start hour.
"""
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple

SLOT_MINUTES = 60

OPENING_HOUR = 8    # first slot 08:00
CLOSING_HOUR = 22   # last slot 21:00-22:00

# half-open [start, end) hour ranges
PRIME_TIME_WINDOWS: Tuple[Tuple[int, int], ...] = ((8, 12), (15, 18))


@dataclass(frozen=True)
class TimeSlot:
    start_time: time
    is_prime_time: bool

    @property
    def end_time(self) -> time:
        end = datetime.combine(date.min, self.start_time) + timedelta(minutes=SLOT_MINUTES)
        return end.time()

    def label(self) -> str:
        return self.start_time.strftime("%H:%M")


def is_prime_time(start: time, windows: Iterable[Sequence[int]] = PRIME_TIME_WINDOWS) -> bool:
    return any(lo <= start.hour < hi for lo, hi in windows)


def build_slot_grid(
    opening_hour: int = OPENING_HOUR,
    closing_hour: int = CLOSING_HOUR,
    prime_windows: Iterable[Sequence[int]] = PRIME_TIME_WINDOWS,
) -> List[TimeSlot]:
    if not 0 <= opening_hour < closing_hour <= 24:
        raise ValueError("opening_hour must be before closing_hour within a day")
    windows = [tuple(w) for w in prime_windows]
    return [
        TimeSlot(start_time=time(hour, 0), is_prime_time=is_prime_time(time(hour, 0), windows))
        for hour in range(opening_hour, closing_hour)
    ]


def parse_start_time(value) -> Optional[time]:
    """Accepts "HH:MM", "HH:MM:SS" or a time; returns None when unparseable."""
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        return None
    try:
        return time.fromisoformat(value.strip())
    except ValueError:
        return None


def slot_start(booking_date: date, start: time) -> datetime:
    return datetime.combine(booking_date, start)
