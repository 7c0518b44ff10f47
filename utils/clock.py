from datetime import datetime
from zoneinfo import ZoneInfo


def club_now(tz_name: str) -> datetime:
    """Current club-local wall-clock time as a naive datetime.

    Booking dates and slot times are stored as local times, so comparisons
    happen in that frame.
    """
    return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)
