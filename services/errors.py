class BookingError(Exception):
    """Base class for booking rule violations; routes answer them as JSON errors."""

    code = "BOOKING_ERROR"
    status_code = 400
    default_message = "Booking request rejected"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.code}


class InvalidSlotError(BookingError):
    code = "INVALID_SLOT"
    default_message = "Requested time is not a bookable slot"


class SlotInPastError(BookingError):
    code = "SLOT_IN_PAST"
    default_message = "Cannot book past/started slots"


class SlotAlreadyBookedError(BookingError):
    code = "SLOT_ALREADY_BOOKED"
    status_code = 409
    default_message = "Slot already booked"


class AdvanceNoticeError(BookingError):
    code = "ADVANCE_NOTICE"
    default_message = "Bookings must be made further in advance"


class CancellationWindowError(BookingError):
    code = "CANCELLATION_WINDOW"
    status_code = 403
    default_message = "Cancellation window has passed"


class NotFoundError(BookingError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Booking not found"


class InvalidStatusTransitionError(BookingError):
    code = "INVALID_STATUS_TRANSITION"
    default_message = "Booking status cannot change that way"


class CourtUnavailableError(BookingError):
    code = "COURT_UNAVAILABLE"
    status_code = 409
    default_message = "Court is not open for bookings"
