# marketplace_booking/core/exceptions.py
"""Domain errors raised by the booking services and mapped to HTTP responses in main.py"""


class BookingEngineError(Exception):
    """Base class for booking engine errors"""
    status_code = 400
    default_detail = "Booking request failed"

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(BookingEngineError):
    """Malformed availability rule, blocked date or booking request"""
    status_code = 422
    default_detail = "Invalid input"


class NotFoundError(BookingEngineError):
    status_code = 404
    default_detail = "Not found"


class AuthorizationError(BookingEngineError):
    """Caller does not own the resource or appointment"""
    status_code = 403
    default_detail = "You don't have access to this resource"


class DataUnavailableError(BookingEngineError):
    """Upstream read failed; availability is unknown and the call may be retried"""
    status_code = 503
    default_detail = "Availability data is temporarily unavailable, please retry"
    retryable = True


class ConflictError(BookingEngineError):
    """The slot was taken between reading availability and committing the booking"""
    status_code = 409
    default_detail = "This time was just booked, please choose another"


class InvalidStatusTransitionError(BookingEngineError):
    status_code = 409
    default_detail = "Appointment status cannot change this way"
