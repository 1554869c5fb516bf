"""
Custom exceptions for the booking wizard and submission gateway.
Raised in wizard.py / gateway.py / client.py and caught in views.py and
api.py for clean error handling.
"""


class BookingError(Exception):
    """Base exception for all booking errors."""
    pass


class BookingValidationError(BookingError):
    """Raised when a required field or cross-field rule is unmet. No network call is made."""
    pass


class BookingInProgressError(BookingError):
    """Raised when a payment or submission is started while one is already in flight."""
    pass


class PaymentError(BookingError):
    """Raised when the (simulated) payment round trip fails. The user may retry."""
    pass


class SubmissionError(BookingError):
    """Base exception for failures while handing a booking to the API."""
    pass


class InvalidInputError(SubmissionError):
    """Raised when boundary-side re-validation rejects the payload."""

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.errors = list(errors or [])


class SubmissionTimeoutError(SubmissionError):
    """Raised when the booking API does not answer within BOOKING_API_TIMEOUT."""
    pass


class NetworkError(SubmissionError):
    """Raised when the booking API cannot be reached."""
    pass


class SubmissionRejectedError(SubmissionError):
    """Raised when the booking API answers with a non-success status."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code
