from typing import Optional


class DineWithUsError(Exception):
    """Base class for errors raised by the booking companion."""

    code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class InvalidDateError(DineWithUsError, ValueError):
    """The dinner start time could not be parsed."""

    code = "INVALID_DATE"


class InvalidAmountError(DineWithUsError, ValueError):
    """The booking amount is negative, NaN, infinite or not a number."""

    code = "INVALID_AMOUNT"


class BackendError(DineWithUsError):
    """
    The booking backend rejected a request or could not be reached.
    `status_code` is None for transport failures.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message, code or ("NETWORK_ERROR" if status_code is None else "BACKEND_ERROR"))
        self.status_code = status_code


class BookingNotFoundError(DineWithUsError):
    """The booking is not in the viewer's list."""

    code = "BOOKING_NOT_FOUND"


class BookingActionError(DineWithUsError):
    """The action is not open to this viewer in the booking's current status."""

    code = "ACTION_NOT_ALLOWED"
