"""
Booking error taxonomy

Every error raised by the scheduling engine is terminal for the request:
nothing here is retried. The HTTP layer renders them through a single
exception handler registered in main.py.
"""


class BookingError(Exception):
    """Base class for user-visible booking errors"""

    status_code = 400
    kind = "booking_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"success": False, "error": self.kind, "message": self.message}


class ValidationError(BookingError):
    """A required field is missing or malformed"""

    status_code = 422
    kind = "validation_error"

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict:
        body = super().to_dict()
        if self.field:
            body["field"] = self.field
        return body


class NotFoundError(BookingError):
    """A referenced patient, provider, operatory, schedule or appointment does not exist"""

    status_code = 404
    kind = "not_found"


class InactiveResourceError(BookingError):
    """A provider or operatory exists but has been deactivated"""

    status_code = 400
    kind = "inactive_resource"


class ConflictError(BookingError):
    """The requested time overlaps an existing booking or schedule"""

    status_code = 409
    kind = "conflict"
