"""
Custom exceptions for the application.
Following SOLID principles - centralized error handling.

Every domain failure raised by the services derives from ``ClinicError`` and
carries the HTTP status the boundary layer reports it with.
"""


class ClinicError(Exception):
    """Base class for domain failures with a human-readable message."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"message": self.message}


class NotFoundError(ClinicError):
    """A referenced entity id does not resolve."""

    status_code = 404


class InvalidStateError(ClinicError):
    """The operation is not permitted given the current entity state."""

    pass


class ConflictError(ClinicError):
    """Uniqueness or double-booking violation."""

    pass


class InsufficientStockError(ClinicError):
    """A stock deduction exceeds the available quantity."""

    def __init__(self, medicine_name: str, available: int):
        super().__init__(
            f"Insufficient stock for {medicine_name}. Available: {available}."
        )
        self.medicine_name = medicine_name
        self.available = available


class ValidationError(ClinicError, ValueError):
    """Request payload failed field validation before reaching the services."""

    pass


DOUBLE_BOOKING_MESSAGE = "Doctor already has an appointment at this time."
DUPLICATE_NAME_MESSAGE = "Medicine with the same name already exists."
