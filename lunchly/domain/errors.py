"""
Error taxonomy shared by the domain entities, the services and the router.

Every error carries the HTTP status the router should answer with. The
classes derive from ``Exception`` rather than ``ValueError`` so that pydantic
validators let them through unchanged instead of folding them into a
``ValidationError``.
"""

from typing import Union


class LunchlyError(Exception):
    """Base class for all application errors."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# --- Client input ---

class ReservationValidationError(LunchlyError):
    """A reservation field was rejected at assignment time."""

    status_code = 400


class InvalidGuestCountError(ReservationValidationError):
    status_code = 400


class TooFewGuestsError(ReservationValidationError):
    status_code = 422


class InvalidStartAtError(ReservationValidationError):
    status_code = 400


class CustomerChangeError(LunchlyError):
    """Raised when a reservation is moved to a different customer."""

    status_code = 400


# --- Lookups ---

class NotFoundError(LunchlyError):
    status_code = 404


class CustomerNotFoundError(NotFoundError):
    def __init__(self, customer_id: Union[int, str]) -> None:
        super().__init__(f"Customer {customer_id} not found")
        self.customer_id = customer_id


class ReservationNotFoundError(NotFoundError):
    def __init__(self, reservation_id: Union[int, str]) -> None:
        super().__init__(f"Reservation {reservation_id} not found")
        self.reservation_id = reservation_id
