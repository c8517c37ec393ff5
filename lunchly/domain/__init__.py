# lunchly/domain/__init__.py

# 1. The Anchor Entity
from .customer import CustomerDomain

# 2. Bookings
from .reservation import ReservationDomain

# 3. Error taxonomy
from .errors import (
    CustomerChangeError,
    CustomerNotFoundError,
    InvalidGuestCountError,
    InvalidStartAtError,
    LunchlyError,
    NotFoundError,
    ReservationNotFoundError,
    ReservationValidationError,
    TooFewGuestsError,
)


__all__ = [
    "CustomerChangeError",
    "CustomerDomain",
    "CustomerNotFoundError",
    "InvalidGuestCountError",
    "InvalidStartAtError",
    "LunchlyError",
    "NotFoundError",
    "ReservationDomain",
    "ReservationNotFoundError",
    "ReservationValidationError",
    "TooFewGuestsError"
]
