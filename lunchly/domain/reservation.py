from datetime import date, datetime, time, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from .errors import (
    CustomerChangeError,
    InvalidGuestCountError,
    InvalidStartAtError,
    TooFewGuestsError,
)

# Upper bound of the INTEGER column num_guests is stored in
MAX_GUESTS = 2**31 - 1


class ReservationDomain(BaseModel):
    """
    Pure Domain representation of a table Reservation.

    A reservation belongs to exactly one customer for its whole life. Party
    size and start time are checked on construction and on assignment, and
    the failures raise the typed errors from ``lunchly.domain.errors`` so
    the router can answer with the matching status code.

    Attributes:
        id (Optional[int]): Surrogate key, None until the first save.
        customer_id (int): Owning customer; cannot change once set.
        num_guests (int): Party size, at least 1.
        start_at (datetime): When the party arrives.
        notes (str): Free-form notes; never None.
    """

    id: Optional[int] = Field(None, description="Database-assigned identifier")
    customer_id: int = Field(..., description="Reference ID of the owning customer")
    num_guests: int = Field(..., description="Number of people in the party")
    start_at: datetime = Field(..., description="Reservation start date and time")
    notes: str = Field("", description="Free-form notes about the booking")

    @field_validator("num_guests", mode="before")
    @classmethod
    def validate_num_guests(cls, v: Any) -> int:
        """
        Coerces the party size to an integer of at least one.

        Raises:
            InvalidGuestCountError: If the value is not a whole number.
            TooFewGuestsError: If the value is lower than one.
        """
        if isinstance(v, bool) or (isinstance(v, float) and not v.is_integer()):
            raise InvalidGuestCountError("Number of guests must be a valid number")
        try:
            number = int(v.strip()) if isinstance(v, str) else int(v)
        except (TypeError, ValueError, OverflowError):
            raise InvalidGuestCountError("Number of guests must be a valid number") from None
        if number < 1:
            raise TooFewGuestsError("Must have at least 1 in your party to make a reservation")
        if number > MAX_GUESTS:
            raise InvalidGuestCountError("Number of guests must be a valid number")
        return number

    @field_validator("start_at", mode="before")
    @classmethod
    def validate_start_at(cls, v: Any) -> datetime:
        """
        Accepts a datetime, a date (midnight) or an ISO-8601 string such as
        the value of an HTML ``datetime-local`` input. Values with a UTC
        offset are converted to naive UTC, the form the store keeps.

        Raises:
            InvalidStartAtError: For anything that is not a valid date.
        """
        if isinstance(v, str):
            try:
                v = datetime.fromisoformat(v.strip())
            except ValueError:
                raise InvalidStartAtError("Not a valid startAt.") from None
        if isinstance(v, datetime):
            if v.tzinfo is not None and v.utcoffset() is not None:
                return v.astimezone(timezone.utc).replace(tzinfo=None)
            return v.replace(tzinfo=None)
        if isinstance(v, date):
            return datetime.combine(v, time())
        raise InvalidStartAtError("Not a valid startAt.")

    @field_validator("notes", mode="before")
    @classmethod
    def blank_notes_is_empty(cls, v: Any) -> str:
        return v or ""

    def __setattr__(self, name: str, value: Any) -> None:
        # customer_id is write-once; re-assigning the same value is a no-op
        if name == "customer_id" and self.customer_id is not None:
            try:
                same = not isinstance(value, bool) and int(value) == self.customer_id
            except (TypeError, ValueError):
                same = False
            if not same:
                raise CustomerChangeError("Cannot change customer ID")
        super().__setattr__(name, value)

    # --- Display helpers ---

    @property
    def formatted_start_at(self) -> str:
        """Returns the start time as e.g. 'October 19, 2026, 6:30 pm'."""
        hour = self.start_at.hour % 12 or 12
        meridiem = "am" if self.start_at.hour < 12 else "pm"
        return (
            f"{self.start_at:%B} {self.start_at.day}, {self.start_at.year}, "
            f"{hour}:{self.start_at:%M} {meridiem}"
        )

    @property
    def start_at_input(self) -> str:
        """Value for an HTML datetime-local input."""
        return self.start_at.strftime("%Y-%m-%dT%H:%M")

    model_config = {
        "validate_assignment": True,
        "json_schema_extra": {
            "example": {
                "customer_id": 1,
                "num_guests": 4,
                "start_at": "2026-10-19T18:30",
                "notes": "Birthday dinner"
            }
        }
    }
