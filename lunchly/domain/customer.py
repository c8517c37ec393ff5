from pydantic import BaseModel, Field, field_validator
from typing import Any, Optional


def _capitalize(value: str) -> str:
    return value[:1].upper() + value[1:]


class CustomerDomain(BaseModel):
    """
    The pure domain representation of a restaurant Customer.

    Names are normalized to lower case on the way in, so searches and
    ordering in the store are case-insensitive, and are capitalized again
    for display. Validation runs on construction and on every attribute
    assignment, so an edited customer is normalized exactly like a new one.

    Attributes:
        id (Optional[int]): Surrogate key, None until the first save.
        first_name (str): Lower-cased given name.
        middle_name (Optional[str]): Lower-cased middle name, if any.
        last_name (str): Lower-cased family name.
        phone (Optional[str]): Contact number; blank input is stored as None.
        notes (str): Free-form notes; never None.
    """

    id: Optional[int] = Field(None, description="Database-assigned identifier")
    first_name: str = Field(..., description="The customer's given name")
    middle_name: Optional[str] = Field(None, description="The customer's middle name")
    last_name: str = Field(..., description="The customer's family name")
    phone: Optional[str] = Field(None, description="Contact phone number")
    notes: str = Field("", description="Free-form notes about the customer")

    @field_validator("first_name", "last_name")
    @classmethod
    def normalize_required_name(cls, v: str) -> str:
        """
        Lower-cases a required name and rejects blank values.

        Raises:
            ValueError: If the name is empty or only whitespace.
        """
        v = v.strip().lower()
        if not v:
            raise ValueError("name must not be empty")
        return v

    @field_validator("middle_name", mode="before")
    @classmethod
    def normalize_middle_name(cls, v: Any) -> Optional[str]:
        if not v:
            return None
        return str(v).strip().lower() or None

    @field_validator("phone", mode="before")
    @classmethod
    def blank_phone_is_none(cls, v: Any) -> Optional[str]:
        if not v:
            return None
        return str(v).strip() or None

    @field_validator("notes", mode="before")
    @classmethod
    def blank_notes_is_empty(cls, v: Any) -> str:
        return v or ""

    # --- Display helpers ---

    @property
    def display_first_name(self) -> str:
        return _capitalize(self.first_name)

    @property
    def display_middle_name(self) -> str:
        return _capitalize(self.middle_name) if self.middle_name else ""

    @property
    def display_last_name(self) -> str:
        return _capitalize(self.last_name)

    @property
    def full_name(self) -> str:
        """Returns 'First Middle Last', leaving out the middle name when absent."""
        if self.middle_name:
            return f"{self.display_first_name} {self.display_middle_name} {self.display_last_name}"
        return f"{self.display_first_name} {self.display_last_name}"

    model_config = {
        "validate_assignment": True,
        "json_schema_extra": {
            "example": {
                "first_name": "jane",
                "middle_name": None,
                "last_name": "doe",
                "phone": "555-0101",
                "notes": "Prefers a window table"
            }
        }
    }
