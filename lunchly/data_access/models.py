from typing import Optional
from sqlmodel import Field, SQLModel
from pydantic import NaiveDatetime

# --- Tables ---

class CustomerRecord(SQLModel, table=True):
    # Names are persisted lower-cased; display casing is a domain concern
    __tablename__ = "customers"
    id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str = Field(index=True)
    middle_name: Optional[str] = None
    last_name: str = Field(index=True)
    phone: Optional[str] = None
    notes: str = ""

class ReservationRecord(SQLModel, table=True):
    __tablename__ = "reservations"
    id: Optional[int] = Field(default=None, primary_key=True)
    customer_id: int = Field(foreign_key="customers.id", index=True)
    num_guests: int
    # Stored as wall-clock time; the domain converts offsets to UTC first
    start_at: NaiveDatetime
    notes: str = ""
