import logging
from typing import Any, List

from sqlmodel import Session, col, select

# Layer 4: Data Access
from lunchly.data_access.models import ReservationRecord

# Layer 3: Domain Entities
from lunchly.domain.errors import ReservationNotFoundError
from lunchly.domain.reservation import ReservationDomain

logger = logging.getLogger(__name__)

# Fields a reservation edit may overwrite; customer_id is write-once
EDITABLE_FIELDS = ("start_at", "num_guests", "notes")


class ReservationService:
    """
    Service layer for reservation queries and persistence.

    Every public method performs a single round trip through the session it
    was created with. Validation lives on ``ReservationDomain``; this layer
    only maps between domain entities and ``reservations`` rows.
    """

    def __init__(self, session: Session):
        """
        Initializes the ReservationService with a database session.

        Args:
            session (Session): The active SQLModel/SQLAlchemy session.
        """
        self.session = session

    def _get_record_or_raise(self, reservation_id: int) -> ReservationRecord:
        record = self.session.get(ReservationRecord, reservation_id)
        if record is None:
            raise ReservationNotFoundError(reservation_id)
        return record

    def _map_to_domain(self, record: ReservationRecord) -> ReservationDomain:
        return ReservationDomain(
            id=record.id,
            customer_id=record.customer_id,
            num_guests=record.num_guests,
            start_at=record.start_at,
            notes=record.notes
        )

    def for_customer(self, customer_id: int) -> List[ReservationDomain]:
        """
        Retrieves every reservation held by one customer.

        Args:
            customer_id (int): The owning customer's ID.

        Returns:
            List[ReservationDomain]: Reservations ordered by start time.
        """
        statement = (
            select(ReservationRecord)
            .where(ReservationRecord.customer_id == customer_id)
            .order_by(col(ReservationRecord.start_at), col(ReservationRecord.id))
        )
        return [self._map_to_domain(r) for r in self.session.exec(statement).all()]

    def get(self, reservation_id: int) -> ReservationDomain:
        """
        Retrieves a single reservation by its database ID.

        Raises:
            ReservationNotFoundError: If no row has this ID.
        """
        return self._map_to_domain(self._get_record_or_raise(reservation_id))

    def save(self, reservation: ReservationDomain) -> ReservationDomain:
        """
        Inserts a new reservation or updates an existing one by ID.

        On insert the database-assigned ID is written back onto ``reservation``.

        Raises:
            ReservationNotFoundError: If an update targets a row that no longer exists.
        """
        data = reservation.model_dump(exclude={"id"})

        if reservation.id is None:
            record = ReservationRecord(**data)
            self.session.add(record)
            self.session.commit()
            self.session.refresh(record)
            reservation.id = record.id
            logger.info(f"Created reservation {record.id} for customer {reservation.customer_id}")
            return reservation

        record = self._get_record_or_raise(reservation.id)
        for key, value in data.items():
            setattr(record, key, value)
        self.session.add(record)
        self.session.commit()
        logger.info(f"Updated reservation {reservation.id}")
        return reservation

    def update(self, reservation_id: int, changes: dict[str, Any]) -> ReservationDomain:
        """
        Applies form edits to a stored reservation and saves it.

        Each field goes through the domain validators, so a bad party size
        or date raises before anything is written.

        Args:
            reservation_id (int): The reservation to edit.
            changes (dict[str, Any]): New values keyed by field name; keys
                outside start_at, num_guests and notes are ignored.

        Returns:
            ReservationDomain: The saved reservation.
        """
        reservation = self.get(reservation_id)
        for key in EDITABLE_FIELDS:
            if key in changes:
                setattr(reservation, key, changes[key])
        return self.save(reservation)
