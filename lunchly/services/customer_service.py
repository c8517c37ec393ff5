import logging
from typing import Any, List

from sqlalchemy import func
from sqlmodel import Session, col, or_, select

# Layer 4: Data Access
from lunchly.data_access.models import CustomerRecord, ReservationRecord

# Layer 3: Domain Entities
from lunchly.domain.customer import CustomerDomain
from lunchly.domain.errors import CustomerNotFoundError
from lunchly.domain.reservation import ReservationDomain

# Layer 2: Collaborators
from lunchly.services.reservation_service import ReservationService

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("first_name", "middle_name", "last_name", "phone", "notes")


class CustomerService:
    """
    Service layer for customer queries and persistence.

    This service acts as the intermediary between the HTML routes and the
    ``customers`` table. Names are stored lower-cased by ``CustomerDomain``,
    which is what makes the ordering and prefix search here case-insensitive.
    """

    def __init__(self, session: Session):
        """
        Initializes the CustomerService with a database session.

        Args:
            session (Session): The active SQLModel/SQLAlchemy session.
        """
        self.session = session

    def _get_record_or_raise(self, customer_id: int) -> CustomerRecord:
        """
        Internal helper to retrieve a customer row or raise a not-found error.

        Raises:
            CustomerNotFoundError: If the customer does not exist.
        """
        record = self.session.get(CustomerRecord, customer_id)
        if record is None:
            raise CustomerNotFoundError(customer_id)
        return record

    def _map_to_domain(self, record: CustomerRecord) -> CustomerDomain:
        return CustomerDomain(
            id=record.id,
            first_name=record.first_name,
            middle_name=record.middle_name,
            last_name=record.last_name,
            phone=record.phone,
            notes=record.notes
        )

    def _ordered(self, statement):
        return statement.order_by(col(CustomerRecord.last_name), col(CustomerRecord.first_name))

    def all_customers(self) -> List[CustomerDomain]:
        """
        Retrieves every customer, ordered by last name then first name.

        Returns:
            List[CustomerDomain]: All customers in the database.
        """
        statement = self._ordered(select(CustomerRecord))
        return [self._map_to_domain(c) for c in self.session.exec(statement).all()]

    def search(self, term: str) -> List[CustomerDomain]:
        """
        Finds customers whose first or last name starts with ``term``.

        The match is case-insensitive and LIKE wildcards in the term are
        treated literally. A blank term lists everyone.

        Args:
            term (str): The name prefix typed by the user.

        Returns:
            List[CustomerDomain]: Matches ordered by last name then first name.
        """
        prefix = (term or "").strip().lower()
        if not prefix:
            return self.all_customers()

        statement = self._ordered(
            select(CustomerRecord).where(
                or_(
                    col(CustomerRecord.first_name).startswith(prefix, autoescape=True),
                    col(CustomerRecord.last_name).startswith(prefix, autoescape=True),
                )
            )
        )
        return [self._map_to_domain(c) for c in self.session.exec(statement).all()]

    def top_reservation_holders(self, limit: int = 10) -> List[CustomerDomain]:
        """
        Retrieves the customers holding the most reservations.

        Customers without any reservation are not listed. The count drives
        the ordering only and is not returned.

        Args:
            limit (int): Maximum number of customers to return.

        Returns:
            List[CustomerDomain]: Customers by descending reservation count.
        """
        reservation_count = func.count(ReservationRecord.id)
        statement = (
            select(CustomerRecord)
            .join(ReservationRecord, ReservationRecord.customer_id == CustomerRecord.id)
            .group_by(CustomerRecord.id)
            .order_by(
                reservation_count.desc(),
                col(CustomerRecord.last_name),
                col(CustomerRecord.first_name),
            )
            .limit(limit)
        )
        return [self._map_to_domain(c) for c in self.session.exec(statement).all()]

    def get(self, customer_id: int) -> CustomerDomain:
        """
        Retrieves a single customer by their database ID.

        Raises:
            CustomerNotFoundError: If the customer is not found.
        """
        return self._map_to_domain(self._get_record_or_raise(customer_id))

    def list_reservations(self, customer: CustomerDomain) -> List[ReservationDomain]:
        """Returns all reservations held by ``customer``."""
        if customer.id is None:
            return []
        return ReservationService(self.session).for_customer(customer.id)

    def save(self, customer: CustomerDomain) -> CustomerDomain:
        """
        Inserts a new customer or updates an existing one by ID.

        On insert the database-assigned ID is written back onto ``customer``.

        Raises:
            CustomerNotFoundError: If an update targets a row that no longer exists.
        """
        data = customer.model_dump(exclude={"id"})

        if customer.id is None:
            record = CustomerRecord(**data)
            self.session.add(record)
            self.session.commit()
            self.session.refresh(record)
            customer.id = record.id
            logger.info(f"Created customer {record.id}")
            return customer

        record = self._get_record_or_raise(customer.id)
        for key, value in data.items():
            setattr(record, key, value)
        self.session.add(record)
        self.session.commit()
        logger.info(f"Updated customer {customer.id}")
        return customer

    def update(self, customer_id: int, changes: dict[str, Any]) -> CustomerDomain:
        """
        Applies form edits to a stored customer and saves it.

        Every field is assigned through ``CustomerDomain`` so phone and notes
        get the same normalization as on creation.

        Args:
            customer_id (int): The customer to edit.
            changes (dict[str, Any]): New values keyed by field name.

        Returns:
            CustomerDomain: The saved customer.
        """
        customer = self.get(customer_id)
        for key in EDITABLE_FIELDS:
            if key in changes:
                setattr(customer, key, changes[key])
        return self.save(customer)
