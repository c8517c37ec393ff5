from collections.abc import Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine, select
from sqlmodel.pool import StaticPool

from lunchly.api.main import app
from lunchly.data_access.database import get_session
from lunchly.data_access.models import CustomerRecord, ReservationRecord


@pytest.fixture(name="session")
def session_fixture() -> Generator[Session, Any, None]:
    """In-memory SQLite shared across the TestClient's worker threads."""
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session) -> Generator[TestClient, Any, None]:
    def get_session_override() -> Session:
        return session

    app.dependency_overrides[get_session] = get_session_override
    yield TestClient(app)
    app.dependency_overrides.clear()


def create_customer(client: TestClient, **fields: str) -> int:
    data = {"firstName": "jane", "lastName": "DOE"}
    data.update(fields)
    response = client.post("/add/", data=data, follow_redirects=False)
    assert response.status_code == 303
    return int(response.headers["location"].strip("/"))


def book(client: TestClient, customer_id: Any, **fields: str):
    data = {"startAt": "2026-10-19T18:30", "numGuests": "4", "notes": ""}
    data.update(fields)
    return client.post(f"/{customer_id}/add-reservation/", data=data, follow_redirects=False)


# --- 1. Customers ---

def test_list_customers(client: TestClient) -> None:
    create_customer(client)
    response = client.get("/")
    assert response.status_code == 200
    assert "Jane Doe" in response.text

def test_search_customers(client: TestClient) -> None:
    create_customer(client, firstName="Will", lastName="Smith")
    create_customer(client, firstName="Bob", lastName="Jones")

    response = client.post("/", data={"search": "sm"})

    assert response.status_code == 200
    assert "Will Smith" in response.text
    assert "Bob Jones" not in response.text

def test_new_customer_form(client: TestClient) -> None:
    response = client.get("/add/")
    assert response.status_code == 200
    assert 'name="firstName"' in response.text

def test_add_customer_redirects_to_detail(client: TestClient, session: Session) -> None:
    customer_id = create_customer(client, middleName="", phone="", notes="")

    record = session.get(CustomerRecord, customer_id)
    assert record.first_name == "jane"
    assert record.last_name == "doe"
    assert record.middle_name is None
    assert record.phone is None
    assert record.notes == ""

    response = client.get(f"/{customer_id}/")
    assert response.status_code == 200
    assert "Jane Doe" in response.text

def test_add_customer_without_last_name_fails(client: TestClient) -> None:
    response = client.post("/add/", data={"firstName": "jane"}, follow_redirects=False)
    assert response.status_code == 500
    assert response.text.startswith("Can't add customer:")

def test_missing_customer_is_not_found(client: TestClient) -> None:
    response = client.get("/999/")
    assert response.status_code == 404
    assert response.text == "Can't get customer: Customer 999 not found"

    assert client.get("/999/edit/").status_code == 404

def test_edit_customer_normalizes_every_field(client: TestClient, session: Session) -> None:
    customer_id = create_customer(client, phone="555-0101", notes="VIP")

    form = client.get(f"/{customer_id}/edit/")
    assert form.status_code == 200
    assert 'value="Jane"' in form.text

    response = client.post(
        f"/{customer_id}/edit/",
        data={"firstName": "JANET", "lastName": "Doe", "phone": "", "notes": ""},
        follow_redirects=False
    )
    assert response.status_code == 303
    assert response.headers["location"] == f"/{customer_id}/"

    record = session.get(CustomerRecord, customer_id)
    session.refresh(record)
    assert record.first_name == "janet"
    assert record.phone is None
    assert record.notes == ""

def test_edit_customer_with_blank_name_fails(client: TestClient) -> None:
    customer_id = create_customer(client)
    response = client.post(f"/{customer_id}/edit/", data={"firstName": "", "lastName": "doe"})
    assert response.status_code == 500
    assert response.text.startswith("Can't edit customer:")

def test_top_ten(client: TestClient) -> None:
    busy = create_customer(client, firstName="Busy", lastName="Bee")
    quiet = create_customer(client, firstName="Quiet", lastName="Mouse")
    create_customer(client, firstName="Never", lastName="Booked")
    for _ in range(3):
        book(client, busy)
    book(client, quiet)

    response = client.get("/top-ten")

    assert response.status_code == 200
    assert response.text.index("Busy Bee") < response.text.index("Quiet Mouse")
    assert "Never Booked" not in response.text


# --- 2. Reservations ---

def test_add_reservation(client: TestClient) -> None:
    customer_id = create_customer(client)

    response = book(client, customer_id, notes="Birthday")

    assert response.status_code == 303
    assert response.headers["location"] == f"/{customer_id}/"
    detail = client.get(f"/{customer_id}/")
    assert "October 19, 2026, 6:30 pm" in detail.text
    assert "Birthday" in detail.text

@pytest.mark.parametrize("fields, status_code, message", [
    ({"numGuests": "0"}, 422, "Must have at least 1 in your party to make a reservation"),
    ({"numGuests": "abc"}, 400, "Number of guests must be a valid number"),
    ({"startAt": "tomorrow-ish"}, 400, "Not a valid startAt."),
])
def test_add_reservation_validation_errors(
    client: TestClient, session: Session, fields: dict, status_code: int, message: str
) -> None:
    customer_id = create_customer(client)

    response = book(client, customer_id, **fields)

    assert response.status_code == status_code
    assert response.json() == {"error": message}
    assert session.exec(select(ReservationRecord)).all() == []

def test_add_reservation_for_missing_customer(client: TestClient) -> None:
    response = book(client, 404)
    assert response.status_code == 404
    assert response.json() == {"error": "Customer 404 not found"}

def test_edit_reservation(client: TestClient, session: Session) -> None:
    customer_id = create_customer(client)
    book(client, customer_id)
    reservation = session.exec(select(ReservationRecord)).one()

    form = client.get(f"/reservations/{reservation.id}/edit/")
    assert form.status_code == 200
    assert 'value="2026-10-19T18:30"' in form.text

    response = client.post(
        f"/reservations/{reservation.id}/edit/",
        data={"startAt": "2026-12-31T20:00", "numGuests": "6", "notes": "Window"},
        follow_redirects=False
    )
    assert response.status_code == 303
    assert response.headers["location"] == f"/{customer_id}/"

    session.refresh(reservation)
    assert reservation.num_guests == 6
    assert reservation.notes == "Window"

def test_edit_reservation_failures(client: TestClient) -> None:
    customer_id = create_customer(client)
    book(client, customer_id)

    missing = client.get("/reservations/77/edit/")
    assert missing.status_code == 404
    assert missing.text == "Can't get reservation: Reservation 77 not found"

    bad = client.post(
        "/reservations/1/edit/",
        data={"startAt": "2026-12-31T20:00", "numGuests": "0", "notes": ""}
    )
    assert bad.status_code == 500
    assert bad.text.startswith("Can't edit reservation:")

def test_add_reservation_with_huge_party_is_bad_request(client: TestClient, session: Session) -> None:
    customer_id = create_customer(client)

    response = book(client, customer_id, numGuests="99999999999999999999")

    assert response.status_code == 400
    assert response.json() == {"error": "Number of guests must be a valid number"}
    assert session.exec(select(ReservationRecord)).all() == []


# --- 3. Malformed IDs ---

@pytest.mark.parametrize("path, message", [
    ("/abc/", "Can't get customer: Customer abc not found"),
    ("/abc/edit/", "Can't get customer: Customer abc not found"),
    ("/reservations/abc/edit/", "Can't get reservation: Reservation abc not found"),
])
def test_non_numeric_id_gets_text_error(client: TestClient, path: str, message: str) -> None:
    response = client.get(path)
    assert response.status_code == 404
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == message

def test_non_numeric_id_on_posts(client: TestClient) -> None:
    edit = client.post("/abc/edit/", data={"firstName": "jane", "lastName": "doe"})
    assert edit.status_code == 404
    assert edit.text == "Can't edit customer: Customer abc not found"

    booking = book(client, "abc")
    assert booking.status_code == 404
    assert booking.json() == {"error": "Customer abc not found"}
