import logging
from pathlib import Path
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from lunchly.core.config import settings

# Layer 4: Data Access (Session)
from lunchly.data_access.database import get_session

# Layer 3: Domain Entities
from lunchly.domain import (
    CustomerDomain,
    CustomerNotFoundError,
    LunchlyError,
    NotFoundError,
    ReservationDomain,
    ReservationNotFoundError,
)

# Layer 2: Services
from lunchly.services.customer_service import CustomerService
from lunchly.services.reservation_service import ReservationService


logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))
templates.env.globals["site_title"] = settings.APP_TITLE

router = APIRouter()

SessionDep = Annotated[Session, Depends(get_session)]

# Failures a route answers with an error body instead of letting them crash the request
HANDLED_ERRORS = (LunchlyError, ValidationError, SQLAlchemyError)


def _error_text(prefix: str, exc: Exception) -> PlainTextResponse:
    """Plain-text error body. Not-found errors keep their 404, everything else is a 500."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    if getattr(exc, "status_code", None) == status.HTTP_404_NOT_FOUND:
        status_code = status.HTTP_404_NOT_FOUND

    if isinstance(exc, SQLAlchemyError):
        logger.error(f"{prefix}: {exc}")
    else:
        logger.warning(f"{prefix}: {exc}")
    return PlainTextResponse(f"{prefix}: {exc}", status_code=status_code)


def _parse_id(raw: str, not_found: type[NotFoundError]) -> int:
    """Path IDs arrive as text so a malformed one gets the route's own error body."""
    try:
        return int(raw)
    except ValueError:
        raise not_found(raw) from None


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


# --- 1. CUSTOMER LIST, SEARCH & LEADERBOARD ---
@router.get("/", tags=["Customers"])
def list_customers(request: Request, session: SessionDep) -> Response:
    """Homepage: show every customer."""
    customers = CustomerService(session).all_customers()
    return templates.TemplateResponse(request, "customer_list.html", {"customers": customers})

@router.post("/", tags=["Customers"])
def search_customers(
    request: Request,
    session: SessionDep,
    search: Annotated[str, Form()] = ""
) -> Response:
    """Homepage filtered by a first/last name prefix."""
    customers = CustomerService(session).search(search)
    return templates.TemplateResponse(
        request, "customer_list.html", {"customers": customers, "search": search}
    )

@router.get("/top-ten", tags=["Customers"])
def top_ten_customers(request: Request, session: SessionDep) -> Response:
    """The ten customers holding the most reservations."""
    customers = CustomerService(session).top_reservation_holders(limit=10)
    return templates.TemplateResponse(request, "topten_customers.html", {"customers": customers})


# --- 2. ADDING CUSTOMERS ---
# Declared before /{customer_id}/ so "add" is never parsed as an ID
@router.get("/add/", tags=["Customers"])
def new_customer_form(request: Request) -> Response:
    return templates.TemplateResponse(request, "customer_new_form.html", {})

@router.post("/add/", tags=["Customers"])
def add_customer(
    session: SessionDep,
    first_name: Annotated[str, Form(alias="firstName")] = "",
    last_name: Annotated[str, Form(alias="lastName")] = "",
    middle_name: Annotated[Optional[str], Form(alias="middleName")] = None,
    phone: Annotated[Optional[str], Form()] = None,
    notes: Annotated[Optional[str], Form()] = None
) -> Response:
    """Creates a customer and redirects to their detail page."""
    try:
        customer = CustomerDomain(
            first_name=first_name,
            middle_name=middle_name,
            last_name=last_name,
            phone=phone,
            notes=notes
        )
        CustomerService(session).save(customer)
    except HANDLED_ERRORS as e:
        return _error_text("Can't add customer", e)
    return _redirect(f"/{customer.id}/")


# --- 3. RESERVATIONS ---
@router.get("/reservations/{reservation_id}/edit/", tags=["Reservations"])
def edit_reservation_form(reservation_id: str, request: Request, session: SessionDep) -> Response:
    """Form to edit a reservation."""
    try:
        reservation = ReservationService(session).get(
            _parse_id(reservation_id, ReservationNotFoundError)
        )
    except HANDLED_ERRORS as e:
        return _error_text("Can't get reservation", e)
    return templates.TemplateResponse(
        request, "reservation_edit_form.html", {"reservation": reservation}
    )

@router.post("/reservations/{reservation_id}/edit/", tags=["Reservations"])
def edit_reservation(
    reservation_id: str,
    session: SessionDep,
    start_at: Annotated[str, Form(alias="startAt")] = "",
    num_guests: Annotated[str, Form(alias="numGuests")] = "",
    notes: Annotated[Optional[str], Form()] = None
) -> Response:
    """Saves an edited reservation and returns to its customer's page."""
    try:
        reservation = ReservationService(session).update(
            _parse_id(reservation_id, ReservationNotFoundError),
            {"start_at": start_at, "num_guests": num_guests, "notes": notes}
        )
    except HANDLED_ERRORS as e:
        return _error_text("Can't edit reservation", e)
    return _redirect(f"/{reservation.customer_id}/")

@router.post("/{customer_id}/add-reservation/", tags=["Reservations"])
def add_reservation(
    customer_id: str,
    session: SessionDep,
    start_at: Annotated[str, Form(alias="startAt")] = "",
    num_guests: Annotated[str, Form(alias="numGuests")] = "",
    notes: Annotated[Optional[str], Form()] = None
) -> Response:
    """
    Books a reservation for a customer.

    Validation failures answer with a JSON body ``{"error": message}`` and
    the status code carried by the error (400 for a non-numeric party size,
    422 for an empty party), falling back to 500.
    """
    try:
        customer = CustomerService(session).get(_parse_id(customer_id, CustomerNotFoundError))
        reservation = ReservationDomain(
            customer_id=customer.id,
            start_at=start_at,
            num_guests=num_guests,
            notes=notes
        )
        ReservationService(session).save(reservation)
    except HANDLED_ERRORS as e:
        status_code = getattr(e, "status_code", status.HTTP_500_INTERNAL_SERVER_ERROR)
        logger.warning(f"Can't add reservation for customer {customer_id}: {e}")
        return JSONResponse({"error": str(e)}, status_code=status_code)
    return _redirect(f"/{customer.id}/")


# --- 4. CUSTOMER DETAIL & EDITING ---
@router.get("/{customer_id}/", tags=["Customers"])
def customer_detail(customer_id: str, request: Request, session: SessionDep) -> Response:
    """Shows a customer and their reservations."""
    service = CustomerService(session)
    try:
        customer = service.get(_parse_id(customer_id, CustomerNotFoundError))
        reservations = service.list_reservations(customer)
    except HANDLED_ERRORS as e:
        return _error_text("Can't get customer", e)
    return templates.TemplateResponse(
        request, "customer_detail.html", {"customer": customer, "reservations": reservations}
    )

@router.get("/{customer_id}/edit/", tags=["Customers"])
def edit_customer_form(customer_id: str, request: Request, session: SessionDep) -> Response:
    try:
        customer = CustomerService(session).get(_parse_id(customer_id, CustomerNotFoundError))
    except HANDLED_ERRORS as e:
        return _error_text("Can't get customer", e)
    return templates.TemplateResponse(request, "customer_edit_form.html", {"customer": customer})

@router.post("/{customer_id}/edit/", tags=["Customers"])
def edit_customer(
    customer_id: str,
    session: SessionDep,
    first_name: Annotated[str, Form(alias="firstName")] = "",
    last_name: Annotated[str, Form(alias="lastName")] = "",
    middle_name: Annotated[Optional[str], Form(alias="middleName")] = None,
    phone: Annotated[Optional[str], Form()] = None,
    notes: Annotated[Optional[str], Form()] = None
) -> Response:
    """Saves an edited customer; every field passes the same validation as on creation."""
    changes = {
        "first_name": first_name,
        "last_name": last_name,
        "phone": phone,
        "notes": notes
    }
    # The middle name is only touched when the form sends one
    if middle_name is not None:
        changes["middle_name"] = middle_name

    try:
        customer = CustomerService(session).update(
            _parse_id(customer_id, CustomerNotFoundError), changes
        )
    except HANDLED_ERRORS as e:
        return _error_text("Can't edit customer", e)
    return _redirect(f"/{customer.id}/")
