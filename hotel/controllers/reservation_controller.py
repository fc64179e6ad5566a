"""HTTP controller layer for customers, reservations and rooms."""

from __future__ import annotations

from dataclasses import asdict
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator, model_validator

from hotel.controllers.dependencies import get_booking_service, get_reporting_service
from hotel.domain.constraints import is_valid_email, is_valid_name, is_valid_phone
from hotel.domain.models import Customer, Invoice, Reservation, ReservationStatus, Room, RoomType
from hotel.services.booking_service import (
    BookingService,
    BookingValidationError,
    CustomerNotFoundError,
    InvalidStatusTransitionError,
    ReservationNotFoundError,
)
from hotel.services.reporting_service import ReportingService, RoomNotFoundError
from hotel.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(tags=["reservations"])


def _check_name(value: str) -> str:
    if not is_valid_name(value):
        raise ValueError("name must contain letters and cannot be digits only")
    return value.strip()


def _check_email(value: str) -> str:
    if not is_valid_email(value.strip()):
        raise ValueError("email must look like user@example.com")
    return value.strip()


def _check_phone(value: str) -> str:
    if not is_valid_phone(value.strip()):
        raise ValueError("phone must be 7-15 digits with an optional leading '+'")
    return value.strip()


class CustomerCreateRequest(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    phone: str = Field(min_length=7)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _check_name(value)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value: str) -> str:
        return _check_phone(value)


class CustomerUpdateRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _check_name(value)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _check_email(value)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _check_phone(value)


class CustomerResponse(BaseModel):
    customer_id: int = Field(gt=0)
    name: str
    email: str
    phone: str

    @classmethod
    def from_domain(cls, customer: Customer) -> CustomerResponse:
        return cls(
            customer_id=customer.customer_id,
            name=customer.name,
            email=customer.email,
            phone=customer.phone,
        )


class ReservationCreateRequest(BaseModel):
    """Either exact instants or calendar dates (stamped with the default hours)."""

    customer_id: int = Field(gt=0)
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    check_in_date: Optional[date] = None
    check_out_date: Optional[date] = None
    room_type: Optional[RoomType] = None

    @field_validator("check_in", "check_out")
    @classmethod
    def to_local_naive(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value

    @model_validator(mode="after")
    def require_one_form(self) -> ReservationCreateRequest:
        instants = (self.check_in, self.check_out)
        dates = (self.check_in_date, self.check_out_date)
        uses_instants = all(value is not None for value in instants) and all(
            value is None for value in dates
        )
        uses_dates = all(value is not None for value in dates) and all(
            value is None for value in instants
        )
        if not (uses_instants or uses_dates):
            raise ValueError(
                "provide either check_in/check_out or check_in_date/check_out_date"
            )
        return self


class ReservationResponse(BaseModel):
    reservation_id: int = Field(gt=0)
    customer_id: int
    check_in: datetime
    check_out: datetime
    nights: int = Field(ge=0)
    assigned_room: Optional[int] = None
    status: ReservationStatus
    total_cost: float = Field(ge=0.0)

    @classmethod
    def from_domain(cls, reservation: Reservation) -> ReservationResponse:
        return cls(
            reservation_id=reservation.reservation_id,
            customer_id=reservation.customer_id,
            check_in=reservation.check_in,
            check_out=reservation.check_out,
            nights=reservation.nights,
            assigned_room=reservation.assigned_room,
            status=reservation.status,
            total_cost=reservation.total_cost,
        )


class InvoiceResponse(BaseModel):
    reservation_id: int
    invoice_date: str
    customer_name: Optional[str]
    customer_email: Optional[str]
    customer_phone: Optional[str]
    room_number: Optional[int]
    room_type: Optional[RoomType]
    check_in: datetime
    check_out: datetime
    nights: int = Field(ge=0)
    nightly_rate: float = Field(ge=0.0)
    subtotal: float = Field(ge=0.0)
    tax_rate: float = Field(ge=0.0, le=1.0)
    tax: float = Field(ge=0.0)
    total: float = Field(ge=0.0)

    @classmethod
    def from_domain(cls, invoice: Invoice) -> InvoiceResponse:
        return cls(**asdict(invoice))


class RoomResponse(BaseModel):
    room_number: int
    room_type: RoomType
    price_per_night: float = Field(ge=0.0)
    reservation_ids: list[int]

    @classmethod
    def from_domain(cls, room: Room) -> RoomResponse:
        return cls(
            room_number=room.room_number,
            room_type=room.room_type,
            price_per_night=room.price_per_night,
            reservation_ids=list(room.reservation_ids),
        )


class RoomScheduleResponse(BaseModel):
    room: RoomResponse
    reservations: list[ReservationResponse]


def _not_found(exc: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


def _bad_request(exc: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def _conflict(exc: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.post(
    "/customers",
    response_model=CustomerResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_customer(
    payload: CustomerCreateRequest,
    service: BookingService = Depends(get_booking_service),
) -> CustomerResponse:
    try:
        customer = service.add_customer(payload.name, payload.email, payload.phone)
        return CustomerResponse.from_domain(customer)
    except BookingValidationError as exc:
        raise _bad_request(exc) from exc


@router.get("/customers", response_model=list[CustomerResponse])
async def list_customers(
    service: BookingService = Depends(get_booking_service),
) -> list[CustomerResponse]:
    return [CustomerResponse.from_domain(customer) for customer in service.list_customers()]


@router.get("/customers/{customer_id}", response_model=CustomerResponse)
async def get_customer(
    customer_id: int,
    service: BookingService = Depends(get_booking_service),
) -> CustomerResponse:
    try:
        return CustomerResponse.from_domain(service.get_customer(customer_id))
    except CustomerNotFoundError as exc:
        raise _not_found(exc) from exc


@router.patch("/customers/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    customer_id: int,
    payload: CustomerUpdateRequest,
    service: BookingService = Depends(get_booking_service),
) -> CustomerResponse:
    try:
        customer = service.update_customer(
            customer_id,
            name=payload.name,
            email=payload.email,
            phone=payload.phone,
        )
        return CustomerResponse.from_domain(customer)
    except CustomerNotFoundError as exc:
        raise _not_found(exc) from exc
    except BookingValidationError as exc:
        raise _bad_request(exc) from exc


@router.delete("/customers/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(
    customer_id: int,
    service: BookingService = Depends(get_booking_service),
) -> None:
    try:
        service.delete_customer(customer_id)
    except CustomerNotFoundError as exc:
        raise _not_found(exc) from exc


@router.post(
    "/reservations",
    response_model=ReservationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_reservation(
    payload: ReservationCreateRequest,
    service: BookingService = Depends(get_booking_service),
) -> ReservationResponse:
    if payload.check_in_date is not None and payload.check_out_date is not None:
        check_in, check_out = service.stay_window(payload.check_in_date, payload.check_out_date)
    else:
        check_in, check_out = payload.check_in, payload.check_out
    try:
        reservation = service.create_reservation(
            customer_id=payload.customer_id,
            check_in=check_in,
            check_out=check_out,
            room_type=payload.room_type,
        )
        return ReservationResponse.from_domain(reservation)
    except CustomerNotFoundError as exc:
        raise _not_found(exc) from exc
    except BookingValidationError as exc:
        raise _bad_request(exc) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected reservation creation failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create reservation",
        ) from exc


@router.get("/reservations", response_model=list[ReservationResponse])
async def list_reservations(
    service: BookingService = Depends(get_booking_service),
) -> list[ReservationResponse]:
    return [ReservationResponse.from_domain(item) for item in service.list_reservations()]


@router.get("/reservations/{reservation_id}", response_model=ReservationResponse)
async def get_reservation(
    reservation_id: int,
    service: BookingService = Depends(get_booking_service),
) -> ReservationResponse:
    try:
        return ReservationResponse.from_domain(service.get_reservation(reservation_id))
    except ReservationNotFoundError as exc:
        raise _not_found(exc) from exc


@router.post("/reservations/{reservation_id}/cancel", response_model=ReservationResponse)
async def cancel_reservation(
    reservation_id: int,
    service: BookingService = Depends(get_booking_service),
) -> ReservationResponse:
    try:
        return ReservationResponse.from_domain(service.cancel_reservation(reservation_id))
    except ReservationNotFoundError as exc:
        raise _not_found(exc) from exc
    except InvalidStatusTransitionError as exc:
        raise _conflict(exc) from exc


@router.post("/reservations/{reservation_id}/check_in", response_model=ReservationResponse)
async def check_in(
    reservation_id: int,
    service: BookingService = Depends(get_booking_service),
) -> ReservationResponse:
    try:
        return ReservationResponse.from_domain(service.check_in(reservation_id))
    except ReservationNotFoundError as exc:
        raise _not_found(exc) from exc
    except InvalidStatusTransitionError as exc:
        raise _conflict(exc) from exc


@router.post("/reservations/{reservation_id}/check_out", response_model=InvoiceResponse)
async def check_out(
    reservation_id: int,
    service: BookingService = Depends(get_booking_service),
) -> InvoiceResponse:
    try:
        return InvoiceResponse.from_domain(service.check_out(reservation_id))
    except ReservationNotFoundError as exc:
        raise _not_found(exc) from exc
    except InvalidStatusTransitionError as exc:
        raise _conflict(exc) from exc


@router.get("/reservations/{reservation_id}/invoice", response_model=InvoiceResponse)
async def get_invoice(
    reservation_id: int,
    service: BookingService = Depends(get_booking_service),
) -> InvoiceResponse:
    try:
        return InvoiceResponse.from_domain(service.invoice(reservation_id))
    except ReservationNotFoundError as exc:
        raise _not_found(exc) from exc


@router.get("/rooms/{room_number}/schedule", response_model=RoomScheduleResponse)
async def room_schedule(
    room_number: int,
    reporting: ReportingService = Depends(get_reporting_service),
) -> RoomScheduleResponse:
    try:
        schedule = reporting.room_schedule(room_number)
    except RoomNotFoundError as exc:
        raise _not_found(exc) from exc
    return RoomScheduleResponse(
        room=RoomResponse.from_domain(schedule.room),
        reservations=[ReservationResponse.from_domain(item) for item in schedule.reservations],
    )


@router.get("/rooms", response_model=list[RoomResponse])
async def list_rooms(
    reporting: ReportingService = Depends(get_reporting_service),
) -> list[RoomResponse]:
    return [RoomResponse.from_domain(room) for room in reporting.list_rooms()]


@router.get("/schedule", response_model=list[RoomScheduleResponse])
async def hotel_schedule(
    reporting: ReportingService = Depends(get_reporting_service),
) -> list[RoomScheduleResponse]:
    return [
        RoomScheduleResponse(
            room=RoomResponse.from_domain(schedule.room),
            reservations=[
                ReservationResponse.from_domain(item) for item in schedule.reservations
            ],
        )
        for schedule in reporting.hotel_schedule()
    ]
