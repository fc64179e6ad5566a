"""Customer and reservation lifecycle orchestration around the scheduler."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from hotel.domain.constraints import (
    HotelConfig,
    validate_customer_fields,
    validate_hotel_config,
    validate_stay_window,
)
from hotel.domain.intervals import make_instant
from hotel.domain.models import Customer, Invoice, Reservation, ReservationStatus, RoomType
from hotel.repository.stores import CustomerStore, ReservationStore, RoomStore, seed_default_rooms
from hotel.services.reporting_service import ReportingService
from hotel.services.scheduler_service import Scheduler
from hotel.utils.config import Settings, get_settings
from hotel.utils.logger import get_logger


logger = get_logger(__name__)


class BookingValidationError(Exception):
    """Raised when booking inputs are invalid."""


class RoomTypeUnavailableError(BookingValidationError):
    """Raised when the hotel has no room of the requested category."""


class CustomerNotFoundError(Exception):
    """Raised when a customer id is unknown."""


class ReservationNotFoundError(Exception):
    """Raised when a reservation id is unknown."""


class InvalidStatusTransitionError(Exception):
    """Raised when a lifecycle step is not allowed from the current status."""


class BookingService:
    """Business logic for customers, reservations and the admin reset."""

    def __init__(
        self,
        rooms: Optional[RoomStore] = None,
        reservations: Optional[ReservationStore] = None,
        customers: Optional[CustomerStore] = None,
        scheduler: Optional[Scheduler] = None,
        reporting_service: Optional[ReportingService] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or get_settings()
        validate_hotel_config(
            HotelConfig(
                invoice_tax_rate=self._settings.invoice_tax_rate,
                default_check_in_hour=self._settings.default_check_in_hour,
                default_check_out_hour=self._settings.default_check_out_hour,
            )
        )
        self._rooms = rooms if rooms is not None else RoomStore()
        self._reservations = reservations if reservations is not None else ReservationStore()
        self._customers = customers if customers is not None else CustomerStore()
        self._scheduler = scheduler or Scheduler(self._rooms, self._reservations)
        self._reporting = reporting_service or ReportingService(
            rooms=self._rooms,
            reservations=self._reservations,
            customers=self._customers,
            scheduler=self._scheduler,
            settings=self._settings,
        )

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def reporting(self) -> ReportingService:
        return self._reporting

    def initialize(self) -> None:
        if self._settings.seed_default_rooms:
            seed_default_rooms(self._rooms)

    # --- customers ---

    def add_customer(self, name: str, email: str, phone: str) -> Customer:
        name, email, phone = name.strip(), email.strip(), phone.strip()
        try:
            validate_customer_fields(name, email, phone)
        except ValueError as exc:
            raise BookingValidationError(str(exc)) from exc
        customer = self._customers.create(name=name, email=email, phone=phone)
        logger.info("Customer added | customer_id=%s", customer.customer_id)
        return customer

    def list_customers(self) -> list[Customer]:
        return self._customers.list_all()

    def get_customer(self, customer_id: int) -> Customer:
        customer = self._customers.get(customer_id)
        if customer is None:
            raise CustomerNotFoundError(f"Customer {customer_id} not found")
        return customer

    def update_customer(
        self,
        customer_id: int,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Customer:
        customer = self.get_customer(customer_id)
        new_name = name.strip() if name is not None else customer.name
        new_email = email.strip() if email is not None else customer.email
        new_phone = phone.strip() if phone is not None else customer.phone
        try:
            validate_customer_fields(new_name, new_email, new_phone)
        except ValueError as exc:
            raise BookingValidationError(str(exc)) from exc
        customer.name = new_name
        customer.email = new_email
        customer.phone = new_phone
        logger.info("Customer updated | customer_id=%s", customer_id)
        return customer

    def delete_customer(self, customer_id: int) -> None:
        if self._customers.remove(customer_id) is None:
            raise CustomerNotFoundError(f"Customer {customer_id} not found")
        logger.info("Customer deleted | customer_id=%s", customer_id)

    # --- reservations ---

    def create_reservation(
        self,
        *,
        customer_id: int,
        check_in: datetime,
        check_out: datetime,
        room_type: Optional[RoomType] = None,
        now: Optional[datetime] = None,
    ) -> Reservation:
        """Create a PENDING reservation and try to confirm it right away.

        The returned reservation is CONFIRMED when a room was found and stays
        PENDING otherwise; "no room" is not an error.
        """
        self.get_customer(customer_id)
        try:
            validate_stay_window(check_in, check_out)
        except ValueError as exc:
            raise BookingValidationError(str(exc)) from exc
        reference = now or datetime.now()
        if check_in < reference:
            raise BookingValidationError("check_in cannot be earlier than the current time")

        with self._scheduler.lock:
            if room_type is not None and not self._rooms.has_type(room_type):
                raise RoomTypeUnavailableError(
                    f"There are no rooms of type {room_type.label}"
                )
            reservation = self._reservations.create(
                customer_id=customer_id,
                check_in=check_in,
                check_out=check_out,
            )
            scheduled = self._scheduler.schedule_one(reservation.reservation_id, room_type)

        logger.info(
            "Reservation created | reservation_id=%s | scheduled=%s | room=%s",
            reservation.reservation_id,
            scheduled,
            reservation.assigned_room,
        )
        return reservation

    def stay_window(self, check_in_day: date, check_out_day: date) -> tuple[datetime, datetime]:
        """Turn calendar dates into instants at the configured check-in/out hours."""
        return (
            make_instant(
                check_in_day.year,
                check_in_day.month,
                check_in_day.day,
                hour=self._settings.default_check_in_hour,
            ),
            make_instant(
                check_out_day.year,
                check_out_day.month,
                check_out_day.day,
                hour=self._settings.default_check_out_hour,
            ),
        )

    def list_reservations(self) -> list[Reservation]:
        return self._reservations.list_all()

    def get_reservation(self, reservation_id: int) -> Reservation:
        reservation = self._reservations.get(reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(f"Reservation {reservation_id} not found")
        return reservation

    def cancel_reservation(self, reservation_id: int) -> Reservation:
        with self._scheduler.lock:
            reservation = self.get_reservation(reservation_id)
            if reservation.status == ReservationStatus.CANCELLED:
                raise InvalidStatusTransitionError("Reservation already cancelled")
            if reservation.status == ReservationStatus.CHECKED_OUT:
                raise InvalidStatusTransitionError("A checked-out reservation cannot be cancelled")
            self._scheduler.cancel(reservation_id)
        return reservation

    def check_in(self, reservation_id: int) -> Reservation:
        with self._scheduler.lock:
            reservation = self.get_reservation(reservation_id)
            if reservation.status != ReservationStatus.CONFIRMED:
                raise InvalidStatusTransitionError(
                    "Reservation must be confirmed before check-in"
                )
            reservation.status = ReservationStatus.CHECKED_IN
        logger.info(
            "Guest checked in | reservation_id=%s | room=%s",
            reservation_id,
            reservation.assigned_room,
        )
        return reservation

    def check_out(self, reservation_id: int) -> Invoice:
        with self._scheduler.lock:
            reservation = self.get_reservation(reservation_id)
            if reservation.status != ReservationStatus.CHECKED_IN:
                raise InvalidStatusTransitionError("Must be checked-in before check-out")
            reservation.status = ReservationStatus.CHECKED_OUT
            invoice = self._reporting.invoice(reservation)
        logger.info(
            "Guest checked out | reservation_id=%s | total=%.2f",
            reservation_id,
            invoice.total,
        )
        return invoice

    def invoice(self, reservation_id: int) -> Invoice:
        with self._scheduler.lock:
            reservation = self.get_reservation(reservation_id)
            return self._reporting.invoice(reservation)

    def reschedule_all(self) -> dict[int, list[int]]:
        self._scheduler.schedule_all()
        return self._scheduler.room_assignments()
