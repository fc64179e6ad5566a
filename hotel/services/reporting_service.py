"""Read-only projections over the room and reservation stores."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Optional

from hotel.domain.models import (
    Customer,
    Invoice,
    OccupancyReport,
    Reservation,
    ReservationStatus,
    Room,
)
from hotel.repository.stores import CustomerStore, ReservationStore, RoomStore
from hotel.services.scheduler_service import Scheduler
from hotel.utils.config import Settings, get_settings


class RoomNotFoundError(Exception):
    """Raised when a room number is not part of the inventory."""


@dataclass(frozen=True)
class RoomSchedule:
    room: Room
    reservations: list[Reservation]


def build_invoice(
    reservation: Reservation,
    customer: Optional[Customer],
    room: Optional[Room],
    tax_rate: float,
) -> Invoice:
    subtotal = float(reservation.total_cost)
    tax = round(subtotal * tax_rate, 2)
    return Invoice(
        reservation_id=reservation.reservation_id,
        invoice_date=reservation.check_out.date().isoformat(),
        customer_name=customer.name if customer else None,
        customer_email=customer.email if customer else None,
        customer_phone=customer.phone if customer else None,
        room_number=reservation.assigned_room,
        room_type=room.room_type if room else None,
        check_in=reservation.check_in,
        check_out=reservation.check_out,
        nights=reservation.nights,
        nightly_rate=room.price_per_night if room else 0.0,
        subtotal=subtotal,
        tax_rate=tax_rate,
        tax=tax,
        total=round(subtotal + tax, 2),
    )


def count_statuses(reservations: ReservationStore) -> dict[ReservationStatus, int]:
    counts = Counter(reservation.status for reservation in reservations)
    return {status: counts.get(status, 0) for status in ReservationStatus}


class ReportingService:
    """Occupancy reports, schedules and invoices for the presentation layer."""

    def __init__(
        self,
        rooms: RoomStore,
        reservations: ReservationStore,
        customers: CustomerStore,
        scheduler: Scheduler,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._rooms = rooms
        self._reservations = reservations
        self._customers = customers
        self._scheduler = scheduler

    def occupancy_report(self) -> OccupancyReport:
        with self._scheduler.lock:
            return OccupancyReport(
                total_rooms=len(self._rooms),
                rooms_in_use=self._scheduler.rooms_used(),
                occupancy_rate=self._scheduler.occupancy_rate(),
                status_counts=count_statuses(self._reservations),
                total_reservations=len(self._reservations),
            )

    def list_rooms(self) -> list[Room]:
        with self._scheduler.lock:
            return self._rooms.list_all()

    def room_schedule(self, room_number: int) -> RoomSchedule:
        with self._scheduler.lock:
            room = self._rooms.get(room_number)
            if room is None:
                raise RoomNotFoundError(f"Room {room_number} not found")
            return self._schedule_for(room)

    def hotel_schedule(self) -> list[RoomSchedule]:
        """Schedules for every room that hosts at least one reservation id."""
        with self._scheduler.lock:
            return [
                self._schedule_for(room)
                for room in self._rooms
                if room.reservation_ids
            ]

    def invoice(self, reservation: Reservation) -> Invoice:
        room = (
            self._rooms.get(reservation.assigned_room)
            if reservation.assigned_room is not None
            else None
        )
        customer = self._customers.get(reservation.customer_id)
        return build_invoice(
            reservation=reservation,
            customer=customer,
            room=room,
            tax_rate=self._settings.invoice_tax_rate,
        )

    def _schedule_for(self, room: Room) -> RoomSchedule:
        hosted = [
            self._reservations.get(reservation_id)
            for reservation_id in room.reservation_ids
        ]
        return RoomSchedule(
            room=room,
            reservations=[reservation for reservation in hosted if reservation is not None],
        )
