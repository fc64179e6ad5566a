"""Domain models for rooms, customers and reservations."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from hotel.domain.intervals import StayInterval, count_nights


class RoomType(str, Enum):
    SINGLE = "SINGLE"
    DOUBLE = "DOUBLE"
    SUITE = "SUITE"
    DELUXE = "DELUXE"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class ReservationStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"
    CANCELLED = "CANCELLED"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


INACTIVE_STATUSES = frozenset({ReservationStatus.CANCELLED, ReservationStatus.CHECKED_OUT})


@dataclass
class Room:
    room_number: int
    room_type: RoomType
    price_per_night: float
    reservation_ids: list[int] = field(default_factory=list)

    def add_reservation(self, reservation_id: int) -> None:
        self.reservation_ids.append(reservation_id)

    def remove_reservation(self, reservation_id: int) -> bool:
        """Drop the first occurrence of ``reservation_id``; report whether it was hosted."""
        try:
            self.reservation_ids.remove(reservation_id)
        except ValueError:
            return False
        return True


@dataclass
class Customer:
    customer_id: int
    name: str
    email: str
    phone: str


@dataclass
class Reservation:
    reservation_id: int
    customer_id: int
    check_in: datetime
    check_out: datetime
    assigned_room: Optional[int] = None
    status: ReservationStatus = ReservationStatus.PENDING
    total_cost: float = 0.0

    @property
    def interval(self) -> StayInterval:
        return StayInterval(check_in=self.check_in, check_out=self.check_out)

    @property
    def nights(self) -> int:
        return count_nights(self.check_in, self.check_out)

    @property
    def is_active(self) -> bool:
        return self.status not in INACTIVE_STATUSES

    def overlaps(self, other: Reservation) -> bool:
        return self.interval.overlaps(other.interval)

    def clear_assignment(self) -> None:
        self.assigned_room = None
        self.status = ReservationStatus.PENDING
        self.total_cost = 0.0


@dataclass(frozen=True)
class Invoice:
    reservation_id: int
    invoice_date: str
    customer_name: Optional[str]
    customer_email: Optional[str]
    customer_phone: Optional[str]
    room_number: Optional[int]
    room_type: Optional[RoomType]
    check_in: datetime
    check_out: datetime
    nights: int
    nightly_rate: float
    subtotal: float
    tax_rate: float
    tax: float
    total: float


@dataclass(frozen=True)
class OccupancyReport:
    total_rooms: int
    rooms_in_use: int
    occupancy_rate: float
    status_counts: dict[ReservationStatus, int]
    total_reservations: int
