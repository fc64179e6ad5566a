"""In-memory stores for rooms, reservations and customers.

Entities live in id-keyed dicts. Insertion order is the creation order the
scheduler scans rooms in.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Iterator, Optional

from hotel.domain.constraints import validate_room_rate, validate_stay_window
from hotel.domain.models import Customer, Reservation, Room, RoomType
from hotel.utils.logger import get_logger


logger = get_logger(__name__)


DEFAULT_ROOMS: tuple[tuple[int, RoomType, float], ...] = (
    (101, RoomType.SINGLE, 100.0),
    (102, RoomType.SINGLE, 100.0),
    (201, RoomType.DOUBLE, 150.0),
    (202, RoomType.DOUBLE, 150.0),
    (301, RoomType.SUITE, 250.0),
    (302, RoomType.DELUXE, 350.0),
)


class DuplicateRecordError(Exception):
    """Raised when a record with the same identifier already exists."""


class IdGenerator:
    """Monotonic identifier source owned by the store that creates entities."""

    def __init__(self, start: int = 1) -> None:
        if start < 1:
            raise ValueError("start must be >= 1")
        self._next_id = start

    @property
    def peek(self) -> int:
        return self._next_id

    def next_id(self) -> int:
        value = self._next_id
        self._next_id += 1
        return value

    def seed(self, highest_seen: int) -> None:
        """Resume numbering above ``highest_seen`` without ever moving backwards."""
        if highest_seen + 1 > self._next_id:
            self._next_id = highest_seen + 1

    def reset(self, start: int = 1) -> None:
        if start < 1:
            raise ValueError("start must be >= 1")
        self._next_id = start


class RoomStore:
    """Rooms keyed by room number, iterated in creation order."""

    def __init__(self, rooms: Optional[Iterable[Room]] = None) -> None:
        self._rooms: dict[int, Room] = {}
        for room in rooms or ():
            self.add(room)

    def __len__(self) -> int:
        return len(self._rooms)

    def __iter__(self) -> Iterator[Room]:
        return iter(self._rooms.values())

    def __contains__(self, room_number: object) -> bool:
        return room_number in self._rooms

    def add(self, room: Room) -> Room:
        if room.room_number in self._rooms:
            raise DuplicateRecordError(f"Room {room.room_number} already exists")
        validate_room_rate(room.price_per_night)
        self._rooms[room.room_number] = room
        return room

    def create(self, room_number: int, room_type: RoomType, price_per_night: float) -> Room:
        return self.add(
            Room(room_number=room_number, room_type=room_type, price_per_night=price_per_night)
        )

    def get(self, room_number: int) -> Optional[Room]:
        return self._rooms.get(room_number)

    def has_type(self, room_type: RoomType) -> bool:
        return any(room.room_type == room_type for room in self._rooms.values())

    def list_all(self) -> list[Room]:
        return list(self._rooms.values())


class ReservationStore:
    """Reservations keyed by id; ids come from the store's own generator."""

    def __init__(self, id_generator: Optional[IdGenerator] = None) -> None:
        self._reservations: dict[int, Reservation] = {}
        self._ids = id_generator or IdGenerator()

    @property
    def id_generator(self) -> IdGenerator:
        return self._ids

    def __len__(self) -> int:
        return len(self._reservations)

    def __iter__(self) -> Iterator[Reservation]:
        return iter(self._reservations.values())

    def __contains__(self, reservation_id: object) -> bool:
        return reservation_id in self._reservations

    def create(self, customer_id: int, check_in: datetime, check_out: datetime) -> Reservation:
        """Create a PENDING, unassigned reservation with the next id."""
        validate_stay_window(check_in, check_out)
        reservation = Reservation(
            reservation_id=self._ids.next_id(),
            customer_id=customer_id,
            check_in=check_in,
            check_out=check_out,
        )
        self._reservations[reservation.reservation_id] = reservation
        logger.debug(
            "Reservation created | reservation_id=%s | customer_id=%s",
            reservation.reservation_id,
            customer_id,
        )
        return reservation

    def add(self, reservation: Reservation) -> Reservation:
        """Insert an already-identified reservation and keep the id generator above it."""
        if reservation.reservation_id in self._reservations:
            raise DuplicateRecordError(
                f"Reservation {reservation.reservation_id} already exists"
            )
        validate_stay_window(reservation.check_in, reservation.check_out)
        self._reservations[reservation.reservation_id] = reservation
        self._ids.seed(reservation.reservation_id)
        return reservation

    def get(self, reservation_id: int) -> Optional[Reservation]:
        return self._reservations.get(reservation_id)

    def list_all(self) -> list[Reservation]:
        return list(self._reservations.values())


class CustomerStore:
    """Customers keyed by id."""

    def __init__(self, id_generator: Optional[IdGenerator] = None) -> None:
        self._customers: dict[int, Customer] = {}
        self._ids = id_generator or IdGenerator()

    def __len__(self) -> int:
        return len(self._customers)

    def __iter__(self) -> Iterator[Customer]:
        return iter(self._customers.values())

    def create(self, name: str, email: str, phone: str) -> Customer:
        customer = Customer(
            customer_id=self._ids.next_id(),
            name=name,
            email=email,
            phone=phone,
        )
        self._customers[customer.customer_id] = customer
        return customer

    def get(self, customer_id: int) -> Optional[Customer]:
        return self._customers.get(customer_id)

    def remove(self, customer_id: int) -> Optional[Customer]:
        return self._customers.pop(customer_id, None)

    def list_all(self) -> list[Customer]:
        return list(self._customers.values())


def seed_default_rooms(rooms: RoomStore) -> int:
    """Install the standard six-room inventory when the store is empty."""
    if len(rooms) > 0:
        logger.info("Room inventory already present; skipping seed")
        return 0
    for room_number, room_type, price in DEFAULT_ROOMS:
        rooms.create(room_number, room_type, price)
    logger.info("Seeded default room inventory | rooms=%s", len(DEFAULT_ROOMS))
    return len(DEFAULT_ROOMS)
