"""Overlap-safe room assignment engine (first-fit and Left-Edge)."""

from __future__ import annotations

from threading import RLock
from typing import Optional

from hotel.domain.models import Reservation, ReservationStatus, Room, RoomType
from hotel.repository.stores import ReservationStore, RoomStore
from hotel.utils.logger import get_logger


logger = get_logger(__name__)


class Scheduler:
    """Assigns reservations to rooms so active stays in one room never overlap.

    The scheduler binds to live stores it does not own. Every public operation
    runs under one re-entrant lock spanning both stores; callers that mutate
    reservations outside the scheduler (check-in, check-out) hold
    ``scheduler.lock`` as well.

    Unknown reservation ids are no-ops, not errors.
    """

    # TODO: give schedule_one a distinct not-found result so callers stop
    # pre-checking existence to tell "unknown id" from "no room available".

    def __init__(
        self,
        rooms: RoomStore,
        reservations: ReservationStore,
        lock: Optional[RLock] = None,
    ) -> None:
        self._rooms = rooms
        self._reservations = reservations
        self._lock = lock or RLock()

    @property
    def lock(self) -> RLock:
        return self._lock

    def can_assign(self, reservation: Reservation, room: Room) -> bool:
        """Return True when no active reservation hosted by ``room`` overlaps ``reservation``."""
        for hosted_id in room.reservation_ids:
            if hosted_id == reservation.reservation_id:
                continue
            hosted = self._reservations.get(hosted_id)
            if hosted is None or not hosted.is_active:
                continue
            if reservation.overlaps(hosted):
                return False
        return True

    def schedule_one(
        self,
        reservation_id: int,
        room_type: Optional[RoomType] = None,
    ) -> bool:
        """Place one reservation in the first compatible room.

        On failure the reservation is normalized to PENDING, unassigned and
        zero-cost, dropping any assignment it held before.
        """
        with self._lock:
            reservation = self._reservations.get(reservation_id)
            if reservation is None:
                logger.debug("Schedule skipped for unknown reservation | reservation_id=%s", reservation_id)
                return False
            if reservation.status == ReservationStatus.CANCELLED:
                logger.debug("Schedule skipped for cancelled reservation | reservation_id=%s", reservation_id)
                return False
            return self._assign_first_fit(reservation, room_type)

    def schedule_all(self) -> None:
        """Re-partition every active reservation with the Left-Edge heuristic.

        Reservations are processed by ascending check-in, ties kept in store
        order, each going to the first open room. Greedy, so not guaranteed to
        use the fewest rooms.
        """
        with self._lock:
            working_set = [
                reservation
                for reservation in self._reservations
                if reservation.is_active
            ]
            for reservation in working_set:
                self._detach(reservation)
            working_set.sort(key=lambda reservation: reservation.check_in)

            assigned = 0
            for reservation in working_set:
                if self._assign_first_fit(reservation, None):
                    assigned += 1
                else:
                    logger.warning(
                        "No room available during reschedule | reservation_id=%s",
                        reservation.reservation_id,
                    )
            logger.info(
                "Reschedule completed | processed=%s | assigned=%s | unassigned=%s",
                len(working_set),
                assigned,
                len(working_set) - assigned,
            )

    def cancel(self, reservation_id: int) -> None:
        """Release the reservation's room and mark it CANCELLED; unknown ids are ignored."""
        with self._lock:
            reservation = self._reservations.get(reservation_id)
            if reservation is None:
                logger.debug("Cancel skipped for unknown reservation | reservation_id=%s", reservation_id)
                return
            self._detach(reservation)
            reservation.status = ReservationStatus.CANCELLED
            reservation.assigned_room = None
            reservation.total_cost = 0.0
            logger.info("Reservation cancelled | reservation_id=%s", reservation_id)

    def rooms_used(self) -> int:
        with self._lock:
            return sum(1 for room in self._rooms if self._hosts_active(room))

    def occupancy_rate(self) -> float:
        with self._lock:
            total_rooms = len(self._rooms)
            if total_rooms == 0:
                return 0.0
            return 100.0 * self.rooms_used() / total_rooms

    def room_assignments(self) -> dict[int, list[int]]:
        """Snapshot of hosted ids per room, stale entries included."""
        with self._lock:
            return {room.room_number: list(room.reservation_ids) for room in self._rooms}

    def _assign_first_fit(
        self,
        reservation: Reservation,
        room_type: Optional[RoomType],
    ) -> bool:
        self._detach(reservation)
        for room in self._rooms:
            if room_type is not None and room.room_type != room_type:
                continue
            if not self.can_assign(reservation, room):
                continue

            reservation.assigned_room = room.room_number
            if reservation.status == ReservationStatus.PENDING:
                reservation.status = ReservationStatus.CONFIRMED
            reservation.total_cost = reservation.nights * room.price_per_night
            room.add_reservation(reservation.reservation_id)
            logger.info(
                "Reservation assigned | reservation_id=%s | room=%s | cost=%.2f",
                reservation.reservation_id,
                room.room_number,
                reservation.total_cost,
            )
            return True

        reservation.clear_assignment()
        logger.info(
            "No room available | reservation_id=%s | room_type=%s",
            reservation.reservation_id,
            room_type.value if room_type is not None else "ANY",
        )
        return False

    def _detach(self, reservation: Reservation) -> None:
        if reservation.assigned_room is None:
            return
        room = self._rooms.get(reservation.assigned_room)
        if room is not None and room.remove_reservation(reservation.reservation_id):
            return
        # Recorded room is stale; scan for the id.
        for room in self._rooms:
            room.remove_reservation(reservation.reservation_id)

    def _hosts_active(self, room: Room) -> bool:
        for hosted_id in room.reservation_ids:
            hosted = self._reservations.get(hosted_id)
            if hosted is not None and hosted.is_active:
                return True
        return False
