from __future__ import annotations

from datetime import datetime
from itertools import combinations

from hotel.domain.models import ReservationStatus, Room, RoomType
from hotel.repository.stores import ReservationStore, RoomStore, seed_default_rooms
from hotel.services.scheduler_service import Scheduler


def day(n: int, hour: int = 14) -> datetime:
    return datetime(2030, 5, n, hour)


def _build_scheduler(*rooms: tuple[int, RoomType, float]) -> tuple[Scheduler, RoomStore, ReservationStore]:
    room_store = RoomStore()
    for room_number, room_type, price in rooms:
        room_store.create(room_number, room_type, price)
    reservation_store = ReservationStore()
    return Scheduler(room_store, reservation_store), room_store, reservation_store


def _assert_no_overlap(rooms: RoomStore, reservations: ReservationStore) -> None:
    for room in rooms:
        active = [
            reservations.get(reservation_id)
            for reservation_id in room.reservation_ids
            if reservations.get(reservation_id) is not None
            and reservations.get(reservation_id).is_active
        ]
        for first, second in combinations(active, 2):
            assert not first.overlaps(second), (room.room_number, first, second)


def test_adjacent_stays_share_a_room() -> None:
    scheduler, rooms, reservations = _build_scheduler((101, RoomType.SINGLE, 100.0))
    first = reservations.create(1, day(1), day(3))
    second = reservations.create(2, day(3), day(5))

    assert scheduler.schedule_one(first.reservation_id)
    assert scheduler.schedule_one(second.reservation_id)
    assert first.assigned_room == second.assigned_room == 101
    assert rooms.get(101).reservation_ids == [1, 2]


def test_overlapping_stay_is_left_pending_without_room() -> None:
    scheduler, _, reservations = _build_scheduler((101, RoomType.SINGLE, 100.0))
    first = reservations.create(1, day(1), day(3))
    second = reservations.create(2, day(2), day(4))

    assert scheduler.schedule_one(first.reservation_id)
    assert not scheduler.schedule_one(second.reservation_id)
    assert second.status == ReservationStatus.PENDING
    assert second.assigned_room is None
    assert second.total_cost == 0.0


def test_cost_is_nights_times_rate() -> None:
    scheduler, _, reservations = _build_scheduler((101, RoomType.SINGLE, 100.0))
    two_nights = reservations.create(1, day(1), day(3, hour=11))
    same_day = reservations.create(2, day(10, hour=9), day(10, hour=18))

    assert scheduler.schedule_one(two_nights.reservation_id)
    assert scheduler.schedule_one(same_day.reservation_id)
    assert two_nights.total_cost == 200.0
    assert same_day.total_cost == 0.0
    assert same_day.status == ReservationStatus.CONFIRMED


def test_first_fit_fills_first_room_before_second() -> None:
    scheduler, rooms, reservations = _build_scheduler(
        (101, RoomType.SINGLE, 100.0),
        (102, RoomType.SINGLE, 100.0),
    )
    first = reservations.create(1, day(1), day(2))
    second = reservations.create(2, day(5), day(6))

    scheduler.schedule_one(first.reservation_id)
    scheduler.schedule_one(second.reservation_id)

    assert first.assigned_room == 101
    assert second.assigned_room == 101
    assert rooms.get(102).reservation_ids == []


def test_type_filter_skips_other_categories() -> None:
    scheduler, _, reservations = _build_scheduler(
        (101, RoomType.SINGLE, 100.0),
        (301, RoomType.SUITE, 250.0),
    )
    reservation = reservations.create(1, day(1), day(3))

    assert scheduler.schedule_one(reservation.reservation_id, RoomType.SUITE)
    assert reservation.assigned_room == 301
    assert reservation.total_cost == 500.0


def test_type_filter_with_no_matching_room_resets_reservation() -> None:
    scheduler, _, reservations = _build_scheduler((101, RoomType.SINGLE, 100.0))
    reservation = reservations.create(1, day(1), day(3))

    assert not scheduler.schedule_one(reservation.reservation_id, RoomType.DELUXE)
    assert reservation.status == ReservationStatus.PENDING
    assert reservation.assigned_room is None


def test_schedule_one_unknown_or_cancelled_is_noop() -> None:
    scheduler, rooms, reservations = _build_scheduler((101, RoomType.SINGLE, 100.0))
    reservation = reservations.create(1, day(1), day(3))
    scheduler.cancel(reservation.reservation_id)

    assert not scheduler.schedule_one(999)
    assert not scheduler.schedule_one(reservation.reservation_id)
    assert reservation.status == ReservationStatus.CANCELLED
    assert rooms.get(101).reservation_ids == []


def test_schedule_one_does_not_downgrade_checked_in() -> None:
    scheduler, rooms, reservations = _build_scheduler((101, RoomType.SINGLE, 100.0))
    reservation = reservations.create(1, day(1), day(3))
    scheduler.schedule_one(reservation.reservation_id)
    reservation.status = ReservationStatus.CHECKED_IN

    assert scheduler.schedule_one(reservation.reservation_id)
    assert reservation.status == ReservationStatus.CHECKED_IN
    assert rooms.get(101).reservation_ids == [reservation.reservation_id]


def test_checked_out_stay_no_longer_blocks_room() -> None:
    scheduler, rooms, reservations = _build_scheduler((101, RoomType.SINGLE, 100.0))
    first = reservations.create(1, day(1), day(3))
    scheduler.schedule_one(first.reservation_id)
    first.status = ReservationStatus.CHECKED_OUT
    second = reservations.create(2, day(2), day(4))

    assert scheduler.schedule_one(second.reservation_id)
    assert second.assigned_room == 101
    assert first.assigned_room == 101
    assert first.total_cost == 200.0
    assert rooms.get(101).reservation_ids == [1, 2]


def test_cancel_is_idempotent_and_releases_room() -> None:
    scheduler, rooms, reservations = _build_scheduler((101, RoomType.SINGLE, 100.0))
    reservation = reservations.create(1, day(1), day(3))
    scheduler.schedule_one(reservation.reservation_id)

    scheduler.cancel(reservation.reservation_id)
    once = (reservation.status, reservation.assigned_room, reservation.total_cost)
    scheduler.cancel(reservation.reservation_id)

    assert (reservation.status, reservation.assigned_room, reservation.total_cost) == once
    assert once == (ReservationStatus.CANCELLED, None, 0.0)
    assert rooms.get(101).reservation_ids == []


def test_cancel_unknown_reservation_does_not_raise() -> None:
    scheduler, _, _ = _build_scheduler((101, RoomType.SINGLE, 100.0))
    scheduler.cancel(42)


def test_schedule_all_keeps_earliest_created_of_identical_stays() -> None:
    scheduler, _, reservations = _build_scheduler((101, RoomType.SINGLE, 100.0))
    first = reservations.create(1, day(1), day(3))
    second = reservations.create(2, day(1), day(3))

    scheduler.schedule_all()

    assert first.status == ReservationStatus.CONFIRMED
    assert first.assigned_room == 101
    assert second.status == ReservationStatus.PENDING
    assert second.assigned_room is None
    assert second.total_cost == 0.0


def test_cancelling_winner_lets_reschedule_confirm_the_other() -> None:
    scheduler, rooms, reservations = _build_scheduler((101, RoomType.SINGLE, 100.0))
    first = reservations.create(1, day(1), day(3))
    second = reservations.create(2, day(1), day(3))
    scheduler.schedule_all()

    scheduler.cancel(first.reservation_id)
    scheduler.schedule_all()

    assert second.status == ReservationStatus.CONFIRMED
    assert second.assigned_room == 101
    assert rooms.get(101).reservation_ids == [second.reservation_id]


def test_schedule_all_processes_by_check_in_not_creation_order() -> None:
    scheduler, _, reservations = _build_scheduler((101, RoomType.SINGLE, 100.0))
    late = reservations.create(1, day(3), day(6))
    early = reservations.create(2, day(1), day(4))

    scheduler.schedule_all()

    assert early.assigned_room == 101
    assert late.assigned_room is None


def test_schedule_all_repartitions_existing_assignments() -> None:
    scheduler, rooms, reservations = _build_scheduler(
        (101, RoomType.SINGLE, 100.0),
        (102, RoomType.SINGLE, 100.0),
    )
    later = reservations.create(1, day(5), day(7))
    scheduler.schedule_one(later.reservation_id)
    earlier = reservations.create(2, day(1), day(3))
    scheduler.schedule_one(earlier.reservation_id)

    scheduler.schedule_all()

    assert rooms.get(101).reservation_ids == [earlier.reservation_id, later.reservation_id]
    assert rooms.get(102).reservation_ids == []
    _assert_no_overlap(rooms, reservations)


def test_schedule_all_is_deterministic() -> None:
    def run() -> dict[int, list[int]]:
        scheduler, rooms, reservations = _build_scheduler()
        seed_default_rooms(rooms)
        for offset in range(8):
            reservations.create(offset, day(1 + offset % 3), day(4 + offset % 3))
        scheduler.schedule_all()
        return scheduler.room_assignments()

    assert run() == run()


def test_no_overlap_invariant_after_mixed_operations() -> None:
    scheduler, rooms, reservations = _build_scheduler()
    seed_default_rooms(rooms)
    for index in range(12):
        reservation = reservations.create(index, day(1 + index % 4), day(2 + index % 4 + index % 3))
        scheduler.schedule_one(reservation.reservation_id)
    scheduler.cancel(3)
    scheduler.cancel(7)
    reservations.get(1).status = ReservationStatus.CHECKED_IN
    scheduler.schedule_all()
    scheduler.schedule_one(7)

    _assert_no_overlap(rooms, reservations)
    for reservation in reservations:
        if reservation.assigned_room is None:
            assert reservation.total_cost == 0.0
        else:
            assert reservation.status in {
                ReservationStatus.CONFIRMED,
                ReservationStatus.CHECKED_IN,
                ReservationStatus.CHECKED_OUT,
            }


def test_occupancy_counts_only_rooms_with_active_stays() -> None:
    scheduler, rooms, reservations = _build_scheduler(
        (101, RoomType.SINGLE, 100.0),
        (102, RoomType.SINGLE, 100.0),
        (201, RoomType.DOUBLE, 150.0),
        (202, RoomType.DOUBLE, 150.0),
    )
    first = reservations.create(1, day(1), day(3))
    second = reservations.create(2, day(1), day(3))
    scheduler.schedule_one(first.reservation_id)
    scheduler.schedule_one(second.reservation_id)

    assert scheduler.rooms_used() == 2
    assert scheduler.occupancy_rate() == 50.0

    second.status = ReservationStatus.CHECKED_OUT
    assert scheduler.rooms_used() == 1
    assert scheduler.room_assignments() == {101: [1], 102: [2], 201: [], 202: []}


def test_occupancy_rate_without_rooms_is_zero() -> None:
    scheduler, _, _ = _build_scheduler()
    assert scheduler.rooms_used() == 0
    assert scheduler.occupancy_rate() == 0.0


def test_room_assignments_returns_a_copy() -> None:
    scheduler, rooms, reservations = _build_scheduler((101, RoomType.SINGLE, 100.0))
    reservation = reservations.create(1, day(1), day(3))
    scheduler.schedule_one(reservation.reservation_id)

    snapshot = scheduler.room_assignments()
    snapshot[101].append(99)

    assert rooms.get(101).reservation_ids == [1]


def test_stale_hosted_ids_are_ignored_by_conflict_check() -> None:
    room = Room(room_number=101, room_type=RoomType.SINGLE, price_per_night=100.0)
    room.add_reservation(77)
    reservations = ReservationStore()
    scheduler = Scheduler(RoomStore([room]), reservations)
    reservation = reservations.create(1, day(1), day(3))

    assert scheduler.can_assign(reservation, room)


def test_failed_reschedule_releases_previously_held_room() -> None:
    scheduler, rooms, reservations = _build_scheduler((101, RoomType.SINGLE, 100.0))
    reservation = reservations.create(1, day(1), day(3))
    assert scheduler.schedule_one(reservation.reservation_id)
    assert reservation.assigned_room == 101

    assert not scheduler.schedule_one(reservation.reservation_id, RoomType.DELUXE)

    assert reservation.status == ReservationStatus.PENDING
    assert reservation.assigned_room is None
    assert reservation.total_cost == 0.0
    assert rooms.get(101).reservation_ids == []
    assert scheduler.rooms_used() == 0
