#!/usr/bin/env python3
"""Validate local hotel scheduler environment readiness."""

from __future__ import annotations

import importlib
import sys
from datetime import datetime
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from hotel.domain.models import ReservationStatus
from hotel.repository.stores import ReservationStore, RoomStore, seed_default_rooms
from hotel.services.scheduler_service import Scheduler

SEPARATOR_LINE = "=" * 44


def _print_result(name: str, success: bool, detail: str = "") -> tuple[bool, str]:
    if success:
        return True, f"[PASS] {name}{detail}"
    return False, f"[FAIL] {name}: {detail}"


def _check_packages() -> tuple[bool, str]:
    package_specs = [
        ("fastapi", "fastapi"),
        ("uvicorn", "uvicorn"),
        ("pydantic", "pydantic"),
        ("httpx", "httpx"),
        ("pytest", "pytest"),
    ]
    import_errors: list[str] = []
    for module_name, dist_name in package_specs:
        try:
            importlib.import_module(module_name)
            version(dist_name)
        except (ImportError, PackageNotFoundError) as exc:
            import_errors.append(f"{module_name} ({exc})")
    if import_errors:
        return _print_result(
            "Required packages",
            False,
            "missing/unimportable -> " + "; ".join(import_errors),
        )
    return _print_result("Required packages: all importable", True)


def _check_scheduler_smoke() -> tuple[bool, str]:
    """Two overlapping SINGLE stays must land in rooms 101 and 102."""
    try:
        rooms = RoomStore()
        reservations = ReservationStore()
        seed_default_rooms(rooms)
        scheduler = Scheduler(rooms, reservations)

        first = reservations.create(1, datetime(2030, 1, 1, 14), datetime(2030, 1, 3, 11))
        second = reservations.create(2, datetime(2030, 1, 2, 14), datetime(2030, 1, 4, 11))
        scheduler.schedule_all()

        if (first.assigned_room, second.assigned_room) != (101, 102):
            raise RuntimeError(
                f"unexpected rooms {first.assigned_room}, {second.assigned_room}"
            )
        if first.status != ReservationStatus.CONFIRMED or first.total_cost != 200.0:
            raise RuntimeError("first reservation was not confirmed at 200.0")
        return _print_result(
            "Scheduler smoke run",
            True,
            f": occupancy={scheduler.occupancy_rate():.1f}%",
        )
    except Exception as exc:
        return _print_result("Scheduler smoke run", False, str(exc))


def main() -> int:
    results: list[str] = []
    all_passed = True

    if sys.version_info >= (3, 10):
        ok, line = _print_result("Python " + sys.version.split()[0], True)
    else:
        ok, line = _print_result(
            "Python version >= 3.10",
            False,
            f"found {sys.version.split()[0]}",
        )
    results.append(line)
    all_passed = all_passed and ok

    for check in (_check_packages, _check_scheduler_smoke):
        ok, line = check()
        results.append(line)
        all_passed = all_passed and ok

    print(SEPARATOR_LINE)
    print(" Hotel Scheduler Environment Validation")
    print(SEPARATOR_LINE)
    for line in results:
        print(f" {line}")
    print(SEPARATOR_LINE)
    if all_passed:
        print(" All checks passed. Environment is ready.")
        print(SEPARATOR_LINE)
        return 0
    print(" One or more checks failed.")
    print(SEPARATOR_LINE)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
