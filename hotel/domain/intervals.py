"""Half-open stay intervals, overlap testing and night counting."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class StayInterval:
    """A ``[check_in, check_out)`` range; the check-out instant is excluded."""

    check_in: datetime
    check_out: datetime

    @property
    def nights(self) -> int:
        return count_nights(self.check_in, self.check_out)

    def overlaps(self, other: StayInterval) -> bool:
        return intervals_overlap(
            self.check_in,
            self.check_out,
            other.check_in,
            other.check_out,
        )


def intervals_overlap(
    first_start: datetime,
    first_end: datetime,
    second_start: datetime,
    second_end: datetime,
) -> bool:
    """Exact half-open overlap test; touching endpoints do not conflict."""
    return not (first_end <= second_start or first_start >= second_end)


def count_nights(check_in: datetime, check_out: datetime) -> int:
    """Count calendar-day boundaries crossed between check-in and check-out.

    A late-evening arrival leaving the next morning is one night even though
    fewer than 24 hours elapse. Non-positive spans yield 0.
    """
    span = (check_out.date() - check_in.date()).days
    return max(0, span)


def make_instant(
    year: int,
    month: int,
    day: int,
    hour: int = 14,
    minute: int = 0,
) -> datetime:
    """Build a naive local instant from calendar fields.

    Raises ``ValueError`` for impossible dates such as February 30th.
    """
    return datetime(year, month, day, hour, minute)
