"""Validated half-open time ranges."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from timeled.core.domain.errors import InvalidRange

# Instants and durations are supplied by the host (datetime/timedelta,
# integer nanoseconds, ...). Only ordering, instant + duration and
# instant - instant are relied upon.
Instant = Any
Duration = Any


@dataclass(frozen=True, slots=True)
class Interval:
    """Immutable range ``[start, end)``.

    Invariant:
    - start < end (zero-length intervals are rejected)
    """

    start: Instant
    end: Instant

    def __post_init__(self) -> None:
        if not self.start < self.end:
            raise InvalidRange(self.start, self.end)

    def duration(self) -> Duration:
        """Return ``end - start``."""
        return self.end - self.start

    def overlaps(self, other: Interval) -> bool:
        """Return True if both ranges share more than a boundary instant."""
        return self.start < other.end and self.end > other.start

    def intersection(self, other: Interval) -> Interval | None:
        """Return the overlapping part of both ranges, or None if disjoint."""
        if not self.overlaps(other):
            return None

        start = self.start if self.start > other.start else other.start
        end = self.end if self.end < other.end else other.end
        return Interval(start, end)
