"""Status-tagged timeline segments."""

from __future__ import annotations

from enum import Enum

from timeled.core.domain.interval import Duration, Instant, Interval


class SegmentStatus(str, Enum):
    """Occupancy state of a segment. Only VACANT segments can be cut."""

    VACANT = "vacant"
    OCCUPIED = "occupied"


class Segment:
    """A contiguous piece of a timeline partition.

    Equality and hashing are structural over (start, end, status), so two
    segments built from the same arguments compare equal. The bounds are
    fixed for the segment's lifetime; only the status may change.
    """

    __slots__ = ("_interval", "_status")

    def __init__(
        self,
        start: Instant,
        end: Instant,
        status: SegmentStatus = SegmentStatus.VACANT,
    ) -> None:
        self._interval = Interval(start, end)
        self._status = SegmentStatus(status)

    @property
    def interval(self) -> Interval:
        return self._interval

    @property
    def start(self) -> Instant:
        return self._interval.start

    @property
    def end(self) -> Instant:
        return self._interval.end

    @property
    def status(self) -> SegmentStatus:
        return self._status

    @property
    def is_vacant(self) -> bool:
        return self._status is SegmentStatus.VACANT

    @property
    def is_occupied(self) -> bool:
        return self._status is SegmentStatus.OCCUPIED

    def duration(self) -> Duration:
        return self._interval.duration()

    def overlaps(self, other: Segment) -> bool:
        """Return True if the two segments' intervals overlap."""
        return self._interval.overlaps(other.interval)

    def set_status(self, status: SegmentStatus) -> None:
        """Change the status in place. Plain strings are normalized to SegmentStatus."""
        self._status = SegmentStatus(status)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Segment):
            return NotImplemented
        return (
            self.start == other.start
            and self.end == other.end
            and self._status == other.status
        )

    def __hash__(self) -> int:
        return hash((self.start, self.end, self._status))

    def __repr__(self) -> str:
        return f"Segment(start={self.start!r}, end={self.end!r}, status={self._status.value!r})"
