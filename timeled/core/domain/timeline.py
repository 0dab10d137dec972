"""Timeline partition and the search-and-cut algorithm.

A timeline owns an ordered list of segments that exactly partitions
``[start, end)``. Reservations carve a sub-interval of the requested
duration out of the shortest vacant segment that can hold it.

Invariants (hold before and after every public call):
- segments are sorted, and every segment starts where the previous one ends
- the first segment starts at ``start``; the last one ends at ``end``
- adjacent segments with the same status are never merged
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from timeled.core.domain.errors import InvalidRange, NoSegmentAvailable
from timeled.core.domain.interval import Duration, Instant, Interval
from timeled.core.domain.segment import Segment, SegmentStatus
from timeled.core.domain.types import SegmentModel, TimelineSnapshot
from timeled.core.events.events import (
    ReservationFailedEvent,
    SegmentCutEvent,
    SegmentOccupiedEvent,
)
from timeled.core.events.sinks.null_event_bus import NullEventBus

if TYPE_CHECKING:
    from timeled.core.events.event_bus import EventBus

LOGGER = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result models for the non-raising operations
# ---------------------------------------------------------------------------


class CutError(str, Enum):
    INVALID_RANGE = "invalid_range"
    NO_SEGMENT_AVAILABLE = "no_segment_available"


@dataclass(slots=True)
class CutOutcome:
    """Result of ``try_get_and_cut_segment`` / ``try_occupy_segment``.

    Exactly one of ``segment`` and ``error`` is set.
    """

    segment: Segment | None
    error: CutError | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Timeline:
    """Gap-free partition of ``[start, end)`` into vacant and occupied segments.

    Not safe for concurrent mutation; callers sharing a timeline across
    threads must serialize access themselves.
    """

    def __init__(
        self,
        start: Instant,
        end: Instant,
        *,
        event_bus: EventBus | None = None,
    ) -> None:
        if not start < end:
            raise InvalidRange(start, end)

        self._start = start
        self._end = end
        self._event_bus = event_bus if event_bus is not None else NullEventBus()

        self._segments: list[Segment] = [Segment(start, end)]

    @property
    def start(self) -> Instant:
        return self._start

    @property
    def end(self) -> Instant:
        return self._end

    @property
    def segments(self) -> tuple[Segment, ...]:
        """Ordered, read-only view of the partition."""
        return tuple(self._segments)

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def get_and_cut_segment(
        self,
        duration: Duration,
        search_range: Interval | None = None,
    ) -> Segment:
        """Carve a vacant segment of exactly ``duration`` out of the timeline.

        The returned segment starts at the later of the chosen segment's start
        and ``search_range.start``. Raises NoSegmentAvailable (leaving the
        partition untouched) when no single vacant segment can hold it.
        """
        self._check_duration(duration)

        try:
            index, candidate = self._find_shortest_available_segment(duration, search_range)
        except NoSegmentAvailable as exc:
            LOGGER.debug(
                "No segment available",
                extra={"duration": duration, "search_range": search_range},
            )
            self._event_bus.emit(
                ReservationFailedEvent(
                    duration=duration,
                    search_start=None if search_range is None else search_range.start,
                    search_end=None if search_range is None else search_range.end,
                    reason=str(exc),
                )
            )
            raise

        return self._cut_segment(index, candidate, duration, search_range)

    def occupy_segment(
        self,
        duration: Duration,
        search_range: Interval | None = None,
    ) -> Segment:
        """Cut a segment like ``get_and_cut_segment`` and mark it occupied."""
        segment = self.get_and_cut_segment(duration, search_range)
        segment.set_status(SegmentStatus.OCCUPIED)

        self._event_bus.emit(
            SegmentOccupiedEvent(
                segment_start=segment.start,
                segment_end=segment.end,
                segment_count=len(self._segments),
            )
        )
        return segment

    def try_get_and_cut_segment(
        self,
        duration: Duration,
        search_range: Interval | None = None,
    ) -> CutOutcome:
        return self._try(self.get_and_cut_segment, duration, search_range)

    def try_occupy_segment(
        self,
        duration: Duration,
        search_range: Interval | None = None,
    ) -> CutOutcome:
        return self._try(self.occupy_segment, duration, search_range)

    def vacant_capacity(self, search_range: Interval | None = None) -> Duration:
        """Total vacant time, optionally clipped to ``search_range``.

        Returns a zero duration when no vacant time lies in range. The total may exceed
        what a single reservation can get, since vacancy is never merged
        across occupied segments.
        """
        total = self._start - self._start
        for segment in self._segments:
            if not segment.is_vacant:
                continue

            available = self._available_range(segment, search_range)
            if available is None:
                continue

            total += available.duration()
        return total

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def snapshot(self) -> TimelineSnapshot:
        """Export the partition as a validated pydantic model."""
        return TimelineSnapshot(
            start=self._start,
            end=self._end,
            segments=[
                SegmentModel(start=s.start, end=s.end, status=s.status.value)
                for s in self._segments
            ],
        )

    @classmethod
    def from_snapshot(
        cls,
        snapshot: TimelineSnapshot,
        *,
        event_bus: EventBus | None = None,
    ) -> Timeline:
        """Rebuild a timeline from a snapshot.

        The snapshot model has already validated the partition invariants.
        """
        timeline = cls(snapshot.start, snapshot.end, event_bus=event_bus)
        timeline._segments = [
            Segment(s.start, s.end, SegmentStatus(s.status))
            for s in snapshot.segments
        ]
        return timeline

    # ------------------------------------------------------------------
    # Search and cut
    # ------------------------------------------------------------------

    def _check_duration(self, duration: Duration) -> None:
        # Zero of the host's duration type, whatever its granularity.
        zero = self._start - self._start
        if not duration > zero:
            raise InvalidRange(
                self._start,
                self._start,
                f"requested duration must be positive, got {duration!r}",
            )

    @staticmethod
    def _available_range(segment: Segment, search_range: Interval | None) -> Interval | None:
        if search_range is None:
            return segment.interval
        return segment.interval.intersection(search_range)

    def _find_shortest_available_segment(
        self,
        duration: Duration,
        search_range: Interval | None,
    ) -> tuple[int, Segment]:
        """Return (index, segment) of the best-fit vacant segment.

        Candidates are the vacant segments whose part inside ``search_range``
        (or the whole segment when no range is given) is at least
        ``duration`` long. The one with the smallest such part wins; on a tie
        the earliest one wins. Occupied segments are never bridged.
        """
        best: tuple[int, Segment] | None = None
        best_duration = None

        for index, segment in enumerate(self._segments):
            if segment.is_occupied:
                continue

            available = self._available_range(segment, search_range)
            if available is None:
                continue

            available_duration = available.duration()
            if available_duration < duration:
                continue

            if best is None or available_duration < best_duration:
                best = (index, segment)
                best_duration = available_duration

        if best is None:
            raise NoSegmentAvailable(duration, search_range)
        return best

    def _cut_segment(
        self,
        index: int,
        segment: Segment,
        duration: Duration,
        search_range: Interval | None,
    ) -> Segment:
        """Replace ``segment`` with [before], middle, [after]; return middle.

        Only runs after the find step has certified there is room.
        """
        del self._segments[index]

        new_start = segment.start
        if search_range is not None and search_range.start > new_start:
            new_start = search_range.start

        new_segment = Segment(new_start, new_start + duration)

        leftover_before = segment.start < new_segment.start
        if leftover_before:
            self._segments.insert(index, Segment(segment.start, new_segment.start))
            index += 1

        self._segments.insert(index, new_segment)
        index += 1

        leftover_after = new_segment.end < segment.end
        if leftover_after:
            self._segments.insert(index, Segment(new_segment.end, segment.end))

        LOGGER.debug(
            "Segment cut",
            extra={
                "segment_start": new_segment.start,
                "segment_end": new_segment.end,
                "segment_count": len(self._segments),
            },
        )
        self._event_bus.emit(
            SegmentCutEvent(
                segment_start=new_segment.start,
                segment_end=new_segment.end,
                duration=duration,
                search_start=None if search_range is None else search_range.start,
                search_end=None if search_range is None else search_range.end,
                leftover_before=leftover_before,
                leftover_after=leftover_after,
                segment_count=len(self._segments),
            )
        )
        return new_segment

    @staticmethod
    def _try(operation, duration: Duration, search_range: Interval | None) -> CutOutcome:
        try:
            segment = operation(duration, search_range)
        except InvalidRange as exc:
            return CutOutcome(segment=None, error=CutError.INVALID_RANGE, message=str(exc))
        except NoSegmentAvailable as exc:
            return CutOutcome(segment=None, error=CutError.NO_SEGMENT_AVAILABLE, message=str(exc))
        return CutOutcome(segment=segment)

    def __repr__(self) -> str:
        return (
            f"Timeline(start={self._start!r}, end={self._end!r}, "
            f"segments={len(self._segments)})"
        )
