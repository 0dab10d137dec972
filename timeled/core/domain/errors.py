"""Domain errors raised by intervals, segments and timelines."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from timeled.core.domain.interval import Interval


class TimelineError(Exception):
    """Base class for all timeline domain errors."""


class InvalidRange(TimelineError, ValueError):
    """A range does not satisfy ``start < end``.

    Also raised for a requested duration that is not strictly positive,
    in which case ``start`` and ``end`` describe the would-be cut.
    """

    def __init__(self, start: Any, end: Any, message: str | None = None) -> None:
        self.start = start
        self.end = end
        super().__init__(
            message or f"range requires start < end, got start={start!r} end={end!r}"
        )


class NoSegmentAvailable(TimelineError, LookupError):
    """No vacant segment can hold the requested duration."""

    def __init__(self, duration: Any, search_range: Interval | None = None) -> None:
        self.duration = duration
        self.search_range = search_range

        where = "timeline" if search_range is None else (
            f"search range [{search_range.start!r}, {search_range.end!r})"
        )
        super().__init__(f"no vacant segment of duration {duration!r} in {where}")
