"""
Domain event models.

These events record what happened to a timeline's partition. They are
consumed by loggers, recorders and metrics sinks.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class SegmentCutEvent:
    segment_start: Any
    segment_end: Any
    duration: Any

    search_start: Any | None
    search_end: Any | None

    leftover_before: bool
    leftover_after: bool

    segment_count: int


@dataclass(slots=True)
class SegmentOccupiedEvent:
    segment_start: Any
    segment_end: Any

    segment_count: int


@dataclass(slots=True)
class ReservationFailedEvent:
    duration: Any

    search_start: Any | None
    search_end: Any | None

    reason: str
