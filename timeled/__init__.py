"""Public API for the timeled package.

Only symbols imported here are considered part of the stable,
supported external interface.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# ----------------------------------------------------------------------
# Config API
# ----------------------------------------------------------------------
from timeled.config.timeline_config import TimelineConfig

# ----------------------------------------------------------------------
# Domain types
# ----------------------------------------------------------------------
from timeled.core.domain.errors import InvalidRange, NoSegmentAvailable, TimelineError
from timeled.core.domain.interval import Interval
from timeled.core.domain.segment import Segment, SegmentStatus
from timeled.core.domain.timeline import CutError, CutOutcome, Timeline
from timeled.core.domain.types import SegmentModel, TimelineSnapshot

# ----------------------------------------------------------------------
# Events
# ----------------------------------------------------------------------
from timeled.core.events.event_bus import EventBus
from timeled.core.events.events import (
    ReservationFailedEvent,
    SegmentCutEvent,
    SegmentOccupiedEvent,
)

# ----------------------------------------------------------------------
# Public API definition
# ----------------------------------------------------------------------

__all__ = [
    # Timeline
    "Timeline",
    "Interval",
    "Segment",
    "SegmentStatus",
    "CutOutcome",
    "CutError",

    # Errors
    "TimelineError",
    "InvalidRange",
    "NoSegmentAvailable",

    # Snapshots
    "SegmentModel",
    "TimelineSnapshot",

    # Config
    "TimelineConfig",

    # Events
    "EventBus",
    "SegmentCutEvent",
    "SegmentOccupiedEvent",
    "ReservationFailedEvent",

    # Version
    "__version__",
]

# ----------------------------------------------------------------------
# Package version
# ----------------------------------------------------------------------

try:
    __version__ = version("timeled")
except PackageNotFoundError:
    __version__ = "0.0.0"
