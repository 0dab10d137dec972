"""Serialized timeline models.

These Pydantic models are the exchange format for timeline state (snapshots
a host persists or ships elsewhere). They mirror the JSON Schemas in
``timeled/core/schemas`` and intentionally prioritize structural clarity
over minimal class size.
"""

# pylint: disable=missing-class-docstring,missing-function-docstring
from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Instants are ISO-8601 datetimes or integer timestamps (e.g. ns since epoch).
InstantValue = datetime | int
SegmentStatusValue = Literal["vacant", "occupied"]


def _ordered(start: InstantValue, end: InstantValue, what: str) -> None:
    """Raise ValueError unless start < end and both are comparable."""
    if isinstance(start, datetime) != isinstance(end, datetime):
        raise ValueError(f"{what} start and end must be the same kind of instant")
    try:
        ordered = start < end
    except TypeError as exc:
        # e.g. naive vs. aware datetimes
        raise ValueError(f"{what} start and end are not comparable: {exc}") from exc
    if not ordered:
        raise ValueError(f"{what} requires start < end")


# ---------------------------------------------------------------------------
# Segment
# ---------------------------------------------------------------------------


class SegmentModel(BaseModel):
    start: InstantValue
    end: InstantValue
    status: SegmentStatusValue = Field(
        "vacant",
        description="Occupancy state of the segment.",
    )

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def validate_bounds(self) -> SegmentModel:
        _ordered(self.start, self.end, "segment")
        return self


# ---------------------------------------------------------------------------
# Timeline snapshot
# ---------------------------------------------------------------------------


class TimelineSnapshot(BaseModel):
    """
    Full partition of a timeline.

    Enforces the partition invariants the JSON schema cannot express:
    - segments are contiguous (each start equals the previous end)
    - the first segment starts at ``start`` and the last one ends at ``end``
    """

    start: InstantValue
    end: InstantValue
    segments: list[SegmentModel] = Field(..., min_length=1)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def validate_partition(self) -> TimelineSnapshot:
        _ordered(self.start, self.end, "timeline")

        if self.segments[0].start != self.start:
            raise ValueError("first segment must start at the timeline start")
        if self.segments[-1].end != self.end:
            raise ValueError("last segment must end at the timeline end")

        for prev, nxt in zip(self.segments, self.segments[1:]):
            if nxt.start != prev.end:
                raise ValueError(
                    f"segments must be contiguous: gap or overlap between "
                    f"{prev.end!r} and {nxt.start!r}"
                )
        return self

    def occupied(self) -> list[SegmentModel]:
        return [s for s in self.segments if s.status == "occupied"]
