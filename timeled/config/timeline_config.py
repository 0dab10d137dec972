"""Timeline configuration model.

This module defines the TimelineConfig schema used to parse timeline bounds
and event wiring from JSON and build a ready-to-use Timeline.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from timeled.core.domain.timeline import Timeline
from timeled.core.events.event_bus import EventBus
from timeled.core.events.event_sink import EventSink
from timeled.core.events.sinks.file_recorder import FileRecorderSink
from timeled.core.events.sinks.sink_logging import LoggingEventSink
from timeled.metrics.prometheus_metrics import PrometheusMetricsSink

EVENTS_LOGGER_NAME = "timeled.events"


class TimelineConfig(BaseModel):
    """Bounds plus optional event sinks for a timeline.

    JSON example:
        {
          "start": "2025-03-23T00:00:00",
          "end": "2025-03-26T00:00:00",
          "event_log_path": "/var/log/timeled/events.jsonl",
          "log_events": true
        }
    """

    start: datetime
    end: datetime

    event_log_path: str | None = Field(default=None, min_length=1)
    log_events: bool = False
    metrics: bool = False

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_json_obj(cls, obj: dict[str, Any]) -> TimelineConfig:
        """Create a TimelineConfig instance from a JSON-compatible object."""
        return cls.model_validate(obj)

    @model_validator(mode="after")
    def validate_bounds(self) -> TimelineConfig:
        try:
            ordered = self.start < self.end
        except TypeError as exc:
            raise ValueError(f"start and end are not comparable: {exc}") from exc
        if not ordered:
            raise ValueError("end must be later than start")
        return self

    def build_event_bus(self) -> EventBus:
        sinks: list[EventSink] = []

        if self.log_events:
            sinks.append(LoggingEventSink(logging.getLogger(EVENTS_LOGGER_NAME)))
        if self.event_log_path is not None:
            sinks.append(FileRecorderSink(Path(self.event_log_path)))
        if self.metrics:
            sinks.append(PrometheusMetricsSink())

        return EventBus(sinks=sinks)

    def build(self) -> Timeline:
        """Return a fresh single-segment timeline wired to the configured sinks."""
        return Timeline(self.start, self.end, event_bus=self.build_event_bus())
