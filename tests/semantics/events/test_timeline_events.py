"""
Semantic test: Timeline domain events.

Invariant:
Every successful cut emits one SegmentCutEvent, every occupation additionally
emits one SegmentOccupiedEvent, and every failed search emits one
ReservationFailedEvent. Sinks receive events in emission order.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta
from typing import Any

import pytest

from timeled.core.domain.errors import NoSegmentAvailable
from timeled.core.domain.interval import Interval
from timeled.core.domain.timeline import Timeline
from timeled.core.events.event_bus import EventBus
from timeled.core.events.events import (
    ReservationFailedEvent,
    SegmentCutEvent,
    SegmentOccupiedEvent,
)
from timeled.core.events.sinks.file_recorder import FileRecorderSink
from timeled.core.events.sinks.null_event_bus import NullEventBus
from timeled.core.events.sinks.sink_logging import LoggingEventSink

START = datetime(2025, 3, 23)
END = datetime(2025, 3, 26)
HOUR = timedelta(hours=1)


class _CollectingSink:
    def __init__(self) -> None:
        self.events: list[Any] = []
        self.closed = False

    def on_event(self, event: Any) -> None:
        self.events.append(event)

    def close(self) -> None:
        self.closed = True


def test_cut_and_occupy_events() -> None:
    sink = _CollectingSink()
    timeline = Timeline(START, END, event_bus=EventBus(sinks=[sink]))

    timeline.occupy_segment(12 * HOUR, Interval(START + 24 * HOUR, START + 48 * HOUR))

    cut, occupied = sink.events
    assert cut == SegmentCutEvent(
        segment_start=START + 24 * HOUR,
        segment_end=START + 36 * HOUR,
        duration=12 * HOUR,
        search_start=START + 24 * HOUR,
        search_end=START + 48 * HOUR,
        leftover_before=True,
        leftover_after=True,
        segment_count=3,
    )
    assert occupied == SegmentOccupiedEvent(
        segment_start=START + 24 * HOUR,
        segment_end=START + 36 * HOUR,
        segment_count=3,
    )


def test_failed_search_emits_failure_event() -> None:
    sink = _CollectingSink()
    timeline = Timeline(START, END, event_bus=EventBus(sinks=[sink]))

    with pytest.raises(NoSegmentAvailable):
        timeline.get_and_cut_segment(4 * 24 * HOUR)

    (event,) = sink.events
    assert isinstance(event, ReservationFailedEvent)
    assert event.duration == 4 * 24 * HOUR
    assert event.search_start is None
    assert event.search_end is None
    assert event.reason


def test_default_bus_discards_events() -> None:
    timeline = Timeline(START, END)

    assert isinstance(timeline.event_bus, NullEventBus)
    timeline.occupy_segment(HOUR)


def test_event_bus_close_is_idempotent() -> None:
    sink = _CollectingSink()
    bus = EventBus()
    bus.register(sink)

    bus.close()
    bus.close()

    assert sink.closed
    assert bus.sinks == (sink,)


def test_file_recorder_writes_json_lines(tmp_path) -> None:
    path = tmp_path / "events" / "timeline.jsonl"
    recorder = FileRecorderSink(path)
    bus = EventBus(sinks=[recorder])
    timeline = Timeline(START, END, event_bus=bus)

    timeline.occupy_segment(24 * HOUR)
    with pytest.raises(NoSegmentAvailable):
        timeline.get_and_cut_segment(72 * HOUR)
    bus.close()

    records = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert [r["event_type"] for r in records] == [
        "SegmentCutEvent",
        "SegmentOccupiedEvent",
        "ReservationFailedEvent",
    ]
    assert records[0]["segment_start"] == str(START)
    assert records[0]["duration"] == str(24 * HOUR)
    assert records[0]["leftover_before"] is False
    assert records[0]["leftover_after"] is True
    assert records[0]["segment_count"] == 2


def test_logging_sink_logs_domain_events(caplog) -> None:
    logger = logging.getLogger("timeled.test.events")
    timeline = Timeline(START, END, event_bus=EventBus(sinks=[LoggingEventSink(logger)]))

    with caplog.at_level(logging.INFO, logger="timeled.test.events"):
        timeline.get_and_cut_segment(HOUR)

    (record,) = [r for r in caplog.records if r.name == "timeled.test.events"]
    assert record.getMessage() == "domain_event"
    assert record.event_type == "SegmentCutEvent"
    assert isinstance(record.event, SegmentCutEvent)
