from __future__ import annotations

import json
import logging
import os
from typing import Any

from prometheus_client import CollectorRegistry, Counter, Gauge, push_to_gateway

from timeled.core.events.events import (
    ReservationFailedEvent,
    SegmentCutEvent,
    SegmentOccupiedEvent,
)

LOGGER = logging.getLogger(__name__)


class PrometheusMetricsSink:
    """Event sink that turns timeline events into Prometheus metrics.

    Metrics live in a private CollectorRegistry so several timelines (or
    tests) never collide on the process-wide default registry.

    Optional environment for ``push_all``:
    - PROMETHEUS_PUSHGATEWAY_URL: URL to the Pushgateway.
      Example: http://pushgateway.monitoring.svc.cluster.local:9091
    - PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON: JSON object used as grouping key.

    Pushing is best-effort: callers should treat it as a side-effect.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._pushgateway_url = os.environ.get("PROMETHEUS_PUSHGATEWAY_URL")
        self._grouping_key = self._load_grouping_key()
        self._registry = registry if registry is not None else CollectorRegistry()

        self._cuts = Counter(
            "timeled_segments_cut",
            "Segments carved out of a timeline.",
            registry=self._registry,
        )
        self._occupied = Counter(
            "timeled_segments_occupied",
            "Segments marked occupied.",
            registry=self._registry,
        )
        self._failures = Counter(
            "timeled_reservation_failures",
            "Reservations that found no vacant segment.",
            labelnames=["scope"],
            registry=self._registry,
        )
        self._segment_count = Gauge(
            "timeled_segment_count",
            "Number of segments in the partition after the last change.",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def is_enabled(self) -> bool:
        return self._pushgateway_url is not None

    @staticmethod
    def _load_grouping_key() -> dict[str, str]:
        raw = os.environ.get("PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON")
        if not raw:
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            LOGGER.warning(
                "Invalid PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON; ignoring"
            )
            return {}

        if not isinstance(data, dict):
            return {}

        grouping: dict[str, str] = {}
        for key, value in data.items():
            if isinstance(key, str) and isinstance(value, str):
                grouping[key] = value
        return grouping

    def on_event(self, event: Any) -> None:
        if isinstance(event, SegmentCutEvent):
            self._cuts.inc()
            self._segment_count.set(event.segment_count)
        elif isinstance(event, SegmentOccupiedEvent):
            self._occupied.inc()
            self._segment_count.set(event.segment_count)
        elif isinstance(event, ReservationFailedEvent):
            scope = "timeline" if event.search_start is None else "search_range"
            self._failures.labels(scope=scope).inc()

    def push_all(self, *, job: str) -> None:
        if not self._pushgateway_url:
            return

        push_to_gateway(
            gateway=self._pushgateway_url,
            job=job,
            registry=self._registry,
            grouping_key=self._grouping_key,
        )

        LOGGER.info(
            "Prometheus metrics pushed",
            extra={"job": job, "grouping_key": self._grouping_key},
        )
