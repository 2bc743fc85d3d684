"""In-process metrics for catalog index builds."""

from __future__ import annotations
import threading
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime


INDEX_BUILDS = "catalog.index.builds"
INDEX_WORKFLOWS = "catalog.index.workflows"
INDEX_SKIPPED = "catalog.index.skipped"
INDEX_BUILD_SECONDS = "catalog.index.build_seconds"
INDEX_TIMEOUTS = "catalog.index.timeouts"


@dataclass(slots=True)
class MetricEvent:
    """Represents a single metric datapoint."""

    name: str
    value: float
    tags: dict[str, str] = field(default_factory=dict)
    recorded_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))


class MetricRecorder:
    """Thread-safe in-memory recorder for metric events."""

    def __init__(self) -> None:
        """Initialise an empty recorder."""
        self._events: list[MetricEvent] = []
        self._lock = threading.Lock()

    def record(self, event: MetricEvent) -> None:
        """Record a metric event."""
        with self._lock:
            self._events.append(event)

    def extend(self, events: Iterable[MetricEvent]) -> None:
        """Record multiple metric events at once."""
        for event in events:
            self.record(event)

    def increment(self, name: str, value: float = 1.0, **tags: str) -> None:
        """Record ``value`` against the counter ``name``."""
        self.record(MetricEvent(name=name, value=value, tags=tags))

    def events(self, name: str | None = None) -> list[MetricEvent]:
        """Return recorded events, optionally only those called ``name``."""
        with self._lock:
            return [event for event in self._events if name in (None, event.name)]

    def summary(self) -> dict[str, dict[str, float]]:
        """Return aggregated metrics grouped by metric name and tag."""
        aggregates: dict[str, dict[str, float]] = defaultdict(
            lambda: defaultdict(float)
        )
        for event in self.events():
            tag_pairs = (f"{key}={value}" for key, value in sorted(event.tags.items()))
            aggregates[event.name][",".join(tag_pairs)] += event.value
        return {name: dict(values) for name, values in aggregates.items()}

    def clear(self) -> None:
        """Clear recorded metrics (useful in tests)."""
        with self._lock:
            self._events.clear()


def record_index_build(
    recorder: MetricRecorder,
    *,
    root: str,
    workflows: int,
    skipped: int,
    duration_seconds: float,
) -> None:
    """Record the outcome of a completed catalog build."""
    recorder.extend(
        [
            MetricEvent(name=INDEX_BUILDS, value=1, tags={"root": root}),
            MetricEvent(name=INDEX_WORKFLOWS, value=workflows, tags={"root": root}),
            MetricEvent(name=INDEX_SKIPPED, value=skipped, tags={"root": root}),
            MetricEvent(
                name=INDEX_BUILD_SECONDS, value=duration_seconds, tags={"root": root}
            ),
        ]
    )


metrics = MetricRecorder()


__all__ = [
    "INDEX_BUILDS",
    "INDEX_BUILD_SECONDS",
    "INDEX_SKIPPED",
    "INDEX_TIMEOUTS",
    "INDEX_WORKFLOWS",
    "MetricEvent",
    "MetricRecorder",
    "metrics",
    "record_index_build",
]
