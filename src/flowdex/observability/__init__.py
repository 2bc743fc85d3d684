"""Observability helpers for Flowdex."""

from flowdex.observability.metrics import MetricEvent, MetricRecorder, metrics


__all__ = ["MetricEvent", "MetricRecorder", "metrics"]
