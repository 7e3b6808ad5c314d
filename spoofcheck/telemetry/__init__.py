"""Telemetry utilities for exporting reconciliation events and metrics."""

from .event_sink import EventSink, FileEventSink, NullEventSink, sink_from_settings
from .metrics import (
    configure_metrics,
    record_reconciliation_duration,
    record_verdicts,
    increment_reconciliation_runs,
    shutdown_metrics,
    collect_prometheus_metrics,
)

__all__ = [
    "EventSink",
    "FileEventSink",
    "NullEventSink",
    "sink_from_settings",
    "configure_metrics",
    "record_reconciliation_duration",
    "record_verdicts",
    "increment_reconciliation_runs",
    "shutdown_metrics",
    "collect_prometheus_metrics",
]
