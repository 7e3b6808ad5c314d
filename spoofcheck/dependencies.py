"""Application dependency wiring."""

from __future__ import annotations

from functools import lru_cache

from spoofcheck.services.reconciliation import ReconciliationService
from spoofcheck.telemetry import sink_from_settings, EventSink


@lru_cache
def get_event_sink() -> EventSink:
    return sink_from_settings()


@lru_cache
def get_reconciliation_service() -> ReconciliationService:
    return ReconciliationService(sink=get_event_sink())
