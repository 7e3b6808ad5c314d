"""OpenTelemetry metrics instrumentation helpers."""

from __future__ import annotations

import logging
from typing import Mapping

from opentelemetry import metrics
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import ConsoleMetricExporter, PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource

from spoofcheck.core.config import settings

_logger = logging.getLogger(__name__)

_metrics_enabled = False
_meter = None
_provider: MeterProvider | None = None
_reconciliation_duration_hist = None
_verdict_counter = None
_run_counter = None


def configure_metrics() -> None:
    """Initialise the metrics provider if enabled via settings."""

    global _metrics_enabled, _meter, _reconciliation_duration_hist, _verdict_counter, _run_counter, _provider

    if not settings.otel_enabled:
        return
    if _metrics_enabled:
        return

    exporter_name = settings.otel_exporter.lower().strip()
    metric_readers = []

    if exporter_name == "console":
        exporter = ConsoleMetricExporter()
        metric_readers.append(PeriodicExportingMetricReader(exporter))
    elif exporter_name == "prometheus":
        try:
            from opentelemetry.exporter.prometheus import PrometheusMetricReader  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError(
                "Prometheus exporter selected but opentelemetry-exporter-prometheus is not installed."
            ) from exc
        metric_readers.append(PrometheusMetricReader())
    elif exporter_name == "otlp":
        try:
            from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError(
                "OTLP exporter selected but opentelemetry-exporter-otlp is not installed."
            ) from exc
        endpoint = settings.otel_otlp_endpoint
        exporter = OTLPMetricExporter(endpoint=endpoint) if endpoint else OTLPMetricExporter()
        metric_readers.append(PeriodicExportingMetricReader(exporter))
    else:
        _logger.warning("Unsupported OTEL exporter '%s'; defaulting to console", exporter_name)
        metric_readers.append(PeriodicExportingMetricReader(ConsoleMetricExporter()))

    _provider = MeterProvider(metric_readers=metric_readers, resource=Resource.create({"service.name": "spoofcheck"}))
    metrics.set_meter_provider(_provider)
    _meter = metrics.get_meter("spoofcheck")
    _reconciliation_duration_hist = _meter.create_histogram(
        name="spoofcheck.reconciliation.duration",
        unit="s",
        description="Reconciliation execution duration in seconds",
    )
    _verdict_counter = _meter.create_counter(
        name="spoofcheck.reconciliation.verdicts",
        unit="1",
        description="Commit verdicts produced, labelled by verdict",
    )
    _run_counter = _meter.create_counter(
        name="spoofcheck.reconciliation.runs",
        unit="1",
        description="Total reconciliation runs, labelled by mode and outcome",
    )
    _metrics_enabled = True


def record_reconciliation_duration(seconds: float) -> None:
    if _metrics_enabled and _reconciliation_duration_hist is not None:
        _reconciliation_duration_hist.record(max(seconds, 0.0))


def record_verdicts(counts: Mapping[str, int]) -> None:
    if not (_metrics_enabled and _verdict_counter is not None):
        return
    for verdict, count in counts.items():
        if count:
            _verdict_counter.add(count, {"verdict": verdict})


def increment_reconciliation_runs(mode: str, suspicious: bool) -> None:
    if _metrics_enabled and _run_counter is not None:
        _run_counter.add(1, {"mode": mode, "suspicious": str(suspicious).lower()})


def collect_prometheus_metrics() -> tuple[bytes, str]:
    """Render the current metrics in Prometheus text exposition format."""

    from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest

    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST


def shutdown_metrics() -> None:
    global _metrics_enabled, _provider
    if _metrics_enabled and _provider is not None:
        try:
            _provider.shutdown()
        except Exception:  # pragma: no cover - defensive
            _logger.exception("Failed to shutdown metrics provider")
        finally:
            _metrics_enabled = False
            _provider = None
