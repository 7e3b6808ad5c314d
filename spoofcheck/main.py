"""Application entrypoint for the commit spoofing check service."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from spoofcheck.core.config import settings
from spoofcheck.routers import reconciliation
from spoofcheck.telemetry import configure_metrics, shutdown_metrics, collect_prometheus_metrics
from spoofcheck.dependencies import get_event_sink


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_metrics()
    yield
    sink = get_event_sink()
    if hasattr(sink, "close"):
        sink.close()
    shutdown_metrics()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Commit Spoofing Check",
        description="Reconciles commit author and committer identities against the actors that pushed them.",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(reconciliation.router)

    @app.get("/healthz", tags=["health"])
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    if settings.otel_exporter.lower().strip() == "prometheus":

        @app.get("/metrics", tags=["metrics"])
        def metrics_endpoint() -> PlainTextResponse:
            payload, content_type = collect_prometheus_metrics()
            return PlainTextResponse(payload, media_type=content_type)

    return app


app = create_app()
