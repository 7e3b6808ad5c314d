"""Application configuration via environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

from spoofcheck.models.domain import IdentityMode


class Settings(BaseSettings):
    """Service-wide configuration options."""

    api_v1_prefix: str = "/v1"
    log_level: str = "INFO"
    github_token: str | None = None
    github_api_url: str = "https://api.github.com"
    github_api_version: str = "2022-11-28"
    http_timeout_seconds: float = 30.0
    page_size: int = 100
    max_pages: int = 1
    push_identity_mode: IdentityMode = IdentityMode.DUAL
    partial_mismatch_fails: bool = False
    timeseries_backend: str = "off"
    timeseries_path: str = "data/reconciliation_events.jsonl"
    otel_enabled: bool = False
    otel_exporter: str = "console"
    otel_otlp_endpoint: str | None = None

    model_config = SettingsConfigDict(env_prefix="spoofcheck_", env_file=".env", extra="ignore")


settings = Settings()
