import pytest

from spoofcheck.core.config import Settings
from spoofcheck.telemetry.event_sink import FileEventSink, NullEventSink, sink_from_settings


def test_sink_from_settings_defaults_to_null(monkeypatch):
    monkeypatch.setattr("spoofcheck.telemetry.event_sink.settings", Settings(timeseries_backend="off"))
    assert isinstance(sink_from_settings(), NullEventSink)


def test_sink_from_settings_file_backend(monkeypatch, tmp_path):
    settings = Settings(timeseries_backend="file", timeseries_path=str(tmp_path / "events.jsonl"))
    monkeypatch.setattr("spoofcheck.telemetry.event_sink.settings", settings)
    sink = sink_from_settings()
    assert isinstance(sink, FileEventSink)
    assert sink.path == tmp_path / "events.jsonl"


def test_sink_from_settings_rejects_unknown_backend(monkeypatch):
    monkeypatch.setattr("spoofcheck.telemetry.event_sink.settings", Settings(timeseries_backend="kafka"))
    with pytest.raises(ValueError):
        sink_from_settings()
