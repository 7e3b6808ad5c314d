from __future__ import annotations

from fastapi.testclient import TestClient

from spoofcheck.dependencies import get_event_sink, get_reconciliation_service
from spoofcheck.main import create_app
from spoofcheck.services.reconciliation import ReconciliationService
from spoofcheck.telemetry import NullEventSink


def _build_test_client(**service_kwargs) -> TestClient:
    # Reset cached dependencies to avoid cross-test contamination.
    get_event_sink.cache_clear()
    get_reconciliation_service.cache_clear()

    app = create_app()
    sink = NullEventSink()
    service_kwargs.setdefault("partial_mismatch_fails", False)
    service = ReconciliationService(sink=sink, **service_kwargs)
    app.dependency_overrides[get_event_sink] = lambda: sink
    app.dependency_overrides[get_reconciliation_service] = lambda: service
    return TestClient(app)


def test_healthcheck():
    client = _build_test_client()
    assert client.get("/healthz").json() == {"status": "ok"}


def test_push_reconciliation_flags_spoofed_commit():
    client = _build_test_client()
    response = client.post(
        "/v1/reconciliation/push",
        json={
            "commit": {"sha": "def456", "message": "Sneaky", "author": "mallory", "committer": "mallory"},
            "actor": "alice",
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert body["suspicious"] is True
    assert body["mode"] == "dual"
    assert body["verdicts"][0]["verdict"] == "full_mismatch"


def test_push_reconciliation_accepts_single_mode():
    client = _build_test_client()
    response = client.post(
        "/v1/reconciliation/push",
        json={"commit": {"sha": "abc123", "author": "alice"}, "actor": "alice", "mode": "single"},
    )
    body = response.json()
    assert body["suspicious"] is False
    assert body["explanations"] == ["No mismatch detected: Commit by 'alice' was also pushed by 'alice'."]


def test_pull_request_reconciliation_reports_coverage():
    client = _build_test_client()
    payload = {
        "repo": "acme/shop",
        "commits": [
            {"sha": "c1", "message": "one", "author": "alice", "committer": "alice"},
            {"sha": "c2", "message": "two", "author": "bob", "committer": "merge-bot"},
            {"sha": "c3", "message": "three", "author": "alice", "committer": "alice"},
        ],
        "activities": [
            {"resulting_sha": "c1", "actor": "alice", "kind": "push"},
            {"resulting_sha": "c2", "actor": "merge-bot", "kind": "push"},
        ],
        "expected_commit_count": 3,
    }
    body = client.post("/v1/reconciliation/pull-request", json=payload).json()

    assert body["suspicious"] is False
    assert body["all_covered"] is False
    assert body["coverage"]["unmatched_shas"] == ["c3"]
    assert len(body["partial_mismatches"]) == 1


def test_pull_request_sarif_endpoint():
    client = _build_test_client()
    payload = {
        "repo": "acme/shop",
        "commits": [{"sha": "c1", "message": "one", "author": "mallory", "committer": "mallory"}],
        "activities": [{"resulting_sha": "c1", "actor": "alice", "kind": "force_push"}],
    }
    sarif = client.post("/v1/reconciliation/pull-request/sarif", json=payload).json()
    results = sarif["runs"][0]["results"]
    assert results[0]["ruleId"] == "full_mismatch"
    assert results[0]["level"] == "error"
    assert results[0]["properties"]["repo"] == "acme/shop"


def test_invalid_payload_is_rejected():
    client = _build_test_client()
    response = client.post("/v1/reconciliation/push", json={"commit": {"message": "no sha"}, "actor": "alice"})
    assert response.status_code == 422
