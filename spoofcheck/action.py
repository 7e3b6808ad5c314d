"""GitHub Action entrypoint: run the spoofing check for the triggering event."""

from __future__ import annotations

import argparse
import json
import logging
import os
from pathlib import Path
from typing import Sequence

from spoofcheck.core.config import settings
from spoofcheck.core.errors import ConfigurationError, SpoofCheckError, TransportError
from spoofcheck.github.client import GitHubClient
from spoofcheck.models.domain import ReconciliationResult, Verdict
from spoofcheck.services.reconciliation import ReconciliationService
from spoofcheck.services.sarif import build_sarif
from spoofcheck.telemetry import sink_from_settings

_logger = logging.getLogger(__name__)

EXIT_PASSED = 0
EXIT_MISMATCH = 1
EXIT_ERROR = 2

PULL_REQUEST_EVENTS = {"pull_request", "pull_request_target"}


def _split_repository(full_name: str | None) -> tuple[str, str]:
    if not full_name or "/" not in full_name:
        raise ConfigurationError(f"Repository must be in owner/repo form, got {full_name!r}")
    owner, repo = full_name.split("/", 1)
    return owner, repo


def load_event(path: str | None) -> dict:
    if not path:
        return {}
    event_path = Path(path)
    if not event_path.exists():
        raise ConfigurationError(f"Event payload not found at {event_path}")
    return json.loads(event_path.read_text(encoding="utf-8"))


def run_push_check(
    client: GitHubClient,
    service: ReconciliationService,
    *,
    repository: str,
    sha: str | None,
    actor: str | None,
) -> ReconciliationResult:
    if not sha or not actor:
        raise ConfigurationError("Push checks need both the commit SHA and the push actor")
    owner, repo = _split_repository(repository)
    commit = client.fetch_commit(owner, repo, sha)
    return service.reconcile_push(commit, actor)


def run_pull_request_check(
    client: GitHubClient,
    service: ReconciliationService,
    *,
    repository: str,
    payload: dict,
) -> ReconciliationResult:
    pull = payload.get("pull_request") or {}
    number = pull.get("number") or payload.get("number")
    if not number:
        raise ConfigurationError("Pull request payload has no number")
    owner, repo = _split_repository(repository)

    head = pull.get("head") or {}
    head_repo = (head.get("repo") or {}).get("full_name") or repository
    head_ref = head.get("ref")
    if not head_ref:
        raise ConfigurationError("Pull request payload has no head ref")
    head_owner, head_name = _split_repository(head_repo)

    commits = client.fetch_pr_commits(owner, repo, int(number))
    activities = client.fetch_all_push_activity(head_owner, head_name, head_ref)
    return service.reconcile_pull_request(
        commits,
        activities,
        expected_commit_count=pull.get("commits"),
    )


def _escape_command(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def emit_annotations(result: ReconciliationResult) -> None:
    for entry in result.verdicts:
        if entry.verdict is Verdict.FULL_MISMATCH:
            print(f"::error::{_escape_command(entry.explanation)}")
    for line in result.partial_mismatches:
        print(f"::warning::{_escape_command(line)}")
    for line in result.warnings:
        print(f"::warning::{_escape_command(line)}")


def write_outputs(values: dict[str, str], path: str | None = None) -> None:
    output_path = path or os.getenv("GITHUB_OUTPUT")
    if not output_path:
        for key, value in values.items():
            _logger.info("output %s=%s", key, value)
        return
    with open(output_path, "a", encoding="utf-8") as handle:
        for key, value in values.items():
            handle.write(f"{key}={value}\n")


def _resolve_token(explicit: str | None) -> str | None:
    return explicit or os.getenv("INPUT_GITHUB_TOKEN") or os.getenv("GITHUB_TOKEN") or settings.github_token


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Detect commits whose identity does not match the pushing actor")
    parser.add_argument("--event-name", default=os.getenv("GITHUB_EVENT_NAME"))
    parser.add_argument("--event-path", default=os.getenv("GITHUB_EVENT_PATH"))
    parser.add_argument("--repository", default=os.getenv("GITHUB_REPOSITORY"))
    parser.add_argument("--sha", default=os.getenv("GITHUB_SHA"))
    parser.add_argument("--actor", default=os.getenv("GITHUB_ACTOR"))
    parser.add_argument("--token", default=None)
    parser.add_argument("--result-path", default=os.getenv("SPOOFCHECK_RESULT_PATH"))
    parser.add_argument("--sarif-path", default=os.getenv("SPOOFCHECK_SARIF_PATH"))
    parser.add_argument(
        "--partial-mismatch-fails",
        action="store_true",
        default=settings.partial_mismatch_fails,
        help="Fail the check on author-only or committer-only mismatches",
    )
    return parser


def main(argv: Sequence[str] | None = None, *, client: GitHubClient | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    owns_client = client is None
    sink = None
    try:
        try:
            sink = sink_from_settings()
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc
        service = ReconciliationService(partial_mismatch_fails=args.partial_mismatch_fails, sink=sink)
        if client is None:
            client = GitHubClient(token=_resolve_token(args.token))
        payload = load_event(args.event_path)
        if args.event_name == "push":
            sender = (payload.get("sender") or {}).get("login")
            result = run_push_check(
                client,
                service,
                repository=args.repository,
                sha=args.sha or payload.get("after"),
                actor=args.actor or sender,
            )
        elif args.event_name in PULL_REQUEST_EVENTS:
            result = run_pull_request_check(client, service, repository=args.repository, payload=payload)
        else:
            raise ConfigurationError(f"Unsupported event {args.event_name!r}; expected push or pull_request")
    except SpoofCheckError as exc:
        message = f"Action failed with {exc}" if isinstance(exc, TransportError) else f"Action failed with error: {exc}"
        print(f"::error::{_escape_command(message)}")
        write_outputs({"mismatch": "false", "status": "error"})
        return EXIT_ERROR
    finally:
        if owns_client and client is not None:
            client.close()
        if sink is not None:
            sink.close()

    for line in result.explanations:
        _logger.info("%s", line)
    emit_annotations(result)

    if args.result_path:
        out_path = Path(args.result_path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(result.model_dump_json(indent=2) + "\n", encoding="utf-8")
    if args.sarif_path:
        sarif_path = Path(args.sarif_path)
        sarif_path.parent.mkdir(parents=True, exist_ok=True)
        sarif_path.write_text(json.dumps(build_sarif(result, args.repository), indent=2) + "\n", encoding="utf-8")

    write_outputs(
        {
            "mismatch": "true" if result.suspicious else "false",
            "status": "mismatch" if result.suspicious else "passed",
            "all-covered": "true" if result.all_covered else "false",
        }
    )
    return EXIT_MISMATCH if result.suspicious else EXIT_PASSED


if __name__ == "__main__":
    raise SystemExit(main())
