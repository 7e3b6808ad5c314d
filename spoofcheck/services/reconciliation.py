"""Reconciliation of commit identities against the push activity trail."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Optional, Sequence

from spoofcheck.core.config import settings
from spoofcheck.core.errors import IncompleteDataError
from spoofcheck.core.identifiers import new_run_id
from spoofcheck.models.domain import (
    ActivityEvent,
    ActivityKind,
    CommitInfo,
    CommitVerdict,
    Identity,
    IdentityMode,
    MatchedPair,
    ReconciliationResult,
    Verdict,
)
from spoofcheck.services.classifier import classify_pair
from spoofcheck.services.coverage import assess_coverage, coverage_warnings
from spoofcheck.services.matcher import match_commits
from spoofcheck.telemetry import (
    EventSink,
    NullEventSink,
    increment_reconciliation_runs,
    record_reconciliation_duration,
    record_verdicts,
)

_logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _dedupe(values: Sequence) -> list:
    seen: list = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


def _explain(
    commit: CommitInfo,
    verdict: Verdict,
    mode: IdentityMode,
    event: Optional[ActivityEvent],
    incomplete: Optional[IncompleteDataError] = None,
) -> str:
    subject = commit.subject
    if incomplete is not None:
        return (
            f'Commit "{subject}" ({commit.sha}) has no resolvable {incomplete.field} account; '
            "verdict withheld (reduced confidence)."
        )
    if event is None:
        return f'No push activity found for commit "{subject}" ({commit.sha}); verdict withheld.'

    actor = event.actor
    if mode is IdentityMode.SINGLE:
        if verdict is Verdict.CLEAN:
            return f"No mismatch detected: Commit by '{commit.author}' was also pushed by '{actor}'."
        return (
            f'Mismatch detected in commit "{subject}" ({commit.sha}). '
            f'Author is "{commit.author}" while push actor is "{actor}"'
        )

    if verdict is Verdict.CLEAN:
        return (
            f"No mismatch detected: Commit \"{subject}\" ({commit.sha}) by author '{commit.author}' "
            f"and committer '{commit.committer}' was also pushed by '{actor}'."
        )
    if verdict is Verdict.FULL_MISMATCH:
        return (
            f'Mismatch detected in commit "{subject}" ({commit.sha}). Author is "{commit.author}" '
            f'and committer is "{commit.committer}" while push actor is "{actor}"'
        )
    if verdict is Verdict.AUTHOR_MISMATCH:
        return (
            f'Partial mismatch in commit "{subject}" ({commit.sha}): author "{commit.author}" differs '
            f'from push actor "{actor}"; committer "{commit.committer}" matches.'
        )
    return (
        f'Partial mismatch in commit "{subject}" ({commit.sha}): committer "{commit.committer}" differs '
        f'from push actor "{actor}"; author "{commit.author}" matches.'
    )


class ReconciliationService:
    """Matches, classifies and aggregates one batch of commits into a result."""

    def __init__(
        self,
        *,
        partial_mismatch_fails: bool | None = None,
        push_identity_mode: IdentityMode | None = None,
        sink: EventSink | None = None,
    ) -> None:
        if partial_mismatch_fails is None:
            partial_mismatch_fails = settings.partial_mismatch_fails
        self._partial_mismatch_fails = partial_mismatch_fails
        self._push_identity_mode = push_identity_mode or settings.push_identity_mode
        self._sink = sink or NullEventSink()

    def reconcile_push(
        self,
        commit: CommitInfo,
        actor: Identity,
        *,
        mode: IdentityMode | None = None,
    ) -> ReconciliationResult:
        """Check a single pushed commit against the actor that pushed it."""

        event = ActivityEvent(resulting_sha=commit.sha, actor=actor, kind=ActivityKind.PUSH)
        return self.reconcile([commit], [event], mode=mode or self._push_identity_mode)

    def reconcile_pull_request(
        self,
        commits: Sequence[CommitInfo],
        activities: Sequence[ActivityEvent],
        *,
        expected_commit_count: int | None = None,
        mode: IdentityMode = IdentityMode.DUAL,
    ) -> ReconciliationResult:
        """Check every commit of a pull request against the head ref's push activity."""

        return self.reconcile(commits, activities, mode=mode, expected_commit_count=expected_commit_count)

    def reconcile(
        self,
        commits: Sequence[CommitInfo],
        activities: Sequence[ActivityEvent],
        *,
        mode: IdentityMode,
        expected_commit_count: int | None = None,
    ) -> ReconciliationResult:
        started = time.perf_counter()
        pairs = match_commits(commits, activities)
        verdicts = [self._judge(pair, mode) for pair in pairs]
        result = self._build_result(verdicts, mode, expected_commit_count)
        elapsed = time.perf_counter() - started

        counts = result.counts()
        record_reconciliation_duration(elapsed)
        record_verdicts(counts)
        increment_reconciliation_runs(mode.value, result.suspicious)
        self._sink.publish(
            {
                "run_id": new_run_id(),
                "timestamp": _now().isoformat(),
                "mode": mode.value,
                "suspicious": result.suspicious,
                "all_covered": result.all_covered,
                "total_commits": result.coverage.total_commits,
                "missing_commits": result.coverage.missing_commit_count,
                "verdicts": counts,
                "duration_seconds": round(elapsed, 6),
            }
        )
        return result

    def _judge(self, pair: MatchedPair, mode: IdentityMode) -> CommitVerdict:
        commit = pair.commit
        incomplete: IncompleteDataError | None = None
        event: ActivityEvent | None = None
        try:
            verdict, event = classify_pair(pair, mode)
        except IncompleteDataError as exc:
            _logger.warning("Withholding verdict for %s: %s", commit.sha, exc)
            verdict, incomplete = Verdict.UNMATCHED, exc

        return CommitVerdict(
            sha=commit.sha,
            message=commit.message,
            author=commit.author,
            committer=commit.committer if mode is IdentityMode.DUAL else None,
            verdict=verdict,
            matched_actors=_dedupe([e.actor for e in pair.events if e.actor]),
            matched_kinds=_dedupe([e.kind for e in pair.events]),
            reduced_confidence=incomplete is not None,
            explanation=_explain(commit, verdict, mode, event, incomplete),
        )

    def _build_result(
        self,
        verdicts: list[CommitVerdict],
        mode: IdentityMode,
        expected_commit_count: int | None,
    ) -> ReconciliationResult:
        coverage = assess_coverage(verdicts, expected_commit_count)
        classified = [entry for entry in verdicts if entry.verdict is not Verdict.UNMATCHED]
        partial = [entry.explanation for entry in classified if entry.verdict.is_partial]
        reduced = [entry.sha for entry in verdicts if entry.reduced_confidence]

        suspicious = any(entry.verdict is Verdict.FULL_MISMATCH for entry in classified)
        if self._partial_mismatch_fails and partial:
            suspicious = True

        warnings = coverage_warnings(coverage)
        warnings.extend(entry.explanation for entry in verdicts if entry.reduced_confidence)

        return ReconciliationResult(
            mode=mode,
            suspicious=suspicious,
            all_covered=coverage.all_covered,
            verdicts=verdicts,
            explanations=[entry.explanation for entry in classified],
            partial_mismatches=partial,
            reduced_confidence=reduced,
            warnings=warnings,
            coverage=coverage,
        )


def reconcile_push(commit: CommitInfo, actor: Identity, *, mode: IdentityMode | None = None) -> ReconciliationResult:
    return ReconciliationService().reconcile_push(commit, actor, mode=mode)


def reconcile_pull_request(
    commits: Sequence[CommitInfo],
    activities: Sequence[ActivityEvent],
    *,
    expected_commit_count: int | None = None,
) -> ReconciliationResult:
    return ReconciliationService().reconcile_pull_request(
        commits, activities, expected_commit_count=expected_commit_count
    )
