"""Domain data models for commit identity reconciliation."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


Identity = str
"""A hosting-platform account login, e.g. ``alice``."""


def identities_equal(left: Optional[Identity], right: Optional[Identity]) -> bool:
    """Compare two logins the way GitHub does (case-insensitively)."""

    if left is None or right is None:
        return False
    return left.casefold() == right.casefold()


class ActivityKind(str, Enum):
    """Ref update kinds recorded in the repository activity trail."""

    PUSH = "push"
    FORCE_PUSH = "force_push"


class IdentityMode(str, Enum):
    """How many commit identities take part in classification."""

    SINGLE = "single"
    DUAL = "dual"


class Verdict(str, Enum):
    """Trust state assigned to one commit."""

    CLEAN = "clean"
    AUTHOR_MISMATCH = "author_mismatch"
    COMMITTER_MISMATCH = "committer_mismatch"
    FULL_MISMATCH = "full_mismatch"
    UNMATCHED = "unmatched"

    @property
    def is_partial(self) -> bool:
        return self in (Verdict.AUTHOR_MISMATCH, Verdict.COMMITTER_MISMATCH)


class CommitInfo(BaseModel):
    """Normalised identity record for one commit."""

    model_config = ConfigDict(frozen=True)

    sha: str
    message: str = ""
    author: Optional[Identity] = Field(
        None, description="Login of the commit author; None when the platform could not resolve the account."
    )
    committer: Optional[Identity] = Field(
        None, description="Login of the committer; None when the platform could not resolve the account."
    )

    @property
    def subject(self) -> str:
        return self.message.splitlines()[0] if self.message else ""


class ActivityEvent(BaseModel):
    """Normalised push or force-push entry from the activity trail."""

    model_config = ConfigDict(frozen=True)

    resulting_sha: str = Field(..., description="SHA the ref pointed to after the push.")
    actor: Optional[Identity] = Field(
        None, description="Login of the pushing account; None for deleted or unresolvable accounts."
    )
    kind: ActivityKind = ActivityKind.PUSH


class MatchedPair(BaseModel):
    """A commit together with every activity event that produced its SHA."""

    commit: CommitInfo
    events: list[ActivityEvent] = Field(default_factory=list)

    @property
    def is_matched(self) -> bool:
        return bool(self.events)


class CommitVerdict(BaseModel):
    """Per-commit outcome of a reconciliation run."""

    sha: str
    message: str
    author: Optional[Identity] = None
    committer: Optional[Identity] = None
    verdict: Verdict
    matched_actors: list[Identity] = Field(default_factory=list)
    matched_kinds: list[ActivityKind] = Field(default_factory=list)
    reduced_confidence: bool = False
    explanation: str = ""


class CoverageReport(BaseModel):
    """Whether every commit under review was tied to an activity event."""

    total_commits: int
    matched_commits: int
    unmatched_shas: list[str] = Field(default_factory=list)
    unresolved_shas: list[str] = Field(
        default_factory=list,
        description="Commits matched to push activity whose verdict was withheld for a missing identity.",
    )
    missing_commit_count: int = Field(
        0, description="Commits reported by the platform but absent from the fetched pages."
    )

    @property
    def all_covered(self) -> bool:
        return not self.unmatched_shas and not self.unresolved_shas and self.missing_commit_count == 0


class ReconciliationResult(BaseModel):
    """Aggregate result handed to the CI orchestration layer."""

    mode: IdentityMode
    suspicious: bool
    all_covered: bool
    verdicts: list[CommitVerdict] = Field(default_factory=list)
    explanations: list[str] = Field(default_factory=list)
    partial_mismatches: list[str] = Field(
        default_factory=list,
        description="Explanation lines for author-only or committer-only mismatches; never failing by default.",
    )
    reduced_confidence: list[str] = Field(
        default_factory=list, description="SHAs whose identities could not be resolved."
    )
    warnings: list[str] = Field(default_factory=list)
    coverage: CoverageReport

    def verdict_for(self, sha: str) -> Optional[Verdict]:
        for entry in self.verdicts:
            if entry.sha == sha:
                return entry.verdict
        return None

    def counts(self) -> dict[str, int]:
        totals = {verdict.value: 0 for verdict in Verdict}
        for entry in self.verdicts:
            totals[entry.verdict.value] += 1
        return totals
