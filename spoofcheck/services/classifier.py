"""Assigns a trust verdict to a commit given the actors that pushed it."""

from __future__ import annotations

from typing import Optional

from spoofcheck.core.errors import IncompleteDataError
from spoofcheck.models.domain import (
    ActivityEvent,
    CommitInfo,
    Identity,
    IdentityMode,
    MatchedPair,
    Verdict,
    identities_equal,
)

SEVERITY = {
    Verdict.CLEAN: 0,
    Verdict.AUTHOR_MISMATCH: 1,
    Verdict.COMMITTER_MISMATCH: 1,
    Verdict.FULL_MISMATCH: 2,
}

_DUAL_TABLE = {
    (True, True): Verdict.CLEAN,
    (False, True): Verdict.AUTHOR_MISMATCH,
    (True, False): Verdict.COMMITTER_MISMATCH,
    (False, False): Verdict.FULL_MISMATCH,
}


def _require(commit: CommitInfo, field: str) -> Identity:
    value: Optional[Identity] = getattr(commit, field)
    if not value:
        raise IncompleteDataError(commit.sha, field)
    return value


def classify(commit: CommitInfo, event: ActivityEvent, mode: IdentityMode) -> Verdict:
    """Classify one commit against one activity event.

    Raises ``IncompleteDataError`` when an identity the mode relies on is missing,
    including the pushing actor.
    """

    author = _require(commit, "author")
    committer = _require(commit, "committer") if mode is IdentityMode.DUAL else None
    if not event.actor:
        raise IncompleteDataError(commit.sha, "actor")
    if mode is IdentityMode.SINGLE:
        return Verdict.CLEAN if identities_equal(author, event.actor) else Verdict.FULL_MISMATCH

    key = (identities_equal(author, event.actor), identities_equal(committer, event.actor))
    return _DUAL_TABLE[key]


def classify_pair(pair: MatchedPair, mode: IdentityMode) -> tuple[Verdict, Optional[ActivityEvent]]:
    """Evaluate a commit against every matching event and keep the most severe outcome.

    Returns the verdict and the event that produced it. Unmatched pairs yield
    ``(Verdict.UNMATCHED, None)``. Between equally severe outcomes the first
    event wins. Events without a resolvable actor cannot clear a commit: a full
    mismatch from another event is still reported, otherwise the missing actor
    is raised as ``IncompleteDataError``.
    """

    if not pair.is_matched:
        return Verdict.UNMATCHED, None

    worst: Optional[Verdict] = None
    worst_event: Optional[ActivityEvent] = None
    unknown_actor: Optional[IncompleteDataError] = None
    for event in pair.events:
        try:
            verdict = classify(pair.commit, event, mode)
        except IncompleteDataError as exc:
            if exc.field != "actor":
                raise
            unknown_actor = unknown_actor or exc
            continue
        if worst is None or SEVERITY[verdict] > SEVERITY[worst]:
            worst, worst_event = verdict, event

    if unknown_actor is not None and worst is not Verdict.FULL_MISMATCH:
        raise unknown_actor
    return worst, worst_event
