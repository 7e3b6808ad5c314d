"""Correlates commits with the activity events that introduced them."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable, Sequence

from spoofcheck.models.domain import ActivityEvent, CommitInfo, MatchedPair

_logger = logging.getLogger(__name__)


def index_by_sha(activities: Iterable[ActivityEvent]) -> dict[str, list[ActivityEvent]]:
    index: dict[str, list[ActivityEvent]] = defaultdict(list)
    for event in activities:
        index[event.resulting_sha].append(event)
    return index


def match_commits(commits: Sequence[CommitInfo], activities: Iterable[ActivityEvent]) -> list[MatchedPair]:
    """Pair every commit with all activity events whose resulting SHA equals its own.

    Commits keep their input order. A commit with no events is returned with an
    empty ``events`` list and is left for the coverage check to flag. Repeated
    SHAs in ``commits`` are dropped after the first occurrence.
    """

    index = index_by_sha(activities)
    pairs: list[MatchedPair] = []
    seen: set[str] = set()
    for commit in commits:
        if commit.sha in seen:
            _logger.warning("Duplicate commit %s in review batch; ignoring repeat", commit.sha)
            continue
        seen.add(commit.sha)
        pairs.append(MatchedPair(commit=commit, events=list(index.get(commit.sha, ()))))
    return pairs
