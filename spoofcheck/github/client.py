"""GitHub REST client for the commit and activity data a reconciliation needs."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, TypeVar

import httpx

from spoofcheck.core.config import settings
from spoofcheck.core.errors import TransportError
from spoofcheck.models.domain import ActivityEvent, ActivityKind, CommitInfo

_logger = logging.getLogger(__name__)

T = TypeVar("T")


def _login(account: dict | None) -> str | None:
    if not account:
        return None
    return account.get("login") or None


def parse_commit(payload: dict) -> CommitInfo:
    """Map a GitHub commit object (single commit or PR commit entry) to ``CommitInfo``."""

    git_commit = payload.get("commit") or {}
    return CommitInfo(
        sha=payload["sha"],
        message=git_commit.get("message") or "",
        author=_login(payload.get("author")),
        committer=_login(payload.get("committer")),
    )


def parse_activity(payload: dict) -> ActivityEvent:
    """Map a repository activity entry to ``ActivityEvent``."""

    return ActivityEvent(
        resulting_sha=payload["after"],
        actor=_login(payload.get("actor")),
        kind=ActivityKind(payload.get("activity_type", ActivityKind.PUSH.value)),
    )


def qualify_ref(ref: str) -> str:
    return ref if ref.startswith("refs/") else f"refs/heads/{ref}"


class GitHubClient:
    """Synchronous client for the GitHub endpoints used by the spoofing check.

    Every non-success response and every network failure is raised as
    ``TransportError`` so callers never mistake a failed call for empty data.
    """

    def __init__(
        self,
        token: str | None = None,
        *,
        base_url: str | None = None,
        api_version: str | None = None,
        timeout: float | None = None,
        page_size: int | None = None,
        max_pages: int | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        headers: Dict[str, str] = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": api_version or settings.github_api_version,
        }
        token = token if token is not None else settings.github_token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        normalized_base = (base_url or settings.github_api_url).rstrip("/") + "/"
        self._page_size = page_size or settings.page_size
        self._max_pages = max(max_pages or settings.max_pages, 1)
        self._client = httpx.Client(
            base_url=normalized_base,
            timeout=timeout or settings.http_timeout_seconds,
            headers=headers,
            transport=transport,
        )

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def fetch_commit(self, owner: str, repo: str, sha: str) -> CommitInfo:
        payload = self._get_json(f"repos/{owner}/{repo}/commits/{sha}")
        return parse_commit(payload)

    def fetch_pr_commits(self, owner: str, repo: str, pr_number: int) -> list[CommitInfo]:
        return self._paginate(f"repos/{owner}/{repo}/pulls/{pr_number}/commits", {}, parse_commit)

    def fetch_push_activity(self, owner: str, repo: str, ref: str, kind: ActivityKind) -> list[ActivityEvent]:
        params = {"ref": qualify_ref(ref), "activity_type": ActivityKind(kind).value}
        return self._paginate(f"repos/{owner}/{repo}/activity", params, parse_activity)

    def fetch_all_push_activity(self, owner: str, repo: str, ref: str) -> list[ActivityEvent]:
        events: list[ActivityEvent] = []
        for kind in (ActivityKind.PUSH, ActivityKind.FORCE_PUSH):
            events.extend(self.fetch_push_activity(owner, repo, ref, kind))
        return events

    def _paginate(self, path: str, params: dict[str, Any], parse: Callable[[dict], T]) -> list[T]:
        items: list[T] = []
        for page in range(1, self._max_pages + 1):
            data = self._get_json(path, {**params, "per_page": self._page_size, "page": page})
            if not isinstance(data, list):
                raise TransportError(f"unexpected payload from {path}", url=path)
            items.extend(parse(entry) for entry in data)
            if len(data) < self._page_size:
                break
        else:
            _logger.warning("Stopped reading %s after %d pages; results may be truncated", path, self._max_pages)
        return items

    def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        try:
            response = self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            _logger.error("GitHub request to %s failed: %s", path, exc)
            raise TransportError(str(exc), url=path) from exc
        if response.status_code != 200:
            _logger.error("GitHub request to %s returned %s", response.request.url, response.status_code)
            raise TransportError(
                f"GitHub returned {response.status_code}",
                status_code=response.status_code,
                url=str(response.request.url),
            )
        return response.json()
