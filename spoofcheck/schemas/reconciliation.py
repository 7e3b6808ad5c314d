"""API schemas for reconciliation requests."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from spoofcheck.models.domain import ActivityEvent, CommitInfo, IdentityMode


class PushReconciliationRequest(BaseModel):
    """Request body for POST /v1/reconciliation/push."""

    commit: CommitInfo
    actor: str = Field(..., description="Login of the account that pushed the commit.")
    mode: Optional[IdentityMode] = Field(
        None, description="Identity mode override; defaults to the configured push identity mode."
    )


class PullRequestReconciliationRequest(BaseModel):
    """Request body for POST /v1/reconciliation/pull-request."""

    repo: Optional[str] = Field(None, description="Repository identifier in {owner}/{repo} form.")
    commits: list[CommitInfo] = Field(default_factory=list)
    activities: list[ActivityEvent] = Field(default_factory=list)
    expected_commit_count: Optional[int] = Field(
        None,
        ge=0,
        description="Commit count reported by the platform; a shorter commit list is treated as truncated.",
    )
