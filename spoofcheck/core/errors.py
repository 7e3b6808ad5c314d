"""Error taxonomy shared by the GitHub collaborator and the reconciliation core."""

from __future__ import annotations


class SpoofCheckError(Exception):
    """Base class for failures that stop a check from producing a result."""


class TransportError(SpoofCheckError):
    """A hosting API call failed; the check did not run to completion."""

    def __init__(self, message: str, *, status_code: int | None = None, url: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"network error: {self.status_code} ({self.url})"
        return f"network error: {self.args[0]}"


class ConfigurationError(SpoofCheckError):
    """The orchestration layer was started without the inputs it needs."""


class IncompleteDataError(Exception):
    """An identity needed for classification is missing from a commit."""

    def __init__(self, sha: str, field: str) -> None:
        super().__init__(f"commit {sha} has no resolvable {field} account")
        self.sha = sha
        self.field = field
