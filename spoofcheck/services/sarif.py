"""Utilities for generating SARIF reports from reconciliation results."""

from __future__ import annotations

from spoofcheck.models.domain import ReconciliationResult, Verdict

_LEVEL_MAP = {
    Verdict.FULL_MISMATCH: "error",
    Verdict.AUTHOR_MISMATCH: "warning",
    Verdict.COMMITTER_MISMATCH: "warning",
    Verdict.UNMATCHED: "note",
}

_RULES = [
    {
        "id": verdict.value,
        "shortDescription": {"text": text},
    }
    for verdict, text in (
        (Verdict.FULL_MISMATCH, "Commit identity does not match the pushing actor"),
        (Verdict.AUTHOR_MISMATCH, "Commit author does not match the pushing actor"),
        (Verdict.COMMITTER_MISMATCH, "Commit committer does not match the pushing actor"),
        (Verdict.UNMATCHED, "Commit has no matching push activity"),
    )
]


def build_sarif(result: ReconciliationResult, repo: str | None = None) -> dict:
    results = []
    for entry in result.verdicts:
        level = _LEVEL_MAP.get(entry.verdict)
        if level is None:
            continue
        results.append(
            {
                "ruleId": entry.verdict.value,
                "level": level,
                "message": {"text": entry.explanation},
                "partialFingerprints": {"commitSha": entry.sha},
                "properties": {
                    "repo": repo,
                    "sha": entry.sha,
                    "author": entry.author,
                    "committer": entry.committer,
                    "matched_actors": entry.matched_actors,
                    "reduced_confidence": entry.reduced_confidence,
                },
            }
        )

    sarif = {
        "$schema": "https://json.schemastore.org/sarif-2.1.0.json",
        "version": "2.1.0",
        "runs": [
            {
                "tool": {
                    "driver": {
                        "name": "Commit Spoofing Check",
                        "rules": _RULES,
                    }
                },
                "invocations": [
                    {
                        "executionSuccessful": True,
                        "properties": {
                            "suspicious": result.suspicious,
                            "all_covered": result.all_covered,
                        },
                    }
                ],
                "results": results,
            }
        ],
    }
    return sarif
