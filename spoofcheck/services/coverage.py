"""Coverage tracking: were all reviewed commits tied to push activity?"""

from __future__ import annotations

from typing import Optional, Sequence

from spoofcheck.models.domain import CommitVerdict, CoverageReport, Verdict


def assess_coverage(
    verdicts: Sequence[CommitVerdict],
    expected_commit_count: Optional[int] = None,
) -> CoverageReport:
    """Summarise coverage for one run.

    ``expected_commit_count`` is the number of commits the platform reports for
    the change under review. When the fetched batch is shorter (pagination
    truncated it), the difference counts as uncovered commits. Commits whose
    verdict was withheld for a missing identity did match push activity; they
    count as matched and are listed in ``unresolved_shas``.
    """

    unresolved = [entry.sha for entry in verdicts if entry.reduced_confidence]
    unmatched = [
        entry.sha for entry in verdicts if entry.verdict is Verdict.UNMATCHED and not entry.reduced_confidence
    ]
    total = len(verdicts)
    missing = 0
    if expected_commit_count is not None:
        missing = max(expected_commit_count - total, 0)
    return CoverageReport(
        total_commits=total,
        matched_commits=total - len(unmatched),
        unmatched_shas=unmatched,
        unresolved_shas=unresolved,
        missing_commit_count=missing,
    )


def coverage_warnings(report: CoverageReport) -> list[str]:
    warnings: list[str] = []
    if report.unmatched_shas:
        warnings.append(
            f"{len(report.unmatched_shas)} of {report.total_commits} commits could not be matched to push activity; "
            "the audit trail may be incomplete: " + ", ".join(report.unmatched_shas)
        )
    if report.unresolved_shas:
        warnings.append(
            f"{len(report.unresolved_shas)} of {report.total_commits} commits matched push activity but have an "
            "unresolvable account; their verdicts are withheld (reduced confidence): "
            + ", ".join(report.unresolved_shas)
        )
    if report.missing_commit_count:
        warnings.append(
            f"{report.missing_commit_count} commits were not fetched (commit list truncated); "
            "they are treated as unmatched."
        )
    return warnings
