from hypothesis import given, strategies as st

from spoofcheck.models.domain import ActivityEvent, ActivityKind, CommitInfo, Verdict
from spoofcheck.services.reconciliation import ReconciliationService

logins = st.sampled_from(["alice", "bob", "carol", "mallory", "merge-bot"])


@st.composite
def batches(draw):
    size = draw(st.integers(min_value=0, max_value=8))
    commits = [
        CommitInfo(sha=f"sha{idx}", author=draw(logins), committer=draw(logins))
        for idx in range(size)
    ]
    activities = []
    for commit in commits:
        for _ in range(draw(st.integers(min_value=0, max_value=3))):
            activities.append(
                ActivityEvent(
                    resulting_sha=commit.sha,
                    actor=draw(logins),
                    kind=draw(st.sampled_from(list(ActivityKind))),
                )
            )
    return commits, draw(st.permutations(activities))


@given(logins, st.text(min_size=1, max_size=12))
def test_matching_identities_are_clean(login, sha):
    commit = CommitInfo(sha=sha, author=login, committer=login)
    result = ReconciliationService(partial_mismatch_fails=False).reconcile_push(commit, login)
    assert result.verdict_for(sha) is Verdict.CLEAN
    assert result.suspicious is False


@given(logins, logins)
def test_foreign_identities_are_full_mismatches(author, actor):
    if author == actor:
        return
    commit = CommitInfo(sha="abc", author=author, committer=author)
    result = ReconciliationService(partial_mismatch_fails=False).reconcile_push(commit, actor)
    assert result.verdict_for("abc") is Verdict.FULL_MISMATCH
    assert result.suspicious is True


@given(batches())
def test_one_verdict_per_commit_and_deterministic(batch):
    commits, activities = batch
    service = ReconciliationService(partial_mismatch_fails=False)
    first = service.reconcile_pull_request(commits, activities)
    second = service.reconcile_pull_request(commits, activities)

    assert first == second
    assert [entry.sha for entry in first.verdicts] == [commit.sha for commit in commits]
    assert first.suspicious == any(entry.verdict is Verdict.FULL_MISMATCH for entry in first.verdicts)
    assert first.all_covered == all(entry.verdict is not Verdict.UNMATCHED for entry in first.verdicts)
