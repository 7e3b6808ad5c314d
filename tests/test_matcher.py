from spoofcheck.models.domain import ActivityEvent, ActivityKind, CommitInfo
from spoofcheck.services.matcher import index_by_sha, match_commits


def _commit(sha: str) -> CommitInfo:
    return CommitInfo(sha=sha, message=f"change {sha}", author="alice", committer="alice")


def test_match_commits_pairs_every_event_sharing_the_sha():
    commits = [_commit("aaa"), _commit("bbb")]
    activities = [
        ActivityEvent(resulting_sha="aaa", actor="alice", kind=ActivityKind.PUSH),
        ActivityEvent(resulting_sha="bbb", actor="mallory", kind=ActivityKind.FORCE_PUSH),
        ActivityEvent(resulting_sha="bbb", actor="alice", kind=ActivityKind.PUSH),
        ActivityEvent(resulting_sha="zzz", actor="carol", kind=ActivityKind.PUSH),
    ]

    pairs = match_commits(commits, activities)

    assert [pair.commit.sha for pair in pairs] == ["aaa", "bbb"]
    assert [event.actor for event in pairs[0].events] == ["alice"]
    assert [event.kind for event in pairs[1].events] == [ActivityKind.FORCE_PUSH, ActivityKind.PUSH]


def test_match_commits_leaves_unmatched_commits_empty():
    pairs = match_commits([_commit("ccc")], [ActivityEvent(resulting_sha="ddd", actor="alice")])
    assert len(pairs) == 1
    assert not pairs[0].is_matched


def test_match_commits_drops_repeated_shas():
    pairs = match_commits([_commit("aaa"), _commit("aaa")], [])
    assert len(pairs) == 1


def test_index_by_sha_groups_events():
    index = index_by_sha(
        [
            ActivityEvent(resulting_sha="aaa", actor="alice"),
            ActivityEvent(resulting_sha="aaa", actor="bob"),
        ]
    )
    assert [event.actor for event in index["aaa"]] == ["alice", "bob"]
