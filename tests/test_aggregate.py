from __future__ import annotations

import itertools

from git_banzuke.aggregate import fold_commit, merge_all, merge_summaries, summarize_commits
from git_banzuke.models import AuthorSummary, Commit, FileModification


def _commit(name: str, email: str, *counts: tuple[int, int]) -> Commit:
    return Commit(
        author_name=name,
        author_email=email,
        hash="0" * 40,
        file_modifications=tuple(
            FileModification(path=f"f{i}.txt", additions=a, deletions=d) for i, (a, d) in enumerate(counts)
        ),
    )


def _counts(m: dict[str, AuthorSummary]) -> dict[str, tuple[int, int, int, int]]:
    return {k: v.counts for k, v in m.items()}


def test_fold_commit_returns_new_map() -> None:
    acc: dict[str, AuthorSummary] = {}
    out = fold_commit(acc, _commit("A", "a@x.com", (3, 1)))

    assert acc == {}
    assert out["a@x.com"] == AuthorSummary(
        author_name="A",
        author_email="a@x.com",
        commit_count=1,
        addition_count=3,
        deletion_count=1,
        files_modified_count=1,
    )

    out2 = fold_commit(out, _commit("A", "a@x.com", (1, 1), (1, 0)))
    assert out["a@x.com"].commit_count == 1
    assert out2["a@x.com"].counts == (2, 5, 2, 3)


def test_display_name_comes_from_first_commit() -> None:
    out = summarize_commits([_commit("Alice", "a@x.com", (1, 0)), _commit("alice", "a@x.com", (1, 0))])
    assert out["a@x.com"].author_name == "Alice"
    assert out["a@x.com"].commit_count == 2


def test_commit_without_surviving_files_counts_only_as_commit() -> None:
    out = summarize_commits([_commit("A", "a@x.com")])
    assert out["a@x.com"].counts == (1, 0, 0, 0)


def test_summaries_keep_first_seen_order() -> None:
    out = summarize_commits(
        [
            _commit("B", "b@x.com", (1, 0)),
            _commit("A", "a@x.com", (1, 0)),
            _commit("B", "b@x.com", (1, 0)),
        ]
    )
    assert list(out) == ["b@x.com", "a@x.com"]


def test_merge_sums_shared_and_copies_single_sided() -> None:
    a = summarize_commits([_commit("A", "a@x.com", (3, 1)), _commit("B", "b@x.com", (1, 1))])
    b = summarize_commits([_commit("A2", "a@x.com", (2, 0), (2, 2)), _commit("C", "c@x.com", (5, 0))])
    merged = merge_summaries(a, b)

    assert merged["a@x.com"].counts == (2, 7, 3, 3)
    assert merged["a@x.com"].author_name == "A"
    assert merged["b@x.com"] == a["b@x.com"]
    assert merged["c@x.com"] == b["c@x.com"]
    assert a["a@x.com"].counts == (1, 3, 1, 1)
    assert b["a@x.com"].counts == (1, 4, 2, 2)


def test_merge_is_associative_and_commutative() -> None:
    a = summarize_commits([_commit("A", "a@x.com", (3, 1)), _commit("B", "b@x.com", (1, 1))])
    b = summarize_commits([_commit("A", "a@x.com", (2, 0)), _commit("C", "c@x.com", (5, 0), (1, 1))])
    c = summarize_commits([_commit("C", "c@x.com", (0, 9)), _commit("B", "b@x.com"), _commit("D", "d@x.com", (4, 4))])

    expected = _counts(merge_summaries(merge_summaries(a, b), c))
    assert _counts(merge_summaries(a, merge_summaries(b, c))) == expected
    assert _counts(merge_summaries(b, merge_summaries(a, c))) == expected
    for perm in itertools.permutations([a, b, c]):
        assert _counts(merge_all(perm)) == expected


def test_merge_with_empty_is_identity() -> None:
    a = summarize_commits([_commit("A", "a@x.com", (3, 1))])
    assert merge_summaries(a, {}) == a
    assert merge_summaries({}, a) == a
    assert merge_all([]) == {}
