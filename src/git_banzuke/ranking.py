from __future__ import annotations

from typing import Mapping

from .models import AuthorSummary, Leaderboard, LeaderboardRow

TOTALS_NAME = "Total"


def percentage(count: int, total: int) -> float:
    # A zero total (e.g. a repo whose commits touched no lines) is reported as 0%, never NaN.
    if total == 0:
        return 0.0
    return round(count / total * 100, 2)


def rank_summaries(summaries: Mapping[str, AuthorSummary]) -> Leaderboard:
    """
    Rank authors by commit count, highest first.

    Ties keep the order in which the authors were first seen; there is no
    secondary key.
    """
    ranked = sorted(summaries.values(), key=lambda s: s.commit_count, reverse=True)

    commits_total = sum(s.commit_count for s in ranked)
    additions_total = sum(s.addition_count for s in ranked)
    deletions_total = sum(s.deletion_count for s in ranked)
    files_total = sum(s.files_modified_count for s in ranked)

    totals = LeaderboardRow(
        name=TOTALS_NAME,
        email="",
        commit_count=commits_total,
        commit_pct=percentage(commits_total, commits_total),
        addition_count=additions_total,
        addition_pct=percentage(additions_total, additions_total),
        deletion_count=deletions_total,
        deletion_pct=percentage(deletions_total, deletions_total),
        files_modified_count=files_total,
        files_modified_pct=percentage(files_total, files_total),
    )

    entries = tuple(
        LeaderboardRow(
            name=s.author_name,
            email=s.author_email,
            commit_count=s.commit_count,
            commit_pct=percentage(s.commit_count, commits_total),
            addition_count=s.addition_count,
            addition_pct=percentage(s.addition_count, additions_total),
            deletion_count=s.deletion_count,
            deletion_pct=percentage(s.deletion_count, deletions_total),
            files_modified_count=s.files_modified_count,
            files_modified_pct=percentage(s.files_modified_count, files_total),
        )
        for s in ranked
    )
    return Leaderboard(totals=totals, entries=entries)
