from __future__ import annotations

import dataclasses
from typing import Iterable, Mapping

from .models import AuthorSummary, Commit


def add_commit(summary: AuthorSummary, commit: Commit) -> AuthorSummary:
    return dataclasses.replace(
        summary,
        commit_count=summary.commit_count + 1,
        addition_count=summary.addition_count + commit.total_additions,
        deletion_count=summary.deletion_count + commit.total_deletions,
        files_modified_count=summary.files_modified_count + len(commit.file_modifications),
    )


def add_summaries(dst: AuthorSummary, src: AuthorSummary) -> AuthorSummary:
    return dataclasses.replace(
        dst,
        commit_count=dst.commit_count + src.commit_count,
        addition_count=dst.addition_count + src.addition_count,
        deletion_count=dst.deletion_count + src.deletion_count,
        files_modified_count=dst.files_modified_count + src.files_modified_count,
    )


def fold_commit(acc: Mapping[str, AuthorSummary], commit: Commit) -> dict[str, AuthorSummary]:
    """Returns a new map with `commit` counted; `acc` is left untouched."""
    out = dict(acc)
    _fold_into(out, commit)
    return out


def _fold_into(acc: dict[str, AuthorSummary], commit: Commit) -> None:
    key = commit.author_email
    cur = acc.get(key)
    if cur is None:
        # First commit seen for an email decides the display name.
        cur = AuthorSummary(author_name=commit.author_name, author_email=key)
    acc[key] = add_commit(cur, commit)


def summarize_commits(commits: Iterable[Commit]) -> dict[str, AuthorSummary]:
    acc: dict[str, AuthorSummary] = {}
    for commit in commits:
        _fold_into(acc, commit)
    return acc


def merge_summaries(a: Mapping[str, AuthorSummary], b: Mapping[str, AuthorSummary]) -> dict[str, AuthorSummary]:
    out = dict(a)
    for email_key, st in b.items():
        cur = out.get(email_key)
        out[email_key] = st if cur is None else add_summaries(cur, st)
    return out


def merge_all(maps: Iterable[Mapping[str, AuthorSummary]]) -> dict[str, AuthorSummary]:
    out: dict[str, AuthorSummary] = {}
    for m in maps:
        out = merge_summaries(out, m)
    return out
