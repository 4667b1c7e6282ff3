from __future__ import annotations

from typing import Optional

from .models import Commit, Leaderboard, LeaderboardRow


def fmt_int(n: int) -> str:
    return f"{int(n):,}"


def fmt_pct(p: float) -> str:
    return f"{p:.2f}%"


def trunc(s: str, max_len: int) -> str:
    if len(s) <= max_len:
        return s
    if max_len <= 1:
        return s[:max_len]
    return s[: max_len - 1] + "…"


def _row_line(rank: str, row: LeaderboardRow) -> str:
    who = trunc(f"{row.name} <{row.email}>" if row.email else row.name, 40)
    return (
        f"{rank:>4}  {who:<40}  "
        f"{fmt_int(row.commit_count):>8} {fmt_pct(row.commit_pct):>8}  "
        f"{fmt_int(row.addition_count):>10} {fmt_pct(row.addition_pct):>8}  "
        f"{fmt_int(row.deletion_count):>10} {fmt_pct(row.deletion_pct):>8}  "
        f"{fmt_int(row.files_modified_count):>8} {fmt_pct(row.files_modified_pct):>8}"
    )


def render_leaderboard(title: str, leaderboard: Leaderboard, top_n: Optional[int] = None) -> str:
    lines: list[str] = []
    lines.append(title)
    lines.append("=" * len(title))
    header = (
        f"{'#':>4}  {'author':<40}  "
        f"{'commits':>8} {'':>8}  "
        f"{'additions':>10} {'':>8}  "
        f"{'deletions':>10} {'':>8}  "
        f"{'files':>8} {'':>8}"
    )
    lines.append(header)
    lines.append(_row_line("", leaderboard.totals))
    entries = leaderboard.entries if not top_n or top_n <= 0 else leaderboard.entries[:top_n]
    for i, row in enumerate(entries, start=1):
        lines.append(_row_line(str(i), row))
    hidden = len(leaderboard.entries) - len(entries)
    if hidden > 0:
        lines.append(f"      ... {hidden} more")
    return "\n".join(lines)


def render_commit(commit: Commit) -> str:
    lines = [
        f"Author: {commit.author_name}",
        f"Email: {commit.author_email}",
        f"Hash: {commit.hash}",
        f"Additions: {commit.total_additions}",
        f"Deletions: {commit.total_deletions}",
    ]
    for m in commit.file_modifications:
        path = f"{m.original_path} => {m.path}" if m.original_path is not None else m.path
        lines.append(f"+{m.additions}\t-{m.deletions}\t{path}")
    return "\n".join(lines)
