from __future__ import annotations

import csv
from pathlib import Path

from git_banzuke.aggregate import summarize_commits
from git_banzuke.models import Commit, FileModification
from git_banzuke.ranking import rank_summaries
from git_banzuke.render import fmt_int, fmt_pct, render_commit, render_leaderboard, trunc
from git_banzuke.write import LEADERBOARD_COLUMNS, csv_output_path, write_leaderboard_csv


def _board():
    commits = [
        Commit("Alice", "a@x.com", "1" * 40, (FileModification("a.py", None, 1200, 3),)),
        Commit("Bob", "b@x.com", "2" * 40, (FileModification("b.py", "old_b.py", 4, 0),)),
        Commit("Alice", "a@x.com", "3" * 40, ()),
    ]
    return rank_summaries(summarize_commits(commits))


def test_fmt_helpers() -> None:
    assert fmt_int(0) == "0"
    assert fmt_int(1_234_567) == "1,234,567"
    assert fmt_pct(37.5) == "37.50%"
    assert trunc("abcdef", 4) == "abc…"
    assert trunc("abc", 4) == "abc"


def test_render_leaderboard_lists_totals_then_ranked_authors() -> None:
    out = render_leaderboard("Leaderboard: demo", _board())
    lines = out.splitlines()

    assert lines[0] == "Leaderboard: demo"
    assert "Total" in lines[3]
    assert "1,204" in lines[3]
    assert "Alice <a@x.com>" in lines[4]
    assert "66.67%" in lines[4]
    assert "Bob <b@x.com>" in lines[5]


def test_render_leaderboard_top_n() -> None:
    out = render_leaderboard("x", _board(), top_n=1)
    assert "Bob" not in out
    assert "1 more" in out


def test_render_commit_shows_renames() -> None:
    c = Commit("Bob", "b@x.com", "2" * 40, (FileModification("b.py", "old_b.py", 4, 0),))
    out = render_commit(c)
    assert out.splitlines()[:5] == ["Author: Bob", "Email: b@x.com", f"Hash: {'2' * 40}", "Additions: 4", "Deletions: 0"]
    assert "+4\t-0\told_b.py => b.py" in out


def test_csv_output_path_appends_extension() -> None:
    assert csv_output_path(Path("reports/app")) == Path("reports/app.csv")
    assert csv_output_path(Path("reports/app"), "_unfiltered") == Path("reports/app_unfiltered.csv")


def test_write_leaderboard_csv(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "board.csv"
    write_leaderboard_csv(path, _board())

    with path.open(newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))

    assert rows[0] == LEADERBOARD_COLUMNS
    assert rows[1] == ["Total", "", "3", "100.0", "1204", "100.0", "3", "100.0", "2", "100.0"]
    assert rows[2] == ["Alice", "a@x.com", "2", "66.67", "1200", "99.67", "3", "100.0", "1", "50.0"]
    assert rows[3] == ["Bob", "b@x.com", "1", "33.33", "4", "0.33", "0", "0.0", "1", "50.0"]
