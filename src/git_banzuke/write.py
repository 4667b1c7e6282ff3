from __future__ import annotations

import csv
from pathlib import Path

from .models import Leaderboard

LEADERBOARD_COLUMNS = [
    "name",
    "email",
    "commits",
    "commits_pct",
    "additions",
    "additions_pct",
    "deletions",
    "deletions_pct",
    "files_modified",
    "files_modified_pct",
]


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def csv_output_path(path: Path, suffix: str = "") -> Path:
    """`reports/app` -> `reports/app.csv`, `reports/app_unfiltered.csv` with suffix="_unfiltered"."""
    return path.with_name(f"{path.name}{suffix}.csv")


def write_leaderboard_csv(path: Path, leaderboard: Leaderboard) -> None:
    ensure_dir(path.parent)
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(LEADERBOARD_COLUMNS)
        for row in leaderboard.rows():
            writer.writerow(row.as_tuple())
