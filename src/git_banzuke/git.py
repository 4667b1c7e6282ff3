from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional

from .log_parser import LOG_PRETTY_FORMAT


def run_git(args: list[str], cwd: Path, timeout_s: int = 600) -> tuple[int, str, str]:
    proc = subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        capture_output=True,
        encoding="utf-8",
        errors="replace",
        timeout=timeout_s,
    )
    return proc.returncode, proc.stdout, proc.stderr


def get_repo_toplevel(candidate: Path) -> Optional[Path]:
    try:
        code, out, _ = run_git(["rev-parse", "--show-toplevel"], cwd=candidate)
    except (OSError, subprocess.TimeoutExpired):
        return None
    if code != 0:
        return None
    return Path(out.strip()).resolve()


def read_commit_log(repo: Path) -> tuple[str, list[str]]:
    """
    Returns the raw `git log` text for the current checkout of `repo` plus any
    errors. -z makes git separate numstat lines and commits with NUL so paths
    containing newlines cannot be mistaken for record boundaries.
    """
    args = [
        "log",
        "--numstat",
        "--no-merges",
        "--find-renames",
        f"--pretty=format:{LOG_PRETTY_FORMAT}",
        "-z",
    ]
    try:
        code, out, err = run_git(args, cwd=repo)
    except (OSError, subprocess.TimeoutExpired) as e:
        return "", [f"failed to run git log in {repo}: {e}"]
    if code != 0:
        msg = err.strip()[:500]
        # A repository without any commit yet is not an error.
        if "does not have any commits" in msg or "bad default revision" in msg:
            return "", []
        return "", [f"git log exited {code} in {repo}: {msg}"]
    return out, []
