from __future__ import annotations

import dataclasses
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional

from .aggregate import merge_summaries, summarize_commits
from .config import RepoEntry
from .git import get_repo_toplevel, read_commit_log
from .identity import SanitizeRules, sanitize_commits
from .log_parser import parse_commit_log
from .models import AuthorSummary
from .ranking import rank_summaries
from .render import render_leaderboard
from .write import csv_output_path, write_leaderboard_csv

UNFILTERED_SUFFIX = "_unfiltered"


@dataclasses.dataclass
class RepoScan:
    summaries: dict[str, AuthorSummary]
    commits_parsed: int = 0
    commits_dropped: int = 0
    skipped_records: int = 0
    skipped_lines: int = 0
    errors: list[str] = dataclasses.field(default_factory=list)

    @property
    def commits_kept(self) -> int:
        return self.commits_parsed - self.commits_dropped


@dataclasses.dataclass
class EntryResult:
    entry: RepoEntry
    filtered: RepoScan
    unfiltered: Optional[RepoScan]
    errors: list[str]
    warnings: list[str] = dataclasses.field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def scan_log(text: str, rules: SanitizeRules) -> RepoScan:
    parsed = parse_commit_log(text)
    kept = sanitize_commits(parsed.commits, rules)
    return RepoScan(
        summaries=summarize_commits(kept),
        commits_parsed=len(parsed.commits),
        commits_dropped=len(parsed.commits) - len(kept),
        skipped_records=parsed.skipped_records,
        skipped_lines=parsed.skipped_lines,
        errors=list(parsed.errors),
    )


def analyze_entry(entry: RepoEntry, *, unfiltered: bool) -> EntryResult:
    repo = entry.git_repository_path
    top = get_repo_toplevel(repo)
    if top is None:
        return EntryResult(
            entry=entry,
            filtered=RepoScan(summaries={}),
            unfiltered=None,
            errors=[f"Not a git repository: {repo}"],
        )
    warnings: list[str] = []
    if top != repo.resolve():
        warnings.append(f"{repo} is not the root of a repository; scanning the whole repository at {top}")
    text, errors = read_commit_log(top)
    rules = entry.rules
    filtered = scan_log(text, rules)
    unfiltered_scan = scan_log(text, rules.without_bans()) if unfiltered else None
    return EntryResult(entry=entry, filtered=filtered, unfiltered=unfiltered_scan, errors=errors, warnings=warnings)


def _report_scan(label: str, scan: RepoScan, *, verbose: bool) -> None:
    if verbose:
        print(
            f"{label}: {scan.commits_parsed} commits parsed, {scan.commits_dropped} dropped by banned authors, "
            f"{len(scan.summaries)} authors."
        )
    if scan.skipped_records or scan.skipped_lines:
        print(
            f"Warning: {label}: skipped {scan.skipped_records} malformed records and "
            f"{scan.skipped_lines} numstat lines.",
            file=sys.stderr,
        )


def output_leaderboard(
    *,
    title: str,
    summaries: dict[str, AuthorSummary],
    output_path: Optional[Path],
    suffix: str = "",
    verbose: bool,
    top_n: Optional[int] = None,
) -> None:
    leaderboard = rank_summaries(summaries)
    if verbose:
        print("")
        print(render_leaderboard(title, leaderboard, top_n=top_n))
    if output_path is not None:
        csv_path = csv_output_path(output_path, suffix)
        write_leaderboard_csv(csv_path, leaderboard)
        if verbose:
            print(f"Wrote {csv_path}")


def run_banzuke(
    *,
    entries: list[RepoEntry],
    output_path: Optional[Path],
    output_unfiltered: bool,
    verbose: bool,
    jobs: int = 1,
) -> int:
    if not entries:
        print("No repositories configured (every entry needs a git_repository_path).", file=sys.stderr)
        return 2

    if verbose:
        print(f"Computing leaderboards for {len(entries)} repositories (jobs={jobs}).")

    with ThreadPoolExecutor(max_workers=max(1, jobs)) as ex:
        futs = [
            ex.submit(
                analyze_entry,
                entry,
                unfiltered=output_unfiltered and (entry.output_path is not None or output_path is not None),
            )
            for entry in entries
        ]
        # Rollup order follows the configuration file, not completion order.
        results = [fut.result() for fut in futs]

    banzuke: dict[str, AuthorSummary] = {}
    unfiltered_banzuke: dict[str, AuthorSummary] = {}
    failed = 0
    for r in results:
        label = str(r.entry.git_repository_path)
        for warn in r.warnings:
            print(f"Warning: {warn}", file=sys.stderr)
        for err in r.errors:
            print(f"Warning: {err}", file=sys.stderr)
        if not r.ok:
            failed += 1
            continue
        _report_scan(label, r.filtered, verbose=verbose)

        output_leaderboard(
            title=f"Leaderboard: {label}",
            summaries=r.filtered.summaries,
            output_path=r.entry.output_path,
            verbose=verbose,
        )
        banzuke = merge_summaries(banzuke, r.filtered.summaries)

        if r.unfiltered is not None:
            if r.entry.output_path is not None:
                output_leaderboard(
                    title=f"Unfiltered leaderboard: {label}",
                    summaries=r.unfiltered.summaries,
                    output_path=r.entry.output_path,
                    suffix=UNFILTERED_SUFFIX,
                    verbose=False,
                )
            unfiltered_banzuke = merge_summaries(unfiltered_banzuke, r.unfiltered.summaries)

    if failed == len(results):
        print("No repository could be read; nothing to rank.", file=sys.stderr)
        return 2

    output_leaderboard(
        title="Banzuke",
        summaries=banzuke,
        output_path=output_path,
        verbose=verbose,
    )
    if output_unfiltered and output_path is not None:
        output_leaderboard(
            title="Unfiltered banzuke",
            summaries=unfiltered_banzuke,
            output_path=output_path,
            suffix=UNFILTERED_SUFFIX,
            verbose=verbose,
        )

    if verbose:
        print(f"Done. {len(results) - failed}/{len(results)} repositories ranked.")
    return 0
