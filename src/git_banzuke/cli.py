from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Callable

from .config import load_config, load_json_option
from .git import get_repo_toplevel, read_commit_log
from .identity import SanitizeRules, find_invalid_pattern, sanitize_commits
from .log_parser import parse_commit_log
from .render import render_commit
from .run import output_leaderboard, run_banzuke, scan_log


def _json_of(expected: type) -> Callable[[str], object]:
    def parse(value: str) -> object:
        try:
            data = load_json_option(value, Path.cwd())
        except ValueError as e:
            raise argparse.ArgumentTypeError(f"not a JSON file or JSON literal: {value!r} ({e})")
        if not isinstance(data, expected):
            raise argparse.ArgumentTypeError(f"expected a JSON {'object' if expected is dict else 'array'}, got: {value!r}")
        return data

    return parse


def _banned_paths_option(value: str) -> object:
    patterns = _json_of(list)(value)
    bad = find_invalid_pattern(str(p) for p in patterns)
    if bad is not None:
        raise argparse.ArgumentTypeError(f"invalid banned path pattern {bad[0]!r}: {bad[1]}")
    return patterns


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rank contributors across git repositories by commits, additions, deletions and files modified.")
    parser.add_argument("--configuration-file", type=Path, required=True, help="Path to the JSON configuration file (an array of repository entries).")
    parser.add_argument(
        "--output-path",
        type=Path,
        default=None,
        help="Where to write the combined leaderboard. \".csv\" is appended automatically.",
    )
    parser.add_argument(
        "--no-output-unfiltered",
        action="store_true",
        help="Do not write the unfiltered leaderboards (names and emails are still normalized there, bans are ignored).",
    )
    parser.add_argument("--quiet", action="store_true", help="Only print warnings and errors.")
    parser.add_argument("--jobs", type=int, default=max(1, min(8, (os.cpu_count() or 4))), help="Parallel git jobs.")
    return parser


def _add_repo_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("--git-repository", type=Path, default=Path.cwd(), help="Path to the git repository (default: current directory).")
    p.add_argument(
        "--normalized-email-addresses",
        type=_json_of(dict),
        default={},
        help="JSON object (or path to a JSON file) mapping author emails to the email they should count as.",
    )
    p.add_argument(
        "--normalized-names",
        type=_json_of(dict),
        default={},
        help="JSON object (or path to a JSON file) mapping normalized emails to a display name.",
    )
    p.add_argument(
        "--banned-email-addresses",
        type=_json_of(list),
        default=[],
        help="JSON array (or path to a JSON file) of author emails whose commits are ignored.",
    )
    p.add_argument(
        "--banned-paths",
        type=_banned_paths_option,
        default=[],
        help="JSON array (or path to a JSON file) of regular expressions; matching file modifications are ignored.",
    )


def _rules_from_args(args: argparse.Namespace) -> SanitizeRules:
    return SanitizeRules(
        email_rewrites={str(k): str(v) for k, v in args.normalized_email_addresses.items()},
        name_rewrites={str(k): str(v) for k, v in args.normalized_names.items()},
        banned_emails=frozenset(str(e) for e in args.banned_email_addresses),
        banned_path_patterns=tuple(str(p) for p in args.banned_paths),
    )


def _read_repo_log(repo: Path) -> str:
    top = get_repo_toplevel(repo)
    if top is None:
        raise SystemExit(f"Not a git repository: {repo}")
    text, errors = read_commit_log(top)
    if errors:
        raise SystemExit("\n".join(errors))
    return text


def _commits_main(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="git-banzuke commits", description="Print the sanitized commits of one repository.")
    _add_repo_arguments(p)
    args = p.parse_args(argv)

    parsed = parse_commit_log(_read_repo_log(args.git_repository))
    commits = sanitize_commits(parsed.commits, _rules_from_args(args))
    for commit in commits:
        print("==============================")
        print(render_commit(commit))
    for err in parsed.errors:
        print(f"Warning: {err}", file=sys.stderr)
    return 0


def _leaderboard_main(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="git-banzuke leaderboard", description="Print the leaderboard of one repository.")
    _add_repo_arguments(p)
    p.add_argument("--output-path", type=Path, default=None, help="Also write the leaderboard as CSV (\".csv\" is appended).")
    p.add_argument("--top", type=int, default=0, help="Only print the first N authors (0 = all).")
    args = p.parse_args(argv)

    scan = scan_log(_read_repo_log(args.git_repository), _rules_from_args(args))
    if scan.skipped_records or scan.skipped_lines:
        print(
            f"Warning: skipped {scan.skipped_records} malformed records and {scan.skipped_lines} numstat lines.",
            file=sys.stderr,
        )
    output_leaderboard(
        title=f"Leaderboard: {args.git_repository}",
        summaries=scan.summaries,
        output_path=args.output_path,
        verbose=True,
        top_n=int(args.top),
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    if not argv or argv[0] in ("-h", "--help"):
        p = _build_parser()
        p.prog = "git-banzuke"
        p.print_help()
        print("")
        print("commands:")
        print("  leaderboard    Print (and optionally write) the leaderboard of a single repository.")
        print("  commits        Print the sanitized commits of a single repository.")
        print("")
        print("Run `git-banzuke <command> --help` for command-specific options.")
        return 0
    if argv[0] == "commits":
        return _commits_main(argv[1:])
    if argv[0] == "leaderboard":
        return _leaderboard_main(argv[1:])

    parser = _build_parser()
    parser.prog = "git-banzuke"
    args = parser.parse_args(argv)
    if args.jobs < 1:
        raise SystemExit(f"--jobs must be at least 1, got: {args.jobs}")
    entries = load_config(args.configuration_file)
    return run_banzuke(
        entries=entries,
        output_path=args.output_path.expanduser().resolve() if args.output_path else None,
        output_unfiltered=not args.no_output_unfiltered,
        verbose=not args.quiet,
        jobs=int(args.jobs),
    )


if __name__ == "__main__":
    raise SystemExit(main())
