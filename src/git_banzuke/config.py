from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import Optional

from .identity import SanitizeRules, find_invalid_pattern


@dataclasses.dataclass(frozen=True)
class RepoEntry:
    git_repository_path: Path
    normalized_email_addresses: dict[str, str] = dataclasses.field(default_factory=dict)
    normalized_names: dict[str, str] = dataclasses.field(default_factory=dict)
    banned_email_addresses: list[str] = dataclasses.field(default_factory=list)
    banned_paths: list[str] = dataclasses.field(default_factory=list)
    output_path: Optional[Path] = None

    @property
    def rules(self) -> SanitizeRules:
        return SanitizeRules(
            email_rewrites=self.normalized_email_addresses,
            name_rewrites=self.normalized_names,
            banned_emails=frozenset(self.banned_email_addresses),
            banned_path_patterns=tuple(self.banned_paths),
        )


def _is_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        return False


def load_json_option(value: str, base_dir: Path) -> object:
    """
    A JSON option is either a path to a JSON file or a JSON literal.
    Raises ValueError when it is neither.
    """
    candidate = base_dir / Path(value).expanduser() if value else None
    if candidate is not None and _is_file(candidate):
        return json.loads(candidate.read_text(encoding="utf-8"))
    return json.loads(value)


def _resolve_field(value: object, expected: type, base_dir: Path) -> object:
    if isinstance(value, str):
        path = base_dir / Path(value).expanduser()
        if not _is_file(path):
            return expected()
        try:
            value = json.loads(path.read_text(encoding="utf-8"))
        except ValueError as e:
            raise SystemExit(f"Invalid JSON in {path}: {e}")
    if not isinstance(value, expected):
        return expected()
    return value


def parse_entries(rows: object, base_dir: Path) -> list[RepoEntry]:
    if not isinstance(rows, list):
        raise SystemExit("Configuration file must contain a JSON array of repository entries.")

    entries: list[RepoEntry] = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        repo_path = str(row.get("git_repository_path") or "").strip()
        if not repo_path:
            continue

        email_rewrites = _resolve_field(row.get("normalized_email_addresses"), dict, base_dir)
        name_rewrites = _resolve_field(row.get("normalized_names"), dict, base_dir)
        banned_emails = _resolve_field(row.get("banned_email_addresses"), list, base_dir)
        banned_paths = _resolve_field(row.get("banned_paths"), list, base_dir)
        bad = find_invalid_pattern(str(p) for p in banned_paths)
        if bad is not None:
            raise SystemExit(f"Invalid banned_paths pattern {bad[0]!r} for {repo_path}: {bad[1]}")

        output_raw = str(row.get("output_path") or "").strip()
        output_path = (base_dir / Path(output_raw).expanduser()).resolve() if output_raw else None

        entries.append(
            RepoEntry(
                git_repository_path=Path(repo_path).expanduser().resolve(),
                normalized_email_addresses={str(k): str(v) for k, v in email_rewrites.items()},
                normalized_names={str(k): str(v) for k, v in name_rewrites.items()},
                banned_email_addresses=[str(e) for e in banned_emails],
                banned_paths=[str(p) for p in banned_paths],
                output_path=output_path,
            )
        )
    return entries


def load_config(config_path: Path) -> list[RepoEntry]:
    if not config_path.is_file():
        raise SystemExit(f"Configuration file not found: {config_path}")
    try:
        rows = json.loads(config_path.read_text(encoding="utf-8"))
    except ValueError as e:
        raise SystemExit(f"Invalid JSON in {config_path}: {e}")
    return parse_entries(rows, config_path.resolve().parent)
