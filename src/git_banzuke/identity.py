from __future__ import annotations

import dataclasses
import re
from typing import Iterable, Mapping, Optional

from .models import Commit


def find_invalid_pattern(patterns: Iterable[str]) -> Optional[tuple[str, re.error]]:
    """First pattern that does not compile on its own, with its error."""
    for p in patterns:
        try:
            re.compile(p)
        except re.error as e:
            return p, e
    return None


def compile_banned_paths(patterns: Iterable[str]) -> Optional[re.Pattern[str]]:
    """Union of all patterns; None when there is nothing to ban."""
    parts = [f"(?:{p})" for p in patterns if p]
    if not parts:
        return None
    return re.compile("|".join(parts))


@dataclasses.dataclass(frozen=True)
class SanitizeRules:
    email_rewrites: Mapping[str, str] = dataclasses.field(default_factory=dict)
    name_rewrites: Mapping[str, str] = dataclasses.field(default_factory=dict)
    banned_emails: frozenset[str] = frozenset()
    banned_path_patterns: tuple[str, ...] = ()
    _banned_paths_re: Optional[re.Pattern[str]] = dataclasses.field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "email_rewrites", dict(self.email_rewrites or {}))
        object.__setattr__(self, "name_rewrites", dict(self.name_rewrites or {}))
        object.__setattr__(self, "banned_emails", frozenset(self.banned_emails or ()))
        object.__setattr__(self, "banned_path_patterns", tuple(self.banned_path_patterns or ()))
        object.__setattr__(self, "_banned_paths_re", compile_banned_paths(self.banned_path_patterns))

    def without_bans(self) -> SanitizeRules:
        return SanitizeRules(email_rewrites=self.email_rewrites, name_rewrites=self.name_rewrites)

    def is_path_banned(self, path: str) -> bool:
        if self._banned_paths_re is None:
            return False
        return self._banned_paths_re.search(path) is not None

    def sanitize(self, commit: Commit) -> Optional[Commit]:
        """
        Returns the rewritten commit, or None when its author is banned.

        The name rewrite is looked up by the already rewritten email so that a
        name only has to be configured once per canonical identity.
        """
        email = self.email_rewrites.get(commit.author_email, commit.author_email)
        name = self.name_rewrites.get(email, commit.author_name)
        if email in self.banned_emails:
            return None

        out = commit
        if email != commit.author_email or name != commit.author_name:
            out = out.with_identity(name, email)

        if self._banned_paths_re is not None:
            kept = tuple(m for m in out.file_modifications if not self.is_path_banned(m.path))
            if len(kept) != len(out.file_modifications):
                out = out.with_file_modifications(kept)
        return out


def sanitize_commits(commits: Iterable[Commit], rules: SanitizeRules) -> list[Commit]:
    out: list[Commit] = []
    for commit in commits:
        sanitized = rules.sanitize(commit)
        if sanitized is not None:
            out.append(sanitized)
    return out
