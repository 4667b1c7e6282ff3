from __future__ import annotations

import dataclasses
from typing import Iterator, Optional


@dataclasses.dataclass(frozen=True)
class FileModification:
    path: str
    original_path: Optional[str] = None
    additions: int = 0
    deletions: int = 0

    @property
    def is_rename(self) -> bool:
        return self.original_path is not None


@dataclasses.dataclass(frozen=True)
class Commit:
    author_name: str
    author_email: str
    hash: str
    file_modifications: tuple[FileModification, ...] = ()
    total_additions: int = dataclasses.field(init=False)
    total_deletions: int = dataclasses.field(init=False)

    def __post_init__(self) -> None:
        mods = tuple(self.file_modifications)
        object.__setattr__(self, "file_modifications", mods)
        object.__setattr__(self, "total_additions", sum(m.additions for m in mods))
        object.__setattr__(self, "total_deletions", sum(m.deletions for m in mods))

    def with_identity(self, author_name: str, author_email: str) -> Commit:
        return Commit(
            author_name=author_name,
            author_email=author_email,
            hash=self.hash,
            file_modifications=self.file_modifications,
        )

    def with_file_modifications(self, file_modifications: tuple[FileModification, ...]) -> Commit:
        return Commit(
            author_name=self.author_name,
            author_email=self.author_email,
            hash=self.hash,
            file_modifications=file_modifications,
        )


@dataclasses.dataclass(frozen=True)
class AuthorSummary:
    author_name: str = ""
    author_email: str = ""
    commit_count: int = 0
    addition_count: int = 0
    deletion_count: int = 0
    files_modified_count: int = 0

    @property
    def counts(self) -> tuple[int, int, int, int]:
        return (self.commit_count, self.addition_count, self.deletion_count, self.files_modified_count)


@dataclasses.dataclass(frozen=True)
class LeaderboardRow:
    name: str
    email: str
    commit_count: int
    commit_pct: float
    addition_count: int
    addition_pct: float
    deletion_count: int
    deletion_pct: float
    files_modified_count: int
    files_modified_pct: float

    def as_tuple(self) -> tuple[object, ...]:
        return (
            self.name,
            self.email,
            self.commit_count,
            self.commit_pct,
            self.addition_count,
            self.addition_pct,
            self.deletion_count,
            self.deletion_pct,
            self.files_modified_count,
            self.files_modified_pct,
        )


@dataclasses.dataclass(frozen=True)
class Leaderboard:
    totals: LeaderboardRow
    entries: tuple[LeaderboardRow, ...]

    def rows(self) -> Iterator[LeaderboardRow]:
        yield self.totals
        yield from self.entries
