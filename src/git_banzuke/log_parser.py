from __future__ import annotations

import dataclasses
import re
from typing import Optional

from .models import Commit, FileModification

SENTINEL = "\x00"
LOG_PRETTY_FORMAT = "Author: %an%nEmail: %aE%nHash: %H"

_HEADER_PREFIX = "Author: "
_HEADER_RE = re.compile(r"Author: ([^\n]*)\nEmail: ([^\n]*)\nHash: ([^\n]*)\n?")
_NUMSTAT_RE = re.compile(r"([^\t]*)\t+([^\t]*)\t(.*)", re.DOTALL)
_COUNT_RE = re.compile(r"[0-9]+")


class ParseError(ValueError):
    pass


@dataclasses.dataclass
class ParseResult:
    commits: list[Commit] = dataclasses.field(default_factory=list)
    skipped_records: int = 0
    skipped_lines: int = 0
    errors: list[str] = dataclasses.field(default_factory=list)


def _parse_count(value: str) -> int:
    # git reports "-" for both counts of a binary file.
    if value == "-":
        return 0
    if _COUNT_RE.fullmatch(value) is None:
        raise ParseError(f"non-numeric count {value!r}")
    return int(value)


def parse_commit_log(text: str) -> ParseResult:
    """
    Parse the output of::

        git log --numstat --no-merges --pretty=format:'Author: %an%nEmail: %aE%nHash: %H' -z

    With -z every numstat line and every commit boundary is a NUL instead of a
    newline. The header of a record and its first numstat line share one token
    (they are joined by a plain newline), each further numstat line is its own
    token, and empty tokens separate commits.

    Renamed files are the odd case: git prints the counts with an empty path
    and puts the pre-image and post-image paths into the next two tokens:

        5\\t2\\t\\0old.txt\\0new.txt\\0

    Malformed headers and unparseable numstat lines are skipped and counted in
    the result; nothing here raises.
    """
    result = ParseResult()
    if not text:
        return result

    tokens = text.split(SENTINEL)

    current_name = ""
    current_email = ""
    current_hash = ""
    current_mods: list[FileModification] = []
    in_record = False

    def apply_commit() -> None:
        nonlocal current_name, current_email, current_hash, current_mods, in_record
        if in_record:
            result.commits.append(
                Commit(
                    author_name=current_name,
                    author_email=current_email,
                    hash=current_hash,
                    file_modifications=tuple(current_mods),
                )
            )
        current_name = ""
        current_email = ""
        current_hash = ""
        current_mods = []
        in_record = False

    pending: Optional[str] = None
    discarding = False
    i = 0
    while i < len(tokens) or pending is not None:
        if pending is not None:
            token = pending
            pending = None
        else:
            token = tokens[i]
            i += 1

        if token.startswith(_HEADER_PREFIX):
            apply_commit()
            m = _HEADER_RE.match(token)
            if m is None:
                result.skipped_records += 1
                result.errors.append(f"malformed record header: {token[:80]!r}")
                discarding = True
                continue
            discarding = False
            current_name, current_email, current_hash = m.group(1), m.group(2), m.group(3)
            in_record = True
            rest = token[m.end():]
            if rest:
                pending = rest
            continue

        if not token or not in_record or discarding:
            continue

        fm = _NUMSTAT_RE.fullmatch(token)
        if fm is None:
            result.skipped_lines += 1
            result.errors.append(f"{current_hash}: unrecognized numstat line {token[:80]!r}")
            continue

        path = fm.group(3)
        original_path: Optional[str] = None
        if not path:
            if i + 1 >= len(tokens):
                result.skipped_lines += 1
                result.errors.append(f"{current_hash}: rename entry is missing its paths")
                i = len(tokens)
                continue
            original_path = tokens[i]
            path = tokens[i + 1]
            i += 2

        try:
            additions = _parse_count(fm.group(1))
            deletions = _parse_count(fm.group(2))
        except ParseError as e:
            result.skipped_lines += 1
            result.errors.append(f"{current_hash}: {path}: {e}")
            continue

        current_mods.append(
            FileModification(
                path=path,
                original_path=original_path,
                additions=additions,
                deletions=deletions,
            )
        )

    apply_commit()
    return result
