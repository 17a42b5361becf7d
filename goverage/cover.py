"""Reading of Go coverage profiles and computing their highlight boundaries."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from os import PathLike
from typing import Iterable

_LINE_RE = re.compile(r"^(.+):(\d+)\.(\d+),(\d+)\.(\d+) (\d+) (\d+)$")
_MODE_PREFIX = "mode: "


class ProfileParseError(ValueError):
    """Raised when a coverage profile is malformed."""


@dataclass
class ProfileBlock:
    """A single block of a coverage profile."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int
    num_stmt: int
    count: int


@dataclass(frozen=True)
class Boundary:
    """A start or end of a coverage highlight in a source file."""

    offset: int
    start: bool
    count: int
    norm: float = 0.0


@dataclass
class Profile:
    """Coverage data for one source file."""

    file_name: str
    mode: str
    blocks: list[ProfileBlock] = field(default_factory=list)

    def boundaries(self, src: bytes) -> list[Boundary]:
        """Return the highlight boundaries of the blocks within ``src``, sorted by offset."""
        max_count = max((b.count for b in self.blocks), default=0)
        divisor = math.log(max_count) if max_count > 1 else 1.0

        def make(offset: int, start: bool, count: int) -> Boundary:
            if not start or count == 0:
                return Boundary(offset, start, count)
            norm = 0.8 if max_count <= 1 else math.log(count) / divisor
            return Boundary(offset, start, count, norm)

        result: list[Boundary] = []
        line, col = 1, 2
        si, bi = 0, 0
        while si < len(src) and bi < len(self.blocks):
            b = self.blocks[bi]
            if b.start_line == line and b.start_col == col:
                result.append(make(si, True, b.count))
            if (b.end_line == line and b.end_col == col) or line > b.end_line:
                result.append(make(si, False, 0))
                bi += 1
                continue
            if src[si] == ord("\n"):
                line += 1
                col = 0
            col += 1
            si += 1
        result.sort(key=lambda bd: (bd.offset, bd.start))
        return result


def parse_profiles_from_lines(lines: Iterable[str]) -> list[Profile]:
    """Parse profile lines into profiles sorted by file name."""
    files: dict[str, Profile] = {}
    mode = ""
    for lineno, raw in enumerate(lines, 1):
        line = raw.rstrip("\r\n")
        if not mode:
            if not line.startswith(_MODE_PREFIX) or line == _MODE_PREFIX:
                raise ProfileParseError(f"line {lineno}: bad mode line: {line!r}")
            mode = line[len(_MODE_PREFIX):]
            continue
        if not line.strip():
            continue
        match = _LINE_RE.match(line)
        if match is None:
            raise ProfileParseError(f"line {lineno}: line {line!r} doesn't match expected format")
        name = match.group(1)
        numbers = [int(g) for g in match.groups()[1:]]
        profile = files.setdefault(name, Profile(name, mode))
        profile.blocks.append(ProfileBlock(*numbers))
    if not mode:
        raise ProfileParseError("empty profile: missing mode line")

    for profile in files.values():
        profile.blocks.sort(key=lambda b: (b.start_line, b.start_col))
        merged: list[ProfileBlock] = []
        for block in profile.blocks:
            last = merged[-1] if merged else None
            if last is not None and (
                (last.start_line, last.start_col, last.end_line, last.end_col)
                == (block.start_line, block.start_col, block.end_line, block.end_col)
            ):
                if last.num_stmt != block.num_stmt:
                    raise ProfileParseError(
                        f"inconsistent NumStmt in {profile.file_name}: "
                        f"changed from {last.num_stmt} to {block.num_stmt}"
                    )
                if mode == "set":
                    last.count |= block.count
                else:
                    last.count += block.count
            else:
                merged.append(block)
        profile.blocks = merged
    return sorted(files.values(), key=lambda p: p.file_name)


def parse_profiles(path: str | PathLike) -> list[Profile]:
    """Read and parse the coverage profile file at ``path``."""
    with open(path, encoding="utf-8") as handle:
        return parse_profiles_from_lines(handle)