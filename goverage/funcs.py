"""Locating function declarations in Go source and measuring their coverage."""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from os import PathLike
from typing import Iterator

from goverage.cover import Profile

_OPEN = {"(": ")", "[": "]", "{": "}"}
_CLOSE = set(_OPEN.values())


class GoSyntaxError(ValueError):
    """Raised when Go source cannot be scanned."""


@dataclass
class FuncExtent:
    """A function's name and its span in the source."""

    name: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def coverage(self, profile: Profile) -> tuple[int, int]:
        """Return (covered, total) statements of the profile that fall in this function."""
        covered = total = 0
        for b in profile.blocks:
            if b.start_line > self.end_line or (
                b.start_line == self.end_line and b.start_col >= self.end_col
            ):
                break
            if b.end_line < self.start_line or (
                b.end_line == self.start_line and b.end_col <= self.start_col
            ):
                continue
            total += b.num_stmt
            if b.count > 0:
                covered += b.num_stmt
        return covered, total


_Token = tuple[str, str, int]


def _is_ident_char(c: str) -> bool:
    return c.isalnum() or c == "_" or ord(c) > 127


def _tokenize(text: str) -> Iterator[_Token]:
    i, n = 0, len(text)
    while i < n:
        c = text[i]
        if c == "\n":
            yield ("nl", c, i)
            i += 1
        elif c in " \t\r\f":
            i += 1
        elif text.startswith("//", i):
            j = text.find("\n", i)
            i = n if j < 0 else j
        elif text.startswith("/*", i):
            j = text.find("*/", i + 2)
            if j < 0:
                raise GoSyntaxError(f"offset {i}: comment not terminated")
            if "\n" in text[i:j]:
                yield ("nl", "\n", i)
            i = j + 2
        elif c in "\"'":
            j = i + 1
            while True:
                if j >= n or text[j] == "\n":
                    raise GoSyntaxError(f"offset {i}: literal not terminated")
                if text[j] == "\\":
                    j += 2
                    continue
                if text[j] == c:
                    break
                j += 1
            yield ("lit", text[i:j + 1], i)
            i = j + 1
        elif c == "`":
            j = text.find("`", i + 1)
            if j < 0:
                raise GoSyntaxError(f"offset {i}: raw string not terminated")
            yield ("lit", text[i:j + 1], i)
            i = j + 1
        elif _is_ident_char(c):
            j = i
            while j < n and _is_ident_char(text[j]):
                j += 1
            yield ("ident", text[i:j], i)
            i = j
        else:
            yield ("punct", c, i)
            i += 1


def _match(tokens: list[_Token], j: int) -> int:
    """Return the index of the bracket closing the one at ``j``."""
    stack = [_OPEN[tokens[j][1]]]
    k = j + 1
    while k < len(tokens):
        kind, val, off = tokens[k]
        if kind == "punct":
            if val in _OPEN:
                stack.append(_OPEN[val])
            elif val in _CLOSE:
                if stack.pop() != val:
                    raise GoSyntaxError(f"offset {off}: unexpected {val!r}")
                if not stack:
                    return k
        k += 1
    raise GoSyntaxError(f"offset {tokens[j][2]}: unclosed {tokens[j][1]!r}")


def _parse_func(tokens: list[_Token], i: int) -> tuple[tuple[str, int, int] | None, int]:
    j = i + 1
    if j < len(tokens) and tokens[j][:2] == ("punct", "("):
        j = _match(tokens, j) + 1
    if j >= len(tokens) or tokens[j][0] != "ident":
        raise GoSyntaxError(f"offset {tokens[i][2]}: expected function name")
    name = tokens[j][1]
    j += 1
    depth = 0
    while j < len(tokens):
        kind, val, _ = tokens[j]
        if kind == "nl" and depth == 0:
            return None, j
        if kind == "punct":
            if val == ";" and depth == 0:
                return None, j
            if val in "([":
                depth += 1
            elif val in ")]":
                depth -= 1
                if depth < 0:
                    raise GoSyntaxError(f"offset {tokens[j][2]}: unexpected {val!r}")
            elif val == "{":
                prev = tokens[j - 1]
                if depth > 0 or (prev[0] == "ident" and prev[1] in ("struct", "interface")):
                    j = _match(tokens, j) + 1
                    continue
                end = _match(tokens, j)
                return (name, tokens[i][2], tokens[end][2] + 1), end + 1
            elif val == "}":
                raise GoSyntaxError(f"offset {tokens[j][2]}: unexpected '}}'")
        j += 1
    return None, j


def find_funcs_in_source(source: str | bytes) -> list[FuncExtent]:
    """Return the extents of all function declarations with bodies in ``source``."""
    text = source.decode("latin-1") if isinstance(source, bytes) else source.encode("utf-8").decode("latin-1")
    line_starts = [0] + [k + 1 for k, c in enumerate(text) if c == "\n"]

    def position(offset: int) -> tuple[int, int]:
        line = bisect.bisect_right(line_starts, offset)
        return line, offset - line_starts[line - 1] + 1

    tokens = list(_tokenize(text))
    funcs: list[FuncExtent] = []
    stack: list[str] = []
    stmt_start = True
    i = 0
    while i < len(tokens):
        kind, val, off = tokens[i]
        if not stack and stmt_start and kind == "ident" and val == "func":
            found, i = _parse_func(tokens, i)
            if found is not None:
                name, start, end = found
                funcs.append(FuncExtent(name, *position(start), *position(end)))
            stmt_start = True
            continue
        if kind == "punct" and val in _OPEN:
            stack.append(_OPEN[val])
        elif kind == "punct" and val in _CLOSE:
            if not stack or stack.pop() != val:
                raise GoSyntaxError(f"offset {off}: unexpected {val!r}")
        stmt_start = kind == "nl" or (kind == "punct" and val == ";")
        i += 1
    if stack:
        raise GoSyntaxError("unexpected end of file: unclosed brackets")
    return funcs


def find_funcs(name: str | PathLike) -> list[FuncExtent]:
    """Read the Go file ``name`` and return its function extents."""
    with open(name, "rb") as handle:
        return find_funcs_in_source(handle.read())