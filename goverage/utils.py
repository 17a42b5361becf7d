"""Helpers for locating packages and files and for grouping profiles."""

from __future__ import annotations

import json
import math
import os
import posixpath
import re
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from goverage.cover import Profile

_MODULE_RE = re.compile(r"^\s*module\s+(\S+)", re.MULTILINE)


class PackageLookupError(Exception):
    """Raised when a package or its source file cannot be located."""


@dataclass
class Pkg:
    """A package as described by ``go list -json``."""

    import_path: str
    dir: str = ""
    error: str | None = None


@dataclass
class Directory:
    """A directory and the profiles of the files in it."""

    path: str
    profiles: list[Profile] = field(default_factory=list)


def get_module_path() -> str:
    """Return the module path declared by go.mod in the working directory, or ''."""
    try:
        text = Path("go.mod").read_text(encoding="utf-8")
    except OSError:
        return ""
    match = _MODULE_RE.search(text)
    return match.group(1).strip('"') if match else ""


def _is_local(file_name: str) -> bool:
    return file_name.startswith(".") or os.path.isabs(file_name)


def _dirname(path: str) -> str:
    return posixpath.dirname(path) or "."


def find_file(pkgs: dict[str, Pkg | None], file: str) -> str:
    """Return the path on disk of a profile file name."""
    if _is_local(file):
        return file
    pkg = pkgs.get(_dirname(file))
    if pkg is not None:
        if pkg.dir:
            return os.path.join(pkg.dir, posixpath.basename(file))
        if pkg.error is not None:
            raise PackageLookupError(pkg.error)
    raise PackageLookupError(f"did not find package for {file} in go list output")


def percent(covered: int, total: int) -> float:
    """Return covered/total as a percentage rounded to two decimals."""
    if total == 0:
        total = 1
    value = 100.0 * covered / total * 100
    return math.copysign(math.floor(abs(value) + 0.5), value) / 100


def _go_tool() -> str:
    goroot = os.environ.get("GOROOT")
    return os.path.join(goroot, "bin", "go") if goroot else "go"


def find_pkgs(profiles: Iterable[Profile]) -> dict[str, Pkg | None]:
    """Run ``go list`` to find the directory of every package named by the profiles."""
    pkgs: dict[str, Pkg | None] = {}
    for profile in profiles:
        if _is_local(profile.file_name):
            continue
        pkgs.setdefault(_dirname(profile.file_name), None)
    if not pkgs:
        return pkgs

    try:
        result = subprocess.run(
            [_go_tool(), "list", "-e", "-json", *pkgs],
            capture_output=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as exc:
        stderr = getattr(exc, "stderr", b"") or b""
        raise PackageLookupError(
            f"cannot run go list: {exc}\n{stderr.decode(errors='replace')}"
        ) from exc

    decoder = json.JSONDecoder()
    text = result.stdout.decode("utf-8", errors="replace")
    pos = 0
    while True:
        while pos < len(text) and text[pos].isspace():
            pos += 1
        if pos >= len(text):
            break
        try:
            obj, pos = decoder.raw_decode(text, pos)
        except json.JSONDecodeError as exc:
            raise PackageLookupError(f"decoding go list json: {exc}") from exc
        error = obj.get("Error")
        pkg = Pkg(
            import_path=obj.get("ImportPath", ""),
            dir=obj.get("Dir", ""),
            error=error.get("Err", "") if isinstance(error, dict) else None,
        )
        pkgs[pkg.import_path] = pkg
    return pkgs


def get_profiles_tree(profiles: Iterable[Profile]) -> list[Directory]:
    """Group profiles by the directory of their file, relative to the module."""
    module = get_module_path()
    tree: dict[str, Directory] = {}
    for profile in profiles:
        if _is_local(profile.file_name):
            continue
        file_name = profile.file_name
        if file_name.startswith(module):
            file_name = file_name[len(module):]
        file_name = file_name.replace(os.sep, "/")
        dir_path = _dirname(file_name)
        tree.setdefault(dir_path, Directory(dir_path)).profiles.append(profile)
    return list(tree.values())