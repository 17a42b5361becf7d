"""Source files of a report, with their functions and highlighted code."""

from __future__ import annotations

import math
import os
import posixpath
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from goverage.cover import Boundary, Profile
from goverage.funcs import FuncExtent, GoSyntaxError, find_funcs
from goverage.utils import PackageLookupError, Pkg, find_file, find_pkgs, get_module_path

_ESCAPES = {
    ord(">"): b"&gt;",
    ord("<"): b"&lt;",
    ord("&"): b"&amp;",
    ord("\t"): b" " * 8,
}


@dataclass
class SourceFile:
    """A profiled source file ready to be rendered."""

    path: str
    name: str
    funcs: list[FuncExtent] = field(default_factory=list)
    code: str = ""


def html_gen(src: bytes, boundaries: Iterable[Boundary]) -> str:
    """Return ``src`` as escaped HTML with coverage spans at ``boundaries``."""
    if isinstance(src, str):
        src = src.encode("utf-8")
    pending = deque(boundaries)
    out = bytearray()
    for offset, byte in enumerate(src):
        while pending and pending[0].offset == offset:
            b = pending.popleft()
            if b.start:
                n = math.floor(b.norm * 9) + 1 if b.count > 0 else 0
                out += f'<span class="cov{n}" title="{b.count}">'.encode()
            else:
                out += b"</span>"
        out += _ESCAPES.get(byte, bytes((byte,)))
    return out.decode("utf-8", errors="replace")


class FilesRegistry:
    """Source files keyed by their profile file name."""

    def __init__(self, dirs: dict[str, Pkg | None] | None = None) -> None:
        self._files: dict[str, SourceFile] = {}
        self._dirs: dict[str, Pkg | None] = dict(dirs or {})

    @classmethod
    def from_profiles(cls, profiles: Iterable[Profile]) -> FilesRegistry:
        """Locate the packages of ``profiles`` and add every file that can be read."""
        profiles = list(profiles)
        registry = cls(find_pkgs(profiles))
        for profile in profiles:
            try:
                registry.add_profile(profile)
            except (PackageLookupError, GoSyntaxError, OSError):
                continue
        return registry

    def get_files(self) -> list[SourceFile]:
        """Return all registered files."""
        return list(self._files.values())

    def get_file(self, file_name: str) -> SourceFile | None:
        """Return the file registered for ``file_name``, or None."""
        return self._files.get(file_name)

    def add_profile(self, profile: Profile) -> None:
        """Read, scan and highlight the source file of ``profile``."""
        name = profile.file_name
        if name in self._files:
            return
        try:
            file_path = find_file(self._dirs, name)
        except PackageLookupError as exc:
            raise PackageLookupError(f"error finding file {name}: {exc}") from exc
        try:
            funcs = find_funcs(file_path)
        except GoSyntaxError as exc:
            raise GoSyntaxError(f"error finding functions in {name}: {exc}") from exc
        except OSError as exc:
            raise OSError(f"error finding functions in {name}: {exc}") from exc
        try:
            src = Path(file_path).read_bytes()
        except OSError as exc:
            raise OSError(f"error generating HTML for {name}: can't read {file_path!r}: {exc}") from exc

        directory = (posixpath.dirname(name) or ".").removeprefix(get_module_path())
        self._files[name] = SourceFile(
            path=directory.removeprefix("/"),
            name=os.path.basename(file_path),
            funcs=funcs,
            code=html_gen(src, profile.boundaries(src)),
        )