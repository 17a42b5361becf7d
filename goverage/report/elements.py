"""Coverage figures for the files and directories shown in a report."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass

from goverage.cover import Profile
from goverage.report.files import FilesRegistry, SourceFile
from goverage.utils import Directory, get_module_path, percent


@dataclass(frozen=True)
class CoverageItem:
    """Covered and total counts of one kind, with their percentage."""

    total: int
    covered: int
    percent: float


def make_coverage_item(total: int, covered: int) -> CoverageItem:
    """Build a coverage item, computing its rounded percentage."""
    return CoverageItem(total, covered, percent(covered, total))


@dataclass(frozen=True)
class Coverage:
    """Coverage by statements, lines and functions, and overall."""

    statements: CoverageItem
    lines: CoverageItem
    functions: CoverageItem
    total_percent: float


@dataclass
class _Tally:
    statements_total: int = 0
    statements_covered: int = 0
    lines_total: int = 0
    lines_covered: int = 0
    funcs_total: int = 0
    funcs_covered: int = 0

    def add(self, coverage: Coverage) -> None:
        self.statements_total += coverage.statements.total
        self.statements_covered += coverage.statements.covered
        self.lines_total += coverage.lines.total
        self.lines_covered += coverage.lines.covered
        self.funcs_total += coverage.functions.total
        self.funcs_covered += coverage.functions.covered

    def coverage(self) -> Coverage:
        covered = self.statements_covered + self.lines_covered + self.funcs_covered
        total = self.statements_total + self.lines_total + self.funcs_total
        return Coverage(
            statements=make_coverage_item(self.statements_total, self.statements_covered),
            lines=make_coverage_item(self.lines_total, self.lines_covered),
            functions=make_coverage_item(self.funcs_total, self.funcs_covered),
            total_percent=percent(covered, total),
        )


@dataclass
class Element:
    """An entry of a directory listing: a file or a directory."""

    name: str
    path: str
    url: str
    coverage: Coverage


def _dirname(path: str) -> str:
    return posixpath.dirname(path) or "."


class ElementsRegistry:
    """Listing entries keyed by profile file name or directory path."""

    def __init__(self, files_registry: FilesRegistry) -> None:
        self._elements: dict[str, Element] = {}
        self._files = files_registry

    def get_total_coverage(self) -> Coverage:
        """Return the coverage summed over the top-level entries."""
        tally = _Tally()
        for element in self.get_elements(""):
            tally.add(element.coverage)
        return tally.coverage()

    def get_elements(self, path: str) -> list[Element]:
        """Return the entries listed under ``path``."""
        return [e for e in self._elements.values() if e.path == path]

    def add_profile(self, profile: Profile) -> Element | None:
        """Add an entry for a profiled file; None if the file is unknown."""
        existing = self._elements.get(profile.file_name)
        if existing is not None:
            return existing
        file = self._files.get_file(profile.file_name)
        if file is None:
            return None
        element = Element(
            name=file.name,
            path=_dirname(profile.file_name).removeprefix(get_module_path()),
            url=file.name + ".html",
            coverage=self._coverage_by_profile(profile, file),
        )
        self._elements[profile.file_name] = element
        return element

    def add_directory(self, directory: Directory, path: str) -> Element:
        """Add an entry for ``directory``, listed under ``path``."""
        element = Element(
            name=directory.path,
            path=path.removeprefix(get_module_path()),
            url=directory.path.removeprefix("/") + "/index.html",
            coverage=self._coverage_by_directory(directory),
        )
        self._elements[directory.path] = element
        return element

    @staticmethod
    def _coverage_by_profile(profile: Profile, file: SourceFile) -> Coverage:
        tally = _Tally()
        for block in profile.blocks:
            lines = block.end_line - block.start_line + 1
            tally.statements_total += block.num_stmt
            tally.lines_total += lines
            if block.count > 0:
                tally.statements_covered += block.num_stmt
                tally.lines_covered += lines
        tally.funcs_total = len(file.funcs)
        tally.funcs_covered = sum(1 for f in file.funcs if f.coverage(profile)[0] > 0)
        return tally.coverage()

    def _coverage_by_directory(self, directory: Directory) -> Coverage:
        tally = _Tally()
        for profile in directory.profiles:
            element = self._elements.get(profile.file_name) or self.add_profile(profile)
            if element is not None:
                tally.add(element.coverage)
        return tally.coverage()