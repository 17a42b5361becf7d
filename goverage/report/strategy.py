"""The HTML report strategy: writes a browsable coverage report."""

from __future__ import annotations

import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Sequence

from goverage.browser import open_url
from goverage.cover import Profile
from goverage.report.elements import ElementsRegistry
from goverage.report.files import FilesRegistry, SourceFile
from goverage.report.templating import (
    GlobalData,
    get_output_path,
    get_path,
    render_directory,
    render_file,
    write_assets,
)
from goverage.strategies import Strategy
from goverage.utils import Directory, PackageLookupError, get_profiles_tree


class ReportError(Exception):
    """Raised when an HTML report cannot be produced."""


def _write(path: str, content: str) -> None:
    directory = os.path.dirname(path)
    try:
        if directory:
            os.makedirs(directory, exist_ok=True)
    except OSError as exc:
        raise ReportError(f"error creating directory {directory}: {exc}") from exc
    try:
        Path(path).write_text(content, encoding="utf-8")
    except OSError as exc:
        raise ReportError(f"error creating file {path}: {exc}") from exc


class HTMLStrategy(Strategy):
    """Writes index pages for directories and highlighted pages for files."""

    @property
    def name(self) -> str:
        return "HTML"

    def execute(self, profiles: Sequence[Profile], output_dir: str) -> float:
        """Write the report and return the statement coverage percentage.

        With an empty ``output_dir`` the report goes to a new temporary
        directory and is opened in a browser.
        """
        output_path = get_output_path(output_dir)
        global_data = GlobalData(generated_time=datetime.now().astimezone())
        try:
            coverage_percent = self._execute(list(profiles), output_path, global_data)
        except ReportError as exc:
            raise ReportError(f"error executing HTML strategy: {exc}") from exc

        if not output_dir and not open_url(Path(output_path, "index.html").as_uri()):
            print(f"HTML output written to {output_path}", file=sys.stderr)
        return coverage_percent

    def _execute(
        self, profiles: list[Profile], output_path: str, global_data: GlobalData
    ) -> float:
        tree = get_profiles_tree(profiles)
        if not tree:
            raise ReportError("no profiles found")

        try:
            files = FilesRegistry.from_profiles(profiles)
        except PackageLookupError as exc:
            raise ReportError(f"error creating files registry: {exc}") from exc

        elements = ElementsRegistry(files)
        for profile in profiles:
            elements.add_profile(profile)
        for directory in tree:
            elements.add_directory(directory, "")

        total = elements.get_total_coverage()
        global_data.total_coverage = total

        try:
            write_assets(os.path.join(output_path, "assets"))
        except OSError as exc:
            raise ReportError(f"error executing assets: {exc}") from exc

        try:
            self._write_directory(output_path, elements, Directory(""), global_data)
        except ReportError as exc:
            raise ReportError(f"error executing root directory: {exc}") from exc

        for directory in tree:
            try:
                self._write_directory(output_path, elements, directory, global_data)
            except ReportError as exc:
                raise ReportError(
                    f"error executing directories: error executing directory {directory.path}: {exc}"
                ) from exc

        for file in files.get_files():
            try:
                self._write_file(output_path, file, global_data)
            except ReportError as exc:
                raise ReportError(
                    f"error executing files: error executing file {file.name}: {exc}"
                ) from exc

        return total.statements.percent

    @staticmethod
    def _write_directory(
        output_path: str,
        elements: ElementsRegistry,
        directory: Directory,
        global_data: GlobalData,
    ) -> None:
        listed = elements.get_elements(directory.path)
        if not listed:
            raise ReportError(f"no elements found for directory {directory.path}")
        path = get_path(output_path, directory.path, "index.html")
        _write(path, render_directory(directory, listed, global_data))

    @staticmethod
    def _write_file(output_path: str, file: SourceFile, global_data: GlobalData) -> None:
        path = get_path(output_path, file.path, file.name + ".html")
        _write(path, render_file(file, global_data))