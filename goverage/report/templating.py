"""Rendering of report pages and placement of report files."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Sequence

import jinja2

from goverage.report.elements import Coverage, Element
from goverage.report.files import SourceFile
from goverage.utils import Directory

_LAYOUT = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{% block title %}Coverage report{% endblock %}</title>
<link rel="stylesheet" href="{{ root }}assets/style.css">
</head>
<body>
<header>
<nav><a href="{{ root }}index.html">All files</a>{% if data.current_path %} / {{ data.current_path }}{% endif %}</nav>
{% set total = data.global_data.total_coverage %}
{% if total %}
<section class="summary">
{% for label, item in [("Statements", total.statements), ("Lines", total.lines), ("Functions", total.functions)] %}
<div class="metric {{ item.percent|level }}"><span class="label">{{ label }}</span> <span class="value">{{ "%.2f"|format(item.percent) }}%</span> <span class="ratio">{{ item.covered }}/{{ item.total }}</span></div>
{% endfor %}
</section>
{% endif %}
</header>
<main>
{% block content %}{% endblock %}
</main>
<footer>Generated at {{ data.global_data.generated_time|timeformat }}</footer>
</body>
</html>
"""

_DIRECTORY_PAGE = """{% extends "layout.html" %}
{% block title %}Coverage: {{ data.directory.path or "/" }}{% endblock %}
{% block content %}
<table class="elements">
<thead><tr><th>Name</th><th>Statements</th><th>Lines</th><th>Functions</th><th>Total</th></tr></thead>
<tbody>
{% for element in data.elements|sort(attribute="name") %}
<tr>
<td><a href="{{ element.url }}">{{ element.name }}</a></td>
{% for item in (element.coverage.statements, element.coverage.lines, element.coverage.functions) %}
<td class="{{ item.percent|level }}">{{ "%.2f"|format(item.percent) }}% ({{ item.covered }}/{{ item.total }})</td>
{% endfor %}
<td class="{{ element.coverage.total_percent|level }}">{{ "%.2f"|format(element.coverage.total_percent) }}%</td>
</tr>
{% endfor %}
</tbody>
</table>
{% endblock %}
"""

_FILE_PAGE = """{% extends "layout.html" %}
{% block title %}Coverage: {{ data.file.name }}{% endblock %}
{% block content %}
<h1>{{ data.file.name }}</h1>
<pre class="code">{{ data.file.code|safe }}</pre>
{% endblock %}
"""

_STYLE = """body { font-family: sans-serif; margin: 0; background: #fafafa; color: #222; }
header, main, footer { padding: 1em 2em; }
nav a { color: #0b5394; }
.summary { display: flex; gap: 2em; }
.metric .value { font-weight: bold; }
table.elements { border-collapse: collapse; width: 100%; }
table.elements th, table.elements td { border: 1px solid #ddd; padding: 0.3em 0.6em; text-align: left; }
.low { background: #fce1e1; }
.medium { background: #fff4c2; }
.high { background: #e1f5e1; }
pre.code { background: #111; color: #999; padding: 1em; overflow-x: auto; }
.cov0 { color: rgb(192, 0, 0); }
.cov1 { color: rgb(128, 128, 128); }
.cov2 { color: rgb(116, 140, 131); }
.cov3 { color: rgb(104, 152, 134); }
.cov4 { color: rgb(92, 164, 137); }
.cov5 { color: rgb(80, 176, 140); }
.cov6 { color: rgb(68, 188, 143); }
.cov7 { color: rgb(56, 200, 146); }
.cov8 { color: rgb(44, 212, 149); }
.cov9 { color: rgb(32, 224, 152); }
.cov10 { color: rgb(20, 236, 155); }
"""

_ASSETS = {"style.css": _STYLE}


@dataclass
class GlobalData:
    """Data shared by every page of a report."""

    generated_time: datetime
    total_coverage: Coverage | None = None


@dataclass
class TemplateData:
    """Everything a page template is rendered with."""

    current_path: str
    global_data: GlobalData
    file: SourceFile | None = None
    directory: Directory | None = None
    elements: list[Element] = field(default_factory=list)


def level(percent: float) -> str:
    """Classify a percentage as low, medium or high."""
    if percent < 40:
        return "low"
    if percent < 80:
        return "medium"
    return "high"


def baseurl(path: str) -> str:
    """Return the relative URL from ``path`` back to the report root."""
    path = path.strip("/")
    if not path:
        return "."
    return "../" * len(path.split("/"))


def timeformat(t: datetime) -> str:
    """Format a time with its zone name and offset."""
    if t.tzinfo is None:
        t = t.astimezone()
    return t.strftime("%Y-%m-%d %H:%M:%S %Z %z")


@lru_cache(maxsize=None)
def _environment() -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.DictLoader(
            {
                "layout.html": _LAYOUT,
                "directory.page.html": _DIRECTORY_PAGE,
                "file.page.html": _FILE_PAGE,
            }
        ),
        autoescape=True,
    )
    env.filters.update(level=level, baseurl=baseurl, timeformat=timeformat)
    return env


def _render(template: str, data: TemplateData) -> str:
    base = baseurl(data.current_path)
    root = "" if base == "." else base
    return _environment().get_template(template).render(data=data, root=root)


def render_directory(
    directory: Directory, elements: Sequence[Element], global_data: GlobalData
) -> str:
    """Render the listing page of ``directory``."""
    data = TemplateData(
        current_path=directory.path,
        global_data=global_data,
        directory=directory,
        elements=list(elements),
    )
    return _render("directory.page.html", data)


def render_file(file: SourceFile, global_data: GlobalData) -> str:
    """Render the highlighted source page of ``file``."""
    data = TemplateData(current_path=file.path, global_data=global_data, file=file)
    return _render("file.page.html", data)


def write_assets(output_path: str | os.PathLike) -> None:
    """Write the report's static assets into ``output_path``."""
    os.makedirs(output_path, exist_ok=True)
    for name, content in _ASSETS.items():
        Path(output_path, name).write_text(content, encoding="utf-8")


def get_output_path(output_dir: str) -> str:
    """Return the absolute output directory, or a new temporary one if empty."""
    if not output_dir:
        return tempfile.mkdtemp(prefix="cover")
    return os.path.abspath(output_dir)


def get_path(base_path: str, path: str, file_name: str) -> str:
    """Join the parts of an output path, treating ``path`` as relative to the base."""
    parts = [p for p in (base_path, path, file_name) if p]
    if not parts:
        return ""
    return os.path.normpath("/".join(parts))