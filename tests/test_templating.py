import os
from datetime import datetime, timezone

import pytest

from goverage.report.elements import Coverage, Element, make_coverage_item
from goverage.report.files import SourceFile
from goverage.report.templating import (
    GlobalData,
    baseurl,
    get_output_path,
    get_path,
    level,
    render_directory,
    render_file,
    timeformat,
    write_assets,
)
from goverage.utils import Directory

WHEN = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def _coverage():
    return Coverage(
        statements=make_coverage_item(4, 1),
        lines=make_coverage_item(4, 3),
        functions=make_coverage_item(2, 2),
        total_percent=60.0,
    )


@pytest.mark.parametrize(
    "value, expected",
    [(0, "low"), (39.99, "low"), (40, "medium"), (79.99, "medium"), (80, "high"), (100, "high")],
)
def test_level(value, expected):
    assert level(value) == expected


@pytest.mark.parametrize(
    "path, expected",
    [("", "."), ("/", "."), ("a", "../"), ("a/b/", "../../"), ("/internal/db", "../../")],
)
def test_baseurl(path, expected):
    assert baseurl(path) == expected


def test_timeformat():
    assert timeformat(WHEN) == "2024-01-02 03:04:05 UTC +0000"


def test_get_path_without_subdir():
    assert get_path("out", "", "index.html") == os.path.join("out", "index.html")


def test_get_path_treats_path_as_relative():
    assert get_path("out", "/a/b", "x.html") == os.path.join("out", "a", "b", "x.html")


def test_get_output_path_relative(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert get_output_path("report") == os.path.join(os.getcwd(), "report")


def test_get_output_path_temporary():
    path = get_output_path("")
    try:
        assert os.path.isdir(path)
        assert os.path.basename(path).startswith("cover")
    finally:
        os.rmdir(path)


def test_write_assets(tmp_path):
    target = tmp_path / "out" / "assets"
    write_assets(target)
    style = target / "style.css"
    assert style.is_file()
    assert ".cov0" in style.read_text()


def test_render_directory_root():
    elements = [Element("/pkg", "", "pkg/index.html", _coverage())]
    html = render_directory(Directory(""), elements, GlobalData(WHEN, _coverage()))
    assert 'href="assets/style.css"' in html
    assert 'href="pkg/index.html"' in html
    assert "25.00%" in html
    assert timeformat(WHEN) in html


def test_render_directory_nested_and_escaped():
    elements = [Element("<b>.go", "/a/b", "x.html", _coverage())]
    html = render_directory(Directory("/a/b"), elements, GlobalData(WHEN))
    assert 'href="../../assets/style.css"' in html
    assert "&lt;b&gt;.go" in html
    assert "<b>.go" not in html


def test_render_file_keeps_code_markup():
    code = '<span class="cov1" title="1">x &lt; y</span>'
    file = SourceFile(path="pkg", name="a.go", funcs=[], code=code)
    html = render_file(file, GlobalData(WHEN, _coverage()))
    assert code in html
    assert 'href="../assets/style.css"' in html
    assert "a.go" in html