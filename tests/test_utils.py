import os
import posixpath
import subprocess
from unittest import mock

import pytest

from goverage.cover import Profile
from goverage.utils import (
    Directory,
    PackageLookupError,
    Pkg,
    find_file,
    find_pkgs,
    get_module_path,
    get_profiles_tree,
    percent,
)


@pytest.fixture(autouse=True)
def _cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


def make_profile(file_name):
    return Profile(posixpath.join(get_module_path(), file_name), "set", [])


def sort_dirs(dirs):
    dirs = sorted(dirs, key=lambda d: d.path)
    for d in dirs:
        d.profiles.sort(key=lambda p: p.file_name)
    return dirs


CASES = [
    ([], []),
    (
        ["internal/database/user_repository.go"],
        [("internal/database", ["internal/database/user_repository.go"])],
    ),
    (
        ["internal/database/user_repository.go", "internal/database/order_repository.go"],
        [("internal/database", ["internal/database/user_repository.go",
                                "internal/database/order_repository.go"])],
    ),
    (
        ["internal/database/user_repository.go", "internal/database/article_repository.go",
         "internal/api/user_handler.go"],
        [("internal/database", ["internal/database/user_repository.go",
                                "internal/database/article_repository.go"]),
         ("internal/api", ["internal/api/user_handler.go"])],
    ),
    (
        ["internal/database/user_repository.go",
         "internal/database/subdir/article_repository.go",
         "internal/api/user_handler.go"],
        [("internal/database", ["internal/database/user_repository.go"]),
         ("internal/database/subdir", ["internal/database/subdir/article_repository.go"]),
         ("internal/api", ["internal/api/user_handler.go"])],
    ),
]


@pytest.mark.parametrize("names,expected", CASES)
def test_get_profiles_tree(names, expected):
    result = get_profiles_tree([make_profile(n) for n in names])
    want = [Directory(p, [make_profile(f) for f in files]) for p, files in expected]
    assert sort_dirs(result) == sort_dirs(want)


def test_tree_skips_relative_and_absolute():
    assert get_profiles_tree([Profile("./a.go", "set"), Profile("/abs/b.go", "set")]) == []


def test_module_path_from_go_mod(tmp_path):
    (tmp_path / "go.mod").write_text("module example.com/m\n\ngo 1.23\n")
    assert get_module_path() == "example.com/m"
    tree = get_profiles_tree([Profile("example.com/m/internal/db/x.go", "set")])
    assert [d.path for d in tree] == ["/internal/db"]


def test_module_path_missing():
    assert get_module_path() == ""


@pytest.mark.parametrize("covered,total,expected", [(1, 3, 33.33), (0, 0, 0.0), (1, 1, 100.0), (2, 3, 66.67)])
def test_percent(covered, total, expected):
    assert percent(covered, total) == expected


def test_find_file_local_paths():
    assert find_file({}, "./x.go") == "./x.go"


def test_find_file_from_pkg():
    pkgs = {"example.com/m/a": Pkg("example.com/m/a", dir="/src/a")}
    assert find_file(pkgs, "example.com/m/a/f.go") == os.path.join("/src/a", "f.go")


def test_find_file_pkg_error():
    pkgs = {"example.com/m/a": Pkg("example.com/m/a", error="broken")}
    with pytest.raises(PackageLookupError, match="broken"):
        find_file(pkgs, "example.com/m/a/f.go")


def test_find_file_unknown():
    with pytest.raises(PackageLookupError):
        find_file({}, "example.com/m/a/f.go")


def test_find_pkgs_local_only_runs_nothing():
    with mock.patch("subprocess.run") as run:
        assert find_pkgs([Profile("./a.go", "set")]) == {}
    run.assert_not_called()


def test_find_pkgs_decodes_go_list():
    out = (
        b'{"ImportPath": "example.com/m/a", "Dir": "/src/a"}\n'
        b'{"ImportPath": "example.com/m/b", "Error": {"Err": "no Go files"}}\n'
    )
    done = subprocess.CompletedProcess([], 0, stdout=out, stderr=b"")
    with mock.patch("subprocess.run", return_value=done):
        pkgs = find_pkgs([Profile("example.com/m/a/x.go", "set"), Profile("example.com/m/b/y.go", "set")])
    assert pkgs["example.com/m/a"] == Pkg("example.com/m/a", "/src/a", None)
    assert pkgs["example.com/m/b"].error == "no Go files"


def test_find_pkgs_failure():
    with mock.patch("subprocess.run", side_effect=FileNotFoundError("go")):
        with pytest.raises(PackageLookupError):
            find_pkgs([Profile("example.com/m/a/x.go", "set")])