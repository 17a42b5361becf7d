import pytest

from goverage.cover import (
    Profile,
    ProfileBlock,
    ProfileParseError,
    parse_profiles,
    parse_profiles_from_lines,
)

SAMPLE = [
    "mode: set\n",
    "example.com/m/b.go:3.10,5.2 1 1\n",
    "example.com/m/a.go:7.1,8.2 2 0\n",
    "example.com/m/a.go:3.1,4.2 1 1\n",
]


def test_profiles_sorted_by_name():
    profiles = parse_profiles_from_lines(SAMPLE)
    assert [p.file_name for p in profiles] == ["example.com/m/a.go", "example.com/m/b.go"]
    assert all(p.mode == "set" for p in profiles)


def test_blocks_sorted():
    a = parse_profiles_from_lines(SAMPLE)[0]
    assert [b.start_line for b in a.blocks] == [3, 7]
    assert a.blocks[1] == ProfileBlock(7, 1, 8, 2, 2, 0)


def test_duplicate_blocks_merged_set_mode():
    profiles = parse_profiles_from_lines(
        ["mode: set", "f.go:1.1,2.2 1 0", "f.go:1.1,2.2 1 1"]
    )
    assert profiles[0].blocks == [ProfileBlock(1, 1, 2, 2, 1, 1)]


def test_duplicate_blocks_summed_count_mode():
    profiles = parse_profiles_from_lines(
        ["mode: count", "f.go:1.1,2.2 1 2", "f.go:1.1,2.2 1 3"]
    )
    assert profiles[0].blocks[0].count == 5


def test_inconsistent_num_stmt():
    with pytest.raises(ProfileParseError):
        parse_profiles_from_lines(["mode: set", "f.go:1.1,2.2 1 0", "f.go:1.1,2.2 2 1"])


@pytest.mark.parametrize("lines", [[], ["garbage"], ["mode: set", "bad line"]])
def test_bad_input(lines):
    with pytest.raises(ProfileParseError):
        parse_profiles_from_lines(lines)


def test_parse_file(tmp_path):
    path = tmp_path / "coverage.out"
    path.write_text("".join(SAMPLE))
    assert parse_profiles(path) == parse_profiles_from_lines(SAMPLE)


def test_boundaries_bracket_block():
    src = b"package p\n\nfunc f() {\n\tx()\n}\n"
    profile = Profile("p.go", "set", [ProfileBlock(3, 10, 5, 2, 1, 1)])
    start, end = profile.boundaries(src)
    assert start.start and not end.start
    assert src[start.offset] == ord("{")
    assert src[end.offset - 1] == ord("}")
    assert start.count == 1
    assert start.norm == 0.8


def test_boundaries_uncovered_has_zero_norm():
    src = b"package p\n\nfunc f() {\n\tx()\n}\n"
    profile = Profile("p.go", "set", [ProfileBlock(3, 10, 5, 2, 1, 0)])
    bounds = profile.boundaries(src)
    assert [b.norm for b in bounds] == [0.0, 0.0]
    assert bounds == sorted(bounds, key=lambda b: b.offset)