# tests/unit/test_exclusion_filter.py
from pathlib import Path

from forkwalk.domain.models import DEFAULT_EXCLUSIONS
from forkwalk.services.exclusion import ExclusionFilter


def test_single_component_pattern_matches_last_component():
    f = ExclusionFilter([".git"])
    assert f.should_skip(Path("/repo/.git"))
    assert not f.should_skip(Path("/repo/.github"))
    assert not f.should_skip(Path("/repo/.git/objects"))


def test_multi_component_pattern_needs_whole_suffix():
    f = ExclusionFilter(["out/classes"])
    assert f.should_skip(Path("/x/out/classes"))
    assert not f.should_skip(Path("/x/classes"))
    assert not f.should_skip(Path("/x/layout/classes"))


def test_suffix_is_component_wise_not_textual():
    f = ExclusionFilter(["build"])
    assert f.should_skip(Path("/src/build"))
    assert not f.should_skip(Path("/src/mybuild"))


def test_pattern_longer_than_path_never_matches():
    f = ExclusionFilter(["a/b/c"])
    assert not f.should_skip(Path("b/c"))


def test_empty_patterns_are_ignored():
    f = ExclusionFilter(["", "node_modules"])
    assert f.patterns == ("node_modules",)
    assert not f.should_skip(Path("/anything"))


def test_defaults_cover_vcs_and_build_output():
    f = ExclusionFilter(DEFAULT_EXCLUSIONS)
    assert f.should_skip(Path("/work/.git"))
    assert f.should_skip(Path("/work/community/build"))
    assert f.should_skip(Path("/work/out/tests"))
    assert not f.should_skip(Path("/work/src"))
