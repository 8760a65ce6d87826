import pytest

from dir2wix.exclusion_rules.path_rules import PathExclusionRules


@pytest.fixture
def rules():
    rules = PathExclusionRules()
    rules.add_path("setup/Files.wxs")
    rules.add_name_pattern("setup", ".Files.wxs.", ".tmp")
    return rules


@pytest.mark.parametrize(
    "path,is_dir,expected",
    [
        ("setup/Files.wxs", False, True),
        ("./setup/Files.wxs", False, True),
        ("setup\\Files.wxs", False, True),
        ("setup/.Files.wxs.x7k2m1qz.tmp", False, True),
        ("setup/.Files.wxs.tmp", False, False),
        ("Files.wxs", False, False),
        ("other/setup/Files.wxs", False, False),
        (".Files.wxs.x7k2m1qz.tmp", False, False),
        ("setup/Files.wxs.bak", False, False),
        ("setup/Files.wxs", True, False),
    ],
)
def test_path_exclusion(rules, path, is_dir, expected):
    assert rules.exclude(path, is_dir=is_dir) == expected


def test_root_level_name_pattern():
    rules = PathExclusionRules()
    rules.add_name_pattern("", ".Files.wxs.", ".tmp")
    assert rules.exclude(".Files.wxs.abc.tmp")
    assert not rules.exclude("sub/.Files.wxs.abc.tmp")


def test_glob_characters_are_literal():
    rules = PathExclusionRules()
    rules.add_path("out[1]/*.wxs")
    assert rules.exclude("out[1]/*.wxs")
    assert not rules.exclude("out1/Files.wxs")


def test_has_rules():
    rules = PathExclusionRules()
    assert not rules.has_rules()
    assert not rules.exclude("anything.txt")
    rules.add_path("Files.wxs")
    assert rules.has_rules()
