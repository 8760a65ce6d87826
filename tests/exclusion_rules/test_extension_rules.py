import pytest

from dir2wix.exceptions import InvalidArgumentsError
from dir2wix.exclusion_rules.extension_rules import ExtensionExclusionRules, parse_extension_list


@pytest.mark.parametrize(
    "value,expected",
    [
        (".pdb;.obj", (".pdb", ".obj")),
        ("pdb;obj", (".pdb", ".obj")),
        (" .pdb ; .ilk ", (".pdb", ".ilk")),
        (".pdb;;", (".pdb",)),
        ("", ()),
        (".tar.gz", (".tar.gz",)),
    ],
)
def test_parse_extension_list(value, expected):
    assert parse_extension_list(value) == expected


@pytest.mark.parametrize("value", ["bin/.pdb", ".pdb;sub\\x"])
def test_parse_extension_list_rejects_separators(value):
    with pytest.raises(InvalidArgumentsError) as excinfo:
        parse_extension_list(value)
    assert excinfo.value.argument == "--exclude-extensions"


@pytest.mark.parametrize(
    "path,is_dir,expected",
    [
        ("app.pdb", False, True),
        ("bin/app.pdb", False, True),
        ("bin\\app.obj", False, True),
        ("app.exe", False, False),
        ("app.PDB", False, False),
        ("pdb", False, False),
        ("symbols.pdb", True, False),
        ("archive.tar.gz", False, False),
    ],
)
def test_extension_exclusion(path, is_dir, expected):
    rules = ExtensionExclusionRules(".pdb;obj")
    assert rules.exclude(path, is_dir=is_dir) == expected


def test_iterable_of_extensions():
    rules = ExtensionExclusionRules(["pdb", ".ilk"])
    assert rules.extensions == (".pdb", ".ilk")
    assert rules.exclude("app.ilk")


def test_has_rules():
    assert ExtensionExclusionRules(".pdb").has_rules()
    assert not ExtensionExclusionRules(";;").has_rules()
    assert not ExtensionExclusionRules(";;").exclude("anything.pdb")


def test_file_operations_not_supported():
    rules = ExtensionExclusionRules(".pdb")
    with pytest.raises(NotImplementedError):
        rules.load_rules("rules.txt")
    with pytest.raises(NotImplementedError):
        rules.add_rule("*.pdb")
