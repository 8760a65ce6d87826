import os
from unittest.mock import patch

import pytest

from dir2wix.exceptions import PathNotFoundError, TraversalError
from dir2wix.exclusion_rules.git_rules import GitIgnoreExclusionRules
from dir2wix.harvest_tree.records import ComponentRegistry, DirectoryClose, DirectoryOpen, FileUnit
from dir2wix.harvest_tree.walker import HarvestWalker

REFERENCE = "$(var.HarvestPath)"
ROOT_DIRECTORY_ID = "dir197A97F431CE52766B3EA913B66121CC"
SUB_DIRECTORY_ID = "dirC827FAD91C17AB5209EB12D8351058DB"


def file_records(walker):
    return [record for record in walker.walk() if isinstance(record, FileUnit)]


def log_rules():
    rules = GitIgnoreExclusionRules()
    rules.add_rule("*.log")
    return rules


def test_walk_records(sample_tree):
    root, _ = sample_tree
    registry = ComponentRegistry()
    walker = HarvestWalker(root, REFERENCE, "INSTALLFOLDER", exclusion_rules=log_rules())

    records = list(walker.walk(registry))

    assert records == [
        DirectoryOpen("INSTALLFOLDER", "root", "", REFERENCE, is_anchor=True),
        FileUnit(
            directory_id=ROOT_DIRECTORY_ID,
            file_id="fil3A8209BE80708591964BEF4F62427B6A",
            component_id="cmp59CA6329502C622F49933F9846F44E27",
            name="a.txt",
            relative_path="a.txt",
            reference_path="$(var.HarvestPath)\\a.txt",
            size=1,
        ),
        DirectoryOpen(SUB_DIRECTORY_ID, "sub", "sub", "$(var.HarvestPath)\\sub"),
        FileUnit(
            directory_id=SUB_DIRECTORY_ID,
            file_id="fil8B564B47FF74C17EE41825433F971A20",
            component_id="cmp5786337CB721ADB16F4792B1391B5C13",
            name="c.txt",
            relative_path="sub/c.txt",
            reference_path="$(var.HarvestPath)\\sub\\c.txt",
            size=3,
        ),
        DirectoryClose(SUB_DIRECTORY_ID),
        DirectoryClose("INSTALLFOLDER", is_anchor=True),
    ]
    assert registry.ids == ("cmp59CA6329502C622F49933F9846F44E27", "cmp5786337CB721ADB16F4792B1391B5C13")


def test_walk_without_rules(sample_tree):
    root, _ = sample_tree
    records = list(HarvestWalker(root, REFERENCE, "INSTALLFOLDER").walk())
    names = {record.relative_path for record in records if isinstance(record, FileUnit)}
    assert names == {"a.txt", "b.log", "sub/c.txt"}


def test_files_precede_subdirectories(tmp_path):
    (tmp_path / "aaa").mkdir()
    (tmp_path / "aaa" / "inner.txt").write_text("x")
    (tmp_path / "zzz.txt").write_text("x")

    records = list(HarvestWalker(tmp_path, REFERENCE, "INSTALLFOLDER").walk())

    kinds = [(type(record).__name__, getattr(record, "name", None)) for record in records[1:-1]]
    assert kinds == [
        ("FileUnit", "zzz.txt"),
        ("DirectoryOpen", "aaa"),
        ("FileUnit", "inner.txt"),
        ("DirectoryClose", None),
    ]


def test_walk_is_deterministic(sample_tree):
    root, _ = sample_tree
    walker = HarvestWalker(root, REFERENCE, "INSTALLFOLDER")
    assert list(walker.walk()) == list(walker.walk())


def test_ids_do_not_depend_on_filesystem_location(tmp_path):
    first = tmp_path / "first"
    second = tmp_path / "elsewhere" / "second"
    for root in (first, second):
        (root / "bin").mkdir(parents=True)
        (root / "bin" / "app.exe").write_text("x")

    def file_ids(root):
        return [r.component_id for r in file_records(HarvestWalker(root, REFERENCE, "INSTALLFOLDER"))]

    assert file_ids(first) == file_ids(second)


def test_reference_root_changes_ids(sample_tree):
    root, _ = sample_tree

    def ids(reference):
        return {r.component_id for r in file_records(HarvestWalker(root, reference, "INSTALLFOLDER"))}

    assert ids("$(var.HarvestPath)").isdisjoint(ids("$(var.OtherPath)"))


def test_empty_tree(tmp_path):
    registry = ComponentRegistry()
    records = list(HarvestWalker(tmp_path, REFERENCE, "INSTALLFOLDER").walk(registry))
    assert records == [
        DirectoryOpen("INSTALLFOLDER", tmp_path.name, "", REFERENCE, is_anchor=True),
        DirectoryClose("INSTALLFOLDER", is_anchor=True),
    ]
    assert len(registry) == 0


def test_empty_subdirectory_is_emitted(tmp_path):
    (tmp_path / "empty").mkdir()
    records = list(HarvestWalker(tmp_path, REFERENCE, "INSTALLFOLDER").walk())
    assert [type(r) for r in records] == [DirectoryOpen, DirectoryOpen, DirectoryClose, DirectoryClose]
    assert records[1].name == "empty"


def test_excluded_directory_is_not_descended(sample_tree):
    root, _ = sample_tree
    rules = GitIgnoreExclusionRules()
    rules.add_rule("sub/")
    rules.add_rule("!sub/c.txt")

    real_scandir = os.scandir
    scanned = []

    def recording_scandir(path):
        scanned.append(os.path.basename(os.fspath(path)))
        return real_scandir(path)

    with patch("dir2wix.harvest_tree.walker.os.scandir", side_effect=recording_scandir):
        records = list(HarvestWalker(root, REFERENCE, "INSTALLFOLDER", exclusion_rules=rules).walk())

    assert "sub" not in scanned
    assert not any(isinstance(r, DirectoryOpen) and r.name == "sub" for r in records)
    assert not any(isinstance(r, FileUnit) and r.name == "c.txt" for r in records)


def test_exclusion_sees_relative_paths(sample_tree):
    root, _ = sample_tree
    rules = GitIgnoreExclusionRules()
    rules.add_rule("/c.txt")
    files = [r.relative_path for r in file_records(HarvestWalker(root, REFERENCE, "X", exclusion_rules=rules))]
    assert "sub/c.txt" in files

    rules.add_rule("/sub/c.txt")
    files = [r.relative_path for r in file_records(HarvestWalker(root, REFERENCE, "X", exclusion_rules=rules))]
    assert "sub/c.txt" not in files


def test_forward_slash_references(sample_tree):
    root, _ = sample_tree
    walker = HarvestWalker(root, "dist", "INSTALLFOLDER", exclusion_rules=log_rules(), reference_separator="/")
    references = [r.reference_path for r in file_records(walker)]
    assert references == ["dist/a.txt", "dist/sub/c.txt"]


def test_missing_root(tmp_path):
    missing = tmp_path / "missing"
    with pytest.raises(PathNotFoundError) as excinfo:
        list(HarvestWalker(missing, REFERENCE, "INSTALLFOLDER").walk())
    assert excinfo.value.path == str(missing)
    assert str(excinfo.value).startswith("Root directory not found")


def test_root_is_a_file(tmp_path):
    file_path = tmp_path / "file.txt"
    file_path.write_text("x")
    with pytest.raises(PathNotFoundError, match="is not a directory"):
        list(HarvestWalker(file_path, REFERENCE, "INSTALLFOLDER").walk())


def test_unreadable_directory(sample_tree):
    root, _ = sample_tree
    real_scandir = os.scandir

    def failing_scandir(path):
        if os.path.basename(os.fspath(path)) == "sub":
            raise PermissionError(13, "Permission denied")
        return real_scandir(path)

    records = []
    with patch("dir2wix.harvest_tree.walker.os.scandir", side_effect=failing_scandir):
        with pytest.raises(TraversalError) as excinfo:
            for record in HarvestWalker(root, REFERENCE, "INSTALLFOLDER").walk():
                records.append(record)

    assert excinfo.value.is_permission_error
    assert excinfo.value.path == str(root / "sub")
    assert isinstance(excinfo.value.__cause__, PermissionError)
    assert isinstance(records[-1], DirectoryOpen) and records[-1].name == "sub"


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="FIFOs not supported on this platform")
def test_special_files_are_skipped(tmp_path):
    (tmp_path / "regular.txt").write_text("x")
    os.mkfifo(tmp_path / "pipe")
    files = [r.name for r in file_records(HarvestWalker(tmp_path, REFERENCE, "INSTALLFOLDER"))]
    assert files == ["regular.txt"]
