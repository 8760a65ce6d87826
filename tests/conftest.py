"""Test configuration and fixtures for dir2wix."""

import pytest


def pytest_addoption(parser):
    """Add custom command-line options for tests."""
    parser.addoption("--run-cli-tests", action="store_true", default=False, help="Run CLI integration tests (slow)")


@pytest.fixture
def sample_tree(tmp_path):
    """Root with a.txt, b.log and sub/c.txt, plus a *.log rule source beside it."""
    root = tmp_path / "root"
    root.mkdir()
    (root / "a.txt").write_text("a")
    (root / "b.log").write_text("bb")
    (root / "sub").mkdir()
    (root / "sub" / "c.txt").write_text("ccc")

    rule_source = tmp_path / ".wixignore"
    rule_source.write_text("*.log\n")
    return root, rule_source
