"""Exclusion rules for individual files named by their root-relative path."""

from typing import Dict, List, Set, Tuple

from .base_rules import BaseExclusionRules
from .git_rules import normalize_path


class PathExclusionRules(BaseExclusionRules):
    """Exclusion rules for specific files inside the harvested tree.

    A file is excluded if its path equals one of the registered paths, or if it lies
    in a registered directory and its name starts and ends with a registered prefix
    and suffix. The second form covers files whose exact name is only known at run
    time, such as the temporary file written next to an output document. Directories
    are never excluded.

    Unlike gitignore rules, these rules take names literally: no glob characters are
    interpreted, and no other rule can re-include a path they exclude.

    Example:
        >>> rules = PathExclusionRules()
        >>> rules.add_path("setup/Files.wxs")
        >>> rules.add_name_pattern("setup", ".Files.wxs.", ".tmp")
        >>> rules.exclude("setup/Files.wxs"), rules.exclude("setup/.Files.wxs.k2x9.tmp")
        (True, True)
        >>> rules.exclude("Files.wxs"), rules.exclude("setup/other.wxs")
        (False, False)
    """

    def __init__(self) -> None:
        self.paths: Set[str] = set()
        self._name_patterns: Dict[str, List[Tuple[str, str]]] = {}

    def add_path(self, path: str) -> None:
        """Exclude the file at a root-relative path."""
        normalized, _ = normalize_path(path)
        self.paths.add(normalized)

    def add_name_pattern(self, directory: str, prefix: str, suffix: str) -> None:
        """Exclude files in a root-relative directory by name prefix and suffix.

        Args:
            directory: Directory relative to the root; empty for the root itself.
            prefix: Literal start of the file name.
            suffix: Literal end of the file name.
        """
        normalized, _ = normalize_path(directory)
        self._name_patterns.setdefault(normalized, []).append((prefix, suffix))

    def exclude(self, path: str, is_dir: bool = False) -> bool:
        normalized, trailing_slash = normalize_path(path)
        if is_dir or trailing_slash:
            return False
        if normalized in self.paths:
            return True

        directory, _, name = normalized.rpartition("/")
        return any(
            len(name) >= len(prefix) + len(suffix) and name.startswith(prefix) and name.endswith(suffix)
            for prefix, suffix in self._name_patterns.get(directory, ())
        )

    def has_rules(self) -> bool:
        return bool(self.paths or self._name_patterns)
