from abc import ABC, abstractmethod
from typing import Sequence, Union

from dir2wix.types import PathType


class BaseExclusionRules(ABC):
    """
    Abstract base class defining the interface for file/directory exclusion rules.

    This class serves as a contract for the exclusion rules consulted while harvesting a
    directory tree (e.g., .gitignore-style rules, extension rules). Implementations decide
    whether a path relative to the harvest root should be left out of the generated
    document. File loading and individual rule addition are optional capabilities that
    depend on the rule type.

    Paths are always relative to the harvest root and use forward slashes. Because some
    rules only apply to directories (``build/``) or only to files (extension lists), the
    caller states whether the path names a directory.

    Example:
        >>> from dir2wix.exclusion_rules.git_rules import GitIgnoreExclusionRules
        >>> git_rules = GitIgnoreExclusionRules()
        >>> git_rules.add_rule('*.pdb')
        >>> git_rules.exclude('bin/app.pdb')
        True
        >>> git_rules.exclude('bin/app.exe')
        False
        >>>
        >>> from dir2wix.exclusion_rules.extension_rules import ExtensionExclusionRules
        >>> extension_rules = ExtensionExclusionRules('.pdb;.obj')
        >>> extension_rules.extensions
        ('.pdb', '.obj')
    """

    @abstractmethod
    def exclude(self, path: str, is_dir: bool = False) -> bool:
        """
        Determine if a given path should be excluded based on the loaded rules.

        Args:
            path (str): Path relative to the harvest root, using forward slashes.
            is_dir (bool): True if the path names a directory. An excluded directory
                excludes its whole subtree.

        Returns:
            bool: True if the path should be excluded, False if it should be included.
        """
        pass

    def has_rules(self) -> bool:
        """
        Check whether any rule is configured.

        Returns:
            bool: True by default; subclasses that can be empty override this.
        """
        return True

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """
        Load and parse exclusion rules from one or more files.

        Rule types that don't support file operations use this default implementation,
        which raises NotImplementedError.

        Args:
            rules_files: Path to a file or sequence of paths containing exclusion rules.

        Raises:
            NotImplementedError: If this rule type doesn't support loading from files.
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support loading rules from files.")

    def add_rule(self, rule: str) -> None:
        """
        Add a single exclusion rule directly.

        Args:
            rule (str): The exclusion rule to add, e.g. a gitignore pattern like "*.pdb".

        Raises:
            NotImplementedError: If this rule type doesn't support adding individual rules.
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support adding individual rules.")
