"""Extension-based exclusion rules for filtering files by suffix."""

from typing import Iterable, Tuple, Union

from dir2wix.exceptions import InvalidArgumentsError

from .base_rules import BaseExclusionRules


def parse_extension_list(extensions: str) -> Tuple[str, ...]:
    """Parse a semicolon-separated list of file extensions.

    Empty entries are dropped and a missing leading dot is added.

    Args:
        extensions: Extensions like '.pdb;.obj' or 'pdb;obj'.

    Returns:
        Tuple of extensions, each starting with a dot, in the given order.

    Raises:
        InvalidArgumentsError: If an entry contains a path separator.

    Example:
        >>> parse_extension_list(".pdb;obj;;")
        ('.pdb', '.obj')
    """
    result = []
    for entry in extensions.split(";"):
        entry = entry.strip()
        if not entry:
            continue
        if "/" in entry or "\\" in entry:
            raise InvalidArgumentsError(
                f"extension {entry!r} must not contain a path separator", "--exclude-extensions"
            )
        result.append(entry if entry.startswith(".") else f".{entry}")
    return tuple(result)


class ExtensionExclusionRules(BaseExclusionRules):
    """Exclusion rules based on file extensions.

    Files whose name ends with one of the configured extensions are excluded.
    Matching is case-sensitive. Directories are never excluded by extension.

    Attributes:
        extensions (Tuple[str, ...]): Extensions to exclude, each with a leading dot.

    Example:
        >>> rules = ExtensionExclusionRules(".pdb;.obj")
        >>> rules.exclude("bin/app.pdb")
        True
        >>> rules.exclude("bin/app.PDB")
        False
        >>> rules.exclude("symbols.pdb", is_dir=True)
        False
    """

    def __init__(self, extensions: Union[str, Iterable[str]]):
        """Initialize extension exclusion rules.

        Args:
            extensions: Either a semicolon-separated string or an iterable of extensions.

        Raises:
            InvalidArgumentsError: If an extension is malformed.
        """
        if isinstance(extensions, str):
            self.extensions = parse_extension_list(extensions)
        else:
            self.extensions = parse_extension_list(";".join(extensions))

    def exclude(self, path: str, is_dir: bool = False) -> bool:
        if is_dir:
            return False
        name = path.replace("\\", "/").rstrip("/").rsplit("/", 1)[-1]
        return name.endswith(self.extensions)

    def has_rules(self) -> bool:
        return len(self.extensions) > 0
