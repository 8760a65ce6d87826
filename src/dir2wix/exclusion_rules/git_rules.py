"""Implementation of exclusion rules using .gitignore pattern syntax."""

import logging
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from pathspec.patterns import GitWildMatchPattern  # type: ignore
from pathspec.patterns.gitwildmatch import GitWildMatchPatternError  # type: ignore

from dir2wix.exceptions import InvalidArgumentsError, PathNotFoundError
from dir2wix.types import PathType

from .base_rules import BaseExclusionRules

logger = logging.getLogger(__name__)


def normalize_path(path: str) -> Tuple[str, bool]:
    """Normalize a root-relative path for matching.

    Backslashes become forward slashes, leading ``./`` and ``/`` are removed and a
    trailing slash is stripped. A trailing slash marks the path as a directory.

    Args:
        path: Path relative to the harvest root.

    Returns:
        Tuple of the normalized path and whether it was written as a directory.

    Example:
        >>> normalize_path("./sub\\\\dir/")
        ('sub/dir', True)
        >>> normalize_path("/config.yml")
        ('config.yml', False)
    """
    normalized = path.replace("\\", "/")
    is_dir = normalized.endswith("/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized.strip("/"), is_dir


@dataclass(frozen=True)
class Rule:
    """A single gitignore-style pattern with its derived flags.

    Attributes:
        pattern (str): The pattern as written in the rule source.
        negated (bool): The pattern started with ``!`` and re-includes matching paths.
        directory_only (bool): The pattern ended with ``/`` and only matches directories
            (and, through them, their contents).
        anchored (bool): The pattern contains a ``/`` other than a trailing one and is
            matched from the harvest root instead of at any depth.
        compiled (GitWildMatchPattern): The pathspec pattern used for glob matching.

    Example:
        >>> rule = Rule.parse("!logs/keep.log")
        >>> rule.negated, rule.directory_only, rule.anchored
        (True, False, True)
        >>> Rule.parse("build/").directory_only
        True
        >>> Rule.parse("\\\\!literal").negated
        False
        >>> Rule.parse("# comment") is None
        True
    """

    pattern: str
    negated: bool
    directory_only: bool
    anchored: bool
    compiled: GitWildMatchPattern = field(compare=False, repr=False)

    @classmethod
    def parse(cls, pattern: str) -> Optional["Rule"]:
        """Parse one rule-source line into a Rule.

        Args:
            pattern: A single gitignore pattern. Surrounding whitespace must already be
                trimmed by the caller.

        Returns:
            The parsed Rule, or None if the line is blank or a comment.

        Raises:
            GitWildMatchPatternError: If the pattern is not valid gitignore syntax.
        """
        if not pattern or pattern.startswith("#"):
            return None
        compiled = GitWildMatchPattern(pattern)
        if compiled.include is None:
            return None
        negated = pattern.startswith("!")
        body = pattern[1:] if negated else pattern
        return cls(
            pattern=pattern,
            negated=negated,
            directory_only=body.endswith("/"),
            anchored="/" in body.rstrip("/"),
            compiled=compiled,
        )

    def matches(self, path: str, is_dir: bool) -> bool:
        """Test the rule against a normalized root-relative path.

        Directories are matched with a trailing slash, so a directory-only rule never
        matches a file of the same name but does match any path beneath a matching
        directory.
        """
        candidate = f"{path}/" if is_dir else path
        return self.compiled.match_file(candidate) is not None


def evaluate(rules: Iterable[Rule], path: str, is_dir: bool) -> Optional[bool]:
    """Apply rules in order and return the final verdict.

    Each matching rule overwrites the running verdict, so the last matching rule wins,
    as with gitignore precedence.

    Args:
        rules: Rules in load order.
        path: Normalized root-relative path.
        is_dir: Whether the path names a directory.

    Returns:
        None if no rule matched, True if the last matching rule excludes the path,
        False if the last matching rule is a negation that re-includes it.

    Example:
        >>> rules = [Rule.parse("*.log"), Rule.parse("!keep.log")]
        >>> evaluate(rules, "keep.log", False), evaluate(rules, "app.log", False)
        (False, True)
        >>> evaluate(rules, "app.txt", False) is None
        True
    """
    verdict: Optional[bool] = None
    for rule in rules:
        if rule.matches(path, is_dir):
            verdict = not rule.negated
    return verdict


@dataclass(frozen=True)
class RuleSet:
    """Immutable ordered sequence of rules.

    Extending a RuleSet returns a new RuleSet; an existing one is never mutated.
    """

    rules: Tuple[Rule, ...] = ()

    def extend(self, rules: Iterable[Rule]) -> "RuleSet":
        return RuleSet(self.rules + tuple(rules))

    def match(self, path: str, is_dir: bool = False) -> Optional[bool]:
        return evaluate(self.rules, path, is_dir)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)


def read_rule_source(rules_file: PathType) -> List[Rule]:
    """Read the rules of a gitignore-syntax file.

    Lines are trimmed; blank lines and lines starting with ``#`` are skipped. The file
    is decoded as UTF-8, tolerating a byte order mark.

    Args:
        rules_file: Path to the rule source.

    Returns:
        The rules in file order.

    Raises:
        PathNotFoundError: If the file does not exist or cannot be read.
        InvalidArgumentsError: If a line is not a valid pattern.
    """
    path = Path(rules_file)
    if not path.is_file():
        raise PathNotFoundError(path, what="Rule source")

    try:
        with open(path, "r", encoding="utf-8-sig") as f:
            lines = f.read().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise PathNotFoundError(path, what="Rule source", reason=f"cannot be read ({e})") from e

    rules: List[Rule] = []
    for line_number, line in enumerate(lines, start=1):
        try:
            rule = Rule.parse(line.strip())
        except GitWildMatchPatternError as e:
            raise InvalidArgumentsError(
                f"Invalid pattern {line.strip()!r} at {path}:{line_number}: {e}", path=path
            ) from e
        if rule is not None:
            rules.append(rule)

    logger.debug("Loaded %d rules from %s", len(rules), path)
    return rules


class GitIgnoreExclusionRules(BaseExclusionRules):
    """Implementation of exclusion rules using .gitignore pattern syntax.

    Rules are evaluated in load order and the last matching rule decides, so a
    negated pattern (``!keep.log``) re-includes paths excluded by an earlier rule and
    an exclusion after it wins again. Glob syntax follows gitignore (``*``, ``?``,
    ``**``, character classes); each pattern is compiled with the pathspec library.

    Multiple rule sources can be provided during initialization or added
    incrementally with load_rules(). Individual patterns can be added with
    add_rule(). Either way the current rules are held in an immutable RuleSet that
    is replaced, not modified, when rules are added.

    Attributes:
        rule_set (RuleSet): The rules loaded so far.

    Example:
        >>> rules = GitIgnoreExclusionRules()
        >>> rules.add_rule("*.log")
        >>> rules.add_rule("!keep.log")
        >>> rules.exclude("logs/app.log")
        True
        >>> rules.exclude("keep.log")
        False
        >>> rules.add_rule("/config.yml")
        >>> rules.exclude("config.yml"), rules.exclude("sub/config.yml")
        (True, False)

    Note:
        The walker never descends into an excluded directory, so a negated pattern
        cannot re-include a file below an excluded directory during a harvest.
    """

    def __init__(self, rules_files: Optional[Union[PathType, Sequence[PathType]]] = None):
        """Initialize GitIgnoreExclusionRules with patterns from specified files.

        Args:
            rules_files: Path(s) to the file(s) containing .gitignore patterns.

        Raises:
            PathNotFoundError: If any rules file does not exist.
            InvalidArgumentsError: If any rules file contains an invalid pattern.
        """
        self.rule_set = RuleSet()

        if rules_files is not None:
            self.load_rules(rules_files)

    def has_rules(self) -> bool:
        return len(self.rule_set) > 0

    def match(self, path: str, is_dir: bool = False) -> Optional[bool]:
        """Return the tri-state verdict for a path.

        Returns:
            None if no rule matched, True if excluded, False if explicitly re-included.
        """
        normalized, trailing_slash = normalize_path(path)
        if not normalized:
            return None
        return self.rule_set.match(normalized, is_dir or trailing_slash)

    def exclude(self, path: str, is_dir: bool = False) -> bool:
        """Check if a path should be excluded based on the loaded patterns.

        Args:
            path: Path relative to the harvest root. A trailing slash marks a directory.
            is_dir: Whether the path names a directory.

        Returns:
            bool: True if the last matching rule is an exclusion, False otherwise.

        Example:
            >>> rules = GitIgnoreExclusionRules()
            >>> rules.add_rule("build/")
            >>> rules.exclude("build", is_dir=True)
            True
            >>> rules.exclude("build")
            False
            >>> rules.exclude("build/output.txt")
            True
        """
        return self.match(path, is_dir) is True

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """Load and append patterns from one or more rule sources.

        Args:
            rules_files: Path(s) to file(s) containing .gitignore patterns.

        Raises:
            PathNotFoundError: If any rules file does not exist.
            InvalidArgumentsError: If any rules file contains an invalid pattern.
        """
        if isinstance(rules_files, (str, PathLike)):
            rules_files = [rules_files]

        for rules_file in rules_files:
            self.rule_set = self.rule_set.extend(read_rule_source(rules_file))

    def add_rule(self, rule: str) -> None:
        """Append a single .gitignore pattern.

        Blank patterns and comments are ignored.

        Args:
            rule: A single .gitignore pattern (e.g. "*.pdb", "obj/", "!keep.log").

        Raises:
            InvalidArgumentsError: If the pattern is not valid gitignore syntax.
        """
        try:
            parsed = Rule.parse(rule.strip())
        except GitWildMatchPatternError as e:
            raise InvalidArgumentsError(f"Invalid pattern {rule!r}: {e}") from e
        if parsed is not None:
            self.rule_set = self.rule_set.extend([parsed])
