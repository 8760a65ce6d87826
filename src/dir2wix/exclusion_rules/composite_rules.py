"""Composite exclusion rules for combining multiple rule types."""

from typing import List, Sequence

from .base_rules import BaseExclusionRules


class CompositeExclusionRules(BaseExclusionRules):
    """Composite exclusion rules that combine multiple rule types.

    A path is excluded if ANY of the constituent rules excludes it. This is how the
    command line combines gitignore rule sources with an extension list: each rule
    object keeps its own precedence semantics, and the composite only ORs the verdicts.

    Attributes:
        rules (List[BaseExclusionRules]): List of constituent exclusion rules.

    Example:
        >>> from dir2wix.exclusion_rules.extension_rules import ExtensionExclusionRules
        >>> from dir2wix.exclusion_rules.git_rules import GitIgnoreExclusionRules
        >>> git_rules = GitIgnoreExclusionRules()
        >>> git_rules.add_rule("obj/")
        >>> composite = CompositeExclusionRules([git_rules, ExtensionExclusionRules(".pdb")])
        >>> composite.exclude("obj", is_dir=True)
        True
        >>> composite.exclude("bin/app.pdb")
        True
        >>> composite.exclude("bin/app.exe")
        False
    """

    def __init__(self, rules: Sequence[BaseExclusionRules]):
        """Initialize composite exclusion rules.

        Args:
            rules: Sequence of exclusion rules to combine. Rules are evaluated in the
                order provided.

        Raises:
            ValueError: If rules list is empty.
            TypeError: If any rule doesn't implement BaseExclusionRules.
        """
        if not rules:
            raise ValueError("At least one exclusion rule must be provided")

        for i, rule in enumerate(rules):
            if not isinstance(rule, BaseExclusionRules):
                raise TypeError(f"Rule at index {i} must implement BaseExclusionRules, " f"got {type(rule)}")

        self.rules: List[BaseExclusionRules] = list(rules)

    def exclude(self, path: str, is_dir: bool = False) -> bool:
        """Check if a path should be excluded by any constituent rule.

        Uses short-circuit evaluation: stops checking as soon as any rule
        returns True for exclusion.
        """
        return any(rule.exclude(path, is_dir) for rule in self.rules)

    def has_rules(self) -> bool:
        """Check if any constituent rule has rules configured."""
        return any(rule.has_rules() for rule in self.rules)
