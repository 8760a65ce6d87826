"""Exclusion rules for filtering files and directories."""

from .base_rules import BaseExclusionRules
from .composite_rules import CompositeExclusionRules
from .extension_rules import ExtensionExclusionRules
from .git_rules import GitIgnoreExclusionRules, Rule, RuleSet
from .path_rules import PathExclusionRules

__all__ = [
    "BaseExclusionRules",
    "CompositeExclusionRules",
    "ExtensionExclusionRules",
    "GitIgnoreExclusionRules",
    "PathExclusionRules",
    "Rule",
    "RuleSet",
]
