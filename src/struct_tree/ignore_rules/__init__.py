"""Ignore rules for hiding files and directories from output."""

from .base_rules import BaseIgnoreRules
from .default_rules import DefaultIgnoreRules
from .ignore_file_rules import IgnoreFileRules
from .pattern_rules import PatternIgnoreRules
from .policy import IgnorePolicy, Suppression

__all__ = [
    "BaseIgnoreRules",
    "DefaultIgnoreRules",
    "IgnoreFileRules",
    "IgnorePolicy",
    "PatternIgnoreRules",
    "Suppression",
]
