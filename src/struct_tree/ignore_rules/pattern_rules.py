"""Ignore rules built from user-supplied name patterns."""

import logging
import re
from typing import Iterable, List, Optional, Pattern

from struct_tree.types import RuleSource

from .base_rules import BaseIgnoreRules

logger = logging.getLogger(__name__)


def compile_ignore_pattern(pattern: str) -> Optional[Pattern[str]]:
    """Compile a user ignore pattern into an anchored regular expression.

    The only glob translation performed is ``*`` to ``.*``; every other character is
    handed to the regex engine as written. The result must match the whole name.

    Args:
        pattern: Pattern as typed by the user or read from the pattern store.

    Returns:
        The compiled expression, or None if the pattern is empty or malformed.

    Example:
        >>> compile_ignore_pattern("*.log").match("server.log") is not None
        True
        >>> compile_ignore_pattern("build(") is None
        True
    """
    pattern = pattern.strip()
    if not pattern:
        return None
    try:
        return re.compile("^{}$".format(pattern.replace("*", ".*")))
    except re.error as e:
        logger.debug("Dropping malformed ignore pattern %r: %s", pattern, e)
        return None


class PatternIgnoreRules(BaseIgnoreRules):
    """Ignore rules compiled from glob-like name patterns.

    Used for both persisted (CONFIG) and command-line (INLINE) patterns. Malformed
    patterns are dropped silently and simply never match. The same rules apply to
    files and directories.

    Attributes:
        source (RuleSource): Where the patterns came from.
        patterns (List[str]): The pattern strings that compiled successfully.

    Example:
        >>> rules = PatternIgnoreRules(["*.tmp", "scratch"], source=RuleSource.CONFIG)
        >>> rules.matches("a.tmp", is_dir=False)
        True
        >>> rules.matches("scratch", is_dir=True)
        True
        >>> rules.matches("scratchpad", is_dir=True)
        False
    """

    def __init__(self, patterns: Iterable[str] = (), source: RuleSource = RuleSource.INLINE):
        if source is RuleSource.DEFAULT:
            raise ValueError("Pattern rules cannot use the DEFAULT source")
        self.source = source
        self.patterns: List[str] = []
        self._compiled: List[Pattern[str]] = []
        for pattern in patterns:
            self.add_rule(pattern)

    def matches(self, name: str, is_dir: bool) -> bool:
        return any(regex.match(name) for regex in self._compiled)

    def add_rule(self, rule: str) -> None:
        """Compile and add a single pattern, dropping it if it is malformed."""
        compiled = compile_ignore_pattern(rule)
        if compiled is None:
            return
        self.patterns.append(rule.strip())
        self._compiled.append(compiled)


def split_pattern_list(value: str) -> List[str]:
    """Split a comma-separated pattern list, dropping empty entries.

    Example:
        >>> split_pattern_list("venv, *.log,,build")
        ['venv', '*.log', 'build']
    """
    return [part.strip() for part in value.split(",") if part.strip()]
