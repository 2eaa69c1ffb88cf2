"""Combined ignore policy with runtime suppression."""

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional, Sequence

from struct_tree.types import PathType, RuleSource

from .base_rules import BaseIgnoreRules
from .default_rules import DefaultIgnoreRules
from .ignore_file_rules import IgnoreFileRules
from .pattern_rules import PatternIgnoreRules

# Values of -n/--no-ignore that switch off whole sources rather than a single name
SUPPRESS_ALL = "all"
SUPPRESS_DEFAULTS = "defaults"
SUPPRESS_CONFIG = "config"


@dataclass(frozen=True)
class Suppression:
    """Runtime un-ignore directives for a single invocation.

    Suppression only ever removes matches; it can never cause an entry to be ignored.

    Attributes:
        skip_defaults: Disable the built-in catalog.
        skip_config: Disable persisted patterns.
        specific: Names, or pattern strings, that are exempt from every source.

    Example:
        >>> s = Suppression.from_directives(["defaults", "node_modules", "*.log"])
        >>> s.skip_defaults, s.skip_config
        (True, False)
        >>> sorted(s.specific)
        ['*.log', 'node_modules']
    """

    skip_defaults: bool = False
    skip_config: bool = False
    specific: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def from_directives(cls, values: Optional[Iterable[str]]) -> "Suppression":
        """Fold repeated -n values into a Suppression.

        ``all`` disables defaults and config, ``defaults`` and ``config`` disable the
        named source, and any other value exempts that specific name or pattern. Every
        specific value is honoured, not just the first.
        """
        skip_defaults = False
        skip_config = False
        specific = set()
        for value in values or ():
            if value == SUPPRESS_ALL:
                skip_defaults = skip_config = True
            elif value == SUPPRESS_DEFAULTS:
                skip_defaults = True
            elif value == SUPPRESS_CONFIG:
                skip_config = True
            else:
                specific.add(value)
        return cls(skip_defaults, skip_config, frozenset(specific))

    def disables(self, source: RuleSource) -> bool:
        """Check whether a whole rule source is switched off."""
        if source is RuleSource.DEFAULT:
            return self.skip_defaults
        if source is RuleSource.CONFIG:
            return self.skip_config
        return False


class IgnorePolicy:
    """The combined rule set deciding whether an entry is hidden from output.

    Rule sets are consulted in order (defaults, then persisted patterns, then inline
    patterns and ignore files). An entry is ignored if ANY enabled rule set matches it,
    unless its name is individually exempted.

    Attributes:
        rules (List[BaseIgnoreRules]): Constituent rule sets.
        suppression (Suppression): Runtime exemptions.

    Example:
        >>> policy = IgnorePolicy.from_patterns(inline_patterns=["*.log"])
        >>> policy.is_ignored("node_modules", is_dir=True)
        True
        >>> policy.is_ignored("server.log", is_dir=False)
        True
        >>> policy.is_ignored("main.py", is_dir=False)
        False
        >>> relaxed = IgnorePolicy.from_patterns(suppression=Suppression(skip_defaults=True))
        >>> relaxed.is_ignored("node_modules", is_dir=True)
        False
    """

    def __init__(self, rules: Sequence[BaseIgnoreRules], suppression: Optional[Suppression] = None):
        for i, rule in enumerate(rules):
            if not isinstance(rule, BaseIgnoreRules):
                raise TypeError(f"Rule at index {i} must implement BaseIgnoreRules, got {type(rule)}")
        self.rules: List[BaseIgnoreRules] = list(rules)
        self.suppression = suppression or Suppression()

    @classmethod
    def from_patterns(
        cls,
        config_patterns: Iterable[str] = (),
        inline_patterns: Iterable[str] = (),
        ignore_files: Sequence[PathType] = (),
        suppression: Optional[Suppression] = None,
    ) -> "IgnorePolicy":
        """Build the policy from raw pattern strings.

        Pattern strings that appear in the suppression's specific set are left out, so
        ``-n "*.log"`` exempts a persisted ``*.log`` pattern as a whole.

        Args:
            config_patterns: Patterns loaded from the pattern store.
            inline_patterns: Patterns given with -i/--ignore.
            ignore_files: .gitignore-style files given with -e/--exclude.
            suppression: Runtime exemptions. Defaults to none.

        Raises:
            FileNotFoundError: If an ignore file does not exist.
        """
        suppression = suppression or Suppression()
        rules: List[BaseIgnoreRules] = [DefaultIgnoreRules()]
        rules.append(
            PatternIgnoreRules((p for p in config_patterns if p not in suppression.specific), RuleSource.CONFIG)
        )
        rules.append(
            PatternIgnoreRules((p for p in inline_patterns if p not in suppression.specific), RuleSource.INLINE)
        )
        if ignore_files:
            rules.append(IgnoreFileRules(list(ignore_files)))
        return cls(rules, suppression)

    def is_ignored(self, name: str, is_dir: bool) -> bool:
        """Decide whether an entry is hidden.

        Args:
            name: Entry name (a single path component).
            is_dir: Whether the entry is a directory.

        Returns:
            True if any enabled rule set matches and the name is not exempted.
        """
        if name in self.suppression.specific:
            return False
        return any(
            rule.matches(name, is_dir) for rule in self.rules if not self.suppression.disables(rule.source)
        )
