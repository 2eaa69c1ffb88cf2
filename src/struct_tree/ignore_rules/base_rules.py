from abc import ABC, abstractmethod
from typing import Sequence, Union

from struct_tree.types import PathType, RuleSource


class BaseIgnoreRules(ABC):
    """
    Abstract base class defining the interface for name-based ignore rules.

    Ignore rules decide whether a single directory entry, identified by its name and
    kind, should be hidden from output. Matching is always against the name component
    only, never against a full path. Every rule set is tagged with a RuleSource so that
    runtime suppression can switch off whole sources.

    File loading and individual rule addition are optional capabilities that depend on
    the rule type.

    Example:
        >>> from struct_tree.ignore_rules.pattern_rules import PatternIgnoreRules
        >>> rules = PatternIgnoreRules(source=RuleSource.INLINE)
        >>> rules.add_rule('*.tmp')
        >>> rules.matches('scratch.tmp', is_dir=False)
        True
        >>> rules.matches('scratch.py', is_dir=False)
        False
    """

    source: RuleSource

    @abstractmethod
    def matches(self, name: str, is_dir: bool) -> bool:
        """
        Determine if an entry with the given name should be ignored by these rules.

        Args:
            name (str): The entry name (a single path component).
            is_dir (bool): Whether the entry is a directory.

        Returns:
            bool: True if the entry matches any rule, False otherwise.
        """
        pass

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """
        Load rules from one or more files.

        Rule types that don't support file loading use this default implementation.

        Raises:
            NotImplementedError: If this rule type doesn't support loading from files.
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support loading rules from files.")

    def add_rule(self, rule: str) -> None:
        """
        Add a single rule directly.

        Rule types with a fixed catalog use this default implementation.

        Raises:
            NotImplementedError: If this rule type doesn't support adding individual rules.
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support adding individual rules.")
