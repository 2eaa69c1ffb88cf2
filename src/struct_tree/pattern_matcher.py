"""Name matching for the search command.

A search term containing ``*`` or ``?`` is treated as a glob and must match the whole
name; any other term is a case-insensitive substring test. Matching always applies to
a single name component, never to a full path.
"""

import re
from abc import ABC, abstractmethod
from typing import Pattern

from struct_tree.exceptions import EmptyPatternError, InvalidPatternError

GLOB_CHARACTERS = ("*", "?")


class MatchMode(ABC):
    """How a search term is compared with entry names."""

    @abstractmethod
    def is_match(self, filename: str) -> bool:
        """Return True if the given name matches the search term."""


class GlobMatch(MatchMode):
    """Case-insensitive, fully anchored glob match.

    ``*`` matches any run of characters including none, ``?`` matches exactly one
    character, and every other character is literal.

    Example:
        >>> mode = compile_pattern("*.py")
        >>> mode.is_match("script.py"), mode.is_match("SCRIPT.PY"), mode.is_match("script.pyc")
        (True, True, False)
    """

    def __init__(self, regex: Pattern[str]):
        self.regex = regex

    def is_match(self, filename: str) -> bool:
        return self.regex.fullmatch(filename) is not None

    def __repr__(self) -> str:
        return f"GlobMatch({self.regex.pattern!r})"


class SubstringMatch(MatchMode):
    """Case-insensitive substring match.

    Example:
        >>> mode = compile_pattern("gui")
        >>> mode.is_match("MyGuiApp"), mode.is_match("widget")
        (True, False)
    """

    def __init__(self, needle: str):
        self.needle = needle.lower()

    def is_match(self, filename: str) -> bool:
        return self.needle in filename.lower()

    def __repr__(self) -> str:
        return f"SubstringMatch({self.needle!r})"


def glob_to_regex(pattern: str) -> str:
    """Translate a glob into a regular expression body.

    Example:
        >>> glob_to_regex("data_??.csv")
        'data_..\\\\.csv'
    """
    escaped = re.escape(pattern)
    return escaped.replace(r"\*", ".*").replace(r"\?", ".")


def compile_pattern(pattern: str) -> MatchMode:
    """Compile a user search term into a MatchMode.

    Args:
        pattern: The search term as given on the command line.

    Returns:
        A GlobMatch when the term contains ``*`` or ``?``, otherwise a SubstringMatch.

    Raises:
        EmptyPatternError: If the pattern is empty.
        InvalidPatternError: If the derived regular expression fails to compile.
    """
    if not pattern:
        raise EmptyPatternError()

    if any(char in pattern for char in GLOB_CHARACTERS):
        try:
            return GlobMatch(re.compile(glob_to_regex(pattern), re.IGNORECASE))
        except re.error as e:
            raise InvalidPatternError(pattern, str(e))

    return SubstringMatch(pattern)
