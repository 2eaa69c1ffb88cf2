"""Ignore rules loaded from .gitignore-style files."""

from os import PathLike
from pathlib import Path
from typing import List, Optional, Sequence, Union

from pathspec import PathSpec
from pathspec.patterns import GitWildMatchPattern  # type: ignore

from struct_tree.types import PathType, RuleSource

from .base_rules import BaseIgnoreRules


class IgnoreFileRules(BaseIgnoreRules):
    """Ignore rules read from files using .gitignore pattern syntax.

    Patterns are matched with the pathspec library, exactly as Git would match them,
    but only ever against a single entry name. Directory entries are tested with a
    trailing slash so that directory-only patterns such as ``build/`` apply to them and
    not to files of the same name. Negation patterns (``!keep.log``) are honoured within
    the combined pattern list.

    These rules belong to the INLINE source: they are supplied for one invocation on
    the command line.

    Attributes:
        spec (PathSpec): Compiled pattern matcher from the pathspec library.

    Example:
        >>> rules = IgnoreFileRules()
        >>> rules.add_rule("*.log")
        >>> rules.add_rule("!keep.log")
        >>> rules.add_rule("build/")
        >>> rules.matches("server.log", is_dir=False)
        True
        >>> rules.matches("keep.log", is_dir=False)
        False
        >>> rules.matches("build", is_dir=True)
        True
        >>> rules.matches("build", is_dir=False)
        False
    """

    source = RuleSource.INLINE

    def __init__(self, rules_files: Optional[Union[PathType, Sequence[PathType]]] = None):
        """Initialize with patterns from the given file(s), if any.

        Raises:
            FileNotFoundError: If any rules file does not exist.
        """
        self._lines: List[str] = []
        self.spec = PathSpec.from_lines(GitWildMatchPattern, self._lines)
        if rules_files is not None:
            self.load_rules(rules_files)

    def matches(self, name: str, is_dir: bool) -> bool:
        return self.spec.match_file(name + "/" if is_dir else name)

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """Load and append patterns from one or more files.

        Args:
            rules_files: Path(s) to file(s) containing .gitignore patterns.

        Raises:
            FileNotFoundError: If any rules file does not exist.
        """
        if isinstance(rules_files, (str, PathLike)):
            rules_files = [rules_files]

        for rules_file in rules_files:
            path = Path(rules_file)
            if not path.exists():
                raise FileNotFoundError(f"Ignore file not found: {path}")

            with open(path, "r") as f:
                self._lines.extend(f.read().splitlines())

        self._compile()

    def add_rule(self, rule: str) -> None:
        """Add a single .gitignore pattern, e.g. ``*.pyc`` or ``!important.txt``."""
        self._lines.append(rule)
        self._compile()

    def _compile(self) -> None:
        # Later lines override earlier ones, so the PathSpec is always rebuilt in order
        self.spec = PathSpec.from_lines(GitWildMatchPattern, self._lines)
