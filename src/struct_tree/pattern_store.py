"""Persistent storage for user ignore patterns.

Patterns live in a plain-text file, one per line. Blank lines and lines starting with
``#`` are skipped on load. There is no escaping syntax; patterns may contain ``*``.
"""

import logging
from pathlib import Path
from typing import List, Optional

from struct_tree.types import PathType

logger = logging.getLogger(__name__)


def default_store_path() -> Path:
    """Location of the pattern file: ``~/.config/struct/ignores.txt``."""
    return Path.home() / ".config" / "struct" / "ignores.txt"


class PatternStore:
    """Load and save the user's persistent ignore patterns.

    The store is an explicit collaborator: callers load the list once and pass it on
    to ignore-rule construction, rather than rules reading the file themselves.

    Attributes:
        path (Path): The pattern file.

    Example:
        >>> import tempfile, os
        >>> with tempfile.TemporaryDirectory() as tmpdir:
        ...     store = PatternStore(os.path.join(tmpdir, "ignores.txt"))
        ...     store.add("*.tmp")
        ...     store.load()
        ...     store.remove("*.tmp")
        ...     store.remove("*.tmp")
        True
        ['*.tmp']
        True
        False
    """

    def __init__(self, path: Optional[PathType] = None):
        self.path = Path(path) if path is not None else default_store_path()

    def load(self) -> List[str]:
        """Return the stored patterns, or an empty list if there is no file."""
        try:
            content = self.path.read_text()
        except FileNotFoundError:
            return []
        patterns = [line.strip() for line in content.splitlines()]
        return [p for p in patterns if p and not p.startswith("#")]

    def save(self, patterns: List[str]) -> None:
        """Replace the stored patterns, creating parent directories as needed.

        Raises:
            OSError: If the file cannot be written.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("".join(f"{pattern}\n" for pattern in patterns))
        logger.debug("Saved %d pattern(s) to %s", len(patterns), self.path)

    def add(self, pattern: str) -> bool:
        """Append a pattern.

        Returns:
            False if the pattern was already stored, True otherwise.

        Raises:
            ValueError: If the pattern is empty.
        """
        pattern = pattern.strip()
        if not pattern:
            raise ValueError("pattern cannot be empty")
        patterns = self.load()
        if pattern in patterns:
            return False
        patterns.append(pattern)
        self.save(patterns)
        return True

    def remove(self, pattern: str) -> bool:
        """Remove every occurrence of a pattern.

        Returns:
            False if the pattern was not stored, True otherwise.
        """
        pattern = pattern.strip()
        patterns = self.load()
        remaining = [p for p in patterns if p != pattern]
        if len(remaining) == len(patterns):
            return False
        self.save(remaining)
        return True

    def clear(self) -> bool:
        """Delete the pattern file.

        Returns:
            False if there was no file to delete, True otherwise.
        """
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        return True
