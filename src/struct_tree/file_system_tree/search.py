"""Name search across a directory subtree."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Set

from struct_tree.ignore_rules.policy import IgnorePolicy
from struct_tree.pattern_matcher import MatchMode
from struct_tree.types import PathType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchHit:
    """A single matching entry."""

    path: Path
    is_dir: bool
    size: int


@dataclass
class SearchResult:
    """Everything a search found.

    Attributes:
        root: The search root as given by the caller.
        hits: Matching entries in traversal order.
        retained: Every hit plus each of its ancestor directories below the root, which
            is exactly the set needed to draw a connected result tree.
    """

    root: Path
    hits: List[SearchHit] = field(default_factory=list)
    retained: Set[Path] = field(default_factory=set)

    @property
    def count(self) -> int:
        return len(self.hits)

    def add(self, hit: SearchHit) -> None:
        self.hits.append(hit)
        self.retained.add(hit.path)
        for parent in hit.path.parents:
            if parent == self.root or parent in self.retained:
                break
            self.retained.add(parent)


class FileSearch:
    """Depth-first search for entries whose name matches a MatchMode.

    Every entry below the root is tested, files and directories alike. Directories
    hidden by the ignore policy are never descended into, but they are still tested
    themselves, so searching for an ignored name such as ``node_modules`` reports the
    directory without listing its contents. Symbolic links are never followed.

    Attributes:
        root_path (Path): Directory to search.
        matcher (MatchMode): Compiled search term.
        ignore_policy (IgnorePolicy): Decides which directories are pruned.
        max_depth (int): Deepest level to visit, 1 being the root's children. 0 means
            unlimited.

    Example:
        >>> from struct_tree.pattern_matcher import compile_pattern
        >>> search = FileSearch("src", compile_pattern("*.py"))  # doctest: +SKIP
        >>> [str(hit.path) for hit in search.run().hits]  # doctest: +SKIP
        ['src/main.py', 'src/utils/helpers.py']
    """

    def __init__(
        self,
        root_path: PathType,
        matcher: MatchMode,
        ignore_policy: Optional[IgnorePolicy] = None,
        max_depth: int = 0,
    ) -> None:
        if max_depth < 0:
            raise ValueError(f"Depth cannot be negative: {max_depth}")
        self.root_path = Path(root_path)
        self.matcher = matcher
        self.ignore_policy = ignore_policy or IgnorePolicy.from_patterns()
        self.max_depth = max_depth

    def run(self) -> SearchResult:
        """Walk the subtree and collect matches.

        Raises:
            FileNotFoundError: If the root path doesn't exist.
            NotADirectoryError: If the root path isn't a directory.
        """
        if not self.root_path.exists():
            raise FileNotFoundError(f"Search path does not exist: {self.root_path}")
        if not self.root_path.is_dir():
            raise NotADirectoryError(f"Search path is not a directory: {self.root_path}")

        result = SearchResult(self.root_path)
        self._walk(self.root_path, 1, result)
        return result

    def _walk(self, directory: Path, depth: int, result: SearchResult) -> None:
        try:
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError as e:
            logger.debug("Skipping unreadable directory %s: %s", directory, e)
            return

        for entry in entries:
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError:
                continue

            if is_dir and self.ignore_policy.is_ignored(entry.name, True):
                if self.matcher.is_match(entry.name):
                    result.add(SearchHit(Path(entry.path), True, 0))
                continue

            if self.matcher.is_match(entry.name):
                result.add(self._hit(entry, is_dir))

            if is_dir and (self.max_depth == 0 or depth < self.max_depth):
                self._walk(Path(entry.path), depth + 1, result)

    @staticmethod
    def _hit(entry: "os.DirEntry[str]", is_dir: bool) -> SearchHit:
        size = 0
        if not is_dir:
            try:
                size = entry.stat(follow_symlinks=False).st_size
            except OSError:
                pass
        return SearchHit(Path(entry.path), is_dir, size)
