"""Per-invocation traversal settings."""

from dataclasses import dataclass, field
from typing import Optional

from struct_tree.git_repository import GitFileSet, GitMode
from struct_tree.ignore_rules.policy import IgnorePolicy


@dataclass(frozen=True)
class TraversalConfig:
    """Immutable settings for one tree traversal.

    Attributes:
        max_depth: Number of levels below the root to show, or None for unlimited.
        ignore_policy: Rules deciding which entries are hidden.
        max_size_bytes: Directories whose cumulative size exceeds this are not expanded.
        git_files: When set, only member files (and their ancestors) are shown.
        git_mode: The git mode that produced git_files, if any.
        show_size: Annotate files and directories with their size.
    """

    max_depth: Optional[int] = None
    ignore_policy: IgnorePolicy = field(default_factory=lambda: IgnorePolicy.from_patterns())
    max_size_bytes: Optional[int] = None
    git_files: Optional[GitFileSet] = None
    git_mode: Optional[GitMode] = None
    show_size: bool = False

    def __post_init__(self) -> None:
        if self.max_depth is not None and self.max_depth < 1:
            raise ValueError(f"max_depth must be at least 1 or None, got {self.max_depth}")
        if self.max_size_bytes is not None and self.max_size_bytes < 0:
            raise ValueError("Size threshold cannot be negative")

    @property
    def needs_directory_sizes(self) -> bool:
        return self.show_size or self.max_size_bytes is not None


def depth_from_argument(depth: Optional[int]) -> Optional[int]:
    """Map the DEPTH command-line argument to TraversalConfig.max_depth.

    No depth means unlimited, and 0 means immediate children only.

    Example:
        >>> depth_from_argument(None), depth_from_argument(0), depth_from_argument(3)
        (None, 1, 3)
    """
    if depth is None:
        return None
    if depth < 0:
        raise ValueError(f"Depth cannot be negative: {depth}")
    return max(depth, 1)
