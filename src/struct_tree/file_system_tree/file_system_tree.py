"""File system tree representation with ignore rules, depth and size pruning.

This module provides the FileSystemTree class, which walks a directory subtree once
and builds a tree of FileSystemNode objects ready for rendering.
"""

import logging
import os
import posixpath
import stat
from pathlib import Path
from typing import Dict, List, Optional

from anytree import PreOrderIter

from struct_tree.file_system_tree.file_system_node import FileSystemNode
from struct_tree.file_system_tree.traversal_config import TraversalConfig
from struct_tree.types import PathType

logger = logging.getLogger(__name__)


class FileSystemTree:
    """A filtered tree representation of a directory structure.

    The tree is built lazily on first access. Entries hidden by the ignore policy are
    excluded from both recursion and output. Symbolic links are shown as links and
    never followed, so cycles are impossible.

    Git Filtering:
        When the configuration carries a git file set, a file is kept only if it is a
        member of the set. Directory visibility is derived bottom-up: a directory is
        kept only if at least one of its children was kept. A directory that is not
        expanded (depth limit or size pruning) is kept if the file set has any member
        below it.

    Size Pruning:
        When a size threshold is configured, a directory whose cumulative size (the
        sum of all descendant file sizes on disk) exceeds it is shown, marked as
        skipped, and not expanded.

    Permission Handling:
        Unreadable directories and entries that vanish during the walk are skipped
        silently; the directory itself is still shown.

    Attributes:
        root_path (Path): The root directory as given by the caller.
        config (TraversalConfig): Depth, ignore, size and git settings.

    Example:
        >>> tree = FileSystemTree(".", TraversalConfig(max_depth=1))  # doctest: +SKIP
        >>> [child.name for child in tree.get_tree().children]  # doctest: +SKIP
        ['src', 'tests', 'README.md']
    """

    def __init__(self, root_path: PathType, config: Optional[TraversalConfig] = None) -> None:
        self.root_path = Path(root_path)
        self.config = config or TraversalConfig()
        self._tree: Optional[FileSystemNode] = None
        self._git_base: Optional[str] = None
        self._size_cache: Dict[str, int] = {}
        self._file_count = 0
        self._directory_count = 0
        self._symlink_count = 0
        self._total_file_size = 0

    def get_tree(self) -> FileSystemNode:
        """Get the root node of the filtered tree, building it on first access.

        Raises:
            FileNotFoundError: If the root path doesn't exist.
            NotADirectoryError: If the root path isn't a directory.
        """
        if self._tree is None:
            self._tree = self._build_tree()
            self._count_nodes(self._tree)
        return self._tree

    def _build_tree(self) -> FileSystemNode:
        if not self.root_path.exists():
            raise FileNotFoundError(f"Root path does not exist: {self.root_path}")
        if not self.root_path.is_dir():
            raise NotADirectoryError(f"Root path is not a directory: {self.root_path}")

        if self.config.git_files is not None:
            self._git_base = self.config.git_files.relative_path(self.root_path)
            if self._git_base is None:
                logger.debug("%s lies outside of repository %s", self.root_path, self.config.git_files.root)

        root = FileSystemNode(str(self.root_path), is_dir=True)
        if self.config.needs_directory_sizes:
            root.size_bytes = self._directory_size(self.root_path)
        root.children = self._create_children(self.root_path, "", 1)
        return root

    def _create_children(self, directory: Path, relative_path: str, depth: int) -> List[FileSystemNode]:
        """Create the kept child nodes of a directory at the given depth (root children are depth 1)."""
        try:
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError as e:
            logger.debug("Skipping unreadable directory %s: %s", directory, e)
            return []

        children = []
        for entry in entries:
            child_relative = posixpath.join(relative_path, entry.name) if relative_path else entry.name
            node = self._create_node(entry, child_relative, depth)
            if node is not None:
                children.append(node)
        return children

    def _create_node(self, entry: "os.DirEntry[str]", relative_path: str, depth: int) -> Optional[FileSystemNode]:
        """Create a node for one directory entry, or None if it is hidden."""
        try:
            is_symlink = entry.is_symlink()
            is_dir = not is_symlink and entry.is_dir(follow_symlinks=False)
        except OSError as e:
            logger.debug("Skipping unreadable entry %s: %s", entry.path, e)
            return None

        if self.config.ignore_policy.is_ignored(entry.name, is_dir):
            return None

        path = Path(entry.path)

        if not is_dir:
            if not self._in_git_files(relative_path):
                return None
            return self._create_leaf(entry, path, is_symlink)

        node = FileSystemNode(entry.name, is_dir=True)
        expand = self.config.max_depth is None or depth < self.config.max_depth

        if self.config.needs_directory_sizes:
            node.size_bytes = self._directory_size(path)
            if self.config.max_size_bytes is not None and node.size_bytes > self.config.max_size_bytes:
                node.skipped = True
                expand = False

        if expand:
            node.children = self._create_children(path, relative_path, depth + 1)
            if self.config.git_files is not None and not node.children:
                return None
        elif not self._git_files_below(relative_path):
            return None

        return node

    def _create_leaf(self, entry: "os.DirEntry[str]", path: Path, is_symlink: bool) -> Optional[FileSystemNode]:
        if is_symlink:
            try:
                target: Optional[str] = os.readlink(path)
            except OSError:
                target = None
            return FileSystemNode(entry.name, is_symlink=True, symlink_target=target)

        try:
            stat_info = entry.stat(follow_symlinks=False)
        except OSError as e:
            # Deleted between listing and stat
            logger.debug("Skipping vanished entry %s: %s", path, e)
            return None

        is_executable = stat.S_ISREG(stat_info.st_mode) and bool(stat_info.st_mode & 0o111)
        return FileSystemNode(entry.name, size_bytes=stat_info.st_size, is_executable=is_executable)

    def _in_git_files(self, relative_path: str) -> bool:
        git_files = self.config.git_files
        if git_files is None:
            return True
        if self._git_base is None:
            return False
        return posixpath.join(self._git_base, relative_path) in git_files

    def _git_files_below(self, relative_path: str) -> bool:
        """Check whether an unexpanded directory would show any member if it were expanded.

        A member counts only if it still exists and none of the names on its path below
        the directory is ignored.
        """
        git_files = self.config.git_files
        if git_files is None:
            return True
        if self._git_base is None:
            return False
        directory = posixpath.join(self._git_base, relative_path)
        return any(
            self._is_visible_member(git_files.root, directory, member) for member in git_files.members_below(directory)
        )

    def _is_visible_member(self, repository_root: Path, directory: str, member: str) -> bool:
        *directory_names, file_name = member.split("/")
        policy = self.config.ignore_policy
        if any(policy.is_ignored(name, True) for name in directory_names):
            return False
        if policy.is_ignored(file_name, False):
            return False
        return os.path.lexists(os.path.join(repository_root, directory, member))

    def _directory_size(self, directory: Path) -> int:
        """Cumulative size of all regular files below a directory.

        Symlinks are not followed and unreadable entries count as zero. Results are
        cached per directory, so sizing the root sizes every subdirectory once.
        """
        key = str(directory)
        cached = self._size_cache.get(key)
        if cached is not None:
            return cached

        total = 0
        try:
            with os.scandir(directory) as it:
                for entry in it:
                    try:
                        if entry.is_symlink():
                            continue
                        if entry.is_dir(follow_symlinks=False):
                            total += self._directory_size(Path(entry.path))
                        elif entry.is_file(follow_symlinks=False):
                            total += entry.stat(follow_symlinks=False).st_size
                    except OSError:
                        continue
        except OSError as e:
            logger.debug("Cannot size directory %s: %s", directory, e)

        self._size_cache[key] = total
        return total

    def _count_nodes(self, root: FileSystemNode) -> None:
        """Count shown directories (excluding the root), files and symlinks."""
        self._file_count = 0
        self._directory_count = 0
        self._symlink_count = 0
        self._total_file_size = 0

        for node in PreOrderIter(root):
            if node is root:
                continue
            if node.is_symlink:
                self._symlink_count += 1
            elif node.is_dir:
                self._directory_count += 1
            else:
                self._file_count += 1
                self._total_file_size += node.size_bytes or 0

    def get_file_count(self) -> int:
        """Number of files shown in the tree."""
        self.get_tree()
        return self._file_count

    def get_directory_count(self) -> int:
        """Number of directories shown in the tree, excluding the root."""
        self.get_tree()
        return self._directory_count

    def get_symlink_count(self) -> int:
        """Number of symlinks shown in the tree."""
        self.get_tree()
        return self._symlink_count

    def get_total_file_size(self) -> int:
        """Sum of the sizes of all files shown in the tree."""
        self.get_tree()
        return self._total_file_size
