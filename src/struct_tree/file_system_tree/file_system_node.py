"""Node representation for file system elements in the tree."""

from typing import Any, Optional

from anytree import Node


class FileSystemNode(Node):  # type: ignore
    """Node class representing a file or directory in the filesystem tree.

    Extends anytree.Node with the facts the renderer annotates: kind, symlink target,
    size, executability and whether the directory was pruned for size.

    Attributes:
        name (str): The basename of the entry.
        is_dir (bool): True for directories (never for symlinks).
        is_symlink (bool): True for symbolic links, which are never followed.
        symlink_target (Optional[str]): Link target, if known.
        size_bytes (Optional[int]): File size, or cumulative size for directories, in bytes.
        is_executable (bool): True for regular files with an execute bit set.
        skipped (bool): True for directories shown but not expanded due to size.

    Example:
        >>> root = FileSystemNode("root", is_dir=True)
        >>> child = FileSystemNode("run.sh", parent=root, is_executable=True)
        >>> child.is_dir, child.is_executable
        (False, True)
        >>> [node.name for node in root.children]
        ['run.sh']
    """

    def __init__(
        self,
        name: str,
        parent: Optional["FileSystemNode"] = None,
        is_dir: bool = False,
        is_symlink: bool = False,
        symlink_target: Optional[str] = None,
        size_bytes: Optional[int] = None,
        is_executable: bool = False,
        skipped: bool = False,
        **kwargs: Any,
    ) -> None:
        super().__init__(name, parent, **kwargs)
        self.is_dir = is_dir
        self.is_symlink = is_symlink
        self.symlink_target = symlink_target
        self.size_bytes = size_bytes
        self.is_executable = is_executable
        self.skipped = skipped
