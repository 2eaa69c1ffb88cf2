"""Connector-based text rendering of filesystem trees and search results."""

import os
import stat
from pathlib import Path
from typing import Dict, Iterable, Iterator, Optional

from humanfriendly import format_size

from struct_tree.file_system_tree.file_system_node import FileSystemNode
from struct_tree.file_system_tree.search import SearchHit

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE_PREFIX = "│   "
SPACE_PREFIX = "    "


def human_size(size_bytes: int) -> str:
    """Format a byte count using binary units.

    Example:
        >>> human_size(512), human_size(1536)
        ('512 bytes', '1.5 KiB')
    """
    return format_size(size_bytes, binary=True)


class TreeRenderer:
    """Render FileSystemNode trees the way the Unix ``tree`` command does.

    Children are ordered directories first, then files, each case-insensitively by
    name. Directories get a trailing ``/``, executable files a trailing ``*`` and
    symlinks their target. With show_size, files and directories are followed by their
    size in parentheses; directories pruned for size are marked ``[skipped]``.

    Example:
        >>> root = FileSystemNode("project", is_dir=True)
        >>> src = FileSystemNode("src", parent=root, is_dir=True)
        >>> _ = FileSystemNode("main.py", parent=src)
        >>> _ = FileSystemNode("run.sh", parent=root, is_executable=True)
        >>> print("\\n".join(TreeRenderer().render(root)))
        project
        ├── src/
        │   └── main.py
        └── run.sh*
    """

    def __init__(self, show_size: bool = False) -> None:
        self.show_size = show_size

    def render(self, root: FileSystemNode) -> Iterator[str]:
        """Yield the lines of the tree, starting with the root's name."""
        yield root.name
        yield from self._render_children(root, "")

    def render_paths(self, root_path: Path, retained: Iterable[Path]) -> Iterator[str]:
        """Render the minimal tree connecting root_path to every retained path.

        The retained set must include every ancestor directory of each retained path
        (excluding the root itself). Paths that have disappeared are left out together
        with everything below them.
        """
        yield from self.render(self.build_tree(root_path, retained))

    @staticmethod
    def build_tree(root_path: Path, retained: Iterable[Path]) -> FileSystemNode:
        """Build a FileSystemNode tree from a retained path set."""
        root = FileSystemNode(str(root_path), is_dir=True)
        nodes: Dict[Path, FileSystemNode] = {root_path: root}

        # Shallow paths first so every parent exists before its children
        for path in sorted(retained, key=lambda p: len(p.parts)):
            parent = nodes.get(path.parent)
            if parent is None:
                continue
            node = node_from_path(path)
            if node is None:
                continue
            node.parent = parent
            nodes[path] = node
        return root

    def _render_children(self, node: FileSystemNode, prefix: str) -> Iterator[str]:
        children = sorted(node.children, key=lambda n: (not n.is_dir, n.name.lower()))
        for i, child in enumerate(children):
            is_last = i == len(children) - 1
            connector = LAST_BRANCH if is_last else BRANCH
            yield f"{prefix}{connector}{self.format_entry(child)}"
            if child.is_dir:
                yield from self._render_children(child, prefix + (SPACE_PREFIX if is_last else PIPE_PREFIX))

    def format_entry(self, node: FileSystemNode) -> str:
        """Format a single entry's name with its markers."""
        if node.is_symlink:
            if node.symlink_target:
                return f"{node.name} → {node.symlink_target}"
            return f"{node.name} [symlink]"

        label = f"{node.name}/" if node.is_dir else node.name
        if node.is_executable:
            label += "*"
        if self.show_size and node.size_bytes is not None:
            label += f" ({human_size(node.size_bytes)})"
        if node.skipped:
            label += " [skipped]"
        return label


def node_from_path(path: Path) -> Optional[FileSystemNode]:
    """Create a detached node for an existing path, or None if it cannot be inspected."""
    try:
        stat_info = path.lstat()
    except OSError:
        return None

    mode = stat_info.st_mode
    if stat.S_ISLNK(mode):
        try:
            target: Optional[str] = os.readlink(path)
        except OSError:
            target = None
        return FileSystemNode(path.name, is_symlink=True, symlink_target=target)
    if stat.S_ISDIR(mode):
        return FileSystemNode(path.name, is_dir=True)
    return FileSystemNode(
        path.name,
        size_bytes=stat_info.st_size,
        is_executable=stat.S_ISREG(mode) and bool(mode & 0o111),
    )


def render_flat(hits: Iterable[SearchHit]) -> Iterator[str]:
    """Yield one line per search hit, sorted by path.

    Example:
        >>> hits = [SearchHit(Path("b/x.py"), False, 2048), SearchHit(Path("a"), True, 0)]
        >>> list(render_flat(hits))
        ['a/', 'b/x.py (2 KiB)']
    """
    for hit in sorted(hits, key=lambda h: h.path):
        if hit.is_dir:
            yield f"{hit.path}/"
        else:
            yield f"{hit.path} ({human_size(hit.size)})"
