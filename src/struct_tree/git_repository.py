"""Access to git repositories for restricting listings to version-controlled files.

Repositories are queried by running the ``git`` executable. Every query returns a
GitFileSet of paths relative to the repository's top-level working directory.
"""

import logging
import os
import posixpath
import subprocess
from enum import Enum
from pathlib import Path
from typing import FrozenSet, Iterable, Iterator, List, Optional

from struct_tree.exceptions import NotAGitRepositoryError
from struct_tree.types import PathType

logger = logging.getLogger(__name__)

GIT_TIMEOUT_SECONDS = 60


class GitMode(Enum):
    """Which version-control file set restricts the listing.

    Attributes:
        TRACKED: Files in the index
        UNTRACKED: Files not tracked and not ignored by git
        STAGED: Files with staged changes
        CHANGED: Files with unstaged changes in the working tree
        HISTORY: Commit history; provides no file set
    """

    TRACKED = "tracked"
    UNTRACKED = "untracked"
    STAGED = "staged"
    CHANGED = "changed"
    HISTORY = "history"


# Highest priority first; used when several git flags are given at once
GIT_MODE_PRIORITY = (GitMode.CHANGED, GitMode.STAGED, GitMode.UNTRACKED, GitMode.TRACKED, GitMode.HISTORY)


def select_git_mode(requested: Iterable[GitMode]) -> Optional[GitMode]:
    """Pick the single effective mode from all requested ones.

    Example:
        >>> select_git_mode([GitMode.STAGED, GitMode.CHANGED])
        <GitMode.CHANGED: 'changed'>
        >>> select_git_mode([]) is None
        True
    """
    requested = set(requested)
    for mode in GIT_MODE_PRIORITY:
        if mode in requested:
            return mode
    return None


class GitFileSet:
    """An immutable set of repository-relative file paths.

    Besides the files themselves, every ancestor directory of a member is recorded so
    that directories which are not expanded can still be tested for visible content.

    Attributes:
        root (Path): Top-level working directory of the repository.
        files (FrozenSet[str]): Member paths, relative to root, with forward slashes.

    Example:
        >>> files = GitFileSet("/repo", ["src/app/main.py", "README.md"])
        >>> "src/app/main.py" in files, "src/app" in files
        (True, False)
        >>> sorted(files.members_below("src")), list(files.members_below("docs"))
        (['app/main.py'], [])
    """

    def __init__(self, root: PathType, files: Iterable[str]):
        self.root = Path(root)
        self.files: FrozenSet[str] = frozenset(files)
        directories = set()
        for file_path in self.files:
            parent = posixpath.dirname(file_path)
            while parent and parent not in directories:
                directories.add(parent)
                parent = posixpath.dirname(parent)
        self._directories: FrozenSet[str] = frozenset(directories)

    def __contains__(self, relative_path: object) -> bool:
        return relative_path in self.files

    def members_below(self, relative_dir: str) -> Iterator[str]:
        """Yield the members below a repository-relative directory, relative to it.

        An empty directory means the repository root, which yields every member.
        """
        if not relative_dir:
            yield from self.files
            return
        if relative_dir not in self._directories:
            return
        prefix = relative_dir + "/"
        for file_path in self.files:
            if file_path.startswith(prefix):
                yield file_path[len(prefix) :]

    def relative_path(self, path: PathType) -> Optional[str]:
        """Express a filesystem directory relative to the repository root.

        Returns:
            The relative path with forward slashes ("" for the root itself), or None if
            the path lies outside the repository.
        """
        real_path = os.path.realpath(path)
        real_root = os.path.realpath(self.root)
        relative = os.path.relpath(real_path, real_root)
        if relative == os.curdir:
            return ""
        if relative == os.pardir or relative.startswith(os.pardir + os.sep):
            return None
        return relative.replace(os.sep, "/")


class GitRepository:
    """A git working tree located by discovery from some path inside it.

    Attributes:
        workdir (Path): The repository's top-level working directory.

    Example:
        >>> repo = GitRepository.discover(".")  # doctest: +SKIP
        >>> len(repo.tracked_files().files)  # doctest: +SKIP
        42
    """

    def __init__(self, workdir: PathType):
        self.workdir = Path(workdir)

    @classmethod
    def discover(cls, start_path: PathType) -> "GitRepository":
        """Find the repository enclosing start_path.

        Raises:
            NotAGitRepositoryError: If start_path is not inside a git working tree, or
                git is not installed.
        """
        start = Path(start_path)
        if not start.is_dir():
            start = start.parent
        try:
            output = _run_git(start, ["rev-parse", "--show-toplevel"])
        except FileNotFoundError:
            raise NotAGitRepositoryError(str(start_path), "git executable not found")
        except subprocess.CalledProcessError:
            raise NotAGitRepositoryError(str(start_path))
        workdir = output.strip()
        if not workdir:
            raise NotAGitRepositoryError(str(start_path))
        logger.debug("Discovered git repository at %s", workdir)
        return cls(workdir)

    def tracked_files(self) -> GitFileSet:
        return self._file_set(["ls-files", "-z"])

    def untracked_files(self) -> GitFileSet:
        return self._file_set(["ls-files", "-z", "--others", "--exclude-standard"])

    def staged_files(self) -> GitFileSet:
        return self._file_set(["diff", "--cached", "--name-only", "-z"])

    def changed_files(self) -> GitFileSet:
        return self._file_set(["diff", "--name-only", "-z"])

    def files_for_mode(self, mode: GitMode) -> Optional[GitFileSet]:
        """Return the file set for a mode, or None for HISTORY."""
        queries = {
            GitMode.TRACKED: self.tracked_files,
            GitMode.UNTRACKED: self.untracked_files,
            GitMode.STAGED: self.staged_files,
            GitMode.CHANGED: self.changed_files,
        }
        query = queries.get(mode)
        return query() if query is not None else None

    def _file_set(self, args: List[str]) -> GitFileSet:
        output = _run_git(self.workdir, args)
        return GitFileSet(self.workdir, (name for name in output.split("\0") if name))


def _run_git(cwd: Path, args: List[str]) -> str:
    command = ["git", "-C", str(cwd), *args]
    logger.debug("Running %s", " ".join(command))
    result = subprocess.run(
        command,
        capture_output=True,
        text=True,
        check=True,
        timeout=GIT_TIMEOUT_SECONDS,
    )
    return result.stdout
