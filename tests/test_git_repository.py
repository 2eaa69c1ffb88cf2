import shutil
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from struct_tree.exceptions import NotAGitRepositoryError
from struct_tree.git_repository import GitFileSet, GitMode, GitRepository, select_git_mode

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def git(cwd, *args):
    subprocess.run(
        ["git", "-c", "user.name=Test", "-c", "user.email=test@example.com", "-c", "commit.gpgsign=false", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
    )


@pytest.fixture
def repo(tmp_path, monkeypatch):
    """A repository with one file in each state.

    tracked.txt  committed, then modified without staging (changed)
    src/app.py   committed and unchanged
    staged.txt   new and staged
    src/new.py   untracked
    """
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    root = tmp_path / "repo"
    root.mkdir()
    git(root, "init", "-q")
    (root / "tracked.txt").write_text("v1\n")
    (root / "src").mkdir()
    (root / "src" / "app.py").write_text("x = 1\n")
    git(root, "add", ".")
    git(root, "commit", "-q", "-m", "initial")

    (root / "tracked.txt").write_text("v2\n")
    (root / "staged.txt").write_text("staged\n")
    git(root, "add", "staged.txt")
    (root / "src" / "new.py").write_text("y = 2\n")
    return root


@pytest.mark.parametrize(
    "requested, expected",
    [
        ([], None),
        ([GitMode.TRACKED], GitMode.TRACKED),
        ([GitMode.STAGED, GitMode.CHANGED], GitMode.CHANGED),
        ([GitMode.TRACKED, GitMode.STAGED], GitMode.STAGED),
        ([GitMode.TRACKED, GitMode.UNTRACKED], GitMode.UNTRACKED),
        ([GitMode.HISTORY, GitMode.TRACKED], GitMode.TRACKED),
        ([GitMode.HISTORY], GitMode.HISTORY),
        (list(GitMode), GitMode.CHANGED),
    ],
)
def test_select_git_mode(requested, expected):
    assert select_git_mode(requested) is expected


def test_file_set_membership():
    files = GitFileSet("/repo", ["src/app/main.py", "README.md"])
    assert "README.md" in files
    assert "src/app/main.py" in files
    assert "src/app" not in files
    assert "main.py" not in files


def test_file_set_members_below():
    files = GitFileSet("/repo", ["src/app/main.py", "src/app/util.py", "src/setup.cfg", "README.md"])
    assert sorted(files.members_below("src")) == ["app/main.py", "app/util.py", "setup.cfg"]
    assert sorted(files.members_below("src/app")) == ["main.py", "util.py"]
    assert list(files.members_below("src/app/main.py")) == []
    assert list(files.members_below("docs")) == []
    assert list(files.members_below("sr")) == []


def test_file_set_members_below_root():
    files = GitFileSet("/repo", ["src/app/main.py", "README.md"])
    assert sorted(files.members_below("")) == ["README.md", "src/app/main.py"]
    assert list(GitFileSet("/repo", []).members_below("")) == []


def test_file_set_relative_path(tmp_path):
    (tmp_path / "src" / "app").mkdir(parents=True)
    files = GitFileSet(tmp_path, [])
    assert files.relative_path(tmp_path) == ""
    assert files.relative_path(tmp_path / "src" / "app") == "src/app"
    assert files.relative_path(tmp_path.parent) is None


@requires_git
def test_discover_outside_repository(tmp_path, monkeypatch):
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    plain = tmp_path / "plain"
    plain.mkdir()
    with pytest.raises(NotAGitRepositoryError, match="not in a git repository"):
        GitRepository.discover(plain)


def test_discover_without_git_executable(tmp_path):
    with patch("struct_tree.git_repository.subprocess.run", side_effect=FileNotFoundError("git")):
        with pytest.raises(NotAGitRepositoryError, match="git executable not found"):
            GitRepository.discover(tmp_path)


@requires_git
def test_discover_from_subdirectory(repo):
    repository = GitRepository.discover(repo / "src")
    assert Path(repository.workdir).resolve() == repo.resolve()


@requires_git
def test_discover_from_file(repo):
    repository = GitRepository.discover(repo / "src" / "app.py")
    assert Path(repository.workdir).resolve() == repo.resolve()


@requires_git
def test_tracked_files(repo):
    files = GitRepository.discover(repo).tracked_files()
    assert files.files == {"tracked.txt", "staged.txt", "src/app.py"}


@requires_git
def test_untracked_files(repo):
    files = GitRepository.discover(repo).untracked_files()
    assert files.files == {"src/new.py"}


@requires_git
def test_untracked_files_respect_gitignore(repo):
    (repo / ".gitignore").write_text("*.log\n")
    (repo / "debug.log").write_text("noise\n")
    files = GitRepository.discover(repo).untracked_files()
    assert "debug.log" not in files
    assert ".gitignore" in files


@requires_git
def test_staged_files(repo):
    files = GitRepository.discover(repo).staged_files()
    assert files.files == {"staged.txt"}


@requires_git
def test_changed_files(repo):
    files = GitRepository.discover(repo).changed_files()
    assert files.files == {"tracked.txt"}


@requires_git
def test_files_for_mode(repo):
    repository = GitRepository.discover(repo)
    assert repository.files_for_mode(GitMode.CHANGED).files == {"tracked.txt"}
    assert repository.files_for_mode(GitMode.HISTORY) is None


@requires_git
def test_file_names_with_spaces(repo):
    (repo / "my notes.txt").write_text("hello\n")
    files = GitRepository.discover(repo).untracked_files()
    assert "my notes.txt" in files
