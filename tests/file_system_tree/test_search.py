import os
from pathlib import Path

import pytest

from struct_tree.file_system_tree.search import FileSearch, SearchHit, SearchResult
from struct_tree.ignore_rules.policy import IgnorePolicy, Suppression
from struct_tree.pattern_matcher import compile_pattern


def search(root, pattern, **kwargs):
    return FileSearch(root, compile_pattern(pattern), **kwargs).run()


def hit_paths(result, root):
    return {hit.path.relative_to(root).as_posix() for hit in result.hits}


def test_glob_search(project_dir):
    result = search(project_dir, "*.py")
    assert hit_paths(result, project_dir) == {"src/main.py", "src/utils/helpers.py"}
    assert result.count == 2


def test_substring_search_is_case_insensitive(project_dir):
    result = search(project_dir, "HELP")
    assert hit_paths(result, project_dir) == {"src/utils/helpers.py"}


def test_directories_are_matched(project_dir):
    result = search(project_dir, "util")
    assert hit_paths(result, project_dir) == {"src/utils"}
    assert result.hits[0].is_dir


def test_ignored_directory_is_reported_without_contents(project_dir):
    result = search(project_dir, "node_modules")
    assert hit_paths(result, project_dir) == {"node_modules"}
    assert result.hits[0].is_dir
    assert search(project_dir, "index").count == 0


def test_ignored_directories_are_not_entered(project_dir):
    result = search(project_dir, "*.pyc")
    assert hit_paths(result, project_dir) == {"app.pyc"}


def test_skip_defaults_searches_everywhere(project_dir):
    policy = IgnorePolicy.from_patterns(suppression=Suppression(skip_defaults=True))
    result = search(project_dir, "index", ignore_policy=policy)
    assert hit_paths(result, project_dir) == {"node_modules/lib/index.js"}


def test_inline_patterns_prune_search(project_dir):
    policy = IgnorePolicy.from_patterns(inline_patterns=["utils"])
    result = search(project_dir, "*.py", ignore_policy=policy)
    assert hit_paths(result, project_dir) == {"src/main.py"}


@pytest.mark.parametrize(
    "depth, expected",
    [
        (1, set()),
        (2, {"src/main.py"}),
        (3, {"src/main.py", "src/utils/helpers.py"}),
        (0, {"src/main.py", "src/utils/helpers.py"}),
    ],
)
def test_max_depth(project_dir, depth, expected):
    assert hit_paths(search(project_dir, "*.py", max_depth=depth), project_dir) == expected


def test_depth_one_matches_root_children(project_dir):
    result = search(project_dir, "*", max_depth=1)
    assert hit_paths(result, project_dir) == {"src", "docs", "run.sh", "notes.tmp", "app.pyc", "node_modules"}


def test_retained_contains_ancestors(project_dir):
    result = search(project_dir, "helpers")
    assert result.retained == {
        project_dir / "src",
        project_dir / "src" / "utils",
        project_dir / "src" / "utils" / "helpers.py",
    }


def test_no_matches(project_dir):
    result = search(project_dir, "does-not-exist")
    assert result.count == 0
    assert result.retained == set()


def test_hit_sizes(project_dir):
    result = search(project_dir, "readme.md")
    assert result.hits == [SearchHit(project_dir / "docs" / "readme.md", False, len("# Docs\n"))]


def test_symlinked_directories_are_not_followed(project_dir):
    os.symlink(project_dir / "src", project_dir / "src_link")
    result = search(project_dir, "main.py")
    assert hit_paths(result, project_dir) == {"src/main.py"}


def test_unreadable_directory_is_skipped(project_dir, monkeypatch):
    locked = project_dir / "locked"
    locked.mkdir()
    (locked / "main_copy.py").write_text("")
    real_scandir = os.scandir

    def guarded_scandir(path):
        if Path(path).name == "locked":
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr("struct_tree.file_system_tree.search.os.scandir", guarded_scandir)
    result = search(project_dir, "*.py")
    assert hit_paths(result, project_dir) == {"src/main.py", "src/utils/helpers.py"}
    assert search(project_dir, "lock").count == 1


def test_negative_depth(project_dir):
    with pytest.raises(ValueError):
        FileSearch(project_dir, compile_pattern("x"), max_depth=-1)


def test_missing_root(tmp_path):
    with pytest.raises(FileNotFoundError):
        search(tmp_path / "missing", "x")


def test_root_is_a_file(project_dir):
    with pytest.raises(NotADirectoryError):
        search(project_dir / "run.sh", "x")


def test_search_result_add_stops_at_retained_parent():
    root = Path("/project")
    result = SearchResult(root)
    result.add(SearchHit(root / "a" / "b" / "one.py", False, 1))
    result.add(SearchHit(root / "a" / "b" / "two.py", False, 1))
    assert result.count == 2
    assert result.retained == {
        root / "a",
        root / "a" / "b",
        root / "a" / "b" / "one.py",
        root / "a" / "b" / "two.py",
    }
