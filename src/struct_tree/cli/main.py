"""Command-line interface for struct.

This module wires argument parsing to the traversal, search and pattern-store
components and owns all terminal output.

Exit Codes:
    0: Successful completion
    1: Runtime or user-input error (empty search pattern, not a git repository,
       missing path, pattern not found in the store)
    2: Command-line syntax error
    130: Interrupted by SIGINT (Ctrl+C)
    141: Broken pipe (output closed early, e.g. piped to `head`)

Example:
    $ struct 2 ~/projects -z
    $ struct search "*.py" . -f
    $ struct --gc
"""

import argparse
import logging
import os
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Iterable, Optional, Sequence

from struct_tree.cli.argparser import inline_patterns, parse_arguments, requested_git_modes
from struct_tree.file_system_tree.file_system_tree import FileSystemTree
from struct_tree.file_system_tree.search import FileSearch
from struct_tree.file_system_tree.traversal_config import TraversalConfig, depth_from_argument
from struct_tree.file_system_tree.tree_renderer import TreeRenderer, human_size, render_flat
from struct_tree.git_repository import GitRepository, select_git_mode
from struct_tree.ignore_rules.policy import IgnorePolicy, Suppression
from struct_tree.pattern_matcher import compile_pattern
from struct_tree.pattern_store import PatternStore

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Send log records to stderr; DEBUG when verbose, otherwise warnings only."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(name)s: %(message)s", stream=sys.stderr, force=True)


def format_counts(counts: Mapping[str, Optional[int]]) -> str:
    """Format the counts into a human-readable string.

    Example:
        >>> print(format_counts({"directories": 2, "files": 5, "symlinks": 0, "size": None}))
        Directories: 2
        Files: 5
        Symlinks: 0
    """
    result = [
        f"Directories: {counts['directories']}",
        f"Files: {counts['files']}",
        f"Symlinks: {counts['symlinks']}",
    ]

    size = counts.get("size")
    if size is not None:
        result.append(f"Size: {human_size(size)}")

    return "\n".join(result)


def build_ignore_policy(args: argparse.Namespace, store: PatternStore) -> IgnorePolicy:
    """Combine persisted, inline and file patterns with the -n directives."""
    suppression = Suppression.from_directives(args.no_ignore)
    config_patterns = [] if suppression.skip_config else store.load()
    return IgnorePolicy.from_patterns(
        config_patterns=config_patterns,
        inline_patterns=inline_patterns(args),
        ignore_files=args.exclude or (),
        suppression=suppression,
    )


def emit(lines: Iterable[str]) -> None:
    for line in lines:
        print(line)


def run_tree(args: argparse.Namespace, store: PatternStore) -> None:
    path: Path = args.path or Path(".")

    requested, use_root = requested_git_modes(args)
    git_mode = select_git_mode(requested)
    git_files = None
    if git_mode is not None:
        repository = GitRepository.discover(path)
        if use_root:
            path = repository.workdir
        git_files = repository.files_for_mode(git_mode)
        logger.debug("Git mode %s", git_mode.value)

    config = TraversalConfig(
        max_depth=depth_from_argument(args.depth),
        ignore_policy=build_ignore_policy(args, store),
        max_size_bytes=args.max_size_bytes,
        git_files=git_files,
        git_mode=git_mode,
        show_size=args.show_size,
    )

    tree = FileSystemTree(path, config)
    root = tree.get_tree()
    emit(TreeRenderer(show_size=args.show_size).render(root))

    if args.summary:
        counts = {
            "directories": tree.get_directory_count(),
            "files": tree.get_file_count(),
            "symlinks": tree.get_symlink_count(),
            "size": tree.get_total_file_size() if args.show_size else None,
        }
        print()
        print(format_counts(counts))


def run_search(args: argparse.Namespace, store: PatternStore) -> None:
    # Compile first so a bad pattern aborts before any traversal
    matcher = compile_pattern(args.pattern)

    search = FileSearch(args.path, matcher, build_ignore_policy(args, store), max_depth=args.depth)
    result = search.run()

    if result.count == 0:
        print(f"no files or directories matching '{args.pattern}' found")
        return

    print(f"found {result.count} item(s) matching {args.pattern}")
    print()
    if args.flat:
        emit(render_flat(result.hits))
    else:
        emit(TreeRenderer(show_size=True).render_paths(result.root, result.retained))


def run_pattern_command(args: argparse.Namespace, store: PatternStore) -> int:
    """Run add/remove/list/clear and return the exit code."""
    if args.command == "add":
        pattern = args.pattern.strip()
        if not store.add(pattern):
            print(f"{pattern} already in config")
            return 0
        print(f"{pattern} added to config")
        print(f"config file: {store.path}")
    elif args.command == "remove":
        pattern = args.pattern.strip()
        if not store.remove(pattern):
            print(f"{pattern} not found in config")
            return 1
        print(f"{pattern} removed from config")
    elif args.command == "list":
        patterns = store.load()
        if not patterns:
            print("no custom patterns configured")
            print('add some with: struct add "pattern"')
            return 0
        print("custom ignore patterns:")
        for pattern in patterns:
            print(f"  {pattern}")
        print(f"\nconfig file: {store.path}")
    elif args.command == "clear":
        if store.clear():
            print("cleared all custom patterns")
        else:
            print("no config file to clear")
    return 0


def main(argv: Optional[Sequence[str]] = None, store: Optional[PatternStore] = None) -> None:
    """Main entry point for the struct command-line interface.

    Args:
        argv: Arguments without the program name. Defaults to sys.argv[1:].
        store: Pattern store to use. Defaults to the user's store.
    """
    args = parse_arguments(sys.argv[1:] if argv is None else argv)
    setup_logging(args.verbose)
    store = store or PatternStore()

    exit_code = 0
    try:
        if args.command == "search":
            run_search(args, store)
        elif args.command is not None:
            exit_code = run_pattern_command(args, store)
        else:
            run_tree(args, store)
        sys.stdout.flush()
    except BrokenPipeError:
        # Silence the flush error Python would report at shutdown
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        sys.exit(141)
    except KeyboardInterrupt:
        sys.exit(130)
    except Exception as e:
        logger.debug("Aborting", exc_info=True)
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)

    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
