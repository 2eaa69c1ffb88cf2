"""Command-line argument parsing for struct.

Two parsers share the work. When the first argument names a command (search, add,
remove, list, clear) the command parser handles argv; otherwise the tree parser does,
with DEPTH and PATH classified from its bare positionals.
"""

import argparse
import math
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set, Tuple

from humanfriendly import InvalidSize, parse_size

from struct_tree import __version__
from struct_tree.git_repository import GitMode
from struct_tree.ignore_rules.pattern_rules import split_pattern_list

COMMANDS = ("search", "add", "remove", "list", "clear")

BYTES_PER_MEGABYTE = 1024 * 1024

# dest -> (mode, start from repository root)
GIT_FLAGS: Dict[str, Tuple[GitMode, bool]] = {
    "git_tracked": (GitMode.TRACKED, False),
    "git_untracked": (GitMode.UNTRACKED, False),
    "git_staged": (GitMode.STAGED, False),
    "git_changed": (GitMode.CHANGED, False),
    "git_history": (GitMode.HISTORY, False),
    "git_root": (GitMode.TRACKED, True),
    "git_untracked_root": (GitMode.UNTRACKED, True),
    "git_staged_root": (GitMode.STAGED, True),
    "git_changed_root": (GitMode.CHANGED, True),
    "git_history_root": (GitMode.HISTORY, True),
}


def non_negative_int(value: str) -> int:
    """argparse type for depths."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid depth: '{value}'")
    if number < 0:
        raise argparse.ArgumentTypeError(f"depth cannot be negative: '{value}'")
    return number


def size_threshold(value: str) -> int:
    """argparse type for -s/--skip-large.

    A bare number, whole or decimal, is a count of megabytes (1 MB = 1024 * 1024 bytes);
    anything with a unit is parsed by humanfriendly, so '500MB' and '1GiB' both work.

    Example:
        >>> size_threshold("10")
        10485760
        >>> size_threshold("1.5")
        1572864
        >>> size_threshold("1GiB")
        1073741824
    """
    value = value.strip()
    try:
        megabytes = float(value)
    except ValueError:
        try:
            return int(parse_size(value))
        except InvalidSize as e:
            raise argparse.ArgumentTypeError(f"invalid size: {e}")

    if not math.isfinite(megabytes) or megabytes < 0:
        raise argparse.ArgumentTypeError(f"invalid size: '{value}'")
    return int(megabytes * BYTES_PER_MEGABYTE)


def _add_ignore_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-i",
        "--ignore",
        metavar="PATTERNS",
        action="append",
        help=(
            "Comma-separated name patterns to ignore, e.g. 'venv,*.log'. '*' matches any run of "
            "characters. Can be specified multiple times."
        ),
    )
    parser.add_argument(
        "-e",
        "--exclude",
        type=Path,
        metavar="FILE",
        action="append",
        help="Ignore names matching the patterns of a .gitignore-style file (can be specified multiple times).",
    )
    parser.add_argument(
        "-n",
        "--no-ignore",
        metavar="TARGET",
        action="append",
        help=(
            "Un-ignore TARGET for this run: a specific name or pattern, 'defaults', 'config', or 'all'. "
            "Can be specified multiple times: -n defaults -n config"
        ),
    )


def _add_verbose_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-v", "--verbose", action="store_true", help="Log diagnostic details to stderr.")


def create_parser() -> argparse.ArgumentParser:
    """Create the parser for tree display: ``struct [DEPTH] [PATH] [FLAGS]``."""
    description = """
    struct: a smarter tree with intelligent defaults, git awareness and fast search.

    Common clutter (caches, virtual environments, dependency and build directories,
    VCS metadata) is hidden by default. Add your own persistent patterns with
    'struct add', or one-off patterns with -i.
    """

    epilog = """
    Examples:
      struct                         full tree of the current directory
      struct 2 ~/projects            two levels below ~/projects
      struct 0                       immediate children only
      struct -z -s 100               show sizes, do not expand directories over 100 MB
      struct -n defaults             show everything hidden by default
      struct -i "*.log,tmp"          also hide *.log and tmp

    Git (when several git flags are given, highest priority wins:
    changed > staged > untracked > tracked > history):
      struct -g                      tracked files        (--gr: from repository root)
      struct --gu                    untracked files      (--gur)
      struct --gs                    staged files         (--gsr)
      struct --gc                    changed (unstaged)   (--gcr)

    Commands:
      struct search "*.py" [PATH] [DEPTH] [-f]
      struct add "pattern" | remove "pattern" | list | clear
    """

    parser = argparse.ArgumentParser(
        prog="struct",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"struct {__version__}", help="Show the version and exit"
    )
    parser.add_argument(
        "positionals",
        nargs="*",
        metavar="DEPTH/PATH",
        help="Levels to show below PATH (0 = immediate children only) and the directory to show.",
    )
    _add_ignore_arguments(parser)
    parser.add_argument("-z", "--size", dest="show_size", action="store_true", help="Show file and directory sizes.")
    parser.add_argument(
        "-s",
        "--skip-large",
        dest="max_size_bytes",
        type=size_threshold,
        metavar="SIZE",
        help="Do not expand directories larger than SIZE megabytes (or a size such as '500MB').",
    )
    parser.add_argument(
        "--summary", action="store_true", help="Print counts of the directories, files and symlinks shown."
    )

    git = parser.add_argument_group("git modes")
    git.add_argument("-g", "--git", dest="git_tracked", action="store_true", help="Only tracked files.")
    git.add_argument("--gu", dest="git_untracked", action="store_true", help="Only untracked files.")
    git.add_argument("--gs", dest="git_staged", action="store_true", help="Only staged files.")
    git.add_argument("--gc", dest="git_changed", action="store_true", help="Only changed (unstaged) files.")
    git.add_argument("--gh", dest="git_history", action="store_true", help="History mode (no file filtering).")
    git.add_argument("--gr", dest="git_root", action="store_true", help="Tracked files, from the repository root.")
    git.add_argument("--gur", dest="git_untracked_root", action="store_true", help="Untracked, from the root.")
    git.add_argument("--gsr", dest="git_staged_root", action="store_true", help="Staged, from the root.")
    git.add_argument("--gcr", dest="git_changed_root", action="store_true", help="Changed, from the root.")
    git.add_argument("--ghr", dest="git_history_root", action="store_true", help="History, from the root.")

    _add_verbose_argument(parser)
    return parser


def create_command_parser() -> argparse.ArgumentParser:
    """Create the parser for the search and pattern-store commands."""
    parser = argparse.ArgumentParser(prog="struct")
    subparsers = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    search = subparsers.add_parser(
        "search",
        help="Find files and directories by name.",
        description="Plain text is a case-insensitive substring match; '*' and '?' make it a glob.",
    )
    search.add_argument("pattern", help="Search term, e.g. 'gui' or '*.py'.")
    search.add_argument("path", nargs="?", type=Path, default=Path("."), help="Directory to search (default: .).")
    search.add_argument(
        "depth",
        nargs="?",
        type=non_negative_int,
        default=0,
        help="Deepest level to search, 1 being PATH's children (default: 0, unlimited).",
    )
    search.add_argument("-f", "--flat", action="store_true", help="Print full paths instead of a tree.")
    _add_ignore_arguments(search)
    _add_verbose_argument(search)

    add = subparsers.add_parser("add", help="Add a pattern to the persistent ignores.")
    add.add_argument("pattern")
    _add_verbose_argument(add)

    remove = subparsers.add_parser("remove", help="Remove a pattern from the persistent ignores.")
    remove.add_argument("pattern")
    _add_verbose_argument(remove)

    for name, help_text in (("list", "List persistent ignore patterns."), ("clear", "Remove all patterns.")):
        command = subparsers.add_parser(name, help=help_text)
        _add_verbose_argument(command)

    return parser


def resolve_positionals(values: Sequence[str]) -> Tuple[Optional[int], Optional[Path]]:
    """Classify the tree parser's bare positionals as DEPTH and PATH.

    The first non-negative integer is DEPTH and the first other token is PATH.

    Raises:
        ValueError: If more positionals are given than can be classified.

    Example:
        >>> resolve_positionals(["2", "src"])
        (2, PosixPath('src'))
        >>> resolve_positionals(["src", "2"])
        (2, PosixPath('src'))
        >>> resolve_positionals([])
        (None, None)
    """
    depth: Optional[int] = None
    path: Optional[Path] = None
    for value in values:
        if depth is None and value.isdigit():
            depth = int(value)
        elif path is None:
            path = Path(value)
        else:
            raise ValueError(f"unexpected argument: '{value}'")
    return depth, path


def requested_git_modes(args: argparse.Namespace) -> Tuple[Set[GitMode], bool]:
    """Collect the git modes requested by flags and whether any root variant was used."""
    modes: Set[GitMode] = set()
    use_root = False
    for dest, (mode, from_root) in GIT_FLAGS.items():
        if getattr(args, dest, False):
            modes.add(mode)
            use_root = use_root or from_root
    return modes, use_root


def inline_patterns(args: argparse.Namespace) -> List[str]:
    """Flatten every -i value into a list of patterns."""
    patterns: List[str] = []
    for value in args.ignore or ():
        patterns.extend(split_pattern_list(value))
    return patterns


def parse_arguments(argv: Sequence[str]) -> argparse.Namespace:
    """Parse argv (without the program name) with the appropriate parser.

    The returned namespace always has a ``command`` attribute, which is None for tree
    display. For tree display, ``depth`` and ``path`` are resolved from positionals.
    """
    argv = list(argv)
    if argv and argv[0] in COMMANDS:
        return create_command_parser().parse_args(argv)

    parser = create_parser()
    args = parser.parse_intermixed_args(argv)
    try:
        args.depth, args.path = resolve_positionals(args.positionals)
    except ValueError as e:
        parser.error(str(e))
    args.command = None
    return args
