"""Directory exploration utilities.

This package renders filtered, annotated trees of directory structures, searches
them by name or glob, and can restrict output to files known to git.
"""

from importlib.metadata import PackageNotFoundError, version

# Expose the version for both programmatic use and CLI
try:
    __version__ = version("struct-tree")
except PackageNotFoundError:
    __version__ = "unknown"
