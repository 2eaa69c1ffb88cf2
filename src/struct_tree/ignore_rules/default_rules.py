"""Built-in ignore catalog for common tooling clutter."""

from struct_tree.types import RuleSource

from .base_rules import BaseIgnoreRules

DEFAULT_IGNORED_DIRECTORIES = frozenset(
    {
        # Python tooling
        "__pycache__",
        ".pytest_cache",
        ".mypy_cache",
        ".ruff_cache",
        ".tox",
        "dist",
        "build",
        ".coverage",
        # Virtual environments
        "venv",
        ".venv",
        "env",
        ".env",
        "virtualenv",
        # JavaScript dependencies
        "node_modules",
        ".npm",
        ".yarn",
        # Version control
        ".git",
        ".svn",
        ".hg",
        # Editors
        ".vscode",
        ".idea",
        ".obsidian",
        # Build output
        "target",
        "bin",
        "obj",
        ".next",
        ".nuxt",
        # OS metadata
        ".DS_Store",
        # Browser profiles and caches
        "chrome_profile",
        "lofi_chrome_profile",
        "GPUCache",
        "ShaderCache",
        "GrShaderCache",
        "Cache",
        "blob_storage",
    }
)

DEFAULT_IGNORED_DIRECTORY_SUFFIXES = (".egg-info",)

DEFAULT_IGNORED_EXTENSIONS = frozenset({"pyc", "pyo", "pyd", "swp", "swo"})

DEFAULT_IGNORED_FILENAMES = frozenset({"package-lock.json", ".DS_Store"})


class DefaultIgnoreRules(BaseIgnoreRules):
    """The fixed catalog of names hidden unless defaults are suppressed.

    Directories are matched by exact name (or an ``.egg-info`` suffix). Files are
    matched by extension, taken as the text after the last dot, or by exact filename.
    The catalog cannot be extended at runtime.

    Example:
        >>> rules = DefaultIgnoreRules()
        >>> rules.matches("node_modules", is_dir=True)
        True
        >>> rules.matches("node_modules", is_dir=False)
        False
        >>> rules.matches("module.pyc", is_dir=False)
        True
        >>> rules.matches("mypkg.egg-info", is_dir=True)
        True
    """

    source = RuleSource.DEFAULT

    def matches(self, name: str, is_dir: bool) -> bool:
        if is_dir:
            return name in DEFAULT_IGNORED_DIRECTORIES or name.endswith(DEFAULT_IGNORED_DIRECTORY_SUFFIXES)
        extension = name.rsplit(".", 1)[-1]
        return extension in DEFAULT_IGNORED_EXTENSIONS or name in DEFAULT_IGNORED_FILENAMES
