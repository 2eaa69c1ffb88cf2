class EmptyPatternError(ValueError):
    """
    Exception raised when a search is requested with an empty pattern.

    An empty pattern would match every entry, so it is rejected before any traversal
    starts. Users who really want everything can search for "*".

    Example:
        >>> error = EmptyPatternError()
        >>> str(error)
        'pattern cannot be empty - use "*" to match everything'
    """

    def __init__(self, message: str = 'pattern cannot be empty - use "*" to match everything') -> None:
        super().__init__(message)


class InvalidPatternError(ValueError):
    """
    Exception raised when a search pattern cannot be compiled.

    Attributes:
        pattern (str): The pattern that failed to compile.

    Example:
        >>> error = InvalidPatternError("[a", "unterminated character set")
        >>> str(error)
        "invalid search pattern '[a': unterminated character set"
    """

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        super().__init__(f"invalid search pattern '{pattern}': {reason}")


class NotAGitRepositoryError(Exception):
    """
    Exception raised when a git mode is requested outside of a git repository.

    This is fatal for the requested mode: the listing must not silently fall back to
    an unfiltered view.

    Attributes:
        path (str): The path from which repository discovery was attempted.

    Example:
        >>> error = NotAGitRepositoryError("/tmp/somewhere")
        >>> str(error)
        'not in a git repository: /tmp/somewhere'
    """

    def __init__(self, path: str, message: str = "not in a git repository") -> None:
        self.path = path
        super().__init__(f"{message}: {path}")
