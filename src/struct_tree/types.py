from enum import Enum
from os import PathLike
from typing import Union

# Complete path type including strings and any path-like object
PathType = Union[str, PathLike[str]]


class RuleSource(Enum):
    """Origin of an ignore rule.

    The source decides which runtime suppression directive can switch a rule off.

    Attributes:
        DEFAULT: Built-in catalog of directory names, extensions and filenames
        CONFIG: Patterns persisted in the user's pattern store
        INLINE: Patterns given on the command line for a single invocation
    """

    DEFAULT = "default"
    CONFIG = "config"
    INLINE = "inline"
