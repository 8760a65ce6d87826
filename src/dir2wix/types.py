from enum import Enum
from os import PathLike
from typing import Union

# Complete path type including strings and any path-like object
PathType = Union[str, PathLike[str]]


class IdPrefix(str, Enum):
    """Semantic prefixes for generated identifiers.

    Attributes:
        DIRECTORY: Prefix for ``Directory`` element ids.
        FILE: Prefix for ``File`` element ids.
        COMPONENT: Prefix for ``Component`` element ids.
    """

    DIRECTORY = "dir"
    FILE = "fil"
    COMPONENT = "cmp"
