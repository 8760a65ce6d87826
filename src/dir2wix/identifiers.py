"""Deterministic identifier generation for harvested entries.

Identifiers are derived purely from path information so that harvesting an
unchanged tree always yields the same ids, on any machine and in any
traversal order. The encoding, separator and digest match the ids produced
by earlier WiX harvesting tools, so existing installers keep their component
identities when switching to dir2wix.
"""

import hashlib
import re
from typing import Union

from dir2wix.types import IdPrefix

ID_SEPARATOR = "|"
ID_ENCODING = "utf-16-le"
HASH_LENGTH = 16
MAX_IDENTIFIER_LENGTH = 72

_IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_.]*")


def generate_id(prefix: Union[str, IdPrefix], *parts: str) -> str:
    """Generate a stable identifier from a prefix and an ordered list of strings.

    The parts are joined with ``|``, encoded as UTF-16LE and hashed with MD5. The
    first ``HASH_LENGTH`` digest bytes are rendered as uppercase hexadecimal and
    appended to the prefix. The digest is used for its distribution only, not for
    any security property.

    Args:
        prefix: Semantic prefix such as ``"dir"``, ``"fil"`` or ``"cmp"``.
        *parts: Path-derived strings identifying the entry.

    Returns:
        The identifier, ``len(prefix) + 2 * HASH_LENGTH`` characters long.

    Example:
        >>> generate_id("dir", "$(var.HarvestPath)")
        'dir197A97F431CE52766B3EA913B66121CC'
        >>> generate_id(IdPrefix.FILE, "a", "b") == generate_id("fil", "a", "b")
        True
    """
    prefix_str = prefix.value if isinstance(prefix, IdPrefix) else prefix
    data = ID_SEPARATOR.join(parts).encode(ID_ENCODING)
    digest = hashlib.md5(data, usedforsecurity=False).digest()
    return prefix_str + digest[:HASH_LENGTH].hex().upper()


def directory_id(reference_path: str) -> str:
    """Identifier of a directory, derived from its reference path."""
    return generate_id(IdPrefix.DIRECTORY, reference_path)


def file_id(parent_directory_id: str, file_name: str) -> str:
    """Identifier of a file, derived from its parent directory id and its name."""
    return generate_id(IdPrefix.FILE, parent_directory_id, file_name)


def component_id(parent_directory_id: str, file_identifier: str) -> str:
    """Identifier of the component wrapping a file."""
    return generate_id(IdPrefix.COMPONENT, parent_directory_id, file_identifier)


def is_valid_identifier(value: str) -> bool:
    """Check that a caller-supplied id (anchor, group name) is a legal WiX identifier.

    Example:
        >>> is_valid_identifier("INSTALLFOLDER"), is_valid_identifier("Heat.Generated")
        (True, True)
        >>> is_valid_identifier("1stFolder"), is_valid_identifier("my folder")
        (False, False)
    """
    return len(value) <= MAX_IDENTIFIER_LENGTH and _IDENTIFIER_PATTERN.fullmatch(value) is not None
