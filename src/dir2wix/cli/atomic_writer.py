"""Atomic output writing utilities for dir2wix CLI.

This module provides a writing interface that only makes the output file
visible once the whole document has been written, so a failed or interrupted
harvest never leaves a truncated document behind.
"""

import os
import stat
import tempfile
import types
from pathlib import Path
from typing import Optional, Tuple, Type

from dir2wix.exceptions import SerializationError
from dir2wix.types import PathType

TEMP_FILE_SUFFIX = ".tmp"
DEFAULT_FILE_MODE = 0o666


def temp_file_affixes(path: PathType) -> Tuple[str, str]:
    """Prefix and suffix of the temporary files written next to an output path.

    Example:
        >>> temp_file_affixes("out/Files.wxs")
        ('.Files.wxs.', '.tmp')
    """
    return f".{Path(path).name}.", TEMP_FILE_SUFFIX


def output_file_mode(path: Path) -> int:
    """Permission bits for the committed file.

    An existing target keeps its mode; a new file gets the default mode reduced by
    the process umask, as if it had been created with open().
    """
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return DEFAULT_FILE_MODE & ~umask


class AtomicWriter:
    """Write a file through a temporary sibling that replaces the target on success.

    Data is written to a temporary file in the target's directory. commit() renames
    it over the target in one step; discard() removes it and leaves any existing
    target untouched. Used as a context manager, the writer commits when the block
    completes and discards when it raises.

    Attributes:
        path (Path): Final output path.
        temp_path (Path): Temporary file receiving the data.

    Example:
        >>> import os, tempfile
        >>> target = os.path.join(tempfile.mkdtemp(), "Files.wxs")
        >>> with AtomicWriter(target) as writer:
        ...     writer.write("<Wix />\\n")
        >>> open(target).read()
        '<Wix />\\n'
    """

    def __init__(self, path: PathType, encoding: str = "utf-8"):
        """Create the temporary file next to the target.

        Args:
            path: Final output path.
            encoding: Text encoding of the output.

        Raises:
            SerializationError: If the temporary file can't be created.
        """
        self.path = Path(path)
        self._closed = False

        prefix, suffix = temp_file_affixes(self.path)
        try:
            fd, temp_name = tempfile.mkstemp(dir=self.path.parent, prefix=prefix, suffix=suffix)
        except OSError as e:
            raise SerializationError(self.path, e) from e

        self.temp_path = Path(temp_name)
        self._file = os.fdopen(fd, "w", encoding=encoding, newline="\n")

    def write(self, data: str) -> None:
        """Write data to the temporary file.

        Raises:
            ValueError: If the writer was already committed or discarded.
            SerializationError: If an I/O error occurs during writing.
        """
        if self._closed:
            raise ValueError("Cannot write to closed AtomicWriter")

        try:
            self._file.write(data)
        except OSError as e:
            raise SerializationError(self.path, e) from e

    def commit(self) -> None:
        """Move the written data into place.

        Raises:
            SerializationError: If the data can't be flushed or the rename fails. The
                temporary file is removed in that case.
        """
        if self._closed:
            return

        try:
            self._file.close()
            os.chmod(self.temp_path, output_file_mode(self.path))
            os.replace(self.temp_path, self.path)
        except OSError as e:
            self.discard()
            raise SerializationError(self.path, e) from e
        self._closed = True

    def discard(self) -> None:
        """Drop the written data, leaving the target untouched."""
        if self._closed:
            return

        self._closed = True
        try:
            self._file.close()
        finally:
            self.temp_path.unlink(missing_ok=True)

    def __enter__(self) -> "AtomicWriter":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[types.TracebackType],
    ) -> None:
        """Commit if the block succeeded, discard otherwise.

        Exceptions raised in the block are never suppressed.
        """
        if exc_type is None:
            self.commit()
        else:
            self.discard()
