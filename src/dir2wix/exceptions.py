from typing import Optional

from dir2wix.types import PathType


class HarvestError(Exception):
    """
    Base class for all errors that abort a harvest run.

    Every harvest error is fatal for the current run. Subclasses carry the
    context needed to diagnose the failure (the offending path or argument name)
    so the command-line interface can report it without additional logging.

    Attributes:
        message (str): Human-readable description of the failure.
        path (Optional[str]): Filesystem path involved in the failure, if any.
        argument (Optional[str]): Command-line argument involved, if any.

    Example:
        >>> error = HarvestError("Something went wrong", path="/tmp/x")
        >>> str(error)
        'Something went wrong'
        >>> error.path
        '/tmp/x'
    """

    def __init__(self, message: str, *, path: Optional[PathType] = None, argument: Optional[str] = None) -> None:
        self.message = message
        self.path = str(path) if path is not None else None
        self.argument = argument
        super().__init__(message)


class InvalidArgumentsError(HarvestError):
    """
    Exception raised when a required argument is missing or malformed.

    Example:
        >>> error = InvalidArgumentsError("must be a valid identifier", argument="--directory-ref")
        >>> str(error)
        'Invalid value for --directory-ref: must be a valid identifier'
        >>> InvalidArgumentsError("no output given").message
        'no output given'
    """

    def __init__(self, message: str, argument: Optional[str] = None, path: Optional[PathType] = None) -> None:
        if argument is not None:
            message = f"Invalid value for {argument}: {message}"
        super().__init__(message, path=path, argument=argument)


class PathNotFoundError(HarvestError):
    """
    Exception raised when the root directory or a rule-source file is missing.

    Example:
        >>> error = PathNotFoundError("/no/such/dir", what="Root directory")
        >>> str(error)
        'Root directory not found: /no/such/dir'
    """

    def __init__(self, path: PathType, what: str = "Path", reason: str = "not found") -> None:
        super().__init__(f"{what} {reason}: {path}", path=path)


class TraversalError(HarvestError):
    """
    Exception raised when a directory cannot be enumerated or a file's metadata cannot be read.

    The underlying OSError is kept as ``cause`` and is also chained as ``__cause__``
    when raised with ``raise ... from``.

    Example:
        >>> error = TraversalError("/data/locked", PermissionError(13, "Permission denied"))
        >>> str(error)
        'Error accessing /data/locked: [Errno 13] Permission denied'
        >>> error.is_permission_error
        True
    """

    def __init__(self, path: PathType, cause: OSError) -> None:
        self.cause = cause
        super().__init__(f"Error accessing {path}: {cause}", path=path)

    @property
    def is_permission_error(self) -> bool:
        """Whether the traversal failed because access was denied."""
        return isinstance(self.cause, PermissionError)


class SerializationError(HarvestError):
    """
    Exception raised when the output document cannot be produced or written.

    Example:
        >>> error = SerializationError("out/Files.wxs", OSError("disk full"))
        >>> str(error)
        'Cannot write output file out/Files.wxs: disk full'
    """

    def __init__(self, path: PathType, cause: Exception) -> None:
        self.cause = cause
        super().__init__(f"Cannot write output file {path}: {cause}", path=path)
