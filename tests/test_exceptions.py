"""Tests for custom exceptions."""

import pytest

from dir2wix.exceptions import (
    HarvestError,
    InvalidArgumentsError,
    PathNotFoundError,
    SerializationError,
    TraversalError,
)


class TestHarvestError:
    """Test the HarvestError base class."""

    def test_attributes(self):
        error = HarvestError("Something went wrong", path="/tmp/x", argument="--output")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.path == "/tmp/x"
        assert error.argument == "--output"

    def test_defaults(self):
        error = HarvestError("failure")
        assert error.path is None
        assert error.argument is None

    @pytest.mark.parametrize(
        "error",
        [
            InvalidArgumentsError("bad"),
            PathNotFoundError("/missing"),
            TraversalError("/locked", PermissionError(13, "Permission denied")),
            SerializationError("out.wxs", OSError("disk full")),
        ],
    )
    def test_subclasses_are_harvest_errors(self, error):
        assert isinstance(error, HarvestError)


class TestInvalidArgumentsError:
    """Test InvalidArgumentsError exception."""

    def test_with_argument(self):
        error = InvalidArgumentsError("'1st' is not a valid identifier", "--directory-ref")
        assert str(error) == "Invalid value for --directory-ref: '1st' is not a valid identifier"
        assert error.argument == "--directory-ref"

    def test_without_argument(self):
        error = InvalidArgumentsError("-o/--output is required unless -n/--dry-run is given")
        assert str(error) == "-o/--output is required unless -n/--dry-run is given"
        assert error.argument is None


class TestPathNotFoundError:
    """Test PathNotFoundError exception."""

    def test_default_message(self):
        error = PathNotFoundError("/no/such/dir")
        assert str(error) == "Path not found: /no/such/dir"
        assert error.path == "/no/such/dir"

    def test_custom_message(self):
        error = PathNotFoundError("/etc/hosts", what="Root path", reason="is not a directory")
        assert str(error) == "Root path is not a directory: /etc/hosts"


class TestTraversalError:
    """Test TraversalError exception."""

    def test_permission_error(self):
        cause = PermissionError(13, "Permission denied")
        error = TraversalError("/data/locked", cause)
        assert error.cause is cause
        assert error.is_permission_error
        assert str(error) == "Error accessing /data/locked: [Errno 13] Permission denied"

    def test_other_os_error(self):
        error = TraversalError("/data/gone", FileNotFoundError(2, "No such file or directory"))
        assert not error.is_permission_error

    def test_chaining(self):
        cause = OSError(5, "Input/output error")
        with pytest.raises(TraversalError) as excinfo:
            try:
                raise cause
            except OSError as e:
                raise TraversalError("/data", e) from e
        assert excinfo.value.__cause__ is cause


class TestSerializationError:
    """Test SerializationError exception."""

    def test_message(self):
        error = SerializationError("out/Files.wxs", OSError("disk full"))
        assert str(error) == "Cannot write output file out/Files.wxs: disk full"
        assert error.path == "out/Files.wxs"
