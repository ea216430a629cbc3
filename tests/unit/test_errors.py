"""Tests for usersays error types."""

from usersays.errors import (
    ArchiveCorruptError,
    FilesystemError,
    ParseError,
    StorageError,
    UnsafeArchiveError,
    UsersaysError,
)


class TestErrorHierarchy:
    """Test error class hierarchy."""

    def test_all_errors_inherit_from_usersays_error(self) -> None:
        """All custom errors should inherit from UsersaysError."""
        assert issubclass(ArchiveCorruptError, UsersaysError)
        assert issubclass(StorageError, UsersaysError)
        assert issubclass(FilesystemError, UsersaysError)
        assert issubclass(ParseError, UsersaysError)

    def test_unsafe_archive_is_corrupt_archive(self) -> None:
        """Unsafe archives are reported as a kind of corrupt archive."""
        assert issubclass(UnsafeArchiveError, ArchiveCorruptError)


class TestErrorAttributes:
    """Test error-specific attributes."""

    def test_parse_error_file_name(self) -> None:
        """ParseError should store the file name."""
        error = ParseError("bad json", "greet_usersays_en.json")
        assert error.file_name == "greet_usersays_en.json"
        assert str(error) == "bad json"

    def test_parse_error_file_name_optional(self) -> None:
        """ParseError file name defaults to None."""
        assert ParseError("bad json").file_name is None

    def test_filesystem_error_path(self) -> None:
        """FilesystemError should store the path."""
        error = FilesystemError("Permission denied", "/tmp/x/intents")
        assert error.path == "/tmp/x/intents"

    def test_unsafe_archive_entry_name(self) -> None:
        """UnsafeArchiveError should store the offending entry."""
        error = UnsafeArchiveError("traversal", "../x")
        assert error.entry_name == "../x"
