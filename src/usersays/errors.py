"""usersays error types.

All custom exceptions inherit from UsersaysError to allow
catching any usersays-specific error.
"""


class UsersaysError(Exception):
    """Base exception for all usersays errors."""

    pass


class ArchiveCorruptError(UsersaysError):
    """Archive bytes could not be expanded."""

    pass


class UnsafeArchiveError(ArchiveCorruptError):
    """Archive contains entries that would escape the extraction directory."""

    def __init__(self, message: str, entry_name: str | None = None) -> None:
        super().__init__(message)
        self.entry_name = entry_name


class StorageError(UsersaysError):
    """Staging write or workspace cleanup failed."""

    pass


class FilesystemError(UsersaysError):
    """Reading a directory or file failed for a reason other than absence."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class ParseError(UsersaysError):
    """Intent file contents do not match the expected shape."""

    def __init__(self, message: str, file_name: str | None = None) -> None:
        super().__init__(message)
        self.file_name = file_name
