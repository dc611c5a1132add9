"""
Error types for the complink binding engine.

Each error carries a short machine-readable ``code`` that the presentation
layer receives in an ``OperationResult``.
"""

from __future__ import annotations


# ============================================================================
# Exceptions
# ============================================================================


class ComplinkError(Exception):
    """Base exception for binding engine errors."""

    code = "error"

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.file_path = file_path


class NotLinkedError(ComplinkError):
    """Operation requires an existing binding and none was found."""

    code = "not_linked"


class NotFoundError(ComplinkError):
    """Bound file or component instance is no longer present."""

    code = "not_found"


class ReloadFailedError(ComplinkError):
    """Host could not materialize a definition from the file."""

    code = "reload_failed"


class BackupNotFoundError(ComplinkError):
    """Restore requested with no backup present."""

    code = "backup_not_found"


class BackupWriteFailedError(ComplinkError):
    """Backup copy failed. Logged and swallowed by the engine."""

    code = "backup_write_failed"


class DirectoryCreateFailedError(ComplinkError):
    """A directory could not be created."""

    code = "directory_create_failed"


class WriteFailedError(ComplinkError):
    """The primary file could not be written."""

    code = "write_failed"
