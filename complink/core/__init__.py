"""complink core: errors, models, host protocols and identity resolution."""

from complink.core.errors import (
    BackupNotFoundError,
    BackupWriteFailedError,
    ComplinkError,
    DirectoryCreateFailedError,
    NotFoundError,
    NotLinkedError,
    ReloadFailedError,
    WriteFailedError,
)
from complink.core.host import HostDefinition, HostDocument, HostInstance, SavePrompt
from complink.core.identity import IdentityResolver

__all__ = [
    "ComplinkError",
    "NotLinkedError",
    "NotFoundError",
    "ReloadFailedError",
    "BackupNotFoundError",
    "BackupWriteFailedError",
    "DirectoryCreateFailedError",
    "WriteFailedError",
    "HostDefinition",
    "HostDocument",
    "HostInstance",
    "SavePrompt",
    "IdentityResolver",
]
