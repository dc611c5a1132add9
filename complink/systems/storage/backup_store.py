"""
Backup Store for complink.

Keeps exactly one mirrored prior version of each linked file in a sibling
backup directory and performs copy-before-overwrite.
"""

from __future__ import annotations

import shutil
from pathlib import Path

from complink.core.errors import (
    BackupNotFoundError,
    BackupWriteFailedError,
    DirectoryCreateFailedError,
)
from complink.utils.logging import get_logger, log_error

logger = get_logger("storage.backup")


# ============================================================================
# Backup Store
# ============================================================================


class BackupStore:
    """Manages the single-depth backup of linked files.

    For a primary file ``P`` the backup lives at
    ``dirname(P)/<backup_folder>/basename(P)``.

    Usage:
        store = BackupStore("yedek")
        store.snapshot("/work/kaynak/Bracket.skp")
        store.restore("/work/kaynak/Bracket.skp")
    """

    def __init__(self, backup_folder: str = "yedek"):
        """Initialize the store.

        Args:
            backup_folder: Name of the sibling backup directory
        """
        self.backup_folder = backup_folder

    # ========== Paths ==========

    def backup_path(self, file_path: str | Path) -> Path:
        """Location of the backup for ``file_path``."""
        primary = Path(file_path)
        return primary.parent / self.backup_folder / primary.name

    def backup_exists(self, file_path: str | Path) -> bool:
        return self.backup_path(file_path).is_file()

    # ========== Directories ==========

    def ensure_backup_dir(self, file_path: str | Path) -> bool:
        """Create the backup directory (and parents) if absent.

        Failures are logged, never raised.

        Returns:
            True when the directory exists afterwards
        """
        backup_dir = self.backup_path(file_path).parent
        try:
            backup_dir.mkdir(parents=True, exist_ok=True)
            return True
        except OSError as e:
            error = DirectoryCreateFailedError(
                f"Could not create backup directory {backup_dir}: {e}",
                file_path=str(file_path),
            )
            log_error(logger, "ensure_backup_dir", error)
            return False

    def ensure_parent_dir(self, file_path: str | Path) -> Path:
        """Create the directory the primary file lands in.

        Raises:
            DirectoryCreateFailedError: If it cannot be created
        """
        parent = Path(file_path).parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryCreateFailedError(
                f"Could not create directory {parent}: {e}",
                file_path=str(file_path),
            ) from e
        return parent

    # ========== Copy Operations ==========

    def snapshot(self, file_path: str | Path) -> bool:
        """Copy the current primary to its backup location.

        Overwrites any previous backup. Errors are logged and reported
        through the return value.

        Returns:
            True if the backup now mirrors the primary
        """
        primary = Path(file_path)
        backup = self.backup_path(primary)

        if not self.ensure_backup_dir(primary):
            return False

        try:
            shutil.copy2(primary, backup)
        except OSError as e:
            error = BackupWriteFailedError(
                f"Could not back up {primary} to {backup}: {e}",
                file_path=str(primary),
            )
            log_error(logger, "snapshot", error)
            return False

        logger.debug(f"Backup refreshed: {backup}")
        return True

    def restore(self, file_path: str | Path) -> Path:
        """Copy the backup over the primary file.

        Returns:
            Path of the restored primary

        Raises:
            BackupNotFoundError: If no backup exists
            OSError: If the copy fails
        """
        primary = Path(file_path)
        backup = self.backup_path(primary)

        if not backup.is_file():
            raise BackupNotFoundError(
                f"Backup not found: {backup}",
                file_path=str(primary),
            )

        primary.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(backup, primary)
        logger.info(f"Restored {primary} from backup")
        return primary
