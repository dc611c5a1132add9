"""Storage systems for complink."""

from complink.systems.storage.backup_store import BackupStore

__all__ = ["BackupStore"]
