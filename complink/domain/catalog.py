"""
Catalog Builder for complink.

Aggregates registry, backup and note state into the sorted list shown by the
catalog panel. Nothing is cached: files and links can change between calls.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from complink.app.config import NoteConfig
from complink.core.host import HostDocument
from complink.core.models.link import CatalogEntry
from complink.domain.autolink import AutoLinker
from complink.domain.notes import NoteLog, format_timestamp
from complink.domain.registry import LinkRegistry
from complink.systems.storage.backup_store import BackupStore
from complink.utils.logging import get_logger, log_error

logger = get_logger("catalog")


class CatalogBuilder:
    """Builds catalog entries for every linked component with a file on disk."""

    def __init__(
        self,
        document: HostDocument,
        registry: LinkRegistry,
        backups: BackupStore,
        notes: NoteLog,
        note_config: NoteConfig | None = None,
    ):
        self.document = document
        self.registry = registry
        self.backups = backups
        self.notes = notes
        self.note_config = note_config or NoteConfig()
        self.autolinker = AutoLinker(document, registry)

    def note_counts(self) -> dict[str, int]:
        """Non-zero note counts keyed by file path."""
        counts: dict[str, int] = {}
        counted: set[str] = set()
        for definition in self.document.definitions():
            path = self.registry.path_of(definition)
            if path is None or path in counted:
                continue
            counted.add(path)
            count = self.notes.count(self.registry.identity_of(definition))
            if count > 0:
                counts[path] = count
        return counts

    def build(self) -> list[CatalogEntry]:
        """Run the auto-linker, then list linked components sorted by name."""
        try:
            self.autolinker.run()
        except Exception as e:
            log_error(logger, "auto_link", e)

        counts = self.note_counts()
        entries: list[CatalogEntry] = []
        seen: set[str] = set()

        for definition in self.document.definitions():
            path = self.registry.path_of(definition)
            if path is None:
                continue
            if path in seen:
                logger.info(
                    f"Skipping '{definition.name}': {path} is already listed for another component"
                )
                continue

            primary = Path(path)
            if not primary.is_file():
                continue

            try:
                modified = format_timestamp(
                    datetime.fromtimestamp(primary.stat().st_mtime), self.note_config
                )
            except OSError:
                modified = ""

            name = str(definition.name or "").strip() or primary.stem
            entries.append(
                CatalogEntry(
                    display_name=name,
                    file_path=path,
                    last_modified=modified,
                    backup_exists=self.backups.backup_exists(path),
                    note_count=counts.get(path, 0),
                )
            )
            seen.add(path)

        entries.sort(key=lambda e: e.display_name.lower())
        return entries
