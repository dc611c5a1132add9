"""
complink Application State.

Wires the registry, backup store, note log, catalog builder and sync engine
for one host document.
"""

from __future__ import annotations

from dataclasses import dataclass

from complink.app.config import ExporterConfig, get_config
from complink.core.host import HostDocument, SavePrompt
from complink.core.identity import IdentityResolver
from complink.domain.catalog import CatalogBuilder
from complink.domain.notes import NoteLog
from complink.domain.registry import LinkRegistry
from complink.domain.settings import DocumentSettings
from complink.domain.sync_engine import SyncEngine
from complink.systems.storage.backup_store import BackupStore
from complink.utils.logging import get_logger

logger = get_logger("app.state")


@dataclass
class ExporterState:
    """All services bound to one document.

    Usage:
        state = ExporterState.create(document)
        state.engine.export(definition, prompt)
        entries = state.catalog.build()
    """

    config: ExporterConfig
    document: HostDocument
    registry: LinkRegistry
    backups: BackupStore
    notes: NoteLog
    settings: DocumentSettings
    engine: SyncEngine
    catalog: CatalogBuilder

    @classmethod
    def create(
        cls,
        document: HostDocument,
        config: ExporterConfig | None = None,
        prompt: SavePrompt | None = None,
    ) -> "ExporterState":
        config = config or get_config()
        naming = config.naming

        registry = LinkRegistry(document, naming, IdentityResolver())
        backups = BackupStore(naming.backup_folder)
        notes = NoteLog(document, naming, config.notes)

        logger.debug(f"State created for document '{document.path or '<unsaved>'}'")
        return cls(
            config=config,
            document=document,
            registry=registry,
            backups=backups,
            notes=notes,
            settings=DocumentSettings(document, naming),
            engine=SyncEngine(document, registry, backups, naming, prompt, notes),
            catalog=CatalogBuilder(document, registry, backups, notes, config.notes),
        )

    def notes_for_path(self, file_path: str):
        """Note list for the component bound to ``file_path``."""
        return self.notes.list(self.identity_for_path(file_path))

    def identity_for_path(self, file_path: str):
        """Identity of the component bound to ``file_path``.

        Falls back to the path itself when no definition is bound to it.
        """
        if not file_path:
            return None
        return self.registry.identity_for_path(file_path) or file_path
