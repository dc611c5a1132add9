"""
Sync Engine for complink.

Orchestrates export, update, reload and restore for component definitions.
Every write to a linked file goes through the backup policy:

- primary already exists: snapshot the old content, then overwrite
- primary does not exist yet: write it, then snapshot it to seed the backup.
  A first export always reseeds. Later writes keep a backup orphaned by a
  deleted primary, since it is the only prior version left.

Each public operation runs to completion and returns an OperationResult;
errors never propagate to the caller.
"""

from __future__ import annotations

import os
import threading
from collections.abc import Callable, Hashable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

from complink.app.config import NamingConfig
from complink.core.errors import (
    ComplinkError,
    NotFoundError,
    NotLinkedError,
    ReloadFailedError,
    WriteFailedError,
)
from complink.core.host import HostDefinition, HostDocument, SavePrompt
from complink.core.models.result import Operation, OperationResult
from complink.domain.layout import document_dir, ensure_source_dir
from complink.domain.notes import NoteLog
from complink.domain.registry import LinkRegistry
from complink.systems.storage.backup_store import BackupStore
from complink.utils.logging import get_logger, log_error, log_operation

logger = get_logger("sync")


def normalize_extension(file_path: str, extension: str) -> str:
    """Append ``extension`` unless the path already ends with it (any case)."""
    if file_path.lower().endswith(extension.lower()):
        return file_path
    return f"{file_path}{extension}"


# ============================================================================
# Sync Engine
# ============================================================================


class SyncEngine:
    """Export/Update/Reload/Restore state machine for linked components.

    A component is ``Unlinked`` until its first export and ``Linked`` from then
    on. Update, reload and restore require a link and never change it.

    Usage:
        engine = SyncEngine(document, registry, backups, prompt=ask_for_path)
        result = engine.export(definition)
        if not result.ok:
            show_error(result.message)
    """

    def __init__(
        self,
        document: HostDocument,
        registry: LinkRegistry,
        backups: BackupStore,
        naming: NamingConfig | None = None,
        prompt: SavePrompt | None = None,
        notes: NoteLog | None = None,
    ):
        self.document = document
        self.registry = registry
        self.backups = backups
        self.naming = naming or registry.naming
        self.prompt = prompt
        self.notes = notes

        self._locks: dict[Hashable, _LockEntry] = {}
        self._locks_guard = threading.Lock()

    # ========== Export ==========

    def export(
        self,
        definition: HostDefinition,
        prompt: SavePrompt | None = None,
    ) -> OperationResult:
        """Export a component, binding it on first use.

        Linked components reuse their path. Unlinked ones get a target from
        the save prompt; a cancelled prompt changes nothing.
        """
        with self._guard(definition):
            try:
                file_path = self.registry.path_of(definition)
                first_bind = file_path is None
                if first_bind:
                    file_path = self._ask_target(definition, prompt or self.prompt)
                    if file_path is None:
                        logger.info(f"Export of '{definition.name}' cancelled")
                        return OperationResult.cancelled(Operation.EXPORT)
                    self.registry.set_link(definition, file_path)

                warnings = self._write_with_backup(
                    definition, file_path, keep_orphaned_backup=not first_bind
                )
                log_operation(logger, "Exported", file_path, name=definition.name)
                return OperationResult.success(
                    Operation.EXPORT, file_path, f"Saved: {file_path}", warnings
                )
            except Exception as e:
                return self._failed(Operation.EXPORT, e, definition)

    def _ask_target(self, definition: HostDefinition, prompt: SavePrompt | None) -> str | None:
        if prompt is None:
            raise NotLinkedError(
                f"'{definition.name}' has no link and no save location was supplied"
            )

        name = str(definition.name or "").strip() or "Component"
        folder = (
            ensure_source_dir(self.document, self.naming)
            or document_dir(self.document)
            or Path.home()
        )
        ext = self.naming.extension
        chosen = prompt(f"Save Component ({ext})", str(folder), f"{name}{ext}")
        if chosen is None or not str(chosen).strip():
            return None

        return os.path.abspath(normalize_extension(str(chosen).strip(), ext))

    # ========== Update ==========

    def update(self, definition: HostDefinition) -> OperationResult:
        """Write the in-scene content over the bound file, backing up the old one."""
        with self._guard(definition):
            try:
                file_path = self._require_link(definition)
                warnings = self._write_with_backup(definition, file_path)
                log_operation(logger, "Updated", file_path, name=definition.name)
                return OperationResult.success(
                    Operation.UPDATE, file_path, f"Updated: {file_path}", warnings
                )
            except Exception as e:
                return self._failed(Operation.UPDATE, e, definition)

    def update_by_path(self, file_path: str) -> OperationResult:
        return self._by_path(Operation.UPDATE, file_path, self.update)

    # ========== Reload ==========

    def reload(self, definition: HostDefinition) -> OperationResult:
        """Replace every placed instance with one of the definition loaded from file.

        Placement transformation and layer of each instance are preserved.
        """
        with self._guard(definition):
            try:
                file_path = self._require_link(definition)
                old_identity = self.registry.identity_of(definition)
                if not Path(file_path).is_file():
                    raise NotFoundError(f"File not found: {file_path}", file_path=file_path)

                placed = [i for i in self.document.instances() if i.definition == definition]
                if not placed:
                    raise NotFoundError(
                        f"No placed instance of '{definition.name}' in the document",
                        file_path=file_path,
                    )

                try:
                    new_definition = self.document.load_definition(file_path)
                except (OSError, ValueError) as e:
                    raise ReloadFailedError(
                        f"Could not load {file_path}: {e}", file_path=file_path
                    ) from e
                if new_definition is None:
                    raise ReloadFailedError(f"Could not load {file_path}", file_path=file_path)

                for instance in placed:
                    transformation, layer = instance.transformation, instance.layer
                    self.document.erase_instance(instance)
                    self.document.add_instance(new_definition, transformation, layer)

                # The reloaded definition now stands for this component
                self.registry.hand_over(definition, new_definition)
                if self.notes is not None:
                    self.notes.hand_over(old_identity, self.registry.identity_of(new_definition))

                log_operation(logger, "Reloaded", file_path, instances=len(placed))
                return OperationResult.success(
                    Operation.RELOAD, file_path, f"Reloaded: {file_path}"
                )
            except Exception as e:
                return self._failed(Operation.RELOAD, e, definition)

    def reload_by_path(self, file_path: str) -> OperationResult:
        return self._by_path(Operation.RELOAD, file_path, self.reload)

    # ========== Restore ==========

    def restore(self, definition: HostDefinition) -> OperationResult:
        """Copy the backup over the bound file. Scene content is untouched."""
        try:
            file_path = self._require_link(definition)
        except NotLinkedError as e:
            return self._failed(Operation.RESTORE, e, definition)
        return self.restore_by_path(file_path)

    def restore_by_path(self, file_path: str) -> OperationResult:
        definition = self.registry.find_by_path(file_path)
        key = _definition_key(definition) if definition is not None else ("path", file_path)
        with self._guard_key(key):
            try:
                try:
                    self.backups.restore(file_path)
                except OSError as e:
                    raise WriteFailedError(
                        f"Could not restore {file_path}: {e}", file_path=file_path
                    ) from e
                return OperationResult.success(
                    Operation.RESTORE, file_path, f"Restored from backup: {file_path}"
                )
            except Exception as e:
                return self._failed(Operation.RESTORE, e, file_path=file_path)

    # ========== Internals ==========

    def _require_link(self, definition: HostDefinition) -> str:
        file_path = self.registry.path_of(definition)
        if file_path is None:
            raise NotLinkedError(f"'{definition.name}' has not been exported yet")
        return file_path

    def _write_with_backup(
        self,
        definition: HostDefinition,
        file_path: str,
        keep_orphaned_backup: bool = True,
    ) -> list[str]:
        """Write ``definition`` to ``file_path`` under the backup policy.

        Args:
            keep_orphaned_backup: When the primary is missing, leave a backup
                that is already there instead of reseeding it

        Returns:
            Warnings for backup steps that failed; the primary write stands

        Raises:
            DirectoryCreateFailedError: The primary has nowhere to land
            WriteFailedError: The host could not write the primary
        """
        primary = Path(file_path)
        existed = primary.is_file()
        warnings: list[str] = []

        if existed:
            if not self.backups.snapshot(primary):
                warnings.append(f"Backup before overwrite failed for {primary}")
        else:
            self.backups.ensure_parent_dir(primary)

        try:
            written = definition.save_as(str(primary))
        except OSError as e:
            raise WriteFailedError(f"Could not write {primary}: {e}", file_path=file_path) from e
        if written is False:
            raise WriteFailedError(f"Could not write {primary}", file_path=file_path)

        if not existed:
            if keep_orphaned_backup and self.backups.backup_exists(primary):
                logger.info(f"Primary was missing, keeping existing backup of {primary}")
            elif not self.backups.snapshot(primary):
                warnings.append(f"Initial backup failed for {primary}")

        return warnings

    def _by_path(
        self,
        operation: Operation,
        file_path: str,
        action: Callable[[HostDefinition], OperationResult],
    ) -> OperationResult:
        definition = self.registry.find_by_path(file_path)
        if definition is None:
            error = NotFoundError(
                f"No component in the document is bound to {file_path}",
                file_path=file_path,
            )
            return self._failed(operation, error, file_path=file_path)
        return action(definition)

    def _failed(
        self,
        operation: Operation,
        error: Exception,
        definition: HostDefinition | None = None,
        file_path: str | None = None,
    ) -> OperationResult:
        if file_path is None and definition is not None:
            file_path = self.registry.path_of(definition)
        log_error(logger, operation.value, error, file_path)
        if not isinstance(error, ComplinkError):
            error = ComplinkError(str(error) or type(error).__name__, file_path=file_path)
        return OperationResult.failure(operation, error, file_path)

    # ========== Locking ==========

    @contextmanager
    def _guard(self, definition: HostDefinition) -> Iterator[None]:
        with self._guard_key(_definition_key(definition)):
            yield

    @contextmanager
    def _guard_key(self, key: Hashable) -> Iterator[None]:
        """At most one operation in flight per component.

        Entries are reference counted and dropped once no caller holds or
        waits for them.
        """
        with self._locks_guard:
            entry = self._locks.setdefault(key, _LockEntry())
            entry.holders += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._locks_guard:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._locks[key]


@dataclass
class _LockEntry:
    lock: threading.RLock = field(default_factory=threading.RLock)
    holders: int = 0


def _definition_key(definition: HostDefinition) -> Hashable:
    # The definition object outlives link changes, its identity string does not
    return ("definition", id(definition))
