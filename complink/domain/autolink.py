"""
Naming-convention auto-linker.

Files in the source folder named ``<prefix>*<extension>`` (``TSN*.skp`` by
default) are bound to the unlinked definition whose name equals the file
stem. Existing links are never touched, and definitions retired by a reload
are never bound again.
"""

from __future__ import annotations

from pathlib import Path

from complink.core.host import HostDocument
from complink.core.models.link import ComponentLink
from complink.domain.layout import ensure_source_dir
from complink.domain.registry import LinkRegistry
from complink.utils.logging import get_logger, log_operation

logger = get_logger("autolink")


class AutoLinker:
    """Binds convention-named files to same-named unlinked definitions."""

    def __init__(self, document: HostDocument, registry: LinkRegistry):
        self.document = document
        self.registry = registry
        self.naming = registry.naming

    def candidate_files(self) -> list[str]:
        """Convention-matching files in the source folder, sorted by name."""
        folder = ensure_source_dir(self.document, self.naming)
        if folder is None:
            return []

        pattern = f"{self.naming.autolink_prefix}*{self.naming.extension}"
        return sorted(str(p) for p in folder.glob(pattern) if p.is_file())

    def run(self) -> list[ComponentLink]:
        """Bind every matching file to its unlinked namesake.

        Returns:
            The links created by this call
        """
        files = self.candidate_files()
        if not files:
            return []

        created: list[ComponentLink] = []
        definitions = list(self.document.definitions())
        ext_len = len(self.naming.extension)

        for file_path in files:
            stem = Path(file_path).name[:-ext_len]
            definition = next((d for d in definitions if str(d.name) == stem), None)
            if definition is None or self.registry.is_linked(definition):
                continue
            if self.registry.is_retired(definition):
                logger.debug(f"Skipping retired definition '{definition.name}' for {file_path}")
                continue

            created.append(self.registry.set_link(definition, file_path))

        if created:
            log_operation(logger, "Auto-linked components", count=len(created))
        return created
