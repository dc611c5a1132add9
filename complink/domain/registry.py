"""
Link Registry for complink.

Links are stored as one path attribute on each component definition, so the
document carries no central table. Reverse lookups by path go through an
in-memory index that is rebuilt from the definitions whenever it is stale.
"""

from __future__ import annotations

from complink.app.config import NamingConfig
from complink.core.host import HostDefinition, HostDocument
from complink.core.identity import IdentityResolver
from complink.core.models.link import ComponentIdentity, ComponentLink
from complink.utils.logging import get_logger

logger = get_logger("registry")


class LinkRegistry:
    """Identity to file path bindings for one host document.

    Usage:
        registry = LinkRegistry(document, naming)
        registry.set_link(definition, "/work/kaynak/Bracket.skp")
        registry.find_by_path("/work/kaynak/Bracket.skp")
    """

    def __init__(
        self,
        document: HostDocument,
        naming: NamingConfig | None = None,
        resolver: IdentityResolver | None = None,
    ):
        self.document = document
        self.naming = naming or NamingConfig()
        self.resolver = resolver or IdentityResolver()

        self._by_path: dict[str, HostDefinition] = {}
        self._by_identity: dict[ComponentIdentity, HostDefinition] = {}
        self._indexed_count = -1
        self._dirty = True

    # ========== Per-definition attribute ==========

    def path_of(self, definition: HostDefinition) -> str | None:
        """Bound path of ``definition``, None when unlinked."""
        value = definition.get_attribute(self.naming.link_dict, self.naming.link_key)
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    def is_linked(self, definition: HostDefinition) -> bool:
        return self.path_of(definition) is not None

    def is_retired(self, definition: HostDefinition) -> bool:
        """True for a definition a reload replaced."""
        return bool(definition.get_attribute(self.naming.link_dict, self.naming.retired_key, False))

    def identity_of(self, definition: HostDefinition) -> ComponentIdentity | None:
        return self.resolver.resolve(definition, self.path_of(definition))

    # ========== Mutations ==========

    def set_link(self, definition: HostDefinition, file_path: str) -> ComponentLink:
        """Bind ``definition`` to ``file_path``.

        An existing binding is kept as-is; links are never repointed.

        Returns:
            The link now in effect
        """
        current = self.path_of(definition)
        if current is not None:
            if current != file_path:
                logger.warning(
                    f"Keeping existing link for '{definition.name}': "
                    f"{current} (requested {file_path})"
                )
            return ComponentLink(identity=self.identity_of(definition), file_path=current)

        definition.set_attribute(self.naming.link_dict, self.naming.link_key, file_path)
        self.invalidate()
        logger.info(f"Linked '{definition.name}' -> {file_path}")
        return ComponentLink(identity=self.identity_of(definition), file_path=file_path)

    def hand_over(self, old: HostDefinition, new: HostDefinition) -> ComponentLink | None:
        """Move the link of ``old`` onto ``new`` after a reload.

        The file path is unchanged; only the definition carrying it changes.
        ``new`` keeps its own link if it already has one. ``old`` is marked
        retired so the auto-linker leaves it alone.
        """
        file_path = self.path_of(old)
        if file_path is None:
            return None

        if self.path_of(new) is None:
            new.set_attribute(self.naming.link_dict, self.naming.link_key, file_path)
        if old is not new:
            old.set_attribute(self.naming.link_dict, self.naming.link_key, "")
            old.set_attribute(self.naming.link_dict, self.naming.retired_key, True)
        self.invalidate()
        return ComponentLink(identity=self.identity_of(new), file_path=self.path_of(new))

    def invalidate(self) -> None:
        """Mark the reverse index stale."""
        self._dirty = True

    # ========== Lookups ==========

    def get_link(self, identity: ComponentIdentity | None) -> str | None:
        """File path bound to ``identity``."""
        if not identity:
            return None
        definition = self.find_by_identity(identity)
        return self.path_of(definition) if definition is not None else None

    def find_by_identity(self, identity: ComponentIdentity) -> HostDefinition | None:
        return self._lookup(self._by_identity, identity, self.identity_of)

    def find_by_path(self, file_path: str) -> HostDefinition | None:
        """First definition in document order bound to ``file_path``."""
        if not file_path:
            return None
        return self._lookup(self._by_path, file_path, self.path_of)

    def identity_for_path(self, file_path: str) -> ComponentIdentity | None:
        definition = self.find_by_path(file_path)
        if definition is None:
            return None
        return self.identity_of(definition)

    def links(self) -> list[ComponentLink]:
        """All links in document order, duplicates included."""
        result = []
        for definition in self.document.definitions():
            path = self.path_of(definition)
            identity = self.resolver.resolve(definition, path)
            if path is not None and identity is not None:
                result.append(ComponentLink(identity=identity, file_path=path))
        return result

    # ========== Index ==========

    def _lookup(self, index: dict, key: str, key_of) -> HostDefinition | None:
        self._ensure_index()
        definition = index.get(key)
        if definition is not None and key_of(definition) == key:
            return definition

        # Stale hit or miss: the host may have changed under us
        self._rebuild()
        return index.get(key)

    def _ensure_index(self) -> None:
        if self._dirty or self._indexed_count != len(self.document.definitions()):
            self._rebuild()

    def _rebuild(self) -> None:
        by_path: dict[str, HostDefinition] = {}
        by_identity: dict[ComponentIdentity, HostDefinition] = {}
        definitions = list(self.document.definitions())

        for definition in definitions:
            path = self.path_of(definition)
            if path is None:
                continue
            by_path.setdefault(path, definition)
            identity = self.resolver.resolve(definition, path)
            if identity is not None:
                by_identity.setdefault(identity, definition)

        # Mutate in place so callers holding a reference see the rebuilt index
        self._by_path.clear()
        self._by_path.update(by_path)
        self._by_identity.clear()
        self._by_identity.update(by_identity)
        self._indexed_count = len(definitions)
        self._dirty = False
