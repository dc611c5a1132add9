"""
Host protocols for complink.

The binding engine never talks to a 3D application directly. It needs a
document that stores string attributes, enumerates component definitions
and placed instances, and can save and load definitions to and from files.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


# ============================================================================
# Protocols
# ============================================================================


@runtime_checkable
class HostDefinition(Protocol):
    """A component definition inside the host document."""

    @property
    def name(self) -> str: ...

    @property
    def persistent_id(self) -> str | None:
        """Durable id that survives saves and renames, or None."""
        ...

    def get_attribute(self, dictionary: str, key: str, default: Any = None) -> Any: ...

    def set_attribute(self, dictionary: str, key: str, value: Any) -> None: ...

    def save_as(self, file_path: str) -> bool:
        """Write the definition's current content to ``file_path``."""
        ...


@runtime_checkable
class HostInstance(Protocol):
    """A placed instance of a definition."""

    @property
    def definition(self) -> HostDefinition: ...

    @property
    def transformation(self) -> Any: ...

    @property
    def layer(self) -> str | None: ...


@runtime_checkable
class HostDocument(Protocol):
    """The document that owns definitions, instances and attributes."""

    @property
    def path(self) -> str:
        """Storage path of the document, empty if never saved."""
        ...

    def get_attribute(self, dictionary: str, key: str, default: Any = None) -> Any: ...

    def set_attribute(self, dictionary: str, key: str, value: Any) -> None: ...

    def definitions(self) -> Sequence[HostDefinition]: ...

    def instances(self) -> Sequence[HostInstance]: ...

    def load_definition(self, file_path: str) -> HostDefinition | None:
        """Materialize a definition from a file, None when it cannot."""
        ...

    def add_instance(
        self,
        definition: HostDefinition,
        transformation: Any,
        layer: str | None,
    ) -> HostInstance: ...

    def erase_instance(self, instance: HostInstance) -> None: ...


class SavePrompt(Protocol):
    """Save-location prompt supplied by the presentation layer."""

    def __call__(self, title: str, default_dir: str, default_name: str) -> str | None: ...
