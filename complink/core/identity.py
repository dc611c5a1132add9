"""
Identity resolution for component definitions.
"""

from __future__ import annotations

from complink.core.host import HostDefinition
from complink.core.models.link import DURABLE_ID_PREFIX, ComponentIdentity


class IdentityResolver:
    """Derives a stable key for a component definition.

    A durable host id is preferred because it survives renames and file moves.
    Without one, the bound file path is the key; notes and links keyed that way
    fracture when the file moves, and keys are never migrated.
    """

    def resolve(
        self,
        definition: HostDefinition,
        bound_path: str | None,
    ) -> ComponentIdentity | None:
        """Resolve the identity of ``definition``.

        Args:
            definition: Host definition
            bound_path: File path currently bound to the definition, if any

        Returns:
            The identity, or None when the component must be treated as unlinked
        """
        durable_id = getattr(definition, "persistent_id", None)
        if durable_id not in (None, ""):
            return f"{DURABLE_ID_PREFIX}{durable_id}"

        if bound_path and str(bound_path).strip():
            return str(bound_path)

        return None
