"""Host implementations for complink."""

from complink.infrastructure.json_host import (
    IDENTITY_TRANSFORM,
    JsonDefinition,
    JsonDocument,
    JsonInstance,
    read_component_file,
)

__all__ = [
    "IDENTITY_TRANSFORM",
    "JsonDefinition",
    "JsonDocument",
    "JsonInstance",
    "read_component_file",
]
