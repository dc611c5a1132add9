"""
Link and Catalog Models for complink.

A ComponentLink binds a component identity to an external file path. A
CatalogEntry is the presentation-ready view of one link and is rebuilt on
every catalog request.
"""

from __future__ import annotations

from typing import TypeAlias

from pydantic import BaseModel, ConfigDict, Field, field_validator

# "def:<persistent id>" when the host exposes a durable id, else the bound path
ComponentIdentity: TypeAlias = str

DURABLE_ID_PREFIX = "def:"


class ComponentLink(BaseModel):
    """Persistent binding from a component identity to a file path."""

    identity: ComponentIdentity = Field(description="Stable component key")
    file_path: str = Field(description="Absolute path of the external file")

    model_config = ConfigDict(frozen=True)

    @field_validator("file_path")
    @classmethod
    def validate_file_path(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("file_path cannot be blank")
        return value

    @property
    def is_durable(self) -> bool:
        """True when the identity survives moving the file."""
        return self.identity.startswith(DURABLE_ID_PREFIX)


class CatalogEntry(BaseModel):
    """One row of the component catalog."""

    display_name: str
    file_path: str
    last_modified: str = ""
    backup_exists: bool = False
    note_count: int = 0

    def to_panel_dict(self) -> dict[str, object]:
        """Shape consumed by the catalog panel."""
        return {
            "name": self.display_name,
            "file_path": self.file_path,
            "updated_at": self.last_modified,
            "backup_exists": self.backup_exists,
            "note_count": self.note_count,
        }
