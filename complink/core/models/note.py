"""
Note Model for complink.

Notes are stored as a JSON array per component identity. The timestamp is a
human-readable string and is never parsed back.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class Note(BaseModel):
    """A timestamped free-text annotation."""

    text: str
    created_at: str = Field(default="", alias="at")

    model_config = ConfigDict(populate_by_name=True)


NoteList = TypeAdapter(list[Note])


def dump_notes(notes: list[Note]) -> str:
    """Serialize notes to the stored JSON array (``{"text", "at"}`` objects)."""
    return NoteList.dump_json(notes, by_alias=True).decode("utf-8")


def load_notes(raw: str) -> list[Note]:
    """Parse a stored JSON array. Raises ``pydantic.ValidationError`` on bad input."""
    return NoteList.validate_json(raw)
