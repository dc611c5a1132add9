"""
Note Log for complink.

Timestamped free-text notes per component identity, newest first, stored as
one JSON array per identity in a document attribute dictionary.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import ValidationError

from complink.app.config import NamingConfig, NoteConfig
from complink.core.host import HostDocument
from complink.core.models.link import ComponentIdentity
from complink.core.models.note import Note, dump_notes, load_notes
from complink.utils.logging import get_logger

logger = get_logger("notes")


def format_timestamp(moment: datetime, config: NoteConfig | None = None) -> str:
    """Render ``moment`` as e.g. ``2025-09-26 14:05 Cuma``."""
    config = config or NoteConfig()
    day_name = config.weekday_names[moment.weekday()]
    return f"{moment.strftime(config.timestamp_format)} {day_name}"


class NoteLog:
    """Append-ordered notes keyed by component identity.

    Identities that could not be resolved (``None`` or empty) read as an empty
    log and ignore writes.
    """

    def __init__(
        self,
        document: HostDocument,
        naming: NamingConfig | None = None,
        note_config: NoteConfig | None = None,
        clock=datetime.now,
    ):
        self.document = document
        self.naming = naming or NamingConfig()
        self.note_config = note_config or NoteConfig()
        self._clock = clock

    def list(self, identity: ComponentIdentity | None) -> list[Note]:
        """Notes for ``identity``, newest first. Never fails."""
        if not identity:
            return []

        raw = self.document.get_attribute(self.naming.notes_dict, identity)
        if not isinstance(raw, str) or not raw:
            return []

        try:
            return load_notes(raw)
        except ValidationError as e:
            logger.warning(f"Ignoring unreadable notes for {identity}: {e.error_count()} error(s)")
            return []

    def count(self, identity: ComponentIdentity | None) -> int:
        return len(self.list(identity))

    def append(self, identity: ComponentIdentity | None, text: str) -> list[Note]:
        """Insert a note at the head of the log.

        Blank or whitespace-only text leaves the log unchanged.
        """
        notes = self.list(identity)
        stripped = (text or "").strip()
        if not identity or not stripped:
            return notes

        notes.insert(0, Note(text=stripped, created_at=format_timestamp(self._clock(), self.note_config)))
        self._write(identity, notes)
        return notes

    def update(self, identity: ComponentIdentity | None, index: int, text: str) -> list[Note]:
        """Replace the text of the note at ``index``, keeping its timestamp.

        An out-of-range index leaves the log unchanged.
        """
        notes = self.list(identity)
        if not identity or not 0 <= index < len(notes):
            return notes

        notes[index] = notes[index].model_copy(update={"text": str(text)})
        self._write(identity, notes)
        return notes

    def hand_over(
        self,
        old_identity: ComponentIdentity | None,
        new_identity: ComponentIdentity | None,
    ) -> list[Note]:
        """Move the log of a reloaded component to its new identity.

        Nothing moves when the new identity already has notes of its own.
        """
        notes = self.list(old_identity)
        if not new_identity or old_identity == new_identity or not notes:
            return self.list(new_identity)
        if self.list(new_identity):
            logger.info(f"Keeping existing notes of {new_identity}; {old_identity} left in place")
            return self.list(new_identity)

        self._write(new_identity, notes)
        self.document.set_attribute(self.naming.notes_dict, old_identity, "")
        logger.debug(f"Moved {len(notes)} note(s) from {old_identity} to {new_identity}")
        return notes

    def _write(self, identity: ComponentIdentity, notes: list[Note]) -> None:
        self.document.set_attribute(self.naming.notes_dict, identity, dump_notes(notes))
        logger.debug(f"Stored {len(notes)} note(s) for {identity}")
