"""
Panel session for complink.

Owns the lifecycle of the single catalog panel and the single note dialog a
user can have open, and translates their action callbacks into engine calls.
Rendering is delegated to a callback so any front end (HTML dialog, TUI, CLI)
can display the payloads.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from complink.app.state import ExporterState
from complink.core.errors import NotFoundError
from complink.core.models.result import OperationResult
from complink.presentation.opener import open_path
from complink.utils.logging import get_logger

logger = get_logger("presentation.session")

# (view, payload) where view is "panel", "notes" or "message"
Renderer = Callable[[str, dict[str, Any]], None]


def parse_payload(payload: Any) -> dict[str, Any]:
    """Accept a JSON string or a dict; anything unreadable becomes ``{}``."""
    if payload is None:
        return {}
    if isinstance(payload, dict):
        return payload
    if isinstance(payload, str):
        try:
            data = json.loads(payload)
        except json.JSONDecodeError:
            logger.debug(f"Ignoring unreadable payload: {payload[:80]!r}")
            return {}
        return data if isinstance(data, dict) else {}
    return {}


@dataclass
class NotesView:
    file_path: str
    name: str


class PanelSession:
    """One catalog panel and one note dialog per session.

    Usage:
        session = PanelSession(state, renderer=push_to_dialog)
        session.open_panel()
        session.handle_panel("update_from_panel", '{"file_path": "..."}')
    """

    def __init__(
        self,
        state: ExporterState,
        renderer: Renderer,
        opener: Callable[[str], bool] = open_path,
    ):
        self.state = state
        self.renderer = renderer
        self.opener = opener
        self.panel_open = False
        self.notes_view: NotesView | None = None

        self._panel_actions: dict[str, Callable[[dict[str, Any]], None]] = {
            "request_data": lambda _: self.refresh_panel(),
            "update_from_panel": self._on_update,
            "reload_from_panel": self._on_reload,
            "restore_backup": self._on_restore,
            "open_from_panel": self._on_open_file,
            "open_notes": self._on_open_notes,
            "open_render_target": lambda _: self._open_setting("render_path", "Render file"),
            "open_offer_target": lambda _: self._open_setting("offer_path", "Offer file"),
            "open_project_folder": lambda _: self._open_setting("project_path", "Project folder"),
        }
        self._notes_actions: dict[str, Callable[[dict[str, Any]], None]] = {
            "request_notes_data": lambda _: self.refresh_notes(),
            "add_note": self._on_add_note,
            "update_note": self._on_update_note,
        }

    # ========== Lifecycle ==========

    def open_panel(self) -> bool:
        """Open the catalog panel; an unsaved document has no source folder yet."""
        if not self.state.document.path:
            self._message(
                "Save the document first. The source folder is created next to it.",
                error_code=NotFoundError.code,
            )
            return False
        if not self.panel_open:
            self.panel_open = True
            logger.debug("Catalog panel opened")
        self.refresh_panel()
        return True

    def close_panel(self) -> None:
        self.panel_open = False

    def open_notes(self, file_path: str, name: str = "") -> bool:
        """Show the note dialog for a file, replacing any dialog already open."""
        file_path = (file_path or "").strip()
        if not file_path:
            return False
        self.notes_view = NotesView(file_path=file_path, name=(name or "").strip() or "Notes")
        self.refresh_notes()
        return True

    def close_notes(self) -> None:
        self.notes_view = None

    # ========== Payloads ==========

    def panel_payload(self) -> dict[str, Any]:
        return {
            "components": [e.to_panel_dict() for e in self.state.catalog.build()],
            "settings": self.state.settings.read_all(),
        }

    def notes_payload(self) -> dict[str, Any]:
        if self.notes_view is None:
            return {"file_path": None, "name": "", "notes": []}
        notes = self.state.notes_for_path(self.notes_view.file_path)
        return {
            "file_path": self.notes_view.file_path,
            "name": self.notes_view.name,
            "notes": [n.model_dump(by_alias=True) for n in notes],
        }

    def refresh_panel(self) -> None:
        if self.panel_open:
            self.renderer("panel", self.panel_payload())

    def refresh_notes(self) -> None:
        if self.notes_view is not None:
            self.renderer("notes", self.notes_payload())

    # ========== Dispatch ==========

    def handle_panel(self, action: str, payload: Any = None) -> None:
        handler = self._panel_actions.get(action)
        if handler is None:
            logger.warning(f"Unknown panel action: {action}")
            return
        handler(parse_payload(payload))

    def handle_notes(self, action: str, payload: Any = None) -> None:
        handler = self._notes_actions.get(action)
        if handler is None:
            logger.warning(f"Unknown notes action: {action}")
            return
        handler(parse_payload(payload))

    # ========== Panel Actions ==========

    def _on_update(self, data: dict[str, Any]) -> None:
        if data.get("file_path"):
            self._report(self.state.engine.update_by_path(str(data["file_path"])))

    def _on_reload(self, data: dict[str, Any]) -> None:
        if data.get("file_path"):
            self._report(self.state.engine.reload_by_path(str(data["file_path"])))

    def _on_restore(self, data: dict[str, Any]) -> None:
        if data.get("file_path"):
            self._report(self.state.engine.restore_by_path(str(data["file_path"])))

    def _on_open_file(self, data: dict[str, Any]) -> None:
        file_path = str(data.get("file_path") or "").strip()
        if not file_path:
            self._message("No file path is set.")
            return
        self.opener(file_path)

    def _on_open_notes(self, data: dict[str, Any]) -> None:
        self.open_notes(str(data.get("file_path") or ""), str(data.get("name") or ""))

    def _open_setting(self, key: str, label: str) -> None:
        target = self.state.settings.read(key).strip()
        if not target:
            self._message(f"{label} not selected.")
            return
        self.opener(target)

    # ========== Note Actions ==========

    def _on_add_note(self, data: dict[str, Any]) -> None:
        if self.notes_view is None:
            return
        identity = self.state.identity_for_path(self.notes_view.file_path)
        self.state.notes.append(identity, str(data.get("text") or ""))
        self.refresh_notes()
        self.refresh_panel()

    def _on_update_note(self, data: dict[str, Any]) -> None:
        if self.notes_view is None:
            return
        try:
            index = int(data.get("index", -1))
        except (TypeError, ValueError):
            index = -1
        identity = self.state.identity_for_path(self.notes_view.file_path)
        self.state.notes.update(identity, index, str(data.get("text") or ""))
        self.refresh_notes()
        self.refresh_panel()

    # ========== Helpers ==========

    def _report(self, result: OperationResult) -> None:
        self.renderer("message", result.model_dump(mode="json"))
        if result.ok:
            self.refresh_panel()

    def _message(self, text: str, error_code: str | None = None) -> None:
        self.renderer("message", {"message": text, "error_code": error_code})
