"""Freeform per-document path settings (render file, offer file, project folder)."""

from __future__ import annotations

from complink.app.config import NamingConfig
from complink.core.host import HostDocument

SETTING_KEYS = ("render_path", "offer_path", "project_path")


class DocumentSettings:
    """String settings saved with the host document."""

    def __init__(self, document: HostDocument, naming: NamingConfig | None = None):
        self.document = document
        self.naming = naming or NamingConfig()

    def read(self, key: str) -> str:
        value = self.document.get_attribute(self.naming.settings_dict, key, "")
        return "" if value is None else str(value)

    def write(self, key: str, value: str) -> None:
        if key not in SETTING_KEYS:
            raise KeyError(f"Unknown setting: {key}")
        self.document.set_attribute(self.naming.settings_dict, key, str(value))

    def read_all(self) -> dict[str, str]:
        return {key: self.read(key) for key in SETTING_KEYS}
