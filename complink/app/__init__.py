"""complink application layer: configuration."""

from complink.app.config import (
    ExporterConfig,
    NamingConfig,
    NoteConfig,
    get_config,
    reload_config,
    set_config,
)

__all__ = [
    "ExporterConfig",
    "NamingConfig",
    "NoteConfig",
    "get_config",
    "set_config",
    "reload_config",
]
