"""
complink Configuration.

Central configuration for the binding engine: naming conventions, note
timestamp rendering, and logging.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Literal


# ============================================================================
# Default Paths
# ============================================================================


def get_default_data_dir() -> Path:
    """Get the default data directory for complink."""
    if env_path := os.environ.get("COMPLINK_DATA_DIR"):
        return Path(env_path)

    return Path.home() / ".complink"


def get_default_config_path() -> Path:
    return get_default_data_dir() / "complink_config.json"


def _known_fields(cls, data: dict[str, Any]) -> dict[str, Any]:
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}


# ============================================================================
# Configuration Classes
# ============================================================================


@dataclass
class NamingConfig:
    """Attribute dictionary names, folder names and the auto-link convention."""

    link_dict: str = "SaveOut"
    link_key: str = "file_path"
    # Set on a definition a reload replaced; auto-link never binds it again
    retired_key: str = "retired"
    notes_dict: str = "SCE_NOTES"
    settings_dict: str = "SCE_CONFIG"
    source_folder: str = "kaynak"
    backup_folder: str = "yedek"
    autolink_prefix: str = "TSN"
    extension: str = ".skp"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NamingConfig":
        return cls(**_known_fields(cls, data))

    def to_dict(self) -> dict[str, Any]:
        return {
            "link_dict": self.link_dict,
            "link_key": self.link_key,
            "retired_key": self.retired_key,
            "notes_dict": self.notes_dict,
            "settings_dict": self.settings_dict,
            "source_folder": self.source_folder,
            "backup_folder": self.backup_folder,
            "autolink_prefix": self.autolink_prefix,
            "extension": self.extension,
        }


@dataclass
class NoteConfig:
    """Rendering of note and catalog timestamps."""

    timestamp_format: str = "%Y-%m-%d %H:%M"
    # Monday first, matching datetime.weekday()
    weekday_names: list[str] = field(
        default_factory=lambda: [
            "Pazartesi",
            "Salı",
            "Çarşamba",
            "Perşembe",
            "Cuma",
            "Cumartesi",
            "Pazar",
        ]
    )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NoteConfig":
        config = cls(**_known_fields(cls, data))
        if len(config.weekday_names) != 7:
            raise ValueError(
                f"weekday_names needs 7 entries, got {len(config.weekday_names)}"
            )
        return config

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp_format": self.timestamp_format,
            "weekday_names": list(self.weekday_names),
        }


@dataclass
class ExporterConfig:
    """Main configuration for complink.

    Aggregates the sub-configurations and provides load/save functionality.
    """

    data_dir: Path = field(default_factory=get_default_data_dir)

    naming: NamingConfig = field(default_factory=NamingConfig)
    notes: NoteConfig = field(default_factory=NoteConfig)

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_to_file: bool = False

    def __post_init__(self):
        if isinstance(self.data_dir, str):
            self.data_dir = Path(self.data_dir)
        if env_level := os.environ.get("COMPLINK_LOG_LEVEL"):
            self.log_level = env_level.upper()

    @property
    def log_dir(self) -> Path:
        return self.data_dir / "logs"

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> "ExporterConfig":
        """Load configuration from a JSON file.

        Args:
            config_path: Path to config file. If None, uses default location.

        Returns:
            ExporterConfig instance (defaults when the file does not exist)
        """
        if config_path is None:
            config_path = get_default_config_path()

        config_path = Path(config_path)

        if not config_path.exists():
            return cls()

        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExporterConfig":
        """Create config from dictionary."""
        return cls(
            data_dir=Path(data.get("data_dir", get_default_data_dir())),
            naming=NamingConfig.from_dict(data.get("naming", {})),
            notes=NoteConfig.from_dict(data.get("notes", {})),
            log_level=data.get("log_level", "INFO"),
            log_to_file=data.get("log_to_file", False),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "data_dir": str(self.data_dir),
            "naming": self.naming.to_dict(),
            "notes": self.notes.to_dict(),
            "log_level": self.log_level,
            "log_to_file": self.log_to_file,
        }

    def save(self, config_path: str | Path | None = None) -> Path:
        """Save configuration to a JSON file.

        Args:
            config_path: Path to save to. If None, uses default location.

        Returns:
            Path to saved file
        """
        if config_path is None:
            config_path = self.data_dir / "complink_config.json"

        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

        return config_path


# ============================================================================
# Global Config Instance
# ============================================================================


_global_config: ExporterConfig | None = None


def get_config() -> ExporterConfig:
    """Get the global configuration instance."""
    global _global_config
    if _global_config is None:
        _global_config = ExporterConfig.load()
    return _global_config


def set_config(config: ExporterConfig) -> None:
    """Set the global configuration instance."""
    global _global_config
    _global_config = config


def reload_config(config_path: str | Path | None = None) -> ExporterConfig:
    """Reload configuration from disk.

    Args:
        config_path: Optional path to load from

    Returns:
        Newly loaded configuration
    """
    global _global_config
    _global_config = ExporterConfig.load(config_path)
    return _global_config
