"""complink domain services."""

from complink.domain.autolink import AutoLinker
from complink.domain.catalog import CatalogBuilder
from complink.domain.notes import NoteLog, format_timestamp
from complink.domain.registry import LinkRegistry
from complink.domain.settings import SETTING_KEYS, DocumentSettings
from complink.domain.sync_engine import SyncEngine, normalize_extension

__all__ = [
    "AutoLinker",
    "CatalogBuilder",
    "DocumentSettings",
    "LinkRegistry",
    "NoteLog",
    "SETTING_KEYS",
    "SyncEngine",
    "format_timestamp",
    "normalize_extension",
]
