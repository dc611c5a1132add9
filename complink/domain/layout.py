"""
Document-relative folder layout.

The source folder sits next to the document file and is where exported
component files land by default.
"""

from __future__ import annotations

from pathlib import Path

from complink.app.config import NamingConfig
from complink.core.errors import DirectoryCreateFailedError
from complink.core.host import HostDocument
from complink.utils.logging import get_logger, log_error

logger = get_logger("layout")


def document_dir(document: HostDocument) -> Path | None:
    """Directory of the document file, None for an unsaved document."""
    path = (document.path or "").strip()
    if not path:
        return None
    return Path(path).parent


def source_dir(document: HostDocument, naming: NamingConfig) -> Path | None:
    base = document_dir(document)
    if base is None:
        return None
    return base / naming.source_folder


def ensure_source_dir(document: HostDocument, naming: NamingConfig) -> Path | None:
    """Create the source folder if missing.

    Returns:
        The folder, or None when the document is unsaved or creation failed
    """
    folder = source_dir(document, naming)
    if folder is None:
        return None

    try:
        folder.mkdir(exist_ok=True)
    except OSError as e:
        error = DirectoryCreateFailedError(f"Could not create source folder {folder}: {e}")
        log_error(logger, "ensure_source_dir", error, file_path=folder)
        return None

    return folder
