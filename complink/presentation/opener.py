"""Open files, folders and URLs with the operating system."""

from __future__ import annotations

import os
import subprocess
import sys
import webbrowser
from pathlib import Path

from complink.utils.logging import get_logger

logger = get_logger("presentation.opener")


def to_file_uri(path: str) -> str:
    """Build a ``file:`` URI, keeping UNC shares on Windows."""
    if sys.platform.startswith("win"):
        normalized = path.replace("\\", "/")
        if path.startswith("\\\\"):
            return f"file:{normalized}"
        return f"file:///{normalized}"
    return Path(path).absolute().as_uri()


def open_path(path: str) -> bool:
    """Open ``path`` with the default application.

    Returns:
        True if an opener was launched
    """
    target = (path or "").strip()
    if not target:
        return False

    if target.startswith(("http://", "https://")):
        return webbrowser.open(target)

    try:
        if sys.platform.startswith("win"):
            os.startfile(target)  # type: ignore[attr-defined]
            return True
        command = "open" if sys.platform == "darwin" else "xdg-open"
        subprocess.Popen(
            [command, target],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
        return True
    except (FileNotFoundError, OSError) as e:
        logger.debug(f"System opener failed for {target}: {e}")

    return webbrowser.open(to_file_uri(target))
