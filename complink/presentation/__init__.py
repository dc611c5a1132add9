"""Presentation glue: panel session and system opener."""

from complink.presentation.opener import open_path, to_file_uri
from complink.presentation.session import PanelSession, parse_payload

__all__ = ["PanelSession", "parse_payload", "open_path", "to_file_uri"]
