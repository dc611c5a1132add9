"""
complink Core Models.

Pydantic models for links, notes, catalog entries, and operation results.
"""

from complink.core.models.link import (
    DURABLE_ID_PREFIX,
    CatalogEntry,
    ComponentIdentity,
    ComponentLink,
)
from complink.core.models.note import Note, dump_notes, load_notes
from complink.core.models.result import Operation, OperationResult, ResultStatus

__all__ = [
    "ComponentIdentity",
    "ComponentLink",
    "CatalogEntry",
    "DURABLE_ID_PREFIX",
    "Note",
    "dump_notes",
    "load_notes",
    "Operation",
    "OperationResult",
    "ResultStatus",
]
