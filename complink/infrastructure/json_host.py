"""
JSON reference host for complink.

A host document stored as a single JSON file. Component definitions carry an
opaque text ``content`` standing in for geometry, and ``save_as`` writes a
small JSON component file. Attributes are saved inside the document file
itself, so links, notes and settings travel with the document.

Usage:
    document = JsonDocument.open("/work/project.skp")
    bracket = document.add_definition("Bracket", content="v1")
    document.add_instance(bracket, IDENTITY_TRANSFORM, "Layer0")
    document.save()
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from complink.utils.logging import get_logger

logger = get_logger("host.json")

DOCUMENT_FORMAT = "complink.document"
COMPONENT_FORMAT = "complink.component"

IDENTITY_TRANSFORM: list[float] = [
    1.0, 0.0, 0.0, 0.0,
    0.0, 1.0, 0.0, 0.0,
    0.0, 0.0, 1.0, 0.0,
    0.0, 0.0, 0.0, 1.0,
]

AttributeDicts = dict[str, dict[str, Any]]


# ============================================================================
# Stored Records
# ============================================================================


class DefinitionRecord(BaseModel):
    key: str = Field(default_factory=lambda: uuid.uuid4().hex)
    name: str
    persistent_id: str | None = None
    content: str = ""
    attributes: AttributeDicts = Field(default_factory=dict)


class InstanceRecord(BaseModel):
    key: str = Field(default_factory=lambda: uuid.uuid4().hex)
    definition_key: str
    transformation: list[float] = Field(default_factory=lambda: list(IDENTITY_TRANSFORM))
    layer: str | None = "Layer0"


class DocumentRecord(BaseModel):
    format: str = DOCUMENT_FORMAT
    version: int = 1
    durable_ids: bool = True
    next_persistent_id: int = 1
    attributes: AttributeDicts = Field(default_factory=dict)
    definitions: list[DefinitionRecord] = Field(default_factory=list)
    instances: list[InstanceRecord] = Field(default_factory=list)


class ComponentFile(BaseModel):
    """On-disk format written by ``JsonDefinition.save_as``."""

    format: str = COMPONENT_FORMAT
    version: int = 1
    name: str
    content: str = ""


def _get(attributes: AttributeDicts, dictionary: str, key: str, default: Any) -> Any:
    return attributes.get(dictionary, {}).get(key, default)


def _set(attributes: AttributeDicts, dictionary: str, key: str, value: Any) -> None:
    attributes.setdefault(dictionary, {})[key] = value


# ============================================================================
# Host Objects
# ============================================================================


class JsonDefinition:
    """Component definition backed by a DefinitionRecord."""

    def __init__(self, record: DefinitionRecord):
        self.record = record

    def __repr__(self) -> str:
        return f"JsonDefinition(name={self.record.name!r}, persistent_id={self.record.persistent_id!r})"

    @property
    def name(self) -> str:
        return self.record.name

    @name.setter
    def name(self, value: str) -> None:
        self.record.name = value

    @property
    def persistent_id(self) -> str | None:
        return self.record.persistent_id

    @property
    def content(self) -> str:
        return self.record.content

    @content.setter
    def content(self, value: str) -> None:
        self.record.content = value

    def get_attribute(self, dictionary: str, key: str, default: Any = None) -> Any:
        return _get(self.record.attributes, dictionary, key, default)

    def set_attribute(self, dictionary: str, key: str, value: Any) -> None:
        _set(self.record.attributes, dictionary, key, value)

    def save_as(self, file_path: str) -> bool:
        payload = ComponentFile(name=self.record.name, content=self.record.content)
        Path(file_path).write_text(payload.model_dump_json(indent=2), encoding="utf-8")
        return True


class JsonInstance:
    """Placed instance backed by an InstanceRecord."""

    def __init__(self, record: InstanceRecord, definition: JsonDefinition):
        self.record = record
        self._definition = definition

    @property
    def definition(self) -> JsonDefinition:
        return self._definition

    @property
    def transformation(self) -> list[float]:
        return list(self.record.transformation)

    @property
    def layer(self) -> str | None:
        return self.record.layer


class JsonDocument:
    """Host document stored as one JSON file."""

    def __init__(self, record: DocumentRecord | None = None, path: str | Path | None = None):
        self.record = record or DocumentRecord()
        self._path = str(Path(path).resolve()) if path else ""
        self._definitions = [JsonDefinition(r) for r in self.record.definitions]
        by_key = {d.record.key: d for d in self._definitions}
        self._instances = [
            JsonInstance(r, by_key[r.definition_key])
            for r in self.record.instances
            if r.definition_key in by_key
        ]

    # ========== Persistence ==========

    @classmethod
    def open(cls, path: str | Path) -> "JsonDocument":
        """Load a document, or start an empty one bound to ``path``."""
        path = Path(path)
        if not path.exists():
            return cls(path=path)

        record = DocumentRecord.model_validate_json(path.read_text(encoding="utf-8"))
        if record.format != DOCUMENT_FORMAT:
            raise ValueError(f"Not a complink document: {path}")
        return cls(record, path)

    def save(self, path: str | Path | None = None) -> Path:
        if path is not None:
            self._path = str(Path(path).resolve())
        if not self._path:
            raise ValueError("Document has no storage path")

        target = Path(self._path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.record.model_dump_json(indent=2), encoding="utf-8")
        logger.debug(f"Saved document {target}")
        return target

    @property
    def path(self) -> str:
        return self._path

    # ========== Attributes ==========

    def get_attribute(self, dictionary: str, key: str, default: Any = None) -> Any:
        return _get(self.record.attributes, dictionary, key, default)

    def set_attribute(self, dictionary: str, key: str, value: Any) -> None:
        _set(self.record.attributes, dictionary, key, value)

    # ========== Definitions & Instances ==========

    def definitions(self) -> Sequence[JsonDefinition]:
        return list(self._definitions)

    def instances(self) -> Sequence[JsonInstance]:
        return list(self._instances)

    def definition_named(self, name: str) -> JsonDefinition | None:
        return next((d for d in self._definitions if d.name == name), None)

    def add_definition(self, name: str, content: str = "") -> JsonDefinition:
        persistent_id = None
        if self.record.durable_ids:
            persistent_id = str(self.record.next_persistent_id)
            self.record.next_persistent_id += 1

        record = DefinitionRecord(
            name=self._unique_name(name),
            persistent_id=persistent_id,
            content=content,
        )
        self.record.definitions.append(record)
        definition = JsonDefinition(record)
        self._definitions.append(definition)
        return definition

    def add_instance(
        self,
        definition: JsonDefinition,
        transformation: Any = None,
        layer: str | None = "Layer0",
    ) -> JsonInstance:
        record = InstanceRecord(
            definition_key=definition.record.key,
            transformation=list(transformation) if transformation is not None else list(IDENTITY_TRANSFORM),
            layer=layer,
        )
        self.record.instances.append(record)
        instance = JsonInstance(record, definition)
        self._instances.append(instance)
        return instance

    def erase_instance(self, instance: JsonInstance) -> None:
        self._instances = [i for i in self._instances if i is not instance]
        self.record.instances = [r for r in self.record.instances if r.key != instance.record.key]

    def load_definition(self, file_path: str) -> JsonDefinition | None:
        """Create a new definition from a component file.

        Returns None when the file is not a readable component file.
        """
        raw = Path(file_path).read_text(encoding="utf-8")
        try:
            component = ComponentFile.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Invalid component file {file_path}: {e.error_count()} error(s)")
            return None
        if component.format != COMPONENT_FORMAT:
            logger.warning(f"Unexpected component format in {file_path}: {component.format}")
            return None

        return self.add_definition(component.name, component.content)

    def _unique_name(self, name: str) -> str:
        taken = {d.name for d in self._definitions}
        if name not in taken:
            return name
        n = 1
        while f"{name}#{n}" in taken:
            n += 1
        return f"{name}#{n}"


def read_component_file(file_path: str | Path) -> ComponentFile:
    """Parse a component file written by ``JsonDefinition.save_as``."""
    try:
        return ComponentFile.model_validate_json(Path(file_path).read_text(encoding="utf-8"))
    except ValidationError as e:
        raise ValueError(f"Invalid component file {file_path}: {e}") from e
