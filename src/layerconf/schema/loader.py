"""SchemaLoader: builds schema trees from declarative YAML or dict documents.

Document format::

    type: object
    fields:
      db:
        type: object
        fields:
          host: {type: string}
          port: {type: number, default: 5432}
      roles:
        type: array
        items: {type: string}

A leaf with ``default`` is optional; every other leaf is required.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from layerconf.errors import SchemaNotFoundError, SchemaParseError, UnsupportedValueError
from layerconf.schema.types import (
    ArrayOf,
    ExpectedType,
    ObjectSchema,
    OptionalField,
    RequiredField,
    SchemaNode,
)

__all__ = ["SchemaLoader"]

logger = logging.getLogger(__name__)

_LEAF_TYPES: dict[str, ExpectedType] = {
    "bool": ExpectedType.BOOL,
    "boolean": ExpectedType.BOOL,
    "number": ExpectedType.NUMBER,
    "string": ExpectedType.STRING,
    "any": ExpectedType.ANY,
}

_OBJECT_KEYS = {"type", "fields", "description"}
_ARRAY_KEYS = {"type", "items", "description"}
_LEAF_KEYS = {"type", "default", "required", "description"}


class SchemaLoader:
    """Loads schema documents and caches parsed files by resolved path."""

    def __init__(self) -> None:
        self._cache: dict[Path, SchemaNode] = {}

    def load(self, file_path: str | Path) -> SchemaNode:
        """Read a YAML schema file and build its schema tree."""
        path = Path(file_path).resolve()
        if path in self._cache:
            return self._cache[path]
        if not path.is_file():
            raise SchemaNotFoundError(schema_path=str(path))

        try:
            document = yaml.safe_load(path.read_text())
        except yaml.YAMLError as e:
            raise SchemaParseError(message=f"Invalid YAML in {path}: {e}") from e

        if document is None:
            raise SchemaParseError(message=f"Schema file {path} is empty")

        schema = self.parse(document)
        self._cache[path] = schema
        logger.debug("Loaded configuration schema from %s", path)
        return schema

    def parse(self, document: Any) -> SchemaNode:
        """Build a schema tree from an already parsed document."""
        return self._parse_node(document, "")

    def _parse_node(self, document: Any, where: str) -> SchemaNode:
        location = where or "<root>"
        if not isinstance(document, dict):
            raise SchemaParseError(
                message=f"Schema node at {location} must be a mapping, got {type(document).__name__}"
            )
        node_type = document.get("type")
        if not isinstance(node_type, str):
            raise SchemaParseError(message=f"Schema node at {location} needs a string 'type'")

        if node_type == "object":
            self._check_keys(document, _OBJECT_KEYS, location)
            fields = document.get("fields", {})
            if not isinstance(fields, dict):
                raise SchemaParseError(message=f"'fields' at {location} must be a mapping")
            return ObjectSchema(
                {
                    str(name): self._parse_node(child, f"{where}.{name}" if where else str(name))
                    for name, child in fields.items()
                }
            )

        if node_type == "array":
            self._check_keys(document, _ARRAY_KEYS, location)
            if "items" not in document:
                raise SchemaParseError(message=f"Array schema at {location} needs 'items'")
            return ArrayOf(self._parse_node(document["items"], f"{where}[]"))

        expected = _LEAF_TYPES.get(node_type)
        if expected is None:
            raise SchemaParseError(message=f"Unknown schema type '{node_type}' at {location}")
        self._check_keys(document, _LEAF_KEYS, location)

        required = document.get("required", "default" not in document)
        if not isinstance(required, bool):
            raise SchemaParseError(message=f"'required' at {location} must be a boolean")
        if "default" in document:
            if required:
                raise SchemaParseError(message=f"Field at {location} cannot be required and have a default")
            try:
                return OptionalField(expected, document["default"])
            except UnsupportedValueError as e:
                raise SchemaParseError(message=f"Invalid default at {location}: {e.message}", cause=e) from e
        if not required:
            raise SchemaParseError(message=f"Optional field at {location} needs a 'default'")
        return RequiredField(expected)

    @staticmethod
    def _check_keys(document: dict[str, Any], allowed: set[str], location: str) -> None:
        unknown = sorted(str(key) for key in document.keys() - allowed)
        if unknown:
            raise SchemaParseError(message=f"Unknown keys at {location}: {', '.join(unknown)}")
