"""
Schema Validation Utilities

Validates snapshot documents against the JSON schema shipped next to this
module.

Only the document skeleton is validated here (the form must be a list of
sections, metadata must be an object). The answer, photo and observation
blobs are deliberately loose: they may be legacy or double-encoded strings
and are decoded leniently by the extractor.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


SNAPSHOT_SCHEMA_VERSION = 1


_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when a snapshot document fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_snapshot(data: Any) -> None:
    """
    Validate a snapshot document.

    Args:
        data: Decoded JSON document

    Raises:
        ValidationError: If the document skeleton is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError(
            f"Snapshot must be a JSON object, got {type(data).__name__}",
            path="",
        )

    version = data.get("schema_version", SNAPSHOT_SCHEMA_VERSION)
    if version != SNAPSHOT_SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported snapshot schema version: {version} (expected {SNAPSHOT_SCHEMA_VERSION})",
            path="schema_version",
        )

    schema = _load_schema("snapshot")
    validator = jsonschema.Draft7Validator(schema)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path))
    if errors:
        first = errors[0]
        raise ValidationError(
            f"Schema validation failed: {first.message}",
            path=".".join(str(p) for p in first.absolute_path),
            errors=[e.message for e in errors],
        )
