"""
Module: loading.loader

Purpose:
    Load inspection snapshots from JSON files with structural validation.
    A snapshot bundles everything one report is built from: the form
    schema, the raw answer/photo/observation stores and the report
    metadata.

Key Functions:
    - load_snapshot(): Read and validate a snapshot file

Key Classes:
    - ReportSnapshot: Decoded snapshot
    - SnapshotError: Exception for loading failures

Dependencies:
    - json, pathlib (std)
    - core.schemas.validator: jsonschema validation
    - core.models: FormSchema, ReportMetadata

Used By:
    - controller: Report pipeline
    - cli: Command line entry point
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from inspection_report.core.models import FormSchema, ReportMetadata
from inspection_report.core.schemas import ValidationError, validate_snapshot


logger = logging.getLogger(__name__)


class SnapshotError(Exception):
    """Error reading a snapshot file."""
    pass


@dataclass(frozen=True)
class ReportSnapshot:
    """
    Decoded inspection snapshot (immutable).

    The answer, photo and observation stores are kept raw: they may be
    legacy or string-encoded and are decoded by the extractor.

    Attributes:
        form: Parsed form schema
        answers: Raw answer store
        photos: Raw photo store
        observations: Raw section observation store
        metadata: Report metadata

    Example:
        >>> snapshot = ReportSnapshot.from_dict({"form": {"sections": []}})
        >>> snapshot.form.is_empty
        True
    """
    form: FormSchema
    answers: Any = None
    photos: Any = None
    observations: Any = None
    metadata: ReportMetadata = field(default_factory=ReportMetadata)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, validate: bool = True) -> "ReportSnapshot":
        """
        Build a snapshot from a decoded JSON document.

        Raises:
            ValidationError: If validate is set and the document is invalid
        """
        if validate:
            validate_snapshot(data)
        return cls(
            form=FormSchema.from_dict(data.get("form")),
            answers=data.get("answers"),
            photos=data.get("photos"),
            observations=data.get("observations"),
            metadata=ReportMetadata.from_dict(data.get("metadata")),
        )


def load_snapshot(path: Path) -> ReportSnapshot:
    """
    Load a snapshot file.

    Args:
        path: Path to a JSON snapshot

    Returns:
        ReportSnapshot

    Raises:
        SnapshotError: If the file is missing or is not valid JSON
        ValidationError: If the document skeleton is invalid
    """
    path = Path(path)
    if not path.exists():
        raise SnapshotError(f"Snapshot does not exist: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot is not valid JSON: {path}: {e}") from e
    except OSError as e:
        raise SnapshotError(f"Cannot read snapshot {path}: {e}") from e

    try:
        snapshot = ReportSnapshot.from_dict(data)
    except ValidationError as e:
        logger.error(f"Invalid snapshot {path}: {e} (at {e.path or '<root>'})")
        raise

    logger.info(
        f"Loaded snapshot {path.name}: {len(snapshot.form.sections)} sections, "
        f"{snapshot.form.question_count} questions"
    )
    return snapshot
