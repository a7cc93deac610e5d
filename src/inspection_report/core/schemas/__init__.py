"""
Schemas Package

JSON schema definitions and validation utilities.
"""

from .validator import (
    validate_snapshot,
    ValidationError,
    SNAPSHOT_SCHEMA_VERSION,
)

__all__ = [
    "validate_snapshot",
    "ValidationError",
    "SNAPSHOT_SCHEMA_VERSION",
]
