"""
Module: inspection_report.loading

Purpose:
    Snapshot loading from JSON files.

Key Functions:
    - load_snapshot(): Read and validate a snapshot file

Dependencies:
    - inspection_report.core.schemas.validator: Schema validation

Used By:
    - inspection_report.controller: Report pipeline
"""

from .loader import ReportSnapshot, SnapshotError, load_snapshot

__all__ = [
    "ReportSnapshot",
    "SnapshotError",
    "load_snapshot",
]
