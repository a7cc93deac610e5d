"""
Module: extraction

Purpose:
    Decode raw stored answers, photos and observations (including legacy
    and double-encoded payloads) into canonical AnswerRecords.

Key Functions:
    - extract_answers(): Main entry point
    - summarize_statuses(): Status tallies for the project page
    - lookup_status(): Status text -> color/category

Key Classes:
    - ExtractionConfig: Extraction settings
    - ExtractionResult: Records plus observations
    - StatusSummary: Status tallies

Dependencies:
    - json, datetime (std): Payload decoding
    - inspection_report.core.models

Used By:
    - inspection_report.controller
"""

from .config import ExtractionConfig
from .extractor import ExtractionResult, extract_answers
from .status import StatusCategory, StatusEntry, lookup_status
from .summary import SectionTally, StatusSummary, summarize_statuses

__all__ = [
    "ExtractionConfig",
    "ExtractionResult",
    "extract_answers",
    "StatusCategory",
    "StatusEntry",
    "lookup_status",
    "SectionTally",
    "StatusSummary",
    "summarize_statuses",
]
