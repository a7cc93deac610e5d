"""
Module: layout.weights

Purpose:
    Estimate the printed vertical space of one item in dimensionless
    weight units: one header row, photos two per row at two units per
    row, and long comments wrapping into extra rows.

Key Functions:
    - item_weight(): Weight from photo count and comment length
    - record_weight(): Weight of a whole AnswerRecord
"""

from __future__ import annotations

import math

from inspection_report.core.models import AnswerRecord

HEADER_WEIGHT = 1.0
PHOTOS_PER_ROW = 2
PHOTO_ROW_WEIGHT = 2.0
COMMENT_CHARS_PER_LINE = 100
COMMENT_LINES_PER_ROW = 2


def item_weight(photo_count: int, comment_length: int) -> float:
    """
    Weight of an item with the given photo count and comment length.

    Example:
        >>> item_weight(5, 0)
        7.0
        >>> item_weight(0, 250)
        3.0
    """
    extra_rows = 0
    if comment_length > COMMENT_CHARS_PER_LINE:
        lines = math.ceil(comment_length / COMMENT_CHARS_PER_LINE)
        extra_rows = max(0, math.ceil(lines / COMMENT_LINES_PER_ROW))

    if photo_count <= 0:
        return HEADER_WEIGHT + extra_rows

    photo_rows = math.ceil(photo_count / PHOTOS_PER_ROW)
    return HEADER_WEIGHT + photo_rows * PHOTO_ROW_WEIGHT + extra_rows


def record_weight(record: AnswerRecord) -> float:
    """Weight of an unsplit record."""
    return item_weight(record.photo_count, len(record.comment))
