"""
Module: extraction.config

Purpose:
    Configuration for answer extraction.

Key Classes:
    - ExtractionConfig: Immutable extraction settings

Dependencies:
    - dataclasses (std)

Used By:
    - extraction.extractor: Value formatting and payload decoding
"""

from __future__ import annotations

from dataclasses import dataclass


DEFAULT_DATE_FORMAT = "%d/%m/%Y"
DEFAULT_SIGNED_LABEL = "Assinado"
DEFAULT_MAX_DECODE_DEPTH = 8


@dataclass(frozen=True)
class ExtractionConfig:
    """
    Configuration for answer extraction (immutable).

    Attributes:
        date_format: strftime pattern for dates shown in the report
        signed_label: Display text for answered signature questions
        max_decode_depth: How many layers of string-encoded JSON are unwrapped
                          before a payload is considered malformed

    Example:
        >>> config = ExtractionConfig(date_format="%Y-%m-%d")
        >>> config.signed_label
        'Assinado'
    """

    date_format: str = DEFAULT_DATE_FORMAT
    signed_label: str = DEFAULT_SIGNED_LABEL
    max_decode_depth: int = DEFAULT_MAX_DECODE_DEPTH

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not self.date_format:
            raise ValueError("date_format must not be empty")
        if self.max_decode_depth < 1:
            raise ValueError(f"max_decode_depth must be positive: {self.max_decode_depth}")
