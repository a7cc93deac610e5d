"""
Module: inspection_report.config

Purpose:
    Configuration dataclass for the report pipeline. Immutable
    configuration with validation on construction.

Key Classes:
    - ReportConfig: Main configuration for building a report

Dependencies:
    - dataclasses (std)
    - pathlib (std)

Used By:
    - inspection_report.controller: Main build controller
    - inspection_report.cli: Command line entry point
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from inspection_report.extraction.config import ExtractionConfig
from inspection_report.layout.config import PaginationConfig


@dataclass(frozen=True)
class ReportConfig:
    """
    Configuration for building a report (immutable).

    Attributes:
        snapshot_path: Path to the JSON snapshot
        output_path: Path of the PDF to write (None skips rendering)
        pagination: Pagination configuration
        extraction: Extraction configuration
        show_footer: Draw header and page footer on pages after the cover

    Example:
        >>> config = ReportConfig(
        ...     snapshot_path=Path("vistoria.json"),
        ...     output_path=Path("out/relatorio.pdf"),
        ... )
    """

    # Required
    snapshot_path: Path

    # Output
    output_path: Optional[Path] = None
    show_footer: bool = True

    # Stages
    pagination: PaginationConfig = field(default_factory=PaginationConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not str(self.snapshot_path):
            raise ValueError("snapshot_path must not be empty")
        if self.output_path is not None and Path(self.output_path).suffix.lower() != ".pdf":
            raise ValueError(f"output_path must be a .pdf file: {self.output_path}")
