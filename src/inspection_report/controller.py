"""
Module: inspection_report.controller

Purpose:
    Orchestrate the complete report pipeline.
    Load → Extract → Summarize → Number → Paginate → Insert fixed pages → Render

Key Functions:
    - build_layout(): Snapshot to final page list (no I/O)
    - build_report(): Main entry point, file to PDF

Key Classes:
    - BuildResult: Complete build result
    - ReportError: Exception for build failures

Dependencies:
    - inspection_report.loading: Snapshot loading
    - inspection_report.extraction: Answer extraction and status summary
    - inspection_report.layout: Numbering, pagination and fixed pages
    - inspection_report.output: PDF rendering

Used By:
    - inspection_report.cli: Command line entry point
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import ReportConfig
from .core.schemas import ValidationError
from .extraction import ExtractionConfig, extract_answers, summarize_statuses
from .layout import (
    PaginationConfig,
    ReportLayout,
    build_numbering,
    insert_fixed_pages,
    paginate,
)
from .loading import ReportSnapshot, SnapshotError, load_snapshot
from .output import render_to_pdf

logger = logging.getLogger(__name__)


class ReportError(Exception):
    """Error during the report pipeline."""
    pass


@dataclass(frozen=True)
class BuildResult:
    """
    Complete build result (immutable).

    Attributes:
        layout: Final page list
        pdf_path: Path to the rendered PDF (None when rendering was skipped)
        page_count: Number of pages in the report
        record_count: Number of extracted records
        warnings: Pagination warnings

    Example:
        >>> result = build_report(config)
        >>> print(f"Generated {result.page_count} pages")
    """
    layout: ReportLayout
    pdf_path: Optional[Path]
    page_count: int
    record_count: int
    warnings: tuple[str, ...]


def build_layout(
    snapshot: ReportSnapshot,
    pagination: Optional[PaginationConfig] = None,
    extraction: Optional[ExtractionConfig] = None,
) -> ReportLayout:
    """
    Compute the full page list of one report.

    Pure computation: every call builds its own pagination state, so
    layouts for different snapshots can be computed concurrently.

    Args:
        snapshot: Decoded snapshot
        pagination: Pagination configuration
        extraction: Extraction configuration

    Returns:
        ReportLayout with every page numbered

    Example:
        >>> layout = build_layout(ReportSnapshot.from_dict(data))
        >>> layout.total_pages
        7
    """
    pagination = pagination or PaginationConfig()

    extracted = extract_answers(
        snapshot.form,
        snapshot.answers,
        snapshot.photos,
        snapshot.observations,
        config=extraction,
    )
    summary = summarize_statuses(snapshot.form, extracted.records)
    numbering = build_numbering(
        extracted.records,
        extracted.observations,
        marker=pagination.ordinal_marker,
    )
    content = paginate(extracted.records, numbering, pagination)

    return insert_fixed_pages(
        content,
        extracted.records,
        metadata=snapshot.metadata,
        summary=summary,
    )


def build_report(config: ReportConfig) -> BuildResult:
    """
    Build a report from start to finish.

    Pipeline:
    1. Load and validate the snapshot
    2. Extract records and compute the layout
    3. (Optional) Render the PDF

    Args:
        config: Report configuration

    Returns:
        BuildResult with the layout and output path

    Raises:
        ReportError: If loading or rendering fails
    """
    start_time = time.perf_counter()
    logger.info(f"Starting report build from {config.snapshot_path}")

    # 1. Load snapshot
    try:
        snapshot = load_snapshot(Path(config.snapshot_path))
    except (SnapshotError, ValidationError) as e:
        raise ReportError(f"Failed to load snapshot: {e}") from e

    # 2. Layout
    layout = build_layout(snapshot, config.pagination, config.extraction)
    for warning in layout.warnings:
        logger.warning(warning)
    logger.info(
        f"Laid out {layout.total_pages} pages "
        f"({len(layout.content_pages)} content pages)"
    )

    # 3. Render
    pdf_path = None
    if config.output_path is not None:
        pdf_path = Path(config.output_path)
        try:
            render_to_pdf(layout, pdf_path, show_footer=config.show_footer)
        except OSError as e:
            raise ReportError(f"Failed to write PDF {pdf_path}: {e}") from e

    elapsed = time.perf_counter() - start_time
    logger.info(f"Report build completed in {elapsed:.2f}s")

    record_count = len({
        item.record.key for page in layout.content_pages for item in page.items
    })
    return BuildResult(
        layout=layout,
        pdf_path=pdf_path,
        page_count=layout.total_pages,
        record_count=record_count,
        warnings=layout.warnings,
    )
