"""
Module: layout.pages

Purpose:
    Wrap content pages with the structurally fixed report pages and number
    the result 1..N.

    Order: cover, project information, content pages (or one placeholder
    when there are none), gallery (only when any record has a photo),
    signatures (only when any signature entry exists). Long gallery and
    signature lists continue on as many pages as they need. Fixed pages always
    stand alone and are never merged with content.

Key Functions:
    - insert_fixed_pages(): Build the final ReportLayout
    - collect_gallery(): List every photo with its section

Dependencies:
    - layout.models: ReportPage, ReportLayout, GalleryEntry

Used By:
    - controller: Report pipeline
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple, TypeVar, TYPE_CHECKING

from inspection_report.core.models import AnswerRecord, ReportMetadata

from .models import ContentLayout, GalleryEntry, PageKind, ReportLayout, ReportPage

if TYPE_CHECKING:
    from inspection_report.extraction.summary import StatusSummary

logger = logging.getLogger(__name__)

# Entries one page holds; longer lists continue on further pages.
GALLERY_ENTRIES_PER_PAGE = 50
SIGNATURES_PER_PAGE = 6

T = TypeVar("T")


def _chunked(entries: Sequence[T], size: int) -> List[Tuple[T, ...]]:
    return [tuple(entries[i:i + size]) for i in range(0, len(entries), size)]


def collect_gallery(records: Sequence[AnswerRecord]) -> Tuple[GalleryEntry, ...]:
    """Every photo of every record, in record order."""
    photos = [(record, photo) for record in records for photo in record.photos]
    return tuple(
        GalleryEntry(
            url=photo.url,
            caption=photo.caption,
            section_name=record.section_name,
            record_key=record.key,
            number=number,
        )
        for number, (record, photo) in enumerate(photos, start=1)
    )


def insert_fixed_pages(
    content: ContentLayout,
    records: Sequence[AnswerRecord],
    metadata: Optional[ReportMetadata] = None,
    summary: Optional["StatusSummary"] = None,
) -> ReportLayout:
    """
    Build the final numbered page list.

    Args:
        content: Output of the pagination engine
        records: Records that were paginated (source of gallery photos)
        metadata: Report metadata (signatures decide the signatures page)
        summary: Status tallies shown on the project information page

    Returns:
        ReportLayout with pages numbered from 1

    Example:
        >>> layout = insert_fixed_pages(paginate([]), [])
        >>> [str(p.kind) for p in layout.pages]
        ['cover', 'project_info', 'placeholder']
    """
    metadata = metadata or ReportMetadata()

    pages: List[ReportPage] = []
    number = 0

    def add(kind: PageKind, **payload) -> None:
        nonlocal number
        number += 1
        pages.append(ReportPage(number=number, kind=kind, **payload))

    add(PageKind.COVER)
    add(PageKind.PROJECT_INFO, summary=summary)

    if content.pages:
        for page in content.pages:
            add(PageKind.CONTENT, content=page)
    else:
        logger.info("No content to paginate, inserting placeholder page")
        add(PageKind.PLACEHOLDER)

    gallery = collect_gallery(records)
    for chunk in _chunked(gallery, GALLERY_ENTRIES_PER_PAGE):
        add(PageKind.GALLERY, gallery=chunk)

    for chunk in _chunked(metadata.signatures, SIGNATURES_PER_PAGE):
        add(PageKind.SIGNATURES, signatures=chunk)

    logger.info(
        f"Report has {number} pages "
        f"({content.page_count} content, {len(gallery)} gallery photos, "
        f"{len(metadata.signatures)} signatures)"
    )

    return ReportLayout(
        pages=tuple(pages),
        metadata=metadata,
        sections=content.sections,
        warnings=tuple(content.warnings),
    )
