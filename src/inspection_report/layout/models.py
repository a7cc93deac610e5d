"""
Module: layout.models

Purpose:
    Data models for report layout.
    Immutable dataclasses for packed items, content pages and the final
    numbered report page list.

Key Classes:
    - PackedItem: Record (or part of a split record) with computed weight
    - PageGroup: Items of one section on one page
    - Page: One content page
    - ContentLayout: Output of the pagination engine
    - PageKind: Kind of a report page
    - GalleryEntry: One photo listed on the gallery page
    - ReportPage: One numbered page of the final report
    - ReportLayout: Final page list handed to rendering

Dependencies:
    - dataclasses (std)
    - core.models: AnswerRecord, SectionDescriptor, ReportMetadata

Used By:
    - layout.paginator: Creates Pages
    - layout.pages: Creates ReportPages
    - output.renderer: Draws ReportPages
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, TYPE_CHECKING

from inspection_report.core.models import (
    AnswerRecord,
    Photo,
    ReportMetadata,
    SectionDescriptor,
    Signature,
)
from inspection_report.core.utils import to_roman

if TYPE_CHECKING:
    from inspection_report.extraction.summary import StatusSummary


@dataclass(frozen=True)
class PackedItem:
    """
    Renderable unit placed by the paginator (immutable).

    An unsplit record becomes one PackedItem. A record with more photos
    than a part may hold becomes several: the first keeps the comment,
    the following ones are continuations with the comment cleared.

    Attributes:
        record: Source record
        weight: Estimated print space
        photos: Photos of this part (a sublist when split)
        comment: Comment printed with this part ("" for continuations)
        roman_ordinal: Item ordinal within its section, None for marker items
        is_continuation: True for every part after the first
        part_number: 1-based part index
        part_count: Number of parts the record was split into
    """
    record: AnswerRecord
    weight: float
    photos: Tuple[Photo, ...]
    comment: str = ""
    roman_ordinal: Optional[int] = None
    is_continuation: bool = False
    part_number: int = 1
    part_count: int = 1

    @property
    def photo_count(self) -> int:
        return len(self.photos)

    @property
    def section_index(self) -> int:
        return self.record.section_index

    @property
    def key(self) -> str:
        """Unique identifier of this part."""
        if self.part_count == 1:
            return self.record.key
        return f"{self.record.key}-part{self.part_number}"

    @property
    def roman_numeral(self) -> str:
        """Roman numeral text ("" for marker items)."""
        return to_roman(self.roman_ordinal) if self.roman_ordinal else ""


@dataclass(frozen=True)
class PageGroup:
    """
    Items of one section placed on one page.

    Attributes:
        section: Section heading (name, ordinal, observation)
        items: Items in placement order
    """
    section: SectionDescriptor
    items: Tuple[PackedItem, ...]

    @property
    def total_weight(self) -> float:
        return sum(item.weight for item in self.items)


@dataclass(frozen=True)
class Page:
    """
    One content page (immutable).

    Attributes:
        index: Content page number (0-indexed)
        groups: Section groups sorted by section index
        observed_sections: Section indices whose observation is printed here

    Example:
        >>> page.item_count
        3
        >>> page.shows_observation(page.groups[0].section.index)
        True
    """
    index: int
    groups: Tuple[PageGroup, ...]
    observed_sections: Tuple[int, ...] = ()

    @property
    def items(self) -> Tuple[PackedItem, ...]:
        return tuple(item for group in self.groups for item in group.items)

    @property
    def item_count(self) -> int:
        return sum(len(group.items) for group in self.groups)

    @property
    def total_weight(self) -> float:
        return sum(group.total_weight for group in self.groups)

    @property
    def photo_count(self) -> int:
        return sum(item.photo_count for item in self.items)

    @property
    def is_empty(self) -> bool:
        return self.item_count == 0

    def shows_observation(self, section_index: int) -> bool:
        return section_index in self.observed_sections


@dataclass(frozen=True)
class ContentLayout:
    """
    Pagination output with diagnostics.

    Attributes:
        pages: Content pages in order
        sections: Numbered sections with content
        warnings: Over-capacity pages and similar notes
        section_page_map: Section index -> content page indices
    """
    pages: Tuple[Page, ...]
    sections: Tuple[SectionDescriptor, ...] = ()
    warnings: list[str] = field(default_factory=list)
    section_page_map: dict[int, list[int]] = field(default_factory=dict)

    @property
    def page_count(self) -> int:
        return len(self.pages)


class PageKind(str, Enum):
    """Kind of a page in the final report."""
    COVER = "cover"
    PROJECT_INFO = "project_info"
    CONTENT = "content"
    PLACEHOLDER = "placeholder"
    GALLERY = "gallery"
    SIGNATURES = "signatures"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class GalleryEntry:
    """Photo listed on the gallery pages with the section it belongs to."""
    url: str
    caption: str
    section_name: str
    record_key: str
    number: int = 0


@dataclass(frozen=True)
class ReportPage:
    """
    One numbered page of the final report.

    Attributes:
        number: 1-based page number
        kind: Page kind
        content: Content page (CONTENT kind only)
        gallery: Photos (GALLERY kind only)
        signatures: Signature entries (SIGNATURES kind only)
        summary: Status tallies (PROJECT_INFO kind only)
    """
    number: int
    kind: PageKind
    content: Optional[Page] = None
    gallery: Tuple[GalleryEntry, ...] = ()
    signatures: Tuple[Signature, ...] = ()
    summary: Optional["StatusSummary"] = None


@dataclass(frozen=True)
class ReportLayout:
    """
    Final report page list (immutable).

    The page count is known before anything is drawn, which is what the
    renderer needs for "page X of N" footers.

    Attributes:
        pages: All pages in print order
        metadata: Report metadata
        sections: Numbered sections with content
        warnings: Pagination warnings
    """
    pages: Tuple[ReportPage, ...]
    metadata: ReportMetadata = field(default_factory=ReportMetadata)
    sections: Tuple[SectionDescriptor, ...] = ()
    warnings: Tuple[str, ...] = ()

    @property
    def total_pages(self) -> int:
        return len(self.pages)

    @property
    def content_pages(self) -> Tuple[Page, ...]:
        return tuple(p.content for p in self.pages if p.content is not None)

    def pages_of_kind(self, kind: PageKind) -> Tuple[ReportPage, ...]:
        return tuple(p for p in self.pages if p.kind is kind)

    def has_page(self, kind: PageKind) -> bool:
        return any(p.kind is kind for p in self.pages)
