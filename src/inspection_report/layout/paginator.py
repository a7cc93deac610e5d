"""
Module: layout.paginator

Purpose:
    Arrange answer records onto fixed-capacity content pages.
    Greedy weighted bin-packing with section-aware and content-aware
    exceptions.

Key Functions:
    - paginate(): Main pagination function
    - split_record(): Turn one record into one or more PackedItems

Algorithm:
    For each record, in order:
    1. Section entry: if the record starts a new section and the page is
       not empty, close the page when the section always starts fresh, the
       page already holds enough photos, or the page is already heavy
    2. Split records with too many photos into parts; the first part is
       placed by capacity, every continuation opens a new page
    3. Unsplit items with many photos close the page before placement
    4. Close the page when the item does not fit, unless the item is the
       last light item of its section (orphan avoidance)
    5. Items with many photos close the page right after placement
    6. Flush the trailing page

    Each section's observation is attached to the first page holding any
    of its items. The emitted set lives in the per-call state only.

Dependencies:
    - layout.models: PackedItem, Page, PageGroup, ContentLayout
    - layout.config: PaginationConfig
    - layout.weights: item_weight
    - layout.numbering: SectionNumbering

Used By:
    - controller: Report pipeline
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Set, Tuple

from inspection_report.core.models import AnswerRecord

from .config import PaginationConfig
from .models import ContentLayout, PackedItem, Page, PageGroup
from .numbering import SectionNumbering, build_numbering
from .weights import item_weight, record_weight

logger = logging.getLogger(__name__)


def split_record(
    record: AnswerRecord,
    roman_ordinal: Optional[int],
    max_photos_per_part: int,
) -> Tuple[PackedItem, ...]:
    """
    Build the PackedItems for one record.

    Records with at most max_photos_per_part photos yield a single item.
    Larger photo sets are cut into ordered chunks; only the first chunk
    keeps the comment.

    Args:
        record: Source record
        roman_ordinal: Item ordinal (None for marker items)
        max_photos_per_part: Photo limit per part

    Returns:
        Tuple of parts whose photo lists partition record.photos

    Example:
        >>> parts = split_record(record_with_5_photos, 1, 4)
        >>> [p.weight for p in parts]
        [5.0, 3.0]
    """
    if record.photo_count <= max_photos_per_part:
        return (PackedItem(
            record=record,
            weight=record_weight(record),
            photos=record.photos,
            comment=record.comment,
            roman_ordinal=roman_ordinal,
        ),)

    chunks = [
        record.photos[i:i + max_photos_per_part]
        for i in range(0, record.photo_count, max_photos_per_part)
    ]
    parts = []
    for number, chunk in enumerate(chunks, start=1):
        comment = record.comment if number == 1 else ""
        parts.append(PackedItem(
            record=record,
            weight=item_weight(len(chunk), len(comment)),
            photos=chunk,
            comment=comment,
            roman_ordinal=roman_ordinal,
            is_continuation=number > 1,
            part_number=number,
            part_count=len(chunks),
        ))
    return tuple(parts)


class _PaginationState:
    """
    Mutable state of a single pagination run.

    Holds the open page buffer, its running weight and photo count, the
    finished pages and the set of sections whose observation has already
    been emitted. Never outlives the paginate() call that created it.
    """

    def __init__(self, numbering: SectionNumbering, config: PaginationConfig):
        self.numbering = numbering
        self.config = config
        self.buffer: List[PackedItem] = []
        self.weight = 0.0
        self.photo_count = 0
        self.emitted: Set[int] = set()
        self.pages: List[Page] = []
        self.warnings: List[str] = []
        self.section_page_map: Dict[int, List[int]] = {}

    @property
    def is_empty(self) -> bool:
        return not self.buffer

    @property
    def last_section(self) -> Optional[int]:
        return self.buffer[-1].section_index if self.buffer else None

    def place(self, item: PackedItem) -> None:
        self.buffer.append(item)
        self.weight += item.weight
        self.photo_count += item.photo_count

    def close(self, reason: str) -> None:
        """Flush the buffer as a finished page (no-op when empty)."""
        if not self.buffer:
            return

        page_index = len(self.pages)
        grouped: Dict[int, List[PackedItem]] = {}
        for item in self.buffer:
            grouped.setdefault(item.section_index, []).append(item)

        groups = []
        observed = []
        for section_index in sorted(grouped):
            section = self.numbering.descriptor(section_index)
            groups.append(PageGroup(section=section, items=tuple(grouped[section_index])))
            if section.has_observation and section_index not in self.emitted:
                observed.append(section_index)
                self.emitted.add(section_index)
            _track_section(self.section_page_map, section_index, page_index)

        if len(self.buffer) > 1 and self.weight > self._page_capacity():
            self.warnings.append(
                f"Page {page_index} holds {self.weight:g} units over capacity "
                f"{self._page_capacity():g} to keep a short item with its section"
            )
        elif len(self.buffer) == 1 and self.weight > self._page_capacity():
            self.warnings.append(
                f"Item {self.buffer[0].key} overflows page {page_index}: "
                f"{self.weight:g} units, capacity {self._page_capacity():g}"
            )

        logger.debug(
            f"Closing page {page_index} ({reason}): {len(self.buffer)} items, "
            f"weight {self.weight:g}, {self.photo_count} photos"
        )
        self.pages.append(Page(
            index=page_index,
            groups=tuple(groups),
            observed_sections=tuple(observed),
        ))
        self.buffer = []
        self.weight = 0.0
        self.photo_count = 0

    def _page_capacity(self) -> float:
        """Capacity of the buffered page, taken from its last item's section."""
        rank = self.numbering.rank(self.buffer[-1].section_index)
        return self.config.capacity_for(rank)


def paginate(
    records: Sequence[AnswerRecord],
    numbering: Optional[SectionNumbering] = None,
    config: Optional[PaginationConfig] = None,
) -> ContentLayout:
    """
    Arrange records onto content pages.

    Args:
        records: Extracted records in schema order
        numbering: Section/item numbering (built from records when omitted)
        config: Pagination configuration

    Returns:
        ContentLayout with pages in order; empty when there are no records

    Example:
        >>> layout = paginate(records)
        >>> layout.page_count
        3
    """
    config = config or PaginationConfig()
    if numbering is None:
        numbering = build_numbering(records, marker=config.ordinal_marker)

    if not records:
        return ContentLayout(pages=(), sections=numbering.sections)

    state = _PaginationState(numbering, config)
    remaining = _remaining_in_section(records)

    for i, record in enumerate(records):
        rank = numbering.rank(record.section_index)
        _enter_section(state, record, rank, config)

        parts = split_record(record, numbering.ordinal_for(record), config.max_photos_per_part)
        if len(parts) > 1:
            _place_split(state, parts, rank, config)
        else:
            is_orphan = (
                remaining[i] == 1
                and parts[0].weight < config.orphan_weight_limit
            )
            _place_single(state, parts[0], rank, config, is_orphan)

    state.close("end of content")

    logger.info(f"Paginated {len(records)} records onto {len(state.pages)} content pages")

    return ContentLayout(
        pages=tuple(state.pages),
        sections=numbering.sections,
        warnings=state.warnings,
        section_page_map=state.section_page_map,
    )


def _enter_section(
    state: _PaginationState,
    record: AnswerRecord,
    rank: int,
    config: PaginationConfig,
) -> None:
    """Forced break when a record opens a new section on a non-empty page."""
    if state.is_empty or state.last_section == record.section_index:
        return

    if config.starts_fresh(rank):
        state.close(f"section rank {rank} starts fresh")
    elif state.photo_count >= config.photo_threshold_for(rank):
        state.close(f"{state.photo_count} photos before section rank {rank}")
    elif state.weight >= config.section_entry_weight:
        state.close(f"weight {state.weight:g} before section rank {rank}")


def _place_single(
    state: _PaginationState,
    item: PackedItem,
    rank: int,
    config: PaginationConfig,
    is_orphan: bool,
) -> None:
    threshold = config.photo_threshold_for(rank)
    isolate = item.photo_count >= threshold

    if isolate and not state.is_empty:
        state.close(f"isolating item {item.key} with {item.photo_count} photos")

    capacity = config.capacity_for(rank)
    if state.weight + item.weight > capacity and not state.is_empty:
        if is_orphan:
            logger.debug(f"Keeping last item {item.key} of its section on an over-capacity page")
        else:
            state.close(f"capacity {capacity:g} reached")

    state.place(item)

    if isolate:
        state.close(f"item {item.key} has {item.photo_count} photos")


def _place_split(
    state: _PaginationState,
    parts: Tuple[PackedItem, ...],
    rank: int,
    config: PaginationConfig,
) -> None:
    threshold = config.photo_threshold_for(rank)
    capacity = config.capacity_for(rank)

    first = parts[0]
    if state.weight + first.weight > capacity and not state.is_empty:
        state.close(f"capacity {capacity:g} reached")
    state.place(first)

    for part in parts[1:]:
        state.close(f"continuation of {first.record.key}")
        state.place(part)

    if parts[-1].photo_count >= threshold:
        state.close(f"item {parts[-1].key} has {parts[-1].photo_count} photos")


def _remaining_in_section(records: Sequence[AnswerRecord]) -> List[int]:
    """For each position, how many records from there on share its section."""
    remaining = [0] * len(records)
    seen: Dict[int, int] = {}
    for i in range(len(records) - 1, -1, -1):
        section_index = records[i].section_index
        seen[section_index] = seen.get(section_index, 0) + 1
        remaining[i] = seen[section_index]
    return remaining


def _track_section(
    section_page_map: Dict[int, List[int]],
    section_index: int,
    page_index: int,
) -> None:
    """Track which pages a section appears on."""
    if section_index not in section_page_map:
        section_page_map[section_index] = []
    if page_index not in section_page_map[section_index]:
        section_page_map[section_index].append(page_index)
