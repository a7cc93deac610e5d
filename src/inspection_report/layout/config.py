"""
Module: layout.config

Purpose:
    Configuration for the pagination engine.
    Defines page capacity (in weight units), the per-rank overrides,
    photo-count thresholds and the orphan-avoidance limit.

Key Classes:
    - PaginationConfig: Immutable pagination configuration

Dependencies:
    - dataclasses (std)

Used By:
    - layout.paginator: Break decisions
    - layout.numbering: Ordinal marker
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet


DEFAULT_PAGE_CAPACITY = 6.0

# Keyed by positional rank among sections with content (1-based),
# not by a stable section identifier.
DEFAULT_CAPACITY_OVERRIDES: Dict[int, float] = {
    3: 15.0,
    4: 8.0,
    5: 7.0,
    6: 10.0,
    7: 10.0,
    8: 10.0,
    9: 12.0,
    10: 8.0,
    11: 10.0,
    13: 10.0,
    16: 25.0,
}

DEFAULT_FRESH_START_RANKS: FrozenSet[int] = frozenset({3})

DEFAULT_PHOTO_THRESHOLD = 3
DEFAULT_PHOTO_THRESHOLD_OVERRIDES: Dict[int, int] = {4: 2}

DEFAULT_SECTION_ENTRY_WEIGHT = 6.0
DEFAULT_MAX_PHOTOS_PER_PART = 4
DEFAULT_ORPHAN_WEIGHT_LIMIT = 2.0

# Items whose question text contains this marker get no Roman numeral.
DEFAULT_ORDINAL_MARKER = "Acabamento / Especificação"


@dataclass(frozen=True)
class PaginationConfig:
    """
    Configuration for pagination (immutable).

    Attributes:
        page_capacity: Default weight capacity of a content page
        capacity_overrides: Section rank -> capacity
        fresh_start_ranks: Ranks whose first item always opens a new page
        photo_threshold: Photo count that isolates an item / closes a page
                         on section entry
        photo_threshold_overrides: Section rank -> photo threshold
        section_entry_weight: Accumulated weight that closes the page when
                              a new section begins
        max_photos_per_part: Items with more photos are split into parts
        orphan_weight_limit: A last-of-section item lighter than this is
                             never pushed alone onto a new page
        ordinal_marker: Question-text marker that suppresses Roman numerals

    Example:
        >>> config = PaginationConfig()
        >>> config.capacity_for(3)
        15.0
        >>> config.capacity_for(2)
        6.0
    """

    page_capacity: float = DEFAULT_PAGE_CAPACITY
    capacity_overrides: Dict[int, float] = field(
        default_factory=lambda: dict(DEFAULT_CAPACITY_OVERRIDES)
    )
    fresh_start_ranks: FrozenSet[int] = DEFAULT_FRESH_START_RANKS
    photo_threshold: int = DEFAULT_PHOTO_THRESHOLD
    photo_threshold_overrides: Dict[int, int] = field(
        default_factory=lambda: dict(DEFAULT_PHOTO_THRESHOLD_OVERRIDES)
    )
    section_entry_weight: float = DEFAULT_SECTION_ENTRY_WEIGHT
    max_photos_per_part: int = DEFAULT_MAX_PHOTOS_PER_PART
    orphan_weight_limit: float = DEFAULT_ORPHAN_WEIGHT_LIMIT
    ordinal_marker: str = DEFAULT_ORDINAL_MARKER

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.page_capacity <= 0:
            raise ValueError(f"page_capacity must be positive: {self.page_capacity}")
        for rank, capacity in self.capacity_overrides.items():
            if rank < 1:
                raise ValueError(f"capacity override rank must be >= 1: {rank}")
            if capacity <= 0:
                raise ValueError(f"capacity for rank {rank} must be positive: {capacity}")
        if self.photo_threshold < 1:
            raise ValueError(f"photo_threshold must be >= 1: {self.photo_threshold}")
        for rank, threshold in self.photo_threshold_overrides.items():
            if threshold < 1:
                raise ValueError(f"photo threshold for rank {rank} must be >= 1: {threshold}")
        if self.max_photos_per_part < 1:
            raise ValueError(f"max_photos_per_part must be >= 1: {self.max_photos_per_part}")
        if self.section_entry_weight <= 0:
            raise ValueError(f"section_entry_weight must be positive: {self.section_entry_weight}")

    def capacity_for(self, rank: int) -> float:
        """Weight capacity of a page for an item of the section at rank."""
        return self.capacity_overrides.get(rank, self.page_capacity)

    def photo_threshold_for(self, rank: int) -> int:
        """Photo threshold for the section at rank."""
        return self.photo_threshold_overrides.get(rank, self.photo_threshold)

    def starts_fresh(self, rank: int) -> bool:
        """Whether the section at rank always begins on a new page."""
        return rank in self.fresh_start_ranks
