"""
Module: layout.numbering

Purpose:
    Section and item numbering.
    Sections with at least one record get dense ordinals 1..N in schema
    order; empty sections leave no gap. Items within a section get
    increasing Roman numeral ordinals, except marker items, which get
    none and do not advance the counter.

Key Functions:
    - build_numbering(): Number sections and items in one pass

Key Classes:
    - SectionNumbering: Lookup of section descriptors and item ordinals

Dependencies:
    - core.models: AnswerRecord, SectionDescriptor

Used By:
    - controller: Report pipeline
    - layout.paginator: Section ranks and item ordinals
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Sequence, Tuple

from inspection_report.core.models import AnswerRecord, SectionDescriptor

from .config import DEFAULT_ORDINAL_MARKER


@dataclass(frozen=True)
class SectionNumbering:
    """
    Section descriptors and item ordinals for one report (immutable).

    The ordinal of a section is also its positional rank, which is what
    the per-rank pagination overrides are keyed by.

    Attributes:
        sections: Descriptors in ordinal order
        item_ordinals: Record key -> Roman ordinal (None for marker items)
    """
    sections: Tuple[SectionDescriptor, ...] = ()
    item_ordinals: Dict[str, Optional[int]] = field(default_factory=dict)

    def descriptor(self, section_index: int) -> SectionDescriptor:
        """
        Descriptor of a section with content.

        Raises:
            KeyError: If the section has no records
        """
        for section in self.sections:
            if section.index == section_index:
                return section
        raise KeyError(f"Section {section_index} has no numbered content")

    def rank(self, section_index: int) -> int:
        return self.descriptor(section_index).ordinal

    def ordinal_for(self, record: AnswerRecord) -> Optional[int]:
        return self.item_ordinals.get(record.key)


def number_sections(
    records: Sequence[AnswerRecord],
    observations: Optional[Mapping[int, str]] = None,
) -> Tuple[SectionDescriptor, ...]:
    """
    Assign dense ordinals to sections that hold records.

    Args:
        records: Extracted records
        observations: Section index -> observation text

    Returns:
        Descriptors sorted by section index, ordinals 1..N
    """
    observations = observations or {}
    names: Dict[int, str] = {}
    for record in records:
        names.setdefault(record.section_index, record.section_name)

    return tuple(
        SectionDescriptor(
            index=index,
            name=names[index],
            ordinal=ordinal,
            observation=observations.get(index),
        )
        for ordinal, index in enumerate(sorted(names), start=1)
    )


def assign_item_ordinals(
    records: Sequence[AnswerRecord],
    marker: str = DEFAULT_ORDINAL_MARKER,
) -> Dict[str, Optional[int]]:
    """
    Assign per-section Roman ordinals in record order.

    Example:
        >>> ordinals = assign_item_ordinals([a, marker_item, b])
        >>> [ordinals[r.key] for r in (a, marker_item, b)]
        [1, None, 2]
    """
    counters: Dict[int, int] = {}
    ordinals: Dict[str, Optional[int]] = {}
    for record in records:
        if marker and marker in record.question_text:
            ordinals[record.key] = None
            continue
        counters[record.section_index] = counters.get(record.section_index, 0) + 1
        ordinals[record.key] = counters[record.section_index]
    return ordinals


def build_numbering(
    records: Sequence[AnswerRecord],
    observations: Optional[Mapping[int, str]] = None,
    marker: str = DEFAULT_ORDINAL_MARKER,
) -> SectionNumbering:
    """Number sections and items for one report."""
    return SectionNumbering(
        sections=number_sections(records, observations),
        item_ordinals=assign_item_ordinals(records, marker),
    )
