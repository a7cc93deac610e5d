"""
Module: extraction.summary

Purpose:
    Status tallies printed on the project information page: overall
    counts per status category and per-section counts of conforming,
    non-conforming and pending answers.

Key Functions:
    - summarize_statuses(): Build a StatusSummary from records

Key Classes:
    - SectionTally: Per-section counts
    - StatusSummary: Report-wide counts

Dependencies:
    - extraction.status: Status categories

Used By:
    - controller: Attached to the report layout
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from inspection_report.core.models import AnswerRecord, FormSchema, QuestionKind

from .status import StatusCategory, lookup_status

# Categories counted per section
_SECTION_CATEGORIES = (
    StatusCategory.CONFORMING,
    StatusCategory.NON_CONFORMING,
    StatusCategory.PENDING,
)


@dataclass(frozen=True)
class SectionTally:
    """Counts of categorized select answers in one section."""
    section_name: str
    conforming: int = 0
    non_conforming: int = 0
    pending: int = 0

    @property
    def total(self) -> int:
        return self.conforming + self.non_conforming + self.pending


@dataclass(frozen=True)
class StatusSummary:
    """
    Report-wide status counts (immutable).

    Attributes:
        counts: Category -> number of select answers in that category
        sections: Per-section tallies in schema order
        answered_items: Records with a response other than "not applicable"
    """
    counts: Dict[StatusCategory, int] = field(default_factory=dict)
    sections: Tuple[SectionTally, ...] = ()
    answered_items: int = 0

    def count(self, category: StatusCategory) -> int:
        return self.counts.get(category, 0)


def summarize_statuses(form: FormSchema, records: Iterable[AnswerRecord]) -> StatusSummary:
    """
    Tally select answers by status category.

    Only select questions are categorized; unknown status texts are not
    counted. Every defined schema section gets a tally, even when empty.

    Args:
        form: Form schema (for section order)
        records: Extracted records

    Returns:
        StatusSummary
    """
    counts: Dict[StatusCategory, int] = {c: 0 for c in StatusCategory}
    per_section: Dict[int, Dict[StatusCategory, int]] = {
        idx: {c: 0 for c in _SECTION_CATEGORIES} for idx in range(len(form.sections))
    }
    answered = 0

    for record in records:
        if record.has_response and record.display_text != StatusCategory.NOT_APPLICABLE.value:
            answered += 1
        if record.kind is not QuestionKind.SELECT or not record.has_response:
            continue
        category = lookup_status(record.display_text).category
        if category is None:
            continue
        counts[category] += 1
        section_counts = per_section.get(record.section_index)
        if section_counts is not None and category in section_counts:
            section_counts[category] += 1

    tallies: List[SectionTally] = []
    for idx, section in enumerate(form.sections):
        if not section.present:
            continue
        section_counts = per_section[idx]
        tallies.append(SectionTally(
            section_name=section.name,
            conforming=section_counts[StatusCategory.CONFORMING],
            non_conforming=section_counts[StatusCategory.NON_CONFORMING],
            pending=section_counts[StatusCategory.PENDING],
        ))

    return StatusSummary(counts=counts, sections=tuple(tallies), answered_items=answered)
