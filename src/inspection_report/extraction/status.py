"""
Module: extraction.status

Purpose:
    Typed lookup table mapping free-text status values to the six-color
    taxonomy and to the summary categories. Evaluated once per record
    during extraction; layout never looks at status text again.

Key Functions:
    - lookup_status(): Resolve a status text to its StatusEntry

Key Classes:
    - StatusCategory: Summary bucket for a status
    - StatusEntry: Color plus optional summary category

Dependencies:
    - core.models: StatusColor

Used By:
    - extraction.extractor: Record colors
    - extraction.summary: Status counts
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from inspection_report.core.models import StatusColor


class StatusCategory(str, Enum):
    """Summary bucket counted on the project page."""
    CONFORMING = "Conforme"
    NON_CONFORMING = "Não Conforme"
    PENDING = "Pendente"
    NOT_APPLICABLE = "Não Aplicável"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class StatusEntry:
    """Resolved status: display color and (optional) summary category."""
    color: StatusColor
    category: Optional[StatusCategory] = None


_CONFORMING = StatusEntry(StatusColor.GREEN, StatusCategory.CONFORMING)
_NON_CONFORMING = StatusEntry(StatusColor.RED, StatusCategory.NON_CONFORMING)
_PENDING = StatusEntry(StatusColor.YELLOW, StatusCategory.PENDING)
_IN_PROGRESS = StatusEntry(StatusColor.BLUE)
_INFORMATIVE = StatusEntry(StatusColor.PURPLE)
_NOT_APPLICABLE = StatusEntry(StatusColor.GRAY, StatusCategory.NOT_APPLICABLE)

UNKNOWN_STATUS = StatusEntry(StatusColor.GRAY)

# Keys are lower-case and trimmed.
STATUS_VOCABULARY: Mapping[str, StatusEntry] = {
    "conforme": _CONFORMING,
    "finalizado": _CONFORMING,
    "concluído": _CONFORMING,
    "liberado para ocupação": _CONFORMING,
    "não conforme": _NON_CONFORMING,
    "nao conforme": _NON_CONFORMING,
    "não liberado para ocupação": _NON_CONFORMING,
    "nao liberado para ocupação": _NON_CONFORMING,
    "pendente": _PENDING,
    "em andamento": _IN_PROGRESS,
    "andamento": _IN_PROGRESS,
    "informativo": _INFORMATIVE,
    "assinado": _INFORMATIVE,
    "não aplicável": _NOT_APPLICABLE,
    "nao aplicavel": _NOT_APPLICABLE,
    "não se aplica": _NOT_APPLICABLE,
    "nao se aplica": _NOT_APPLICABLE,
}


def lookup_status(text: object) -> StatusEntry:
    """
    Resolve status text case-insensitively.

    Args:
        text: Status text as stored

    Returns:
        Matching StatusEntry, or a gray entry without category when the
        text is not in the vocabulary

    Example:
        >>> lookup_status("  NÃO CONFORME ").color
        <StatusColor.RED: 'red'>
    """
    if text is None:
        return UNKNOWN_STATUS
    return STATUS_VOCABULARY.get(str(text).strip().lower(), UNKNOWN_STATUS)
