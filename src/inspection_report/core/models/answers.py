"""
Module: answers

Purpose:
    Provides the AnswerRecord dataclass - the canonical shape of one answered
    inspection question after extraction. Every encoding variant found in the
    answer store is normalized into this single immutable record.

Key Classes:
    - StatusColor: Fixed six-color status taxonomy
    - QuestionKind: Question type tag from the form schema
    - Photo: One photo reference with caption
    - AnswerRecord: Normalized answer for a single question
    - SectionDescriptor: Numbered section heading with optional observation

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - extraction.extractor: Builds AnswerRecords
    - layout.numbering: Builds SectionDescriptors
    - layout.paginator: Wraps records into PackedItems
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class StatusColor(str, Enum):
    """Color tag attached to a categorical answer."""
    GREEN = "green"
    RED = "red"
    YELLOW = "yellow"
    BLUE = "blue"
    PURPLE = "purple"
    GRAY = "gray"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: object) -> "StatusColor":
        """Parse a stored color tag, falling back to GRAY for unknown tags."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.GRAY


class QuestionKind(str, Enum):
    """Type of form question."""
    TEXT = "text"
    TEXTAREA = "textarea"
    SELECT = "select"
    CHECKBOX = "checkbox"
    DATE = "date"
    SIGNATURE = "signature"
    PHOTO = "photo"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: object) -> "QuestionKind":
        """Parse a stored kind tag; unknown kinds are treated as free text."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.TEXT


@dataclass(frozen=True)
class Photo:
    """
    Photo reference attached to an answer.

    The URL is an opaque value: it may be a remote address, a local path
    or an embedded data payload. Resolving it belongs to the renderer.

    Attributes:
        url: Photo location
        caption: Caption text (may be empty)
    """
    url: str
    caption: str = ""


@dataclass(frozen=True)
class AnswerRecord:
    """
    Normalized answer for one question (immutable).

    A record only exists when the question carries a response, a comment,
    at least one photo or a signature. Fully empty questions are omitted
    by the extractor.

    Attributes:
        section_index: Position of the section in the form schema
        question_index: Position of the question within its section
        section_name: Section heading
        question_text: Question label
        kind: Question type
        display_text: Printable response ("" when there is none)
        color: Status color tag
        comment: Free-text comment ("" when there is none)
        photos: Ordered photos
        signature_image: Embedded signature payload, if any

    Example:
        >>> record = AnswerRecord(0, 2, "Pisos", "Rodapé", QuestionKind.SELECT,
        ...                       "Conforme", StatusColor.GREEN)
        >>> record.key
        '0-2'
    """
    section_index: int
    question_index: int
    section_name: str
    question_text: str
    kind: QuestionKind
    display_text: str = ""
    color: StatusColor = StatusColor.GRAY
    comment: str = ""
    photos: Tuple[Photo, ...] = ()
    signature_image: Optional[str] = None

    @property
    def key(self) -> str:
        """Stable identifier built from the schema position."""
        return f"{self.section_index}-{self.question_index}"

    @property
    def photo_count(self) -> int:
        return len(self.photos)

    @property
    def has_response(self) -> bool:
        return bool(self.display_text) and self.display_text != "-"

    @property
    def has_comment(self) -> bool:
        text = self.comment.strip()
        return bool(text) and text != "-"

    @property
    def has_content(self) -> bool:
        """True when the record carries anything worth printing."""
        return (
            self.has_response
            or self.has_comment
            or bool(self.photos)
            or bool(self.signature_image)
        )


@dataclass(frozen=True)
class SectionDescriptor:
    """
    Section heading as printed in the report.

    Attributes:
        index: Position of the section in the form schema
        name: Section heading
        ordinal: Dense display number (1..N over sections with content)
        observation: Section note printed once, on the first page of the section
    """
    index: int
    name: str
    ordinal: int
    observation: Optional[str] = None

    @property
    def has_observation(self) -> bool:
        return bool(self.observation and self.observation.strip())
