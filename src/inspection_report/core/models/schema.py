"""
Module: schema

Purpose:
    Form schema models: ordered sections holding ordered questions, each
    question with a kind tag and, for choice kinds, an ordered option list.
    Parsed from the stored form document, which exists in an English and a
    legacy Portuguese key layout.

Key Classes:
    - ChoiceOption: One selectable option with optional color tag
    - QuestionSchema: One question definition
    - SectionSchema: One named group of questions
    - FormSchema: Complete form definition

Dependencies:
    - dataclasses (std)
    - .answers: QuestionKind, StatusColor

Used By:
    - loading.loader: Snapshot parsing
    - extraction.extractor: Schema-ordered extraction
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from .answers import QuestionKind, StatusColor


def _first(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the value of the first key present in data."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass(frozen=True)
class ChoiceOption:
    """
    Selectable option of a select/checkbox question.

    Attributes:
        text: Option label
        color: Color tag, or None for legacy bare-string options
               (resolved later through the status vocabulary)
    """
    text: str
    color: Optional[StatusColor] = None

    @classmethod
    def from_raw(cls, raw: Any) -> "ChoiceOption":
        if isinstance(raw, Mapping):
            text = _first(raw, "text", "texto", default="")
            color = _first(raw, "color", "cor")
            return cls(
                text=str(text),
                color=StatusColor.parse(color) if color is not None else None,
            )
        return cls(text=str(raw))


@dataclass(frozen=True)
class QuestionSchema:
    """
    Single question definition.

    A stored entry that is not an object still occupies its position
    (answer keys are positional); it is kept as a question with
    present=False.
    """
    text: str
    kind: QuestionKind = QuestionKind.TEXT
    options: Tuple[ChoiceOption, ...] = ()
    present: bool = True

    @classmethod
    def placeholder(cls) -> "QuestionSchema":
        return cls(text="", present=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "QuestionSchema":
        raw_options = _first(data, "options", "opcoes", default=[])
        if not isinstance(raw_options, (list, tuple)):
            raw_options = []
        return cls(
            text=str(_first(data, "text", "pergunta", default="")),
            kind=QuestionKind.parse(_first(data, "kind", "tipo", default="text")),
            options=tuple(ChoiceOption.from_raw(opt) for opt in raw_options),
        )

    def find_option(self, text: str) -> Optional[ChoiceOption]:
        """Find the option whose label equals text exactly."""
        for option in self.options:
            if option.text == text:
                return option
        return None


@dataclass(frozen=True)
class SectionSchema:
    """Named group of questions sharing one heading."""
    name: str
    questions: Tuple[QuestionSchema, ...] = ()
    present: bool = True

    @classmethod
    def placeholder(cls) -> "SectionSchema":
        return cls(name="", present=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SectionSchema":
        raw_questions = _first(data, "questions", "perguntas", default=[])
        if not isinstance(raw_questions, (list, tuple)):
            raw_questions = []
        return cls(
            name=str(_first(data, "name", "nome_secao", default="")),
            questions=tuple(
                QuestionSchema.from_dict(q) if isinstance(q, Mapping) else QuestionSchema.placeholder()
                for q in raw_questions
            ),
        )


@dataclass(frozen=True)
class FormSchema:
    """
    Complete form definition (immutable).

    Example:
        >>> form = FormSchema.from_dict({"sections": [
        ...     {"name": "Pisos", "questions": [{"text": "Rodapé", "kind": "select"}]}
        ... ]})
        >>> form.sections[0].questions[0].kind
        <QuestionKind.SELECT: 'select'>
    """
    sections: Tuple[SectionSchema, ...] = ()

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "FormSchema":
        if not isinstance(data, Mapping):
            return cls()
        raw_sections = _first(data, "sections", "secoes", default=[])
        if not isinstance(raw_sections, (list, tuple)):
            return cls()
        return cls(sections=tuple(
            SectionSchema.from_dict(s) if isinstance(s, Mapping) else SectionSchema.placeholder()
            for s in raw_sections
        ))

    @property
    def is_empty(self) -> bool:
        return not any(s.present for s in self.sections)

    @property
    def question_count(self) -> int:
        return sum(
            1 for s in self.sections if s.present
            for q in s.questions if q.present
        )
