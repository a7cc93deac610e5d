"""
Core Models Package

Immutable data models shared by extraction, layout and output.

All models in this package are frozen dataclasses. A decoded snapshot may
be shared between pagination runs, including runs on separate threads.
"""

from .answers import AnswerRecord, Photo, QuestionKind, SectionDescriptor, StatusColor
from .schema import ChoiceOption, FormSchema, QuestionSchema, SectionSchema
from .report import ReportMetadata, Signature

__all__ = [
    "AnswerRecord",
    "Photo",
    "QuestionKind",
    "SectionDescriptor",
    "StatusColor",
    "ChoiceOption",
    "FormSchema",
    "QuestionSchema",
    "SectionSchema",
    "ReportMetadata",
    "Signature",
]
