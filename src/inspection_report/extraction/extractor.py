"""
Module: extraction.extractor

Purpose:
    Decode the raw answer, photo and observation stores into canonical
    AnswerRecords, in schema order, keeping only records with content.

Key Functions:
    - extract_answers(): Main entry point

Key Classes:
    - ExtractionResult: Records plus per-section observations

Algorithm:
    For every (section, question) position in the schema:
    1. Look up the stored answer: modern key first, legacy suffix keys after
    2. Resolve the comment (inline comment, then legacy "_obs" key)
    3. Collect photos for the position
    4. Normalize the value through the answer decoder chain
    5. Apply checkbox merging and status colors
    6. Emit the record only if it carries any content

Dependencies:
    - extraction.decoders: Payload and value decoding
    - extraction.status: Status color lookup
    - core.models: AnswerRecord, FormSchema

Used By:
    - controller: Report pipeline
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from inspection_report.core.models import (
    AnswerRecord,
    FormSchema,
    Photo,
    QuestionKind,
    QuestionSchema,
    StatusColor,
)

from .config import ExtractionConfig
from .decoders import (
    MAPPING_DECODERS,
    PayloadDecodeError,
    decode_answer_value,
    decode_list,
    decode_mapping,
    run_decoders,
)
from .status import lookup_status

logger = logging.getLogger(__name__)

# Tried in order; the last non-empty value wins.
LEGACY_ANSWER_SUFFIXES = ("", "_text", "_textarea", "_date", "_signature", "_select")

_ENTRY_KEYS = ("resposta", "response", "comentario", "comment")

_POSITION_KEY_RE = re.compile(r"^(?:secao_(\d+)_pergunta_(\d+)|(\d+)_(\d+))(?:_\w+)?$")


@dataclass(frozen=True)
class ExtractionResult:
    """
    Extraction output (immutable).

    Attributes:
        records: Non-empty records in schema order
        observations: Section index -> observation text (non-blank only)
        skipped_keys: Stored answer keys pointing at no schema question
    """
    records: Tuple[AnswerRecord, ...]
    observations: Dict[int, str] = field(default_factory=dict)
    skipped_keys: Tuple[str, ...] = ()

    @property
    def photo_count(self) -> int:
        return sum(r.photo_count for r in self.records)

    @property
    def has_photos(self) -> bool:
        return any(r.photos for r in self.records)


def answer_key(section_index: int, question_index: int) -> str:
    """Modern answer key for a schema position."""
    return f"secao_{section_index}_pergunta_{question_index}"


def photo_key(section_index: int, question_index: int) -> str:
    """Photo store key for a schema position."""
    return f"{answer_key(section_index, question_index)}_imagem"


def extract_answers(
    form: FormSchema,
    answers: Any,
    photos: Any = None,
    observations: Any = None,
    config: Optional[ExtractionConfig] = None,
) -> ExtractionResult:
    """
    Extract canonical records from raw stores.

    Never raises on malformed stored data: every undecodable blob
    degrades to an empty structure for that field.

    Args:
        form: Parsed form schema
        answers: Raw answer store (object or JSON string, possibly double-encoded)
        photos: Raw photo store
        observations: Raw section observation store
        config: Extraction configuration

    Returns:
        ExtractionResult with records in schema order

    Example:
        >>> result = extract_answers(form, {"secao_0_pergunta_0": "Conforme"})
        >>> result.records[0].color
        <StatusColor.GREEN: 'green'>
    """
    config = config or ExtractionConfig()
    depth = config.max_decode_depth

    answer_map = decode_mapping(answers, field="answers", max_depth=depth)
    photo_map = decode_mapping(photos, field="photos", max_depth=depth)
    observation_map = decode_mapping(observations, field="observations", max_depth=depth)

    records: List[AnswerRecord] = []
    for s_idx, section in enumerate(form.sections):
        if not section.present:
            continue
        for q_idx, question in enumerate(section.questions):
            if not question.present:
                continue
            record = _extract_record(
                s_idx, q_idx, section.name, question,
                answer_map, photo_map, config,
            )
            if record is not None:
                records.append(record)

    section_observations = _extract_observations(form, observation_map)
    skipped = _find_skipped_keys(form, answer_map)
    if skipped:
        logger.debug(f"Skipped {len(skipped)} answers without a matching question: {skipped}")

    logger.info(
        f"Extracted {len(records)} records from {form.question_count} questions "
        f"in {len(form.sections)} sections"
    )
    return ExtractionResult(
        records=tuple(records),
        observations=section_observations,
        skipped_keys=tuple(skipped),
    )


def _extract_record(
    s_idx: int,
    q_idx: int,
    section_name: str,
    question: QuestionSchema,
    answer_map: Mapping[str, Any],
    photo_map: Mapping[str, Any],
    config: ExtractionConfig,
) -> Optional[AnswerRecord]:
    """Build the record for one schema position, or None if it is empty."""
    raw_value, raw_comment = _lookup_answer(answer_map, s_idx, q_idx, config)

    comment = _clean_comment(raw_comment)
    if not comment:
        comment = _clean_comment(answer_map.get(f"{s_idx}_{q_idx}_obs"))

    photos = _extract_photos(photo_map.get(photo_key(s_idx, q_idx)), s_idx, q_idx, config)

    value = decode_answer_value(raw_value, question.kind, config)
    display_text = value.display_text

    if question.kind is QuestionKind.CHECKBOX:
        display_text = _merge_checkbox(raw_comment, display_text)
        comment = ""

    color = StatusColor.GRAY
    if question.kind is QuestionKind.SELECT and display_text:
        color = _resolve_color(question, display_text)

    record = AnswerRecord(
        section_index=s_idx,
        question_index=q_idx,
        section_name=section_name,
        question_text=question.text,
        kind=question.kind,
        display_text=display_text,
        color=color,
        comment=comment,
        photos=photos,
        signature_image=value.signature_image,
    )
    return record if record.has_content else None


def _lookup_answer(
    answer_map: Mapping[str, Any],
    s_idx: int,
    q_idx: int,
    config: ExtractionConfig,
) -> Tuple[Any, Any]:
    """Return (raw value, raw comment) for a position."""
    entry = answer_map.get(answer_key(s_idx, q_idx))
    if entry not in (None, ""):
        entry = _unwrap_entry(entry, config)
        if isinstance(entry, Mapping):
            value = entry.get("resposta", entry.get("response"))
            comment = entry.get("comentario", entry.get("comment"))
            return value, comment
        return entry, None

    value = None
    base = f"{s_idx}_{q_idx}"
    for suffix in LEGACY_ANSWER_SUFFIXES:
        candidate = answer_map.get(f"{base}{suffix}")
        if candidate not in (None, ""):
            value = candidate
    return value, None


def _unwrap_entry(entry: Any, config: ExtractionConfig) -> Any:
    """
    Unwrap a string-encoded {response, comment} entry, however many times
    it was encoded. Plain scalars pass through unchanged.
    """
    if not isinstance(entry, str):
        return entry
    try:
        decoded = run_decoders(entry, MAPPING_DECODERS, max_depth=config.max_decode_depth)
    except PayloadDecodeError:
        # Not JSON: an ordinary text answer
        return entry
    if isinstance(decoded, Mapping) and any(k in decoded for k in _ENTRY_KEYS):
        return decoded
    return entry


def _clean_comment(raw: Any) -> str:
    if raw is None:
        return ""
    text = str(raw)
    if not text.strip() or text.strip() == "-":
        return ""
    return text


def _extract_photos(raw: Any, s_idx: int, q_idx: int, config: ExtractionConfig) -> Tuple[Photo, ...]:
    entries = decode_list(raw, field=f"photos for {s_idx}-{q_idx}", max_depth=config.max_decode_depth)
    photos = []
    for entry in entries:
        if isinstance(entry, Mapping):
            url = entry.get("url")
            if not url:
                continue
            caption = entry.get("legenda", entry.get("caption")) or ""
            photos.append(Photo(url=str(url), caption=str(caption)))
        elif isinstance(entry, str) and entry.strip():
            photos.append(Photo(url=entry.strip()))
    return tuple(photos)


def _merge_checkbox(raw_comment: Any, display_text: str) -> str:
    """Selected options (stored comma-separated in the comment) first, free text after."""
    selected: List[str] = []
    if isinstance(raw_comment, str) and raw_comment.strip():
        selected = [opt.strip() for opt in raw_comment.split(",") if opt.strip()]
    content = "\n".join(selected)
    if display_text:
        content = f"{content}\n{display_text}" if content else display_text
    return content


def _resolve_color(question: QuestionSchema, display_text: str) -> StatusColor:
    option = question.find_option(display_text)
    if option is not None and option.color is not None:
        return option.color
    return lookup_status(display_text).color


def _extract_observations(form: FormSchema, observation_map: Mapping[str, Any]) -> Dict[int, str]:
    observations: Dict[int, str] = {}
    for s_idx, section in enumerate(form.sections):
        if not section.present:
            continue
        raw = observation_map.get(section.name)
        if raw in (None, ""):
            raw = observation_map.get(str(s_idx))
        if raw is None:
            continue
        text = str(raw)
        if text.strip():
            observations[s_idx] = text
    return observations


def _find_skipped_keys(form: FormSchema, answer_map: Mapping[str, Any]) -> List[str]:
    skipped = []
    for key in answer_map:
        match = _POSITION_KEY_RE.match(str(key))
        if not match:
            continue
        s_text, q_text = (match.group(1), match.group(2)) if match.group(1) else (match.group(3), match.group(4))
        s_idx, q_idx = int(s_text), int(q_text)
        if not _position_exists(form, s_idx, q_idx):
            skipped.append(str(key))
    return skipped


def _position_exists(form: FormSchema, s_idx: int, q_idx: int) -> bool:
    if s_idx >= len(form.sections) or not form.sections[s_idx].present:
        return False
    questions = form.sections[s_idx].questions
    return q_idx < len(questions) and questions[q_idx].present
