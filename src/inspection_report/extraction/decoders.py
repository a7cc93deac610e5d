"""
Module: extraction.decoders

Purpose:
    Small ordered chains of typed decoders for stored payloads.

    Stored blobs come in several shapes: plain objects, JSON strings,
    JSON strings holding JSON strings (double encoding), ISO dates,
    date objects and embedded image payloads. Each decoder either
    returns a DecodeStep or defers (returns None) to the next one in
    its chain. A non-final step feeds its value back into the chain,
    which is how nested encodings are unwrapped.

Key Functions:
    - run_decoders(): Drive a decoder chain
    - decode_mapping(): Lenient object decoding (never raises)
    - decode_list(): Lenient list decoding (never raises)
    - decode_answer_value(): Normalize one stored answer value

Key Classes:
    - DecodeStep: Result of one decoder
    - AnswerValue: Display text plus optional signature payload
    - PayloadDecodeError: Raised inside a chain, caught by the lenient wrappers

Dependencies:
    - json (std)
    - datetime (std)
    - extraction.config: ExtractionConfig

Used By:
    - extraction.extractor: All payload decoding
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from inspection_report.core.models import QuestionKind

from .config import ExtractionConfig

logger = logging.getLogger(__name__)


class PayloadDecodeError(ValueError):
    """Payload could not be decoded by any decoder in the chain."""
    pass


@dataclass(frozen=True)
class DecodeStep:
    """
    Outcome of one decoder.

    Attributes:
        value: Decoded value
        final: If False, value is fed back into the chain
    """
    value: Any
    final: bool = True


Decoder = Callable[[Any], Optional[DecodeStep]]


# ─────────────────────────────────────────────────────────────────────────────
# Container decoders
# ─────────────────────────────────────────────────────────────────────────────

def _decode_null(value: Any) -> Optional[DecodeStep]:
    if value is None:
        return DecodeStep(None)
    return None


def _decode_mapping_value(value: Any) -> Optional[DecodeStep]:
    if isinstance(value, Mapping):
        return DecodeStep(dict(value))
    return None


def _decode_sequence_value(value: Any) -> Optional[DecodeStep]:
    if isinstance(value, (list, tuple)):
        return DecodeStep(list(value))
    return None


def _decode_json_string(value: Any) -> Optional[DecodeStep]:
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return DecodeStep(None)
    try:
        return DecodeStep(json.loads(text), final=False)
    except json.JSONDecodeError as e:
        raise PayloadDecodeError(f"Malformed JSON payload: {e.msg} at position {e.pos}") from e


MAPPING_DECODERS: tuple[Decoder, ...] = (
    _decode_null,
    _decode_mapping_value,
    _decode_json_string,
)

LIST_DECODERS: tuple[Decoder, ...] = (
    _decode_null,
    _decode_sequence_value,
    _decode_json_string,
)


def run_decoders(raw: Any, decoders: Sequence[Decoder], *, max_depth: int) -> Any:
    """
    Drive a decoder chain until a decoder produces a final value.

    Args:
        raw: Stored payload
        decoders: Ordered decoders; the first non-deferring one wins each round
        max_depth: Maximum number of rounds (encoding layers)

    Returns:
        Final decoded value

    Raises:
        PayloadDecodeError: If every decoder defers, a decoder fails,
            or the nesting exceeds max_depth
    """
    value = raw
    for _ in range(max_depth):
        for decoder in decoders:
            step = decoder(value)
            if step is not None:
                break
        else:
            raise PayloadDecodeError(f"No decoder accepts {type(value).__name__} payload")
        if step.final:
            return step.value
        value = step.value
    raise PayloadDecodeError(f"Payload nested deeper than {max_depth} levels")


def decode_mapping(raw: Any, *, field: str, max_depth: int) -> dict[str, Any]:
    """
    Decode a stored object, degrading to {} on any failure.

    Args:
        raw: Stored payload (object, JSON string, nested JSON string, None)
        field: Field name used in log messages
        max_depth: Maximum encoding layers

    Returns:
        Decoded dict (empty when absent or malformed)
    """
    try:
        value = run_decoders(raw, MAPPING_DECODERS, max_depth=max_depth)
    except PayloadDecodeError as e:
        logger.warning(f"Could not decode {field}, using empty value: {e}")
        return {}
    return value if isinstance(value, dict) else {}


def decode_list(raw: Any, *, field: str, max_depth: int) -> list[Any]:
    """Decode a stored list, degrading to [] on any failure."""
    try:
        value = run_decoders(raw, LIST_DECODERS, max_depth=max_depth)
    except PayloadDecodeError as e:
        logger.warning(f"Could not decode {field}, using empty value: {e}")
        return []
    return value if isinstance(value, list) else []


# ─────────────────────────────────────────────────────────────────────────────
# Answer value decoders
# ─────────────────────────────────────────────────────────────────────────────

_ISO_DATETIME_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}")
_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DATA_IMAGE_PREFIX = "data:image"


@dataclass(frozen=True)
class AnswerValue:
    """
    Normalized answer value.

    Attributes:
        display_text: Printable response ("" when there is none)
        signature_image: Embedded signature payload, if the answer is one
    """
    display_text: str = ""
    signature_image: Optional[str] = None


AnswerDecoder = Callable[[Any, QuestionKind, ExtractionConfig], Optional[AnswerValue]]


def format_date_text(text: str, date_format: str) -> Optional[str]:
    """
    Format an ISO date or datetime string.

    Returns:
        Formatted date, the raw text if it looks like ISO but cannot be
        parsed, or None if it does not look like an ISO date at all
    """
    text = text.strip()
    if _ISO_DATETIME_RE.match(text):
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).strftime(date_format)
        except ValueError:
            return text
    if _ISO_DATE_RE.match(text):
        try:
            return date.fromisoformat(text).strftime(date_format)
        except ValueError:
            return text
    return None


def _answer_empty(value: Any, kind: QuestionKind, config: ExtractionConfig) -> Optional[AnswerValue]:
    if value is None or value == "":
        return AnswerValue()
    return None


def _answer_signature(value: Any, kind: QuestionKind, config: ExtractionConfig) -> Optional[AnswerValue]:
    if kind is QuestionKind.SIGNATURE and isinstance(value, str) and value.startswith(_DATA_IMAGE_PREFIX):
        return AnswerValue(display_text=config.signed_label, signature_image=value)
    return None


def _answer_date_object(value: Any, kind: QuestionKind, config: ExtractionConfig) -> Optional[AnswerValue]:
    if isinstance(value, Mapping) and value.get("type") == "date":
        raw = value.get("value")
        if raw is None:
            return AnswerValue()
        text = str(raw)
        return AnswerValue(display_text=format_date_text(text, config.date_format) or text)
    return None


def _answer_date_string(value: Any, kind: QuestionKind, config: ExtractionConfig) -> Optional[AnswerValue]:
    if isinstance(value, str):
        formatted = format_date_text(value, config.date_format)
        if formatted is not None:
            return AnswerValue(display_text=formatted)
    return None


def _answer_object(value: Any, kind: QuestionKind, config: ExtractionConfig) -> Optional[AnswerValue]:
    if isinstance(value, Mapping):
        if value.get("value") is not None:
            return AnswerValue(display_text=_scalar_text(value["value"]))
        return AnswerValue(display_text=json.dumps(value, ensure_ascii=False, separators=(",", ":")))
    if isinstance(value, (list, tuple)):
        return AnswerValue(display_text=", ".join(_scalar_text(v) for v in value if v not in (None, "")))
    return None


def _answer_scalar(value: Any, kind: QuestionKind, config: ExtractionConfig) -> Optional[AnswerValue]:
    return AnswerValue(display_text=_scalar_text(value))


def _scalar_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


ANSWER_DECODERS: tuple[AnswerDecoder, ...] = (
    _answer_empty,
    _answer_signature,
    _answer_date_object,
    _answer_date_string,
    _answer_object,
    _answer_scalar,
)


def decode_answer_value(value: Any, kind: QuestionKind, config: ExtractionConfig) -> AnswerValue:
    """
    Normalize one stored answer value into display text.

    Args:
        value: Stored value (scalar, date object, ISO string, data payload...)
        kind: Question kind
        config: Extraction configuration

    Returns:
        AnswerValue; display_text is "" when there is no response

    Example:
        >>> decode_answer_value("2024-03-05", QuestionKind.DATE, ExtractionConfig()).display_text
        '05/03/2024'
    """
    for decoder in ANSWER_DECODERS:
        result = decoder(value, kind, config)
        if result is not None:
            return result
    return AnswerValue()
