"""Typed answer values parsed from raw response item strings.

Every answer is stored as a raw string regardless of its question type.
``parse_answer`` is the single place where that string is interpreted; it
returns ``None`` for input that cannot contribute to type-specific
statistics instead of raising.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Union

from .enums import (
    SOURCES,
    UNKNOWN,
    YES_NO,
    QuestionType,
    display_label,
    normalize_enum,
    normalize_enumish,
)

logger = logging.getLogger("feedback_api.analytics")


@dataclass(frozen=True)
class RatingAnswer:
    score: int


@dataclass(frozen=True)
class YesNoAnswer:
    is_yes: bool


@dataclass(frozen=True)
class ChoiceAnswer:
    key: str


@dataclass(frozen=True)
class TextAnswer:
    value: str
    submitted_at: datetime | None
    source: str


Answer = Union[RatingAnswer, YesNoAnswer, ChoiceAnswer, TextAnswer]


@dataclass(frozen=True)
class ChoiceOption:
    key: str
    label: str


def parse_rating(raw: str) -> int | None:
    """Round ``raw`` half-up and return it when it lands in ``1..5``."""

    try:
        number = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    score = math.floor(number + 0.5)
    return score if 1 <= score <= 5 else None


def parse_answer(
    question_type: str | None,
    raw: str,
    submitted_at: datetime | None = None,
    source: str | None = None,
) -> Answer | None:
    """Interpret ``raw`` according to ``question_type``.

    ``raw`` is expected to be trimmed and non-empty. Returns ``None`` for
    values that are invalid for the type or for unknown question types.
    """

    qtype = normalize_enumish(question_type)
    if qtype == QuestionType.RATING_1_5.value:
        score = parse_rating(raw)
        return RatingAnswer(score) if score is not None else None
    if qtype == QuestionType.YES_NO.value:
        value = normalize_enum(YES_NO, raw)
        return YesNoAnswer(value == "YES") if value is not None else None
    if qtype == QuestionType.CHOICE_SINGLE.value:
        key = normalize_enumish(raw)
        return ChoiceAnswer(key) if key is not None else None
    if qtype == QuestionType.TEXT.value:
        return TextAnswer(
            value=raw,
            submitted_at=submitted_at,
            source=display_label(SOURCES, source) or UNKNOWN,
        )
    return None


def _option_from(entry: Any) -> ChoiceOption | None:
    if isinstance(entry, str):
        key = normalize_enumish(entry)
        return ChoiceOption(key, entry.strip()) if key else None
    if isinstance(entry, dict):
        raw_key = entry.get("key")
        key = normalize_enumish(raw_key)
        if key is None:
            return None
        label = str(entry.get("label") or raw_key).strip()
        return ChoiceOption(key, label or key)
    return None


def parse_choices(raw: Any) -> list[ChoiceOption]:
    """Parse stored choice definitions into an ordered option list.

    ``raw`` may be a JSON string or an already decoded list. Plain string
    options and ``{"key", "label"}`` objects are supported. Anything
    malformed yields an empty list.
    """

    data = raw
    if isinstance(raw, (str, bytes)):
        try:
            text = raw.decode() if isinstance(raw, bytes) else raw
            data = json.loads(text) if text.strip() else []
        except (ValueError, UnicodeDecodeError, RecursionError):
            logger.debug("ignoring malformed choices payload: %.80r", raw)
            return []
    if not isinstance(data, list):
        return []

    options: list[ChoiceOption] = []
    seen: set[str] = set()
    for entry in data:
        option = _option_from(entry)
        if option is None or option.key in seen:
            continue
        seen.add(option.key)
        options.append(option)
    return options


__all__ = [
    "Answer",
    "RatingAnswer",
    "YesNoAnswer",
    "ChoiceAnswer",
    "TextAnswer",
    "ChoiceOption",
    "parse_rating",
    "parse_answer",
    "parse_choices",
]
