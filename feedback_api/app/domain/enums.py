"""Closed vocabularies for feedback data and helpers to normalize them."""

from __future__ import annotations

from enum import Enum
from typing import Iterable

UNKNOWN = "UNKNOWN"


class QuestionType(str, Enum):
    """Supported question kinds."""

    RATING_1_5 = "RATING_1_5"
    YES_NO = "YES_NO"
    CHOICE_SINGLE = "CHOICE_SINGLE"
    TEXT = "TEXT"


class Source(str, Enum):
    """Channel a response was collected through."""

    QR = "QR"
    STAFF = "STAFF"
    USSD = "USSD"
    PAPER = "PAPER"


class VisitFrequency(str, Enum):
    FIRST_TIME = "FIRST_TIME"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"


class FastExitReason(str, Enum):
    """Why a customer left the store quickly."""

    QUEUE = "QUEUE"
    NO_STOCK = "NO_STOCK"
    PRICE = "PRICE"
    SERVICE = "SERVICE"
    OTHER = "OTHER"


def _values(members: Iterable[Enum]) -> frozenset[str]:
    return frozenset(m.value for m in members)


SOURCES = _values(Source)
VISIT_FREQUENCY = _values(VisitFrequency)
FAST_EXIT_REASONS = _values(FastExitReason)
YES_NO = frozenset({"YES", "NO"})


def normalize_enumish(value: object) -> str | None:
    """Return ``value`` trimmed and upper-cased, or ``None`` when blank."""

    text = "" if value is None else str(value).strip()
    return text.upper() if text else None


def normalize_enum(allowed: Iterable[str], value: object) -> str | None:
    """Return the normalized ``value`` if it belongs to ``allowed``.

    Write paths use this to drop unrecognized input to ``None`` instead of
    rejecting the whole request.
    """

    candidate = normalize_enumish(value)
    if candidate is None:
        return None
    return candidate if candidate in allowed else None


def display_label(allowed: Iterable[str], value: object) -> str | None:
    """Return a label for read-side breakdowns.

    Absent or blank values yield ``None`` so callers can exclude them from
    totals; present but unrecognized values collapse to ``UNKNOWN``.
    """

    if normalize_enumish(value) is None:
        return None
    return normalize_enum(allowed, value) or UNKNOWN


__all__ = [
    "UNKNOWN",
    "QuestionType",
    "Source",
    "VisitFrequency",
    "FastExitReason",
    "SOURCES",
    "VISIT_FREQUENCY",
    "FAST_EXIT_REASONS",
    "YES_NO",
    "normalize_enumish",
    "normalize_enum",
    "display_label",
]
