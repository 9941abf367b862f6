"""Domain models and helpers."""

from .answers import (
    Answer,
    ChoiceAnswer,
    ChoiceOption,
    RatingAnswer,
    TextAnswer,
    YesNoAnswer,
    parse_answer,
    parse_choices,
)
from .enums import (
    FAST_EXIT_REASONS,
    SOURCES,
    UNKNOWN,
    VISIT_FREQUENCY,
    FastExitReason,
    QuestionType,
    Source,
    VisitFrequency,
    display_label,
    normalize_enum,
    normalize_enumish,
)
from .errors import InvalidSubmissionError, QrTokenExpiredError, SurveyNotFoundError

__all__ = [
    "Answer",
    "ChoiceAnswer",
    "ChoiceOption",
    "RatingAnswer",
    "TextAnswer",
    "YesNoAnswer",
    "parse_answer",
    "parse_choices",
    "FAST_EXIT_REASONS",
    "SOURCES",
    "UNKNOWN",
    "VISIT_FREQUENCY",
    "FastExitReason",
    "QuestionType",
    "Source",
    "VisitFrequency",
    "display_label",
    "normalize_enum",
    "normalize_enumish",
    "InvalidSubmissionError",
    "QrTokenExpiredError",
    "SurveyNotFoundError",
]
