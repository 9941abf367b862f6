"""Per-question statistics for survey analytics.

Raw answer rows are first parsed into typed answers
(:func:`..domain.answers.parse_answer`); anything that fails to parse
still counts toward ``totalAnswers`` but contributes nothing to the
type-specific figures. ``ratingCount <= totalAnswers`` is therefore
expected whenever malformed ratings were submitted.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone
from typing import Iterable

from ..domain.answers import (
    ChoiceAnswer,
    RatingAnswer,
    TextAnswer,
    YesNoAnswer,
    parse_answer,
    parse_choices,
)
from ..domain.enums import QuestionType, normalize_enumish
from ..domain.records import AnswerRow, QuestionSchema
from ..utils.dates import as_utc, isoformat_utc
from .day_buckets import rank_counts

TEXT_LATEST_LIMIT = 10
RATING_SCALE = (1, 2, 3, 4, 5)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class QuestionAccumulator:
    """Collects answers for one question and renders its summary."""

    def __init__(self, question: QuestionSchema) -> None:
        self.question = question
        self.qtype = normalize_enumish(question.type)
        self.total_answers = 0
        self.rating_sum = 0
        self.rating_dist = {score: 0 for score in RATING_SCALE}
        self.yes = 0
        self.no = 0
        self.choice_counts: Counter = Counter()
        self.texts: list[TextAnswer] = []

    def add(self, row: AnswerRow) -> None:
        raw = "" if row.value is None else str(row.value).strip()
        if not raw:
            return
        self.total_answers += 1

        answer = parse_answer(self.qtype, raw, row.submitted_at, row.source)
        if isinstance(answer, RatingAnswer):
            self.rating_sum += answer.score
            self.rating_dist[answer.score] += 1
        elif isinstance(answer, YesNoAnswer):
            if answer.is_yes:
                self.yes += 1
            else:
                self.no += 1
        elif isinstance(answer, ChoiceAnswer):
            self.choice_counts[answer.key] += 1
        elif isinstance(answer, TextAnswer):
            self.texts.append(answer)

    @property
    def rating_count(self) -> int:
        return sum(self.rating_dist.values())

    def summary(self) -> dict:
        q = self.question
        out = {
            "questionId": q.id,
            "order": q.order,
            "prompt": q.prompt,
            "type": q.type,
            "totalAnswers": self.total_answers,
        }
        if self.qtype == QuestionType.RATING_1_5.value:
            out.update(self._rating_summary())
        elif self.qtype == QuestionType.YES_NO.value:
            out.update(self._yes_no_summary())
        elif self.qtype == QuestionType.CHOICE_SINGLE.value:
            out.update(self._choice_summary())
        elif self.qtype == QuestionType.TEXT.value:
            out.update(self._text_summary())
        return out

    def _rating_summary(self) -> dict:
        count = self.rating_count
        return {
            "ratingCount": count,
            "ratingSum": self.rating_sum,
            "avgRating": self.rating_sum / count if count else None,
            "ratingDist": dict(self.rating_dist),
            "chart": [
                {"label": str(score), "count": self.rating_dist[score]}
                for score in RATING_SCALE
            ],
        }

    def _yes_no_summary(self) -> dict:
        answered = self.yes + self.no
        return {
            "yes": self.yes,
            "no": self.no,
            "yesPercent": self.yes / answered * 100 if answered else None,
            "chart": [
                {"label": "YES", "count": self.yes},
                {"label": "NO", "count": self.no},
            ],
        }

    def _choice_summary(self) -> dict:
        labels = {opt.key: opt.label for opt in parse_choices(self.question.choices)}
        options = [
            {"key": key, "label": labels.get(key) or key, "count": count}
            for key, count in rank_counts(self.choice_counts)
        ]
        return {
            "options": options,
            "chart": [{"label": o["label"], "count": o["count"]} for o in options],
        }

    def _text_summary(self) -> dict:
        latest = sorted(
            self.texts,
            key=lambda t: as_utc(t.submitted_at) if t.submitted_at else _EPOCH,
            reverse=True,
        )[:TEXT_LATEST_LIMIT]
        return {
            "latest": [
                {
                    "value": t.value,
                    "submittedAt": isoformat_utc(t.submitted_at),
                    "source": t.source,
                }
                for t in latest
            ]
        }


def summarize_questions(
    questions: Iterable[QuestionSchema], rows: Iterable[AnswerRow]
) -> list[dict]:
    """Return one summary per question, ordered by ``order``.

    Questions without answers are still present with empty defaults.
    Rows whose question is not in ``questions`` are ignored.
    """

    accumulators = {q.id: QuestionAccumulator(q) for q in questions}
    for row in rows:
        acc = accumulators.get(row.question_id)
        if acc is not None:
            acc.add(row)
    ordered = sorted(accumulators.values(), key=lambda a: a.question.order)
    return [acc.summary() for acc in ordered]


__all__ = ["QuestionAccumulator", "summarize_questions", "TEXT_LATEST_LIMIT"]
