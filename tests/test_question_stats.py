import json
from datetime import datetime, timedelta, timezone

from feedback_api.app.domain.records import AnswerRow, QuestionSchema
from feedback_api.app.services.question_stats import (
    TEXT_LATEST_LIMIT,
    summarize_questions,
)

T0 = datetime(2024, 3, 10, 12, tzinfo=timezone.utc)


def _q(qid, qtype, order=1, choices=None):
    return QuestionSchema(qid, order, f"Prompt {qid}", qtype, choices)


def _rows(qid, *values, source="QR"):
    return [
        AnswerRow(qid, value, T0 + timedelta(minutes=i), source)
        for i, value in enumerate(values)
    ]


def test_rating_ignores_unparseable_values_but_counts_them():
    (summary,) = summarize_questions(
        [_q("q1", "RATING_1_5")], _rows("q1", "5", "3", "abc")
    )
    assert summary["totalAnswers"] == 3
    assert summary["ratingCount"] == 2
    assert summary["ratingSum"] == 8
    assert summary["avgRating"] == 4.0
    assert summary["ratingDist"] == {1: 0, 2: 0, 3: 1, 4: 0, 5: 1}
    assert [c["label"] for c in summary["chart"]] == ["1", "2", "3", "4", "5"]


def test_yes_no_percent_excludes_other_values():
    (summary,) = summarize_questions(
        [_q("q1", "YES_NO")], _rows("q1", "YES", "yes", "NO", "maybe")
    )
    assert summary["totalAnswers"] == 4
    assert summary["yes"] == 2
    assert summary["no"] == 1
    assert abs(summary["yesPercent"] - 66.666) < 0.01
    assert summary["chart"] == [
        {"label": "YES", "count": 2},
        {"label": "NO", "count": 1},
    ]


def test_choice_uses_labels_and_keeps_unlisted_keys():
    choices = json.dumps([{"key": "FRESH", "label": "Fresh produce"}, "Bakery"])
    (summary,) = summarize_questions(
        [_q("q1", "CHOICE_SINGLE", choices=choices)],
        _rows("q1", "fresh", "FRESH", "bakery", "toys"),
    )
    assert summary["options"] == [
        {"key": "FRESH", "label": "Fresh produce", "count": 2},
        {"key": "BAKERY", "label": "Bakery", "count": 1},
        {"key": "TOYS", "label": "TOYS", "count": 1},
    ]
    assert summary["chart"][0] == {"label": "Fresh produce", "count": 2}


def test_choice_with_malformed_definition_falls_back_to_keys():
    (summary,) = summarize_questions(
        [_q("q1", "CHOICE_SINGLE", choices="{broken")], _rows("q1", "a")
    )
    assert summary["options"] == [{"key": "A", "label": "A", "count": 1}]


def test_text_keeps_latest_ten_newest_first():
    values = [f"comment {i}" for i in range(12)]
    (summary,) = summarize_questions([_q("q1", "TEXT")], _rows("q1", *values))
    latest = summary["latest"]
    assert summary["totalAnswers"] == 12
    assert len(latest) == TEXT_LATEST_LIMIT
    assert latest[0]["value"] == "comment 11"
    assert latest[-1]["value"] == "comment 2"
    assert latest[0]["submittedAt"].endswith("Z")
    assert latest[0]["source"] == "QR"


def test_blank_answers_are_not_counted():
    (summary,) = summarize_questions([_q("q1", "TEXT")], _rows("q1", "  ", None, "ok"))
    assert summary["totalAnswers"] == 1


def test_questions_without_answers_have_empty_defaults():
    questions = [
        _q("r", "RATING_1_5", order=1),
        _q("y", "YES_NO", order=2),
        _q("c", "CHOICE_SINGLE", order=3),
        _q("t", "TEXT", order=4),
    ]
    rating, yes_no, choice, text = summarize_questions(questions, [])
    assert rating["ratingCount"] == 0
    assert rating["avgRating"] is None
    assert rating["ratingDist"] == {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}
    assert yes_no["yesPercent"] is None
    assert choice["options"] == []
    assert text["latest"] == []


def test_summaries_follow_question_order_and_skip_foreign_rows():
    questions = [_q("b", "TEXT", order=2), _q("a", "TEXT", order=1)]
    rows = _rows("a", "x") + _rows("zzz", "y")
    summaries = summarize_questions(questions, rows)
    assert [s["questionId"] for s in summaries] == ["a", "b"]
    assert summaries[0]["totalAnswers"] == 1
    assert summaries[1]["totalAnswers"] == 0


def test_choice_with_deeply_nested_definition_falls_back_to_keys():
    (summary,) = summarize_questions(
        [_q("q1", "CHOICE_SINGLE", choices="[" * 200000)], _rows("q1", "fresh")
    )
    assert summary["options"] == [{"key": "FRESH", "label": "FRESH", "count": 1}]
