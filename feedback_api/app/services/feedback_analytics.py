"""Tenant-scoped analytics views: overview, trends and per-survey.

Every view is read-only and scoped by ``org_id``. Independent store reads
are awaited concurrently. Store failures propagate unchanged; malformed
stored values degrade to excluded contributions instead of errors.

``totalResponses`` in the overview is all-time; every other overview
figure is windowed.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections import Counter
from datetime import datetime, timedelta
from typing import Iterable

from ..db.store import FeedbackStore
from ..domain.enums import FAST_EXIT_REASONS, SOURCES, UNKNOWN, display_label
from ..domain.errors import SurveyNotFoundError
from ..utils.dates import as_utc, isoformat_utc, utcnow
from .day_buckets import bucket_by_day, rank_counts
from .question_stats import summarize_questions

logger = logging.getLogger("feedback_api.analytics")

MIN_DAYS = 1
MAX_DAYS = 365
DEFAULT_OVERVIEW_DAYS = 7
DEFAULT_TRENDS_DAYS = 14
DEFAULT_SURVEY_DAYS = 7
TOP_EXIT_REASONS = 5
UNKNOWN_SURVEY_TITLE = "Unknown survey"

_LEADING_INT = re.compile(r"\s*(\d+)")


def parse_days(raw: object, default: int) -> int:
    """Return ``raw`` as a window length, or ``default`` if unusable.

    Non-numeric values and values outside ``[1, 365]`` fall back silently.
    """

    if raw is None or isinstance(raw, bool):
        return default
    try:
        days = int(str(raw).strip())
    except ValueError:
        return default
    return days if MIN_DAYS <= days <= MAX_DAYS else default


def _window(days: object, default: int, now: datetime | None) -> tuple[int, datetime, datetime]:
    window_days = parse_days(days, default)
    until = as_utc(now) if now is not None else utcnow()
    return window_days, until - timedelta(days=window_days), until


def parse_peak_hour(bucket: str | None) -> int | None:
    """Best-effort start hour of a bucket such as ``"10-12"`` or ``"14"``."""

    if bucket is None:
        return None
    head = str(bucket).split("-", 1)[0]
    match = _LEADING_INT.match(head)
    if not match:
        return None
    hour = int(match.group(1))
    return hour if 0 <= hour <= 23 else None


def _labelled_counts(
    pairs: Iterable[tuple[object, int]], allowed: frozenset[str]
) -> list[tuple[str, int]]:
    """Merge raw grouped counts under their display label.

    Blank values are excluded; unrecognized values are counted as ``UNKNOWN``.
    """

    counts: Counter = Counter()
    for value, count in pairs:
        label = display_label(allowed, value)
        if label is not None:
            counts[label] += count
    return rank_counts(counts)


def _peak_hours(pairs: Iterable[tuple[object, int]]) -> list[dict]:
    counts: Counter = Counter()
    for value, count in pairs:
        bucket = "" if value is None else str(value).strip()
        if bucket:
            counts[bucket] += count
    rows = [
        {"bucket": bucket, "startHour": parse_peak_hour(bucket), "count": count}
        for bucket, count in counts.items()
    ]
    rows.sort(
        key=lambda r: (r["startHour"] is None, r["startHour"] or 0, r["bucket"])
    )
    return rows


async def overview_analytics(
    store: FeedbackStore,
    org_id: str,
    days: object = None,
    now: datetime | None = None,
) -> dict:
    """Totals and windowed breakdowns for one organization."""

    window_days, since, until = _window(days, DEFAULT_OVERVIEW_DAYS, now)

    (
        total_responses,
        responses_in_window,
        avg_time_spent,
        peak_hours,
        exit_reasons,
        by_source,
        by_survey,
    ) = await asyncio.gather(
        store.count_responses(org_id),
        store.count_responses(org_id, since, until),
        store.avg_time_spent(org_id, since, until),
        store.group_responses(org_id, "peak_hour_bucket", since, until),
        store.group_responses(org_id, "fast_exit_reason", since, until),
        store.group_responses(org_id, "source", since, until),
        store.group_responses(org_id, "survey_id", since, until),
    )

    survey_counts: Counter = Counter()
    for survey_id, count in by_survey:
        survey_counts[survey_id] += count
    titles = await store.survey_titles(org_id, survey_counts.keys())

    logger.debug(
        "overview org=%s days=%d total=%d window=%d",
        org_id,
        window_days,
        total_responses,
        responses_in_window,
    )

    return {
        "windowDays": window_days,
        "since": isoformat_utc(since),
        "totalResponses": total_responses,
        "responsesInWindow": responses_in_window,
        "avgTimeSpentMin": avg_time_spent,
        "peakHours": _peak_hours(peak_hours),
        "sources": [
            {"source": source, "count": count}
            for source, count in _labelled_counts(by_source, SOURCES)
        ],
        "fastExitReasonsTop": [
            {"reason": reason, "count": count}
            for reason, count in _labelled_counts(exit_reasons, FAST_EXIT_REASONS)[
                :TOP_EXIT_REASONS
            ]
        ],
        "surveyBreakdown": [
            {
                "surveyId": survey_id,
                "title": titles.get(survey_id) or UNKNOWN_SURVEY_TITLE,
                "count": count,
            }
            for survey_id, count in rank_counts(survey_counts)
        ],
    }


async def trends_analytics(
    store: FeedbackStore,
    org_id: str,
    days: object = None,
    now: datetime | None = None,
) -> dict:
    """Per-day response counts, average time spent and source split."""

    window_days, since, until = _window(days, DEFAULT_TRENDS_DAYS, now)
    rows = await store.trend_rows(org_id, since, until)

    buckets = bucket_by_day(
        (r.submitted_at, r.time_spent_min, display_label(SOURCES, r.source) or UNKNOWN)
        for r in rows
    )
    return {
        "windowDays": window_days,
        "since": isoformat_utc(since),
        "series": [
            {
                "day": b.day,
                "responses": b.count,
                "avgTimeSpentMin": b.avg,
                "sources": [
                    {"source": source, "count": count} for source, count in b.breakdown
                ],
            }
            for b in buckets
        ],
    }


async def survey_analytics(
    store: FeedbackStore,
    org_id: str,
    survey_id: str,
    days: object = None,
    now: datetime | None = None,
) -> dict:
    """Per-question summaries for one survey of ``org_id``.

    Raises :class:`SurveyNotFoundError` when the survey does not belong to
    the organization, without revealing whether it exists elsewhere.
    """

    window_days, since, until = _window(days, DEFAULT_SURVEY_DAYS, now)

    survey = await store.get_survey(org_id, survey_id)
    if survey is None:
        raise SurveyNotFoundError()

    responses_in_window, rows = await asyncio.gather(
        store.count_responses(org_id, since, until, survey_id=survey.id),
        store.answer_rows(org_id, survey.id, since, until),
    )

    description = (survey.description or "").strip() or None
    return {
        "windowDays": window_days,
        "since": isoformat_utc(since),
        "survey": {
            "id": survey.id,
            "title": survey.title,
            "description": description,
        },
        "responsesInWindow": responses_in_window,
        "questions": summarize_questions(survey.questions, rows),
    }


__all__ = [
    "DEFAULT_OVERVIEW_DAYS",
    "DEFAULT_SURVEY_DAYS",
    "DEFAULT_TRENDS_DAYS",
    "parse_days",
    "parse_peak_hour",
    "overview_analytics",
    "trends_analytics",
    "survey_analytics",
]
