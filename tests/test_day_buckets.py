import math
from datetime import datetime, timezone

from feedback_api.app.services.day_buckets import bucket_by_day, rank_counts

UTC = timezone.utc


def _rows():
    return [
        (datetime(2024, 3, 1, 10, tzinfo=UTC), 4, "QR"),
        (datetime(2024, 3, 1, 23, 59, tzinfo=UTC), None, "STAFF"),
        (datetime(2024, 3, 1, 8, tzinfo=UTC), 6, "QR"),
        (datetime(2024, 3, 3, 0, 0, tzinfo=UTC), "abc", None),
    ]


def test_sparse_series_ordered_by_day():
    buckets = bucket_by_day(_rows())
    assert [b.day for b in buckets] == ["2024-03-01", "2024-03-03"]
    first, second = buckets
    assert first.count == 3
    assert first.avg == 5.0
    assert first.breakdown == [("QR", 2), ("STAFF", 1)]
    assert second.count == 1
    assert second.avg is None
    assert second.breakdown == []


def test_input_order_does_not_matter():
    assert bucket_by_day(_rows()) == bucket_by_day(list(reversed(_rows())))


def test_non_finite_values_only_skip_the_average():
    rows = [
        (datetime(2024, 3, 1, tzinfo=UTC), math.inf, "QR"),
        (datetime(2024, 3, 1, tzinfo=UTC), math.nan, "QR"),
        (datetime(2024, 3, 1, tzinfo=UTC), 10, "QR"),
    ]
    (bucket,) = bucket_by_day(rows)
    assert bucket.count == 3
    assert bucket.avg == 10.0
    assert bucket.breakdown == [("QR", 3)]


def test_days_are_utc():
    naive = datetime(2024, 3, 1, 23, 30)
    offset = datetime.fromisoformat("2024-03-02T01:30:00+05:00")
    buckets = bucket_by_day([(naive, None, None), (offset, None, None)])
    assert [(b.day, b.count) for b in buckets] == [("2024-03-01", 2)]


def test_empty_input():
    assert bucket_by_day([]) == []


def test_rank_counts_ties_break_on_key():
    from collections import Counter

    assert rank_counts(Counter({"b": 2, "a": 2, "c": 5})) == [
        ("c", 5),
        ("a", 2),
        ("b", 2),
    ]
