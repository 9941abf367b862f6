"""Timestamp helpers shared by the analytics engine.

All day arithmetic uses UTC. Databases that drop tzinfo (SQLite) hand back
naive datetimes which are interpreted as UTC wall-clock values.
"""

from __future__ import annotations

from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(ts: datetime) -> datetime:
    """Return ``ts`` as an aware UTC datetime."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def day_key(ts: datetime) -> str:
    """Return the zero-padded ``YYYY-MM-DD`` UTC day for ``ts``."""
    return as_utc(ts).strftime("%Y-%m-%d")


def isoformat_utc(ts: datetime | None) -> str | None:
    if ts is None:
        return None
    return as_utc(ts).isoformat().replace("+00:00", "Z")


__all__ = ["utcnow", "as_utc", "day_key", "isoformat_utc"]
