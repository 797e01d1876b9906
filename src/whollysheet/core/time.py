from __future__ import annotations

from datetime import datetime, timezone

# Unset timestamp. Serializes to the empty-cell sentinel.
NO_DATE = datetime.min.replace(tzinfo=timezone.utc)


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def now_utc_iso() -> str:
    """Return an RFC 3339/ISO timestamp in UTC with seconds precision."""
    return now_utc().replace(microsecond=0).isoformat()


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_iso(value: datetime) -> str:
    return as_utc(value).isoformat()


def parse_iso(text: str) -> datetime:
    """Parse ISO-8601 text into an aware datetime, accepting a trailing ``Z``."""
    raw = text.strip()
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    return as_utc(datetime.fromisoformat(raw))
