"""Column conversion helpers shared by the SQLite stores."""

from datetime import UTC, datetime


def now_utc() -> datetime:
    return datetime.now(UTC)


def to_iso(value: datetime | None) -> str | None:
    """Serialize as UTC so stored timestamps compare correctly as text."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat()


def parse_datetime(value: str | None) -> datetime:
    """Parse a stored ISO timestamp, falling back to now for missing or bad values."""
    if value:
        try:
            parsed = datetime.fromisoformat(value)
        except (ValueError, TypeError):
            return now_utc()
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    return now_utc()


def placeholders(count: int) -> str:
    """'?, ?, ?' for an IN clause of the given size."""
    return ", ".join("?" for _ in range(count))
