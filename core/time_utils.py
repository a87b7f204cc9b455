from datetime import date, datetime, timezone


def now_utc() -> datetime:
    """Return a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_iso_date(value) -> date | None:
    """Accept a date, datetime or 'YYYY-MM-DD' string and return a date.

    Returns None for empty input; raises ValueError for anything unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    return date.fromisoformat(text)
