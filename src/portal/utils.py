from datetime import UTC, date, datetime

PLACEHOLDER_URLS = frozenset({"", "#"})


def now() -> datetime:
    return datetime.now(UTC)


def parse_published_date(value: str | None) -> date | None:
    """Parse an ISO-ish date string into a UTC calendar date, None if unparseable.

    Accepts `2025-01-31`, `2025-01-31T10:00:00`, `2025-01-31T10:00:00Z`,
    `2025-01-31T10:00:00.000+05:30` and `2025-01-31 10:00:00`.
    Naive datetimes are taken as UTC.
    """
    if not value:
        return None
    text = value.strip()
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(UTC)
    return parsed.date()


def is_downloadable_url(url: str | None) -> bool:
    """False for an empty or placeholder file URL."""
    return (url or "").strip() not in PLACEHOLDER_URLS
