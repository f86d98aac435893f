from __future__ import annotations

from datetime import date, datetime, time, timedelta


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def day_window(day: date) -> tuple[datetime, datetime]:
    """Return ``[local midnight, next local midnight)`` for ``day``."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def format_notification_time(ts: datetime) -> tuple[str, str]:
    """Human-readable (date, time) pair used in SMS bodies, e.g. ("Oct 18, 2026", "07:45 AM")."""
    return f"{ts.strftime('%b')} {ts.day}, {ts.year}", ts.strftime("%I:%M %p")
