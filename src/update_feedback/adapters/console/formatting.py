"""Human-readable formatting helpers."""

from datetime import datetime, timedelta, timezone
from typing import Optional


def proper_plural(number: int, term: str) -> str:
    """Format a count with a naively pluralized term."""
    if number in (1, -1):
        return f"{number} {term}"
    return f"{number} {term}s"


def duration_until_now(moment: datetime, now: Optional[datetime] = None) -> timedelta:
    """Time elapsed since a moment in the past; never negative."""
    now = now or datetime.now(timezone.utc)
    return max(now - moment, timedelta(0))


def pretty_duration(duration: timedelta) -> str:
    """Format a duration as e.g. "2 days and 3 hours"."""
    if duration >= timedelta(days=1):
        days = duration.days
        hours = (duration - timedelta(days=days)) // timedelta(hours=1)
        return f"{proper_plural(days, 'day')} and {proper_plural(hours, 'hour')}"
    
    if duration >= timedelta(hours=1):
        hours = duration // timedelta(hours=1)
        minutes = (duration - timedelta(hours=hours)) // timedelta(minutes=1)
        return f"{proper_plural(hours, 'hour')} and {proper_plural(minutes, 'minute')}"
    
    if duration >= timedelta(minutes=1):
        return proper_plural(duration // timedelta(minutes=1), "minute")
    
    return "less than a minute"


def format_karma(value: Optional[int], signed: bool = False) -> str:
    """Format a karma count; unknown values are shown as "?"."""
    if value is None:
        return "?"
    if signed and value > 0:
        return f"+{value}"
    return str(value)
