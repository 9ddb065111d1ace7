"""Growth OS — Date range resolution for API query parameters."""

from datetime import date, datetime, timedelta
from typing import Optional

from pydantic import BaseModel

from growthos.core.errors import ValidationError

DEFAULT_DAYS = 30
MAX_DAYS = 540  # Business Profile keeps 18 months


class DateRange(BaseModel):
    """Inclusive reporting window, both ends YYYY-MM-DD."""

    since: str
    until: str

    def days(self) -> list[date]:
        start = date.fromisoformat(self.since)
        end = date.fromisoformat(self.until)
        return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def _parse(value: str, name: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"'{name}' must be a date in YYYY-MM-DD format")


def resolve_date_range(
    since: Optional[str] = None,
    until: Optional[str] = None,
    days: Optional[int] = None,
    today: Optional[date] = None,
) -> DateRange:
    """Resolve ``since``/``until`` or a trailing ``days`` window.

    Explicit dates win; ``until`` alone defaults ``since`` to ``days`` before it.
    """
    today = today or date.today()

    if days is not None and (days < 1 or days > MAX_DAYS):
        raise ValidationError(f"'days' must be between 1 and {MAX_DAYS}")
    window = days or DEFAULT_DAYS

    end = _parse(until, "until") if until else today
    start = _parse(since, "since") if since else end - timedelta(days=window)

    if start > end:
        raise ValidationError("'since' must not be after 'until'")

    return DateRange(since=start.isoformat(), until=end.isoformat())
