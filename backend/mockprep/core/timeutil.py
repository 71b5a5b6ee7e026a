"""Timezone-aware clock and calendar-day helpers."""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Union

import pytz

from .errors import ValidationFailed

Clock = Callable[[], datetime]


def make_clock(tz_name: str) -> Clock:
    """Return a callable producing "now" in the configured zone."""
    tz = pytz.timezone(tz_name)

    def _now() -> datetime:
        return datetime.now(tz)

    return _now


def as_day(value: Union[str, date, datetime]) -> date:
    """Reduce a date, datetime or ISO text to its calendar day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        if len(text) > 10:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return date.fromisoformat(text)
    except ValueError as exc:
        raise ValidationFailed(
            "Invalid date",
            details=[{"field": "date", "message": f"not an ISO date: {text!r}"}],
        ) from exc
