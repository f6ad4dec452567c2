"""Helpers for ``YYYY-MM`` month identifiers."""
from __future__ import annotations

import calendar
import re
from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from bookclub.core.errors import ValidationError

MONTH_PATTERN = re.compile(r"^(?P<year>\d{4})-(?P<month>0[1-9]|1[0-2])$")


def current_month(now: datetime | None = None, *, tz: str = "UTC") -> str:
    """Return the month containing ``now`` in the given zone, e.g. ``"2026-01"``."""

    if tz.upper() == "UTC":
        zone = timezone.utc
    else:
        try:
            zone = ZoneInfo(tz)
        except ZoneInfoNotFoundError as exc:
            raise ValidationError(f"Unknown time zone '{tz}'") from exc

    moment = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(zone).strftime("%Y-%m")


def validate_month(value: str) -> str:
    candidate = (value or "").strip()
    if not MONTH_PATTERN.match(candidate):
        raise ValidationError(f"Month '{value}' must use the YYYY-MM format")
    return candidate


def format_month_display(month: str) -> str:
    """Render a month for humans: ``"2026-01"`` becomes ``"January 2026"``."""

    match = MONTH_PATTERN.match(month)
    if match is None:
        return month
    return f"{calendar.month_name[int(match['month'])]} {match['year']}"


__all__ = ["MONTH_PATTERN", "current_month", "format_month_display", "validate_month"]
