"""Operating-timezone clock helpers for the periodic jobs.

The platform runs on one fixed region's wall clock, whatever the host's local
timezone is. Stored timestamps without tzinfo are UTC instants.
"""

import re
from datetime import UTC, datetime, time, timedelta
from zoneinfo import ZoneInfo

_TIME_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])?\s*$")


def as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def now_local(tz: ZoneInfo, now: datetime | None = None) -> datetime:
    return as_utc(now or datetime.now(UTC)).astimezone(tz)


def day_bounds(moment: datetime) -> tuple[datetime, datetime]:
    """``[start of that day, start of the next day)`` in ``moment``'s timezone."""
    start = datetime.combine(moment.date(), time.min, tzinfo=moment.tzinfo)
    end = datetime.combine(moment.date() + timedelta(days=1), time.min, tzinfo=moment.tzinfo)
    return start, end


def parse_scheduled_time(value: str | None) -> time | None:
    """Parse ``"HH:MM"`` (24-hour) or ``"HH:MM AM/PM"``; None when malformed."""
    match = _TIME_PATTERN.match(value or "")
    if not match:
        return None

    hours, minutes, meridiem = int(match.group(1)), int(match.group(2)), match.group(3)
    if minutes > 59:
        return None
    if meridiem:
        if not 1 <= hours <= 12:
            return None
        hours = hours % 12
        if meridiem.upper() == "PM":
            hours += 12
    elif hours > 23:
        return None
    return time(hours, minutes)


def normalize_time(value: str | None) -> str | None:
    parsed = parse_scheduled_time(value)
    return parsed.strftime("%H:%M") if parsed else None


def delivery_instant(scheduled_date: datetime | None, scheduled_time: str | None, tz: ZoneInfo) -> datetime | None:
    """Combine the scheduled date's local calendar day with the scheduled time."""
    if scheduled_date is None:
        return None
    parsed = parse_scheduled_time(scheduled_time)
    if parsed is None:
        return None
    local_day = as_utc(scheduled_date).astimezone(tz).date()
    return datetime.combine(local_day, parsed, tzinfo=tz)
