from __future__ import annotations

import datetime as dt
import math

NO_DUE_DATE_DAYS = 999


def utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc).replace(tzinfo=None)


def parse_timestamp(value: str | dt.date | None) -> dt.datetime | None:
    """Parses an ISO date or timestamp into a naive UTC datetime.

    Date-only strings resolve to midnight. Returns None for empty or
    unparseable input.
    """
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        parsed = value
    elif isinstance(value, dt.date):
        return dt.datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = dt.datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(dt.timezone.utc).replace(tzinfo=None)
    return parsed


def parse_date(value: str | dt.date | None) -> dt.date | None:
    parsed = parse_timestamp(value)
    return parsed.date() if parsed else None


def to_iso_date(value: dt.date | dt.datetime) -> str:
    if isinstance(value, dt.datetime):
        value = value.date()
    return value.isoformat()


def to_iso_timestamp(value: dt.datetime) -> str:
    return value.isoformat(timespec="milliseconds") + "Z"


def days_between(start: dt.date, end: dt.date) -> int:
    return (end - start).days


def days_until_due(due_date: str | None, today: dt.date | dt.datetime) -> int:
    """Whole days from today's midnight to the due date's midnight.

    A missing (or unparseable) due date counts as NO_DUE_DATE_DAYS out.
    """
    due = parse_date(due_date)
    if due is None:
        return NO_DUE_DATE_DAYS
    if isinstance(today, dt.datetime):
        today = today.date()
    return days_between(today, due)


def weeks_left(days_left: int) -> int:
    return max(1, math.ceil(days_left / 7))
