"""
Time helpers.

Timestamps are stored as naive UTC datetimes. Reporting (calendar days,
weekdays, hours of day) happens in the configured REPORTING_TIMEZONE.
"""

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from flask import current_app, has_app_context

from gymapp.errors import ValidationError


def utcnow() -> datetime:
    """Current time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def reporting_tz():
    name = 'UTC'
    if has_app_context():
        name = current_app.config.get('REPORTING_TIMEZONE', 'UTC')
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError:
        current_app.logger.warning(f"Unknown REPORTING_TIMEZONE {name!r}, using UTC")
        return timezone.utc


def to_local(value: datetime) -> datetime:
    """Convert a stored naive UTC datetime to the reporting timezone."""
    return value.replace(tzinfo=timezone.utc).astimezone(reporting_tz())


def to_utc_naive(value: datetime) -> datetime:
    """Normalize an incoming datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def local_day_bounds(day: date):
    """Return (start, end) of a reporting-timezone calendar day as naive UTC."""
    tz = reporting_tz()
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = start + timedelta(days=1)
    return to_utc_naive(start), to_utc_naive(end)


def window_start(window_days: int, now: datetime = None) -> datetime:
    """Local midnight of today minus window_days, as naive UTC."""
    now = now or utcnow()
    today = to_local(now).date()
    start, _ = local_day_bounds(today - timedelta(days=window_days))
    return start


def parse_timestamp(raw, field='time'):
    """Parse an ISO-8601 timestamp from a request body; None passes through."""
    if raw is None or raw == '':
        return None
    if isinstance(raw, datetime):
        return to_utc_naive(raw)
    try:
        value = datetime.fromisoformat(str(raw).replace('Z', '+00:00'))
    except ValueError:
        raise ValidationError(f"'{field}' must be an ISO-8601 timestamp")
    return to_utc_naive(value)


def parse_day(raw, field='date'):
    try:
        return date.fromisoformat(str(raw))
    except ValueError:
        raise ValidationError(f"'{field}' must be a YYYY-MM-DD date")


def isoformat(value):
    """Serialize a stored datetime/date (naive UTC) for JSON."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=timezone.utc).isoformat()
    return value.isoformat()
