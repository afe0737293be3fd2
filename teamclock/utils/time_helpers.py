# teamclock/utils/time_helpers.py

import calendar
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional, Tuple, Union

import pytz

logger = logging.getLogger(__name__)

ISO_DURATION_RE = re.compile(
    r'^P(?:(?P<days>\d+)D)?'
    r'(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+(?:\.\d+)?)S)?)?$'
)
CLOCK_DURATION_RE = re.compile(r'^(?P<hours>\d+):(?P<minutes>\d{1,2})(?::(?P<seconds>\d{1,2}(?:\.\d+)?))?$')


@dataclass(frozen=True)
class ParsedDuration:
    """A successfully parsed duration"""
    total_seconds: int
    source_format: str  # 'iso8601' or 'clock'

    @property
    def minutes(self) -> int:
        return self.total_seconds // 60

    @property
    def hours(self) -> float:
        return self.total_seconds / 3600


@dataclass(frozen=True)
class DurationParseError:
    """A duration string that matched neither accepted format"""
    text: Optional[str]
    reason: str


def parse_duration(text: Optional[str]) -> Union[ParsedDuration, DurationParseError]:
    """
    Parse a duration string into seconds.

    Accepts ISO-8601 durations ("PT1H30M", "P1DT2H", "PT45S") and clock
    strings ("01:30:00", "1:30"). Returns a DurationParseError instead of
    raising so callers decide how to treat bad input.
    """
    if text is None:
        return DurationParseError(text, 'missing duration')

    value = text.strip()
    if not value:
        return DurationParseError(text, 'empty duration')

    match = ISO_DURATION_RE.match(value)
    # A bare 'P' or a trailing 'T' carries no components
    if match and value != 'P' and not value.endswith('T'):
        parts = match.groupdict()
        seconds = (
            int(parts['days'] or 0) * 86400
            + int(parts['hours'] or 0) * 3600
            + int(parts['minutes'] or 0) * 60
            + int(float(parts['seconds'] or 0))
        )
        return ParsedDuration(seconds, 'iso8601')

    match = CLOCK_DURATION_RE.match(value)
    if match:
        minutes = int(match.group('minutes'))
        secs = float(match.group('seconds') or 0)
        if minutes >= 60 or secs >= 60:
            return DurationParseError(text, 'clock field out of range')
        seconds = int(match.group('hours')) * 3600 + minutes * 60 + int(secs)
        return ParsedDuration(seconds, 'clock')

    return DurationParseError(text, 'unrecognized duration format')


def duration_minutes(text: Optional[str]) -> int:
    """Whole minutes in a duration string, 0 when it cannot be parsed"""
    result = parse_duration(text)
    if isinstance(result, DurationParseError):
        if text:
            logger.warning(f"Could not parse duration {text!r}: {result.reason}")
        return 0
    return result.minutes


def format_minutes(minutes: int) -> str:
    """Format minutes as '1h 30m'"""
    return f"{minutes // 60}h {minutes % 60}m"


def format_duration(text: Optional[str]) -> str:
    """Format a duration string as '1h 30m'"""
    return format_minutes(duration_minutes(text))


def total_hours(text: Optional[str]) -> float:
    result = parse_duration(text)
    if isinstance(result, DurationParseError):
        return 0.0
    return result.minutes / 60


def total_minutes(entries: Iterable) -> int:
    """Sum the durations of time entries (anything with a .duration string)"""
    return sum(duration_minutes(entry.duration) for entry in entries)


def working_days_in_month(today: Optional[date] = None) -> int:
    """Count Monday-Friday days in the month containing `today`"""
    today = today or date.today()
    last_day = calendar.monthrange(today.year, today.month)[1]
    return sum(
        1 for day in range(1, last_day + 1)
        if date(today.year, today.month, day).weekday() < 5
    )


def expected_monthly_hours(today: Optional[date] = None, hours_per_day: int = 8) -> int:
    return working_days_in_month(today) * hours_per_day


def week_range(now: datetime, tz_name: str) -> Tuple[datetime, datetime]:
    """
    Sunday 00:00 through Saturday 23:59:59.999999 of the week containing `now`.

    A naive `now` is taken as UTC. Returns timezone-aware datetimes in
    `tz_name`.
    """
    tz = pytz.timezone(tz_name)
    local_now = _to_zone(now, tz)
    # weekday(): Monday=0 ... Sunday=6
    days_since_sunday = (local_now.weekday() + 1) % 7
    start_day = local_now.date() - timedelta(days=days_since_sunday)
    end_day = start_day + timedelta(days=6)
    return (
        tz.localize(datetime.combine(start_day, time.min)),
        tz.localize(datetime.combine(end_day, time.max)),
    )


def month_range(now: datetime, tz_name: str) -> Tuple[datetime, datetime]:
    """First day 00:00 through last day 23:59:59.999999 of the month containing `now`"""
    tz = pytz.timezone(tz_name)
    local_now = _to_zone(now, tz)
    last_day = calendar.monthrange(local_now.year, local_now.month)[1]
    return (
        tz.localize(datetime.combine(local_now.date().replace(day=1), time.min)),
        tz.localize(datetime.combine(local_now.date().replace(day=last_day), time.max)),
    )


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp from an API payload; empty means absent"""
    if not value:
        return None
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = pytz.UTC.localize(parsed)
    return parsed


def to_utc_iso(value: datetime) -> str:
    """Render a datetime as a UTC ISO string with a trailing Z"""
    if value.tzinfo is None:
        value = pytz.UTC.localize(value)
    return value.astimezone(pytz.UTC).strftime('%Y-%m-%dT%H:%M:%SZ')


def now_in(tz_name: str) -> datetime:
    """Current time in the given timezone"""
    return datetime.now(pytz.timezone(tz_name))


def _to_zone(value: datetime, tz) -> datetime:
    # Naive values are UTC
    if value.tzinfo is None:
        value = pytz.UTC.localize(value)
    return value.astimezone(tz)
