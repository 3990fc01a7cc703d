"""
Projection between Schedule records and calendar-display events.

Schedules hold local wall-clock data (a day plus HH:MM times). Calendar events
hold absolute instants. The conversion from local time to an instant happens
in exactly one place, `_to_instant`.

Both directions take an optional `tz`; when it is None the system local
timezone is used.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, List, Mapping, Optional, Tuple

from schedulesync.model import CalendarEvent, CreateScheduleDto, Schedule

logger = logging.getLogger(__name__)

# Fallback date for malformed `day` values. Not a validated date.
DEFAULT_YEAR = 2025
DEFAULT_MONTH = 1
DEFAULT_DAY = 1


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _int_or(text: Any, default: int) -> int:
    """
    Parse an int component; missing, non-numeric and zero all give `default`.
    """
    try:
        value = int(text)
    except (TypeError, ValueError):
        return default
    return value or default


def _parse_day(day: Any) -> datetime:
    """
    Local midnight of a YYYY-MM-DD day.

    Month and day overflow roll forward (month 13 -> January of next year).
    A day outside the datetime range gives the fallback date.
    """
    parts = str(day or "").split("-")

    def component(index: int, default: int) -> int:
        return _int_or(parts[index], default) if index < len(parts) else default

    year = component(0, DEFAULT_YEAR)
    month = component(1, DEFAULT_MONTH)
    dom = component(2, DEFAULT_DAY)

    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    try:
        return datetime(year, month, 1) + timedelta(days=dom - 1)
    except (ValueError, OverflowError):
        logger.warning("Day %r is out of range, using fallback date", day)
        return datetime(DEFAULT_YEAR, DEFAULT_MONTH, DEFAULT_DAY)


def _parse_time(hhmm: Any) -> Tuple[int, int]:
    parts = str(hhmm or "").split(":")
    hours = _int_or(parts[0], 0)
    minutes = _int_or(parts[1], 0) if len(parts) > 1 else 0
    return hours, minutes


def _to_instant(local: datetime, tz: Optional[tzinfo]) -> str:
    """
    Serialize a naive local wall-clock datetime as a UTC instant
    ('2025-11-11T08:00:00.000Z').
    """
    aware = local.astimezone() if tz is None else local.replace(tzinfo=tz)
    utc = aware.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _as_local(moment: datetime, tz: Optional[tzinfo]) -> datetime:
    # naive datetimes already carry local wall-clock time
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(tz)


def _format_day(moment: datetime) -> str:
    return f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"


def _format_time(moment: datetime) -> str:
    return f"{moment.hour:02d}:{moment.minute:02d}"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def schedule_to_event(schedule: Schedule, tz: Optional[tzinfo] = None) -> CalendarEvent:
    base = _parse_day(schedule.day)

    start_h, start_m = _parse_time(schedule.start_time)
    end_h, end_m = _parse_time(schedule.end_time)

    start = base + timedelta(hours=start_h, minutes=start_m)
    end = base + timedelta(hours=end_h, minutes=end_m)

    return CalendarEvent(
        id=str(schedule.id),
        start=_to_instant(start, tz),
        end=_to_instant(end, tz),
        resource_id=schedule.day,
        extended_props={"scheduleId": schedule.id},
    )


def to_calendar_events(schedules: Any, tz: Optional[tzinfo] = None) -> List[CalendarEvent]:
    """
    Project schedules into calendar events.

    Pure: the input is not modified. Anything other than a list or tuple
    gives [] instead of an exception. Entries may be Schedule objects or
    wire-format dicts. Entries whose instant cannot be represented are
    skipped.
    """
    if not isinstance(schedules, (list, tuple)):
        logger.error("Expected a list of schedules, got: %r", schedules)
        return []

    events: List[CalendarEvent] = []
    for item in schedules:
        if isinstance(item, Mapping):
            item = Schedule.from_dict(item)
        if not isinstance(item, Schedule):
            logger.error("Skipping entry that is not a schedule: %r", item)
            continue
        try:
            events.append(schedule_to_event(item, tz))
        except (ValueError, OverflowError):
            # times that push the instant past the supported range
            logger.error("Skipping schedule %r with out-of-range time", item.id)
    return events


def extract_create_dto(start: datetime, end: datetime, tz: Optional[tzinfo] = None) -> CreateScheduleDto:
    """
    Build a create request from two instants (e.g. a drag-selected range).

    The day comes from `start`'s local date; both times are local HH:MM.
    """
    local_start = _as_local(start, tz)
    local_end = _as_local(end, tz)
    return CreateScheduleDto(
        day=_format_day(local_start),
        start_time=_format_time(local_start),
        end_time=_format_time(local_end),
    )
