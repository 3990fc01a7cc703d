"""
iCalendar (.ics) export.

We convert schedules into a calendar file that can be imported into:
- Google Calendar
- Outlook
- Apple Calendar

Times are written as floating local times, the same wall-clock values the
schedules hold.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable
from datetime import datetime, timezone

from schedulesync.model import Schedule


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS fields (very small subset, sufficient for our use).
    """
    return (
        text.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n").replace(";", "\\;").replace(",", "\\,")
    )


def _dt_local(day: str, time_hh_mm: str) -> str:
    """
    Convert day + time to ICS local datetime string 'YYYYMMDDTHHMM00'.
    """
    dt = datetime.strptime(f"{day} {time_hh_mm}", "%Y-%m-%d %H:%M")
    return dt.strftime("%Y%m%dT%H%M00")


def export_schedules_to_ics(schedules: Iterable[Schedule], out_path: str | Path) -> int:
    """
    Export schedules to an .ics file. Returns number of exported events.

    Schedules whose day or times do not parse are skipped.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    lines: list[str] = []
    lines.append("BEGIN:VCALENDAR")
    lines.append("VERSION:2.0")
    lines.append("PRODID:-//schedulesync//EN")
    lines.append("CALSCALE:GREGORIAN")

    dtstamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")

    count = 0
    for schedule in schedules:
        day = (schedule.day or "").strip()
        start = (schedule.start_time or "").strip()
        end = (schedule.end_time or "").strip()

        if not (day and start and end):
            continue

        try:
            dtstart = _dt_local(day, start)
            dtend = _dt_local(day, end)
        except ValueError:
            continue

        uid = f"schedule-{schedule.id}@schedulesync" if schedule.id is not None else f"schedule-{dtstart}@schedulesync"

        lines.append("BEGIN:VEVENT")
        lines.append(f"UID:{_ics_escape(uid)}")
        lines.append(f"DTSTAMP:{dtstamp}")
        lines.append(f"DTSTART:{dtstart}")
        lines.append(f"DTEND:{dtend}")
        lines.append(f"SUMMARY:{_ics_escape(f'Schedule {schedule.id}')}")
        lines.append("END:VEVENT")
        count += 1

    lines.append("END:VCALENDAR")

    # ICS standard uses CRLF
    out.write_text("\r\n".join(lines) + "\r\n", encoding="utf-8")
    return count
