"""
Central data model definitions used across the project.

This module defines the canonical structure of Schedule records, the
request payloads used to write them, and the CalendarEvent projection, so that:
- all modules share the same field names
- the camelCase wire format of the remote API is handled in one place
- the rest of the code works with plain snake_case attributes
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

DEFAULT_EVENT_COLOR = "#3788d8"


@dataclass
class Schedule:
    """
    One schedule record as held by the remote collection.

    `day` is a local calendar date (YYYY-MM-DD), `start_time` and `end_time`
    are local wall-clock times (HH:MM). `id` is None until the server assigns one.
    """

    id: Optional[int]
    day: str
    start_time: str
    end_time: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Schedule":
        return cls(
            id=data.get("id"),
            day=data.get("day") or "",
            start_time=data.get("startTime") or "",
            end_time=data.get("endTime") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "day": self.day,
            "startTime": self.start_time,
            "endTime": self.end_time,
        }


@dataclass
class CreateScheduleDto:
    """
    Request body for creating a schedule. All fields are required.
    """

    day: str
    start_time: str
    end_time: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "day": self.day,
            "startTime": self.start_time,
            "endTime": self.end_time,
        }


@dataclass
class UpdateScheduleDto:
    """
    Partial patch for an existing schedule. Only fields that are set are sent.
    """

    day: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {}
        if self.day is not None:
            body["day"] = self.day
        if self.start_time is not None:
            body["startTime"] = self.start_time
        if self.end_time is not None:
            body["endTime"] = self.end_time
        return body


@dataclass
class CalendarEvent:
    """
    Calendar-display event derived from one Schedule.

    Events are regenerated from a snapshot of schedules and never edited in place.
    `extended_props["scheduleId"]` refers back to the originating schedule.
    """

    id: str
    start: str
    end: str
    resource_id: str
    extended_props: Dict[str, Any] = field(default_factory=dict)
    background_color: str = DEFAULT_EVENT_COLOR
    border_color: str = DEFAULT_EVENT_COLOR
    editable: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "start": self.start,
            "end": self.end,
            "backgroundColor": self.background_color,
            "borderColor": self.border_color,
            "editable": self.editable,
            "resourceId": self.resource_id,
            "extendedProps": dict(self.extended_props),
        }
