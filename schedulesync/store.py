"""
In-memory schedule store.

The store owns the session's snapshot of schedules and keeps it in step with
the remote collection through a ScheduleService passed in by the caller.

Contract of every CRUD operation:
- loading is True while the request runs and False afterwards, on every path
- error is cleared on entry and set to the failure message on a failed request
- failures are re-raised, never swallowed
- the snapshot changes only after the remote call succeeded
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, tzinfo
from typing import Any, Iterator, List, Optional

from schedulesync.errors import ScheduleServiceError
from schedulesync.model import CalendarEvent, CreateScheduleDto, Schedule, UpdateScheduleDto
from schedulesync.projection import extract_create_dto, to_calendar_events
from schedulesync.service import ScheduleService

logger = logging.getLogger(__name__)


class ScheduleStore:
    def __init__(self, service: ScheduleService, tz: Optional[tzinfo] = None) -> None:
        self.service = service
        self.tz = tz
        self.loading = False
        self.error: Optional[str] = None
        self._schedules: List[Schedule] = []

    # -----------------------------------------------------------------------
    # Observable state
    # -----------------------------------------------------------------------

    @property
    def schedules(self) -> List[Schedule]:
        """Copy of the current snapshot, in arrival order."""
        return list(self._schedules)

    @property
    def has_schedules(self) -> bool:
        return len(self._schedules) > 0

    @contextmanager
    def _tracking(self) -> Iterator[None]:
        self.loading = True
        self.error = None
        try:
            yield
        except ScheduleServiceError as exc:
            self.error = str(exc)
            raise
        finally:
            self.loading = False

    # -----------------------------------------------------------------------
    # CRUD
    # -----------------------------------------------------------------------

    def fetch_all(self) -> List[CalendarEvent]:
        """
        Replace the snapshot with the remote collection and return its events.
        """
        with self._tracking():
            schedules = self.service.list_schedules()
            self._schedules = list(schedules)
            return self.to_calendar_events(self._schedules)

    def create(self, dto: CreateScheduleDto) -> Schedule:
        with self._tracking():
            created = self.service.create_schedule(dto)
            self._schedules.append(created)
            return created

    def update(self, schedule_id: int, dto: UpdateScheduleDto) -> Schedule:
        """
        Update remotely, then replace the cached record in place.

        If the id is not cached the snapshot is left alone and the remote
        result is still returned.
        """
        with self._tracking():
            updated = self.service.update_schedule(schedule_id, dto)
            index = next((i for i, s in enumerate(self._schedules) if s.id == schedule_id), None)
            if index is None:
                logger.warning("Updated schedule %s is not in the local snapshot; cache may be stale", schedule_id)
            else:
                self._schedules[index] = updated
            return updated

    def delete(self, schedule_id: int) -> None:
        with self._tracking():
            self.service.delete_schedule(schedule_id)
            self._schedules = [s for s in self._schedules if s.id != schedule_id]

    # -----------------------------------------------------------------------
    # Projection
    # -----------------------------------------------------------------------

    def to_calendar_events(self, schedules: Any) -> List[CalendarEvent]:
        return to_calendar_events(schedules, self.tz)

    def extract_create_dto(self, start: datetime, end: datetime) -> CreateScheduleDto:
        return extract_create_dto(start, end, self.tz)
