"""
Error taxonomy for the schedule transport layer.

Every transport failure is re-raised as one of these types with a fixed,
human-readable message. The underlying requests exception is logged,
not attached.
"""

from __future__ import annotations

from typing import Optional


class ScheduleServiceError(Exception):
    """Base class for failed schedule operations."""

    def __init__(self, message: str, schedule_id: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.schedule_id = schedule_id


class FetchError(ScheduleServiceError):
    """Reading the collection or a single record failed."""

    @classmethod
    def for_collection(cls) -> "FetchError":
        return cls("Failed to fetch schedules")

    @classmethod
    def for_record(cls, schedule_id: int) -> "FetchError":
        return cls(f"Failed to fetch schedule {schedule_id}", schedule_id)


class CreateError(ScheduleServiceError):
    def __init__(self) -> None:
        super().__init__("Failed to create schedule")


class UpdateError(ScheduleServiceError):
    def __init__(self, schedule_id: int) -> None:
        super().__init__(f"Failed to update schedule {schedule_id}", schedule_id)


class DeleteError(ScheduleServiceError):
    def __init__(self, schedule_id: int) -> None:
        super().__init__(f"Failed to delete schedule {schedule_id}", schedule_id)
