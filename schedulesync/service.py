"""
Transport adapter for the remote schedule collection.

ScheduleService is constructed explicitly (no module-level instance) and owns
its configuration and requests.Session, so tests can hand in a fake session.

Guarantee: every Schedule returned from here has a canonical YYYY-MM-DD day.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

import requests

from schedulesync.config import ClientConfig
from schedulesync.errors import CreateError, DeleteError, FetchError, UpdateError
from schedulesync.model import CreateScheduleDto, Schedule, UpdateScheduleDto
from schedulesync.normalize import DecodeResult, decode_schedules, normalize_schedule

logger = logging.getLogger(__name__)


def _to_schedule(data: Any) -> Schedule:
    if not isinstance(data, Mapping):
        raise ValueError(f"Expected a schedule object, got {type(data).__name__}")
    return normalize_schedule(Schedule.from_dict(data))


class ScheduleService:
    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config or ClientConfig()
        self._session = session or requests.Session()
        self._session.headers.update(self.config.default_headers)

    # -----------------------------------------------------------------------
    # HTTP helper
    # -----------------------------------------------------------------------

    def _request(self, method: str, path: str, body: Optional[dict] = None, expect_body: bool = True) -> Any:
        """
        Send one request and return the decoded JSON body.

        Raises requests.RequestException for connection problems, non-2xx
        statuses and undecodable JSON.
        """
        url = self.config.url(path)
        logger.debug("%s %s", method, url)
        resp = self._session.request(method, url, json=body, timeout=self.config.timeout_seconds)
        resp.raise_for_status()
        if not expect_body:
            return None
        return resp.json()

    # -----------------------------------------------------------------------
    # Reads
    # -----------------------------------------------------------------------

    def list_schedules_result(self) -> DecodeResult:
        """
        Fetch the whole collection and report how the payload was decoded.
        """
        try:
            payload = self._request("GET", "/schedules")
        except requests.RequestException as exc:
            logger.error("Error fetching schedules: %s", exc)
            raise FetchError.for_collection() from None

        result = decode_schedules(payload)
        logger.debug("Decoded %d schedules (%s)", len(result.items), result.decoder or result.reason)
        return result

    def list_schedules(self) -> List[Schedule]:
        """
        Fetch the whole collection. An unrecognized payload shape gives [].
        """
        return self.list_schedules_result().items

    def get_schedule(self, schedule_id: int) -> Schedule:
        try:
            data = self._request("GET", f"/schedules/{schedule_id}")
            return _to_schedule(data)
        except (requests.RequestException, ValueError) as exc:
            logger.error("Error fetching schedule %s: %s", schedule_id, exc)
            raise FetchError.for_record(schedule_id) from None

    # -----------------------------------------------------------------------
    # Writes
    # -----------------------------------------------------------------------

    def create_schedule(self, dto: CreateScheduleDto) -> Schedule:
        try:
            data = self._request("POST", "/schedules", dto.to_dict())
            return _to_schedule(data)
        except (requests.RequestException, ValueError) as exc:
            logger.error("Error creating schedule: %s", exc)
            raise CreateError() from None

    def update_schedule(self, schedule_id: int, dto: UpdateScheduleDto) -> Schedule:
        try:
            data = self._request("PUT", f"/schedules/{schedule_id}", dto.to_dict())
            return _to_schedule(data)
        except (requests.RequestException, ValueError) as exc:
            logger.error("Error updating schedule %s: %s", schedule_id, exc)
            raise UpdateError(schedule_id) from None

    def delete_schedule(self, schedule_id: int) -> None:
        try:
            self._request("DELETE", f"/schedules/{schedule_id}", expect_body=False)
        except requests.RequestException as exc:
            logger.error("Error deleting schedule %s: %s", schedule_id, exc)
            raise DeleteError(schedule_id) from None
