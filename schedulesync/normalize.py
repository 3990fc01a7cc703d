"""
Normalization of remote schedule payloads.

Two concerns live here:
- the date normalization rule that turns whatever the API sends in `day`
  into a canonical YYYY-MM-DD string
- the ordered envelope decoders that find the record list inside a
  response body (bare list, {"data": [...]}, {"schedules": [...]})

Important rules (DO NOT CHANGE):
- string prefix extraction always wins over parsing
- the parse fallback reads the calendar date in UTC, never in local time
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

from schedulesync.model import Schedule

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Date normalization (CORE LOGIC)
# ---------------------------------------------------------------------------

_CANONICAL_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DATE_PREFIX = re.compile(r"^(\d{4}-\d{2}-\d{2})")


def _parse_slash_date(text: str) -> date:
    for fmt in ("%m/%d/%Y %H:%M:%S", "%m/%d/%Y %H:%M"):
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return datetime.strptime(text, "%m/%d/%Y").date()


# Tried in order. Each raises on input it does not understand.
# Date-only forms ("20251111", "2025-W46-2") come back as a plain date.
_INSTANT_PARSERS: Tuple[Callable[[str], date], ...] = (
    date.fromisoformat,
    datetime.fromisoformat,
    parsedate_to_datetime,
    _parse_slash_date,
)


def _parse_instant(text: str) -> Optional[date]:
    for parser in _INSTANT_PARSERS:
        try:
            return parser(text)
        except (TypeError, ValueError, IndexError):
            continue
    return None


def normalize_date_field(value: Any) -> Any:
    """
    Normalize a date-bearing value to YYYY-MM-DD.

    - empty / None / non-string -> returned unchanged
    - already canonical -> returned unchanged
    - ISO datetime like "2025-11-11T00:00:00+00:00" -> "2025-11-11" (no parsing)
    - other date-only forms ("20251111", "2025-W46-2") -> that calendar date
    - anything else that parses as an instant -> its UTC calendar date
    - unparseable -> returned unchanged (logged)
    """
    if not value or not isinstance(value, str):
        return value

    if len(value) == 10 and _CANONICAL_DATE.match(value):
        return value

    # Taking the text prefix avoids any timezone conversion.
    match = _DATE_PREFIX.match(value)
    if match:
        return match.group(1)

    parsed = _parse_instant(value.strip())
    if parsed is None:
        logger.warning("Could not normalize date value %r", value)
        return value

    # A date without a time of day has no offset to shift it.
    if not isinstance(parsed, datetime):
        return parsed.isoformat()

    # Naive values are read as local time, then the date is taken in UTC.
    utc = parsed.astimezone(timezone.utc)
    return f"{utc.year:04d}-{utc.month:02d}-{utc.day:02d}"


def normalize_schedule(schedule: Schedule) -> Schedule:
    """
    Return a copy of `schedule` with its day normalized.
    """
    return replace(schedule, day=normalize_date_field(schedule.day))


# ---------------------------------------------------------------------------
# Envelope decoders
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BareList:
    """The body itself is the record list."""

    @property
    def name(self) -> str:
        return "bare list"

    def decode(self, payload: Any) -> Optional[List[Any]]:
        return payload if isinstance(payload, list) else None


@dataclass(frozen=True)
class WrappedUnder:
    """The record list sits under one key of a JSON object."""

    key: str

    @property
    def name(self) -> str:
        return f"wrapped under {self.key!r}"

    def decode(self, payload: Any) -> Optional[List[Any]]:
        if not isinstance(payload, Mapping):
            return None
        items = payload.get(self.key)
        return items if isinstance(items, list) else None


ENVELOPE_DECODERS: Tuple[Any, ...] = (
    BareList(),
    WrappedUnder("data"),
    WrappedUnder("schedules"),
)


@dataclass
class DecodeResult:
    """
    Outcome of unwrapping a collection payload.

    `decoder` names the strategy that matched. When none matched, `items` is
    empty and `reason` describes what was received instead.
    """

    items: List[Any] = field(default_factory=list)
    decoder: Optional[str] = None
    reason: Optional[str] = None

    @property
    def decoded(self) -> bool:
        return self.decoder is not None


def _describe_payload(payload: Any) -> str:
    if isinstance(payload, Mapping):
        keys = sorted(str(k) for k in payload.keys())
        return f"object with keys {keys}"
    return f"unexpected payload type {type(payload).__name__}"


def unwrap_collection(payload: Any, decoders: Sequence[Any] = ENVELOPE_DECODERS) -> DecodeResult:
    """
    Try each decoder in order and return the first list found.

    Never raises: an unknown shape gives an empty result with a reason.
    """
    for decoder in decoders:
        items = decoder.decode(payload)
        if items is not None:
            return DecodeResult(items=list(items), decoder=decoder.name)
    return DecodeResult(items=[], reason=_describe_payload(payload))


def decode_schedules(payload: Any) -> DecodeResult:
    """
    Unwrap a collection payload into normalized Schedule objects.

    Entries that are not JSON objects are skipped.
    """
    result = unwrap_collection(payload)
    if not result.decoded:
        logger.warning("Schedule list payload not recognized: %s", result.reason)
        return result

    schedules: List[Schedule] = []
    for raw in result.items:
        if not isinstance(raw, Mapping):
            logger.warning("Skipping schedule entry that is not an object: %r", raw)
            continue
        schedules.append(normalize_schedule(Schedule.from_dict(raw)))

    return DecodeResult(items=schedules, decoder=result.decoder)
