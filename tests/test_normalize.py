"""
Unit tests for date normalization and envelope decoding.

Normalization contract:
- canonical YYYY-MM-DD -> unchanged
- value with a YYYY-MM-DD prefix -> the prefix, whatever the time/offset
- other date-only values -> that calendar date
- other parseable instants -> UTC calendar date
- empty / unparseable -> unchanged
"""

import os
import sys
import time
import unittest

from schedulesync.model import Schedule
from schedulesync.normalize import (
    BareList,
    WrappedUnder,
    decode_schedules,
    normalize_date_field,
    normalize_schedule,
    unwrap_collection,
)


class TestNormalizeDateField(unittest.TestCase):
    def test_canonical_dates_are_unchanged(self) -> None:
        for value in ("2025-11-11", "1999-01-31", "2024-02-29"):
            self.assertEqual(normalize_date_field(value), value)

    def test_iso_datetime_keeps_date_prefix(self) -> None:
        cases = [
            "2025-11-11T00:00:00+00:00",
            "2025-11-11T23:59:59-08:00",
            "2025-11-11T00:00:00.000Z",
            "2025-11-11 10:00",
        ]
        for value in cases:
            self.assertEqual(normalize_date_field(value), "2025-11-11")

    def test_prefix_is_not_shifted_by_offset(self) -> None:
        # parsing this as an instant would give 2025-11-11 in UTC
        self.assertEqual(normalize_date_field("2025-11-12T01:00:00+09:00"), "2025-11-12")

    def test_empty_values_pass_through(self) -> None:
        self.assertEqual(normalize_date_field(""), "")
        self.assertIsNone(normalize_date_field(None))

    def test_fallback_uses_utc_calendar_date(self) -> None:
        # 23:30 at -05:00 is 04:30 UTC on the next day
        self.assertEqual(normalize_date_field("Tue, 11 Nov 2025 23:30:00 -0500"), "2025-11-12")
        # 01:00 at +09:00 is 16:00 UTC on the previous day
        self.assertEqual(normalize_date_field("Wed, 12 Nov 2025 01:00:00 +0900"), "2025-11-11")

    def test_unparseable_value_is_returned_and_logged(self) -> None:
        with self.assertLogs("schedulesync.normalize", level="WARNING"):
            self.assertEqual(normalize_date_field("next tuesday"), "next tuesday")

    def test_normalize_schedule_returns_copy(self) -> None:
        original = Schedule(id=1, day="2025-11-11T00:00:00+00:00", start_time="09:00", end_time="10:00")
        normalized = normalize_schedule(original)
        self.assertEqual(normalized.day, "2025-11-11")
        self.assertEqual(original.day, "2025-11-11T00:00:00+00:00")


@unittest.skipUnless(hasattr(time, "tzset"), "needs time.tzset to switch the local zone")
class TestDateOnlyValuesAreNotShifted(unittest.TestCase):
    """
    Date-only values carry no time of day, so a local zone east of UTC
    must not move them to the previous day.
    """

    def setUp(self) -> None:
        self._old_tz = os.environ.get("TZ")
        os.environ["TZ"] = "JST-9"
        time.tzset()

    def tearDown(self) -> None:
        if self._old_tz is None:
            os.environ.pop("TZ", None)
        else:
            os.environ["TZ"] = self._old_tz
        time.tzset()

    def test_slash_date(self) -> None:
        self.assertEqual(normalize_date_field("11/11/2025"), "2025-11-11")

    @unittest.skipIf(sys.version_info < (3, 11), "basic and week ISO forms need Python 3.11")
    def test_basic_and_week_iso_dates(self) -> None:
        self.assertEqual(normalize_date_field("20251111"), "2025-11-11")
        self.assertEqual(normalize_date_field("2025-W46-2"), "2025-11-11")

    @unittest.skipIf(sys.version_info < (3, 11), "basic ISO datetimes need Python 3.11")
    def test_basic_iso_datetime_with_offset(self) -> None:
        self.assertEqual(normalize_date_field("20251111T000000Z"), "2025-11-11")

    def test_local_datetime_still_uses_utc_date(self) -> None:
        # 08:00 at +09:00 is 23:00 UTC on the previous day
        self.assertEqual(normalize_date_field("11/11/2025 08:00"), "2025-11-10")


class TestUnwrapCollection(unittest.TestCase):
    def test_bare_list(self) -> None:
        result = unwrap_collection([{"id": 1}])
        self.assertEqual(result.items, [{"id": 1}])
        self.assertEqual(result.decoder, BareList().name)
        self.assertTrue(result.decoded)

    def test_data_envelope(self) -> None:
        result = unwrap_collection({"data": [{"id": 1}]})
        self.assertEqual(result.items, [{"id": 1}])
        self.assertEqual(result.decoder, WrappedUnder("data").name)

    def test_schedules_envelope(self) -> None:
        result = unwrap_collection({"schedules": [{"id": 2}]})
        self.assertEqual(result.items, [{"id": 2}])
        self.assertEqual(result.decoder, WrappedUnder("schedules").name)

    def test_data_that_is_not_a_list_falls_through_to_schedules(self) -> None:
        result = unwrap_collection({"data": {"id": 1}, "schedules": [{"id": 3}]})
        self.assertEqual(result.items, [{"id": 3}])

    def test_unknown_shapes_give_empty_result_with_reason(self) -> None:
        for payload in ({"items": []}, "oops", None, 42):
            result = unwrap_collection(payload)
            self.assertEqual(result.items, [])
            self.assertFalse(result.decoded)
            self.assertTrue(result.reason)

        self.assertIn("items", unwrap_collection({"items": []}).reason)

    def test_custom_decoder_order(self) -> None:
        payload = {"data": [1], "schedules": [2]}
        result = unwrap_collection(payload, decoders=(WrappedUnder("schedules"), WrappedUnder("data")))
        self.assertEqual(result.items, [2])


class TestDecodeSchedules(unittest.TestCase):
    def test_records_are_normalized(self) -> None:
        payload = {
            "data": [
                {"id": 1, "day": "2025-11-11T00:00:00+00:00", "startTime": "09:00", "endTime": "10:00"},
                {"id": 2, "day": "2025-11-12", "startTime": "13:00", "endTime": "14:30"},
            ]
        }
        result = decode_schedules(payload)
        self.assertEqual(
            result.items,
            [
                Schedule(id=1, day="2025-11-11", start_time="09:00", end_time="10:00"),
                Schedule(id=2, day="2025-11-12", start_time="13:00", end_time="14:30"),
            ],
        )

    def test_non_object_entries_are_skipped(self) -> None:
        with self.assertLogs("schedulesync.normalize", level="WARNING"):
            result = decode_schedules([{"id": 1, "day": "2025-11-11"}, "junk", None])
        self.assertEqual([s.id for s in result.items], [1])

    def test_unrecognized_payload_is_empty_not_error(self) -> None:
        with self.assertLogs("schedulesync.normalize", level="WARNING"):
            result = decode_schedules({"results": []})
        self.assertEqual(result.items, [])
        self.assertIsNotNone(result.reason)


if __name__ == "__main__":
    unittest.main()
