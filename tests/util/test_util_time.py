import unittest
from datetime import datetime, timedelta, timezone

from gdindex.util.time import (
    normalize_dt,
    now_utc,
    parse_rfc3339,
    reference_tz,
    to_reference_time,
    to_rfc3339,
)


class TestUtilTime(unittest.TestCase):
    def test_now_utc_is_tz_aware(self) -> None:
        dt = now_utc()
        self.assertIsNotNone(dt.tzinfo)
        self.assertEqual(dt.tzinfo, timezone.utc)

    def test_normalize_dt_rejects_naive(self) -> None:
        naive = datetime(2025, 1, 1, 12, 0, 0)
        with self.assertRaises(ValueError):
            normalize_dt(naive)

    def test_parse_rfc3339_z(self) -> None:
        dt = parse_rfc3339("2025-01-01T12:34:56Z")
        self.assertEqual(dt.tzinfo, timezone.utc)
        self.assertEqual(dt, datetime(2025, 1, 1, 12, 34, 56, tzinfo=timezone.utc))

    def test_parse_rfc3339_fractional_z(self) -> None:
        dt = parse_rfc3339("2025-01-01T12:34:56.123Z")
        self.assertEqual(dt, datetime(2025, 1, 1, 12, 34, 56, 123000, tzinfo=timezone.utc))

    def test_parse_rfc3339_offset_converts_to_utc(self) -> None:
        dt = parse_rfc3339("2025-01-01T12:34:56+08:00")
        self.assertEqual(dt.tzinfo, timezone.utc)
        self.assertEqual(dt, datetime(2025, 1, 1, 4, 34, 56, tzinfo=timezone.utc))

    def test_to_rfc3339_round_trips(self) -> None:
        dt = datetime(2025, 1, 1, 0, 0, 0, tzinfo=timezone.utc)
        s = to_rfc3339(dt)
        self.assertTrue(s.endswith("Z"))
        self.assertEqual(parse_rfc3339(s), dt)

    def test_reference_time_uses_fixed_offset(self) -> None:
        dt = datetime(2025, 1, 1, 20, 0, 0, tzinfo=timezone.utc)

        local = to_reference_time(dt)

        self.assertEqual(local.utcoffset(), timedelta(hours=8))
        self.assertEqual((local.day, local.hour), (2, 4))
        self.assertEqual(to_reference_time(dt, 0).hour, 20)
        self.assertEqual(reference_tz(-5).utcoffset(None), timedelta(hours=-5))


if __name__ == "__main__":
    unittest.main()
