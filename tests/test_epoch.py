"""
Unit Tests for Epoch Resolution

Run with:
    python -m pytest tests/test_epoch.py -v
"""

import math
import unittest
from datetime import datetime, timedelta, timezone

from sgp4.propagation import gstime

from deep_space.epoch import resolve_epoch
from deep_space.errors import ConfigurationError, DeepSpaceError


class TestResolveEpoch(unittest.TestCase):
    """Test conversion of epochs to ds50 and sidereal time."""

    def test_reference_day(self):
        """1950 January 1.0 is day 1 of the ds50 count."""
        info = resolve_epoch(datetime(1950, 1, 1, tzinfo=timezone.utc))
        self.assertAlmostEqual(info.ds50, 1.0, places=9)
        self.assertAlmostEqual(info.day, 18262.5, places=9)
        self.assertAlmostEqual(info.julian_date, 2433282.5, places=9)

    def test_naive_datetime_is_utc(self):
        naive = resolve_epoch(datetime(2023, 9, 16, 12, 0, 0))
        aware = resolve_epoch(datetime(2023, 9, 16, 12, 0, 0, tzinfo=timezone.utc))
        self.assertEqual(naive, aware)

    def test_aware_datetime_converted_to_utc(self):
        eastern = timezone(timedelta(hours=-5))
        local = resolve_epoch(datetime(2023, 9, 16, 7, 0, 0, tzinfo=eastern))
        utc = resolve_epoch(datetime(2023, 9, 16, 12, 0, 0, tzinfo=timezone.utc))
        self.assertAlmostEqual(local.ds50, utc.ds50, places=9)

    def test_iso_string(self):
        from_string = resolve_epoch("2023-09-16T12:00:00Z")
        from_datetime = resolve_epoch(datetime(2023, 9, 16, 12, 0, 0, tzinfo=timezone.utc))
        self.assertEqual(from_string, from_datetime)

    def test_julian_date_pair(self):
        info = resolve_epoch((2433282.5, 0.25))
        self.assertAlmostEqual(info.ds50, 1.25, places=9)

    def test_sidereal_time(self):
        info = resolve_epoch((2460204.0, 0.0))
        self.assertEqual(info.gmst, gstime(info.ds50 + 2433281.5))
        self.assertGreaterEqual(info.gmst, 0.0)
        self.assertLess(info.gmst, 2.0 * math.pi)

    def test_invalid_string(self):
        with self.assertRaises(ConfigurationError) as cm:
            resolve_epoch("yesterday")
        self.assertIsNotNone(cm.exception.__cause__)

    def test_unsupported_type(self):
        with self.assertRaises(ConfigurationError):
            resolve_epoch(None)
        with self.assertRaises(ConfigurationError):
            resolve_epoch(12345.0)

    def test_non_finite_julian_date(self):
        with self.assertRaises(ConfigurationError):
            resolve_epoch((float("nan"), 0.0))

    def test_error_hierarchy(self):
        """ConfigurationError is both a package error and a ValueError."""
        with self.assertRaises(DeepSpaceError):
            resolve_epoch("not a date")
        with self.assertRaises(ValueError):
            resolve_epoch("not a date")


if __name__ == "__main__":
    unittest.main()
