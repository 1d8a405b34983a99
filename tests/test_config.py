"""
Unit Tests for Configuration and Logging

Run with:
    python -m pytest tests/test_config.py -v
"""

import json
import logging
import os
import tempfile
import unittest
from unittest import mock

from pydantic import ValidationError
from sgp4.api import Satrec

from deep_space.config import DEFAULT_SETTINGS, REFERENCE_TLES, DeepSpaceSettings
from deep_space.logging_config import configure_from_settings, configure_logging, get_logger


class TestDeepSpaceSettings(unittest.TestCase):
    """Test runtime settings."""

    def test_defaults(self):
        self.assertEqual(DEFAULT_SETTINGS.periodic_refresh_minutes, 30.0)
        self.assertTrue(DEFAULT_SETTINGS.share_lunar_cache)
        self.assertEqual(DEFAULT_SETTINGS.max_workers, 8)

    def test_from_env(self):
        env = {
            "DEEP_SPACE_PERIODIC_REFRESH_MINUTES": "12.5",
            "DEEP_SPACE_SHARE_LUNAR_CACHE": "false",
            "DEEP_SPACE_MAX_WORKERS": "3",
            "DEEP_SPACE_LOG_LEVEL": "debug",
            "DEEP_SPACE_LOG_JSON": "1",
        }
        with mock.patch.dict(os.environ, env):
            settings = DeepSpaceSettings.from_env()

        self.assertEqual(settings.periodic_refresh_minutes, 12.5)
        self.assertFalse(settings.share_lunar_cache)
        self.assertEqual(settings.max_workers, 3)
        self.assertEqual(settings.log_level, "DEBUG")
        self.assertTrue(settings.log_json)

    def test_rejects_invalid_values(self):
        with self.assertRaises(ValidationError):
            DeepSpaceSettings(periodic_refresh_minutes=0.0)
        with self.assertRaises(ValidationError):
            DeepSpaceSettings(max_workers=0)
        with self.assertRaises(ValidationError):
            DeepSpaceSettings(log_level="VERBOSE")

    def test_is_frozen(self):
        with self.assertRaises(ValidationError):
            DEFAULT_SETTINGS.max_workers = 2


class TestReferenceTLEs(unittest.TestCase):
    """Test the bundled element sets."""

    def test_all_parse(self):
        for key, tle in REFERENCE_TLES.items():
            satrec = Satrec.twoline2rv(tle["line1"], tle["line2"])
            self.assertEqual(satrec.error, 0, msg=key)
            self.assertEqual(satrec.satnum, tle["norad_id"], msg=key)


class TestLogging(unittest.TestCase):
    """Test structured logging set-up."""

    def tearDown(self):
        configure_logging(level=logging.WARNING)

    def test_json_events_written_to_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "deep_space.log")
            configure_logging(level=logging.INFO, log_file=path, json=True)

            get_logger("deep_space.tests.json_events").info("context_ready", regime="synchronous")
            configure_logging(level=logging.WARNING)

            with open(path) as handle:
                record = json.loads(handle.read().strip().splitlines()[-1])

        self.assertEqual(record["event"], "context_ready")
        self.assertEqual(record["regime"], "synchronous")
        self.assertEqual(record["level"], "info")
        self.assertEqual(record["logger"], "deep_space.tests.json_events")

    def test_configure_from_settings(self):
        settings = DeepSpaceSettings(log_level="DEBUG", log_json=True)
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "deep_space.log")
            configure_from_settings(settings, log_file=path)

            get_logger("deep_space.tests.settings").debug("integrator_epoch_restart", t=-50.0)
            configure_logging(level=logging.WARNING)

            with open(path) as handle:
                record = json.loads(handle.read().strip().splitlines()[-1])

        self.assertEqual(record["event"], "integrator_epoch_restart")
        self.assertEqual(record["level"], "debug")
        self.assertEqual(record["t"], -50.0)

    def test_settings_level_filters(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "deep_space.log")
            configure_from_settings(DeepSpaceSettings(log_level="ERROR"), log_file=path)

            get_logger("deep_space.tests.settings_filtered").warning("hidden_warning")
            configure_logging(level=logging.WARNING)

            with open(path) as handle:
                self.assertNotIn("hidden_warning", handle.read())

    def test_level_filtering(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "deep_space.log")
            configure_logging(level=logging.WARNING, log_file=path)

            get_logger("deep_space.tests.filtered").debug("hidden_event")
            configure_logging(level=logging.WARNING)

            with open(path) as handle:
                self.assertNotIn("hidden_event", handle.read())


if __name__ == "__main__":
    unittest.main()
