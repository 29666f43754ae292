# tests/test_settings.py

"""Tests for the Settings configuration class."""

import unittest
from pathlib import Path

from listing_search.config.settings import Settings


class TestSettings(unittest.TestCase):
    """Verify Settings constants."""

    def test_request_timeout_is_positive_int(self) -> None:
        """REQUEST_TIMEOUT must be a positive integer."""
        self.assertIsInstance(Settings.REQUEST_TIMEOUT, int)
        self.assertGreater(Settings.REQUEST_TIMEOUT, 0)

    def test_api_url_has_no_trailing_slash(self) -> None:
        """Paths are appended directly to the base URL."""
        self.assertFalse(Settings.CATALOG_API_URL.endswith("/"))

    def test_default_country_is_upper_case(self) -> None:
        """The fallback scope is an upper-case ISO code."""
        self.assertEqual(
            Settings.DEFAULT_COUNTRY, Settings.DEFAULT_COUNTRY.upper()
        )
        self.assertEqual(len(Settings.DEFAULT_COUNTRY), 2)

    def test_geo_constants(self) -> None:
        """Bounding-box sizing constants are positive and ordered."""
        self.assertEqual(Settings.DEFAULT_BBOX_DELTA, 0.05)
        self.assertGreater(Settings.DEFAULT_BBOX_DELTA, Settings.MIN_ZOOM_DELTA)
        self.assertGreater(Settings.ZOOM_DELTA_FACTOR, 0)
        self.assertGreater(Settings.GPS_TIMEOUT, 0)

    def test_matching_tolerances(self) -> None:
        """Short tokens get less slack than long ones."""
        self.assertLess(
            Settings.SHORT_TOKEN_TOLERANCE, Settings.LONG_TOKEN_TOLERANCE
        )
        self.assertGreaterEqual(Settings.FEW_RESULTS_THRESHOLD, 1)

    def test_query_cache_ttl_positive(self) -> None:
        """QUERY_CACHE_TTL must be > 0."""
        self.assertGreater(Settings.QUERY_CACHE_TTL, 0)

    def test_messages_are_non_empty(self) -> None:
        """Every user-facing message has text."""
        for name in (
            "empty_query",
            "location_not_found",
            "gps_unavailable",
            "fetch_error",
            "no_results",
        ):
            with self.subTest(name=name):
                self.assertTrue(Settings.MESSAGES[name])

    def test_logs_dir_is_path(self) -> None:
        """LOGS_DIR should be a Path object."""
        self.assertIsInstance(Settings.LOGS_DIR, Path)


if __name__ == "__main__":
    unittest.main()
