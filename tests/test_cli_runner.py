# tests/test_cli_runner.py

"""Tests for the headless CLI runner and argument parser."""

import io
import json
import unittest
from contextlib import redirect_stdout
from typing import Any
from unittest.mock import patch

from listing_search.cli.runner import cli_search, parse_bounds
from listing_search.filters.product_validator import ProductValidator
from listing_search.models.product import ProductRecord
from main import _build_parser


class FakeClient:
    """Async-context catalog client returning canned listings."""

    def __init__(self, payloads: list[dict[str, Any]]) -> None:
        self.payloads = payloads

    async def __aenter__(self) -> "FakeClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None

    async def search_products(
        self, params: dict[str, Any], use_cache: bool = False,
    ) -> list[ProductRecord]:
        return ProductValidator.ingest(self.payloads)


class TestParseBounds(unittest.TestCase):
    """parse_bounds() input handling."""

    def test_four_numbers(self) -> None:
        """Comma-separated edges map to the camelCase keys."""
        self.assertEqual(
            parse_bounds("-24, -23,-47,-46"),
            {"minLat": -24.0, "maxLat": -23.0, "minLng": -47.0, "maxLng": -46.0},
        )

    def test_wrong_arity(self) -> None:
        """Anything other than four values is rejected."""
        with self.assertRaises(ValueError):
            parse_bounds("1,2,3")

    def test_non_numeric(self) -> None:
        """Non-numeric values are rejected."""
        with self.assertRaises(ValueError):
            parse_bounds("a,b,c,d")


class TestParser(unittest.TestCase):
    """Argument parser wiring."""

    def test_text_mode(self) -> None:
        """Global flags precede the sub-command."""
        args = _build_parser().parse_args(["-f", "table", "text", "sofa"])
        self.assertEqual(args.mode, "text")
        self.assertEqual(args.query, "sofa")
        self.assertEqual(args.output_format, "table")

    def test_gps_requires_coordinates(self) -> None:
        """The gps mode needs --lat and --lng."""
        args = _build_parser().parse_args(["gps", "--lat", "-23.5", "--lng", "-46.6"])
        self.assertEqual((args.lat, args.lng), (-23.5, -46.6))
        with self.assertRaises(SystemExit):
            _build_parser().parse_args(["gps"])


class TestCliSearch(unittest.IsolatedAsyncioTestCase):
    """cli_search() exit codes and output."""

    async def test_text_search_prints_json(self) -> None:
        """A successful search prints the label and items as JSON."""
        client = FakeClient([{"id": i, "title": "Sofá", "category": "Móveis"} for i in range(1, 8)])
        out = io.StringIO()
        with patch("listing_search.cli.runner.CatalogClient", return_value=client):
            with redirect_stdout(out):
                code = await cli_search("text", "sofa", "json")
        self.assertEqual(code, 0)
        payload = json.loads(out.getvalue())
        self.assertEqual(payload["label"], "sofa")
        self.assertEqual(payload["country"], "BR")
        self.assertEqual(len(payload["items"]), 7)
        self.assertEqual(payload["categories"], [{"label": "Móveis", "count": 7}])

    async def test_no_results_exit_code(self) -> None:
        """A search that finds nothing exits with 1."""
        with patch(
            "listing_search.cli.runner.CatalogClient", return_value=FakeClient([])
        ):
            code = await cli_search("country", "PT", "json")
        self.assertEqual(code, 1)

    async def test_invalid_bounds_exit_code(self) -> None:
        """Malformed region bounds exit with 1 before any request."""
        with patch(
            "listing_search.cli.runner.CatalogClient", return_value=FakeClient([])
        ):
            code = await cli_search("region", "1,2", "json")
        self.assertEqual(code, 1)


if __name__ == "__main__":
    unittest.main()
