# tests/test_catalog_client.py

"""Tests for CatalogClient against a fake HTTP session."""

import unittest
from typing import Any
from unittest.mock import AsyncMock, MagicMock

from listing_search.services.catalog_client import (
    COUNTRIES_PATH,
    PRODUCTS_PATH,
    CatalogClient,
    parse_place,
)
from listing_search.services.errors import NetworkError
from listing_search.storage.query_cache import QueryCache


def _response(body: Any = None, status: int = 200) -> MagicMock:
    """Build a fake curl_cffi response."""
    resp = MagicMock()
    resp.status_code = status
    if isinstance(body, Exception):
        resp.json.side_effect = body
    else:
        resp.json.return_value = body
    return resp


def _session(*responses: Any) -> MagicMock:
    """Fake AsyncSession whose ``get`` yields *responses* in turn."""
    session = MagicMock()
    session.get = AsyncMock(side_effect=list(responses))
    session.close = AsyncMock()
    return session


class TestParsePlace(unittest.TestCase):
    """parse_place() coercion."""

    def test_full_payload(self) -> None:
        """Coordinates become floats and the country is upper-cased."""
        place = parse_place(
            {"lat": "-25.4", "lng": -49.2, "city": " Curitiba ", "state": "PR", "country": "br"}
        )
        assert place is not None
        self.assertAlmostEqual(place.lat or 0, -25.4)
        self.assertEqual(place.city, "Curitiba")
        self.assertEqual(place.country, "BR")

    def test_bad_coordinates(self) -> None:
        """Junk coordinates are dropped rather than raising."""
        place = parse_place({"lat": "north", "lng": None, "city": "X"})
        assert place is not None
        self.assertIsNone(place.lat)
        self.assertIsNone(place.lng)

    def test_non_mapping(self) -> None:
        """Anything but an object yields None."""
        self.assertIsNone(parse_place(None))
        self.assertIsNone(parse_place(["lat", 1]))


class TestSearchProducts(unittest.IsolatedAsyncioTestCase):
    """GET /products handling."""

    async def test_success_ingests_records(self) -> None:
        """A successful envelope is resolved into ProductRecords."""
        session = _session(
            _response({"success": True, "data": [{"id": 1, "title": "Sofá"}, None]})
        )
        client = CatalogClient(base_url="http://api/", session=session)
        records = await client.search_products({"sort": "rank", "q": "sofa"})

        self.assertEqual([r.title for r in records], ["Sofá"])
        session.get.assert_awaited_once()
        args, kwargs = session.get.call_args
        self.assertEqual(args[0], f"http://api{PRODUCTS_PATH}")
        self.assertEqual(kwargs["params"], {"sort": "rank", "q": "sofa"})

    async def test_repeat_request_served_from_cache(self) -> None:
        """An identical request inside the TTL does not hit the network."""
        session = _session(_response({"success": True, "data": [{"id": 1}]}))
        client = CatalogClient(session=session, cache=QueryCache(ttl=60))
        await client.search_products({"sort": "rank"}, use_cache=True)
        again = await client.search_products({"sort": "rank"}, use_cache=True)
        self.assertEqual([r.id for r in again], [1])
        self.assertEqual(session.get.await_count, 1)

    async def test_uncached_request_always_hits_network(self) -> None:
        """Without use_cache a repeat request is fetched again and refreshes the cache."""
        session = _session(
            _response({"success": True, "data": [{"id": 1}]}),
            _response({"success": True, "data": [{"id": 2}]}),
        )
        client = CatalogClient(session=session, cache=QueryCache(ttl=60))
        await client.search_products({"sort": "rank"})
        fresh = await client.search_products({"sort": "rank"})
        self.assertEqual([r.id for r in fresh], [2])
        self.assertEqual(session.get.await_count, 2)
        cached = await client.search_products({"sort": "rank"}, use_cache=True)
        self.assertEqual([r.id for r in cached], [2])

    async def test_clear_cache(self) -> None:
        """clear_cache drops cached listings."""
        session = _session(
            _response({"success": True, "data": [{"id": 1}]}),
            _response({"success": True, "data": [{"id": 3}]}),
        )
        client = CatalogClient(session=session, cache=QueryCache(ttl=60))
        await client.search_products({"sort": "rank"}, use_cache=True)
        self.assertEqual(client.clear_cache(), 1)
        records = await client.search_products({"sort": "rank"}, use_cache=True)
        self.assertEqual([r.id for r in records], [3])

    async def test_unsuccessful_envelope_is_empty(self) -> None:
        """success=false reads as an empty listing and is not cached."""
        session = _session(
            _response({"success": False}),
            _response({"success": True, "data": [{"id": 5}]}),
        )
        client = CatalogClient(session=session)
        self.assertEqual(await client.search_products({"sort": "rank"}), [])
        records = await client.search_products({"sort": "rank"})
        self.assertEqual([r.id for r in records], [5])

    async def test_http_error_raises(self) -> None:
        """Non-200 status is a NetworkError."""
        client = CatalogClient(session=_session(_response({}, status=503)))
        with self.assertRaises(NetworkError):
            await client.search_products({"sort": "rank"})

    async def test_transport_error_raises(self) -> None:
        """Connection failures are wrapped in NetworkError."""
        client = CatalogClient(session=_session(ConnectionError("refused")))
        with self.assertRaises(NetworkError):
            await client.search_products({"sort": "rank"})

    async def test_invalid_json_raises(self) -> None:
        """An undecodable or non-object body is a NetworkError."""
        client = CatalogClient(
            session=_session(_response(ValueError("bad")), _response([1, 2]))
        )
        with self.assertRaises(NetworkError):
            await client.search_products({"sort": "rank"})
        with self.assertRaises(NetworkError):
            await client.search_products({"sort": "rank", "q": "x"})


class TestGeocoding(unittest.IsolatedAsyncioTestCase):
    """Forward and reverse geocoding endpoints."""

    async def test_forward_geocode(self) -> None:
        """A successful lookup returns a Place."""
        session = _session(
            _response(
                {"success": True, "data": {"lat": -25.4, "lng": -49.2, "city": "Curitiba", "country": "BR"}}
            )
        )
        client = CatalogClient(session=session)
        place = await client.forward_geocode("Curitiba")
        assert place is not None
        self.assertEqual(place.city, "Curitiba")
        self.assertEqual(session.get.call_args.kwargs["params"], {"q": "Curitiba"})

    async def test_forward_geocode_not_found(self) -> None:
        """success=false means no place."""
        client = CatalogClient(session=_session(_response({"success": False})))
        self.assertIsNone(await client.forward_geocode("nowhere"))

    async def test_reverse_geocode_keeps_queried_point(self) -> None:
        """The returned place is pinned to the queried coordinates."""
        session = _session(
            _response({"success": True, "data": {"city": "Lisboa", "country": "pt"}})
        )
        client = CatalogClient(session=session)
        place = await client.reverse_geocode(38.7, -9.1)
        assert place is not None
        self.assertEqual((place.lat, place.lng), (38.7, -9.1))
        self.assertEqual(place.country, "PT")


class TestActiveCountries(unittest.IsolatedAsyncioTestCase):
    """GET /products/countries."""

    async def test_dedupes_and_upper_cases(self) -> None:
        """Codes are upper-cased, duplicates and junk dropped."""
        session = _session(
            _response(
                {
                    "success": True,
                    "data": [
                        {"country": "br", "total": "12"},
                        {"country": "BR", "total": 3},
                        {"country": "", "total": 1},
                        "junk",
                        {"country": "pt", "total": "many"},
                    ],
                }
            )
        )
        client = CatalogClient(session=session)
        counts = await client.list_active_countries()
        self.assertEqual(
            [(c.country, c.total) for c in counts], [("BR", 12), ("PT", 0)]
        )
        self.assertTrue(session.get.call_args.args[0].endswith(COUNTRIES_PATH))


class TestLifecycle(unittest.IsolatedAsyncioTestCase):
    """Session ownership."""

    async def test_context_manager_closes_session(self) -> None:
        """Leaving the async context closes the HTTP session."""
        session = _session()
        async with CatalogClient(session=session):
            pass
        session.close.assert_awaited_once()


if __name__ == "__main__":
    unittest.main()
