# listing_search/services/catalog_client.py

"""Async HTTP client for the catalog and geocoding service."""

import logging
import math
from collections.abc import Mapping
from typing import Any

from curl_cffi.requests import AsyncSession

from listing_search.config.settings import Settings
from listing_search.filters.product_validator import ProductValidator
from listing_search.models.geo import CountryCount, Place
from listing_search.models.product import ProductRecord
from listing_search.services.errors import NetworkError
from listing_search.storage.query_cache import QueryCache

logger = logging.getLogger("listing_search.catalog")

PRODUCTS_PATH = "/products"
COUNTRIES_PATH = "/products/countries"
FORWARD_GEOCODE_PATH = "/geo/forward"
REVERSE_GEOCODE_PATH = "/geo/reverse"


def _coordinate(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def parse_place(data: Any) -> Place | None:
    """Build a :class:`Place` from a geocoder ``data`` object."""
    if not isinstance(data, Mapping):
        return None
    return Place(
        lat=_coordinate(data.get("lat")),
        lng=_coordinate(data.get("lng")),
        city=str(data.get("city") or "").strip(),
        state=str(data.get("state") or "").strip(),
        country=str(data.get("country") or "").strip().upper(),
    )


class CatalogClient:
    """Thin wrapper over the ``{success, data}`` JSON endpoints.

    Transport failures, non-200 responses and undecodable bodies raise
    :class:`NetworkError`.  A well-formed ``success: false`` answer is
    not an error: it reads as an empty list or an unknown place.
    """

    def __init__(
        self,
        base_url: str | None = None,
        session: Any = None,
        cache: QueryCache | None = None,
    ) -> None:
        self.settings = Settings()
        self.base_url = (base_url or self.settings.CATALOG_API_URL).rstrip("/")
        self.cache = cache if cache is not None else QueryCache()
        self._session = session
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    @property
    def session(self) -> Any:
        """Lazily open the impersonating session inside the event loop."""
        if self._session is None:
            self._session = AsyncSession(
                impersonate=self.settings.IMPERSONATE_BROWSER,
                headers=self.settings.DEFAULT_HEADERS,
            )
        return self._session

    async def close(self) -> None:
        """Release the underlying HTTP session."""
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ── Transport ────────────────────────────────────────

    async def _get_json(
        self, path: str, params: Mapping[str, Any],
    ) -> dict[str, Any]:
        """GET *path* and return the decoded JSON envelope."""
        url = f"{self.base_url}{path}"
        try:
            resp = await self.session.get(
                url,
                params=dict(params),
                timeout=self._request_timeout,
            )
        except Exception as exc:
            logger.warning(
                "Request to %s failed: %s", path, exc, exc_info=True,
            )
            msg = f"Request to {path} failed: {exc}"
            raise NetworkError(msg) from exc

        if resp.status_code != 200:
            logger.warning(
                "HTTP %d from %s (params=%s)",
                resp.status_code,
                path,
                dict(params),
            )
            msg = f"HTTP {resp.status_code} from {path}"
            raise NetworkError(msg)

        try:
            body = resp.json()
        except ValueError as exc:
            msg = f"Invalid JSON from {path}"
            raise NetworkError(msg) from exc
        if not isinstance(body, dict):
            msg = f"Unexpected payload from {path}"
            raise NetworkError(msg)
        return body

    # ── Endpoints ────────────────────────────────────────

    def clear_cache(self) -> int:
        """Forget cached listings; returns how many entries were dropped."""
        return self.cache.clear()

    async def search_products(
        self, params: Mapping[str, Any], use_cache: bool = False,
    ) -> list[ProductRecord]:
        """``GET /products`` → resolved records.

        With *use_cache* an identical request inside the cache TTL is
        answered from memory; without it the catalog is always asked
        (the fresh answer still refreshes the cache).
        """
        if use_cache:
            cached = self.cache.find(PRODUCTS_PATH, params)
            if cached is not None:
                return ProductValidator.ingest(cached)

        body = await self._get_json(PRODUCTS_PATH, params)
        if not body.get("success"):
            logger.info(
                "Catalog reported no success for %s", dict(params)
            )
            return []
        data = body.get("data")
        payloads = data if isinstance(data, list) else []
        self.cache.store(PRODUCTS_PATH, params, payloads)
        logger.debug(
            "Catalog returned %d listings for %s",
            len(payloads),
            dict(params),
        )
        return ProductValidator.ingest(payloads)

    async def forward_geocode(self, text: str) -> Place | None:
        """``GET /geo/forward`` → place for free-form text, or ``None``."""
        body = await self._get_json(FORWARD_GEOCODE_PATH, {"q": text})
        if not body.get("success"):
            return None
        return parse_place(body.get("data"))

    async def reverse_geocode(self, lat: float, lng: float) -> Place | None:
        """``GET /geo/reverse`` → place containing the point, or ``None``."""
        body = await self._get_json(
            REVERSE_GEOCODE_PATH, {"lat": lat, "lng": lng}
        )
        if not body.get("success"):
            return None
        place = parse_place(body.get("data"))
        if place is not None:
            # The reverse endpoint answers for the queried point
            place.lat, place.lng = lat, lng
        return place

    async def list_active_countries(self) -> list[CountryCount]:
        """``GET /products/countries`` → one entry per upper-cased code."""
        body = await self._get_json(COUNTRIES_PATH, {})
        if not body.get("success"):
            return []
        data = body.get("data")
        counts: list[CountryCount] = []
        seen: set[str] = set()
        for item in data if isinstance(data, list) else []:
            if not isinstance(item, Mapping):
                continue
            code = str(item.get("country") or "").strip().upper()
            if not code or code in seen:
                continue
            seen.add(code)
            try:
                total = int(item.get("total") or 0)
            except (TypeError, ValueError):
                total = 0
            counts.append(CountryCount(country=code, total=total))
        return counts
