# listing_search/services/search_orchestrator.py

"""Tiered catalog cascades that reconcile into one result list.

Each ``run_*`` coroutine is a small state machine: it walks named
:class:`CascadeStage` steps, widening the catalog query only while the
previous tier under-delivers, and ends either with a
:class:`ReconciledResult` or a :class:`SearchError` subclass.
"""

import asyncio
import logging
from typing import Any

from listing_search.config.settings import Settings
from listing_search.data.countries import normalize_country_code
from listing_search.filters.deduplicator import ProductDeduplicator
from listing_search.filters.fuzzy_matcher import filter_by_query
from listing_search.filters.product_keys import key_of
from listing_search.filters.text_normalizer import normalize
from listing_search.geo.bounds import (
    bounds_from_point,
    centroid,
    has_valid_coords,
    normalize_bounds,
)
from listing_search.geo.labels import (
    build_location_label,
    country_name,
    near_label,
)
from listing_search.models.geo import (
    BboxScope,
    CountryCount,
    CountryScope,
    GeoBounds,
    GeoScope,
    Place,
)
from listing_search.models.product import ProductRecord
from listing_search.models.search import (
    CascadeStage,
    ReconciledResult,
    SearchKind,
    SearchRequest,
)
from listing_search.services.catalog_client import CatalogClient
from listing_search.services.errors import (
    GeocodingError,
    InputError,
    NetworkError,
    NoResultsError,
    PositionUnavailableError,
)
from listing_search.services.position import PositionProvider

logger = logging.getLogger("listing_search.orchestrator")

# Tiers that repeat the same broad listing; primary queries always go out
_CACHED_STAGES = frozenset(
    {
        CascadeStage.BROAD_FALLBACK,
        CascadeStage.SUPPLEMENT,
        CascadeStage.BROAD_CITY_FILTER,
        CascadeStage.COUNTRY_SECONDARY,
    }
)


class SearchOrchestrator:
    """Drive the catalog service through the per-path cascades."""

    def __init__(
        self,
        client: CatalogClient | None = None,
        position_provider: PositionProvider | None = None,
    ) -> None:
        self.settings = Settings()
        self.client = client if client is not None else CatalogClient()
        self.position_provider = position_provider

    # ── Private helpers ──────────────────────────────────

    def _message(self, name: str) -> str:
        return self.settings.MESSAGES[name]

    def _default_scope(self) -> CountryScope:
        return CountryScope(self.settings.DEFAULT_COUNTRY)

    async def _fetch(
        self,
        params: dict[str, Any],
        stage: CascadeStage,
        stages: list[CascadeStage],
    ) -> list[ProductRecord]:
        """Run one catalog tier and record it in *stages*."""
        stages.append(stage)
        records = await self.client.search_products(
            params, use_cache=stage in _CACHED_STAGES
        )
        logger.info(
            "Stage %s returned %d listings (params=%s)",
            stage.value,
            len(records),
            params,
        )
        return records

    # ── Text search ──────────────────────────────────────

    async def run_text_search(
        self,
        text: str,
        scope: GeoScope | None = None,
        category: str | None = None,
    ) -> ReconciledResult:
        """Free-text query → scoped primary, then broad fallbacks.

        1. Primary query with ``q`` inside the scope.
        2. Local fuzzy filter; if it rejects everything the server's
           own matches are kept as the candidate.
        3. No candidate → broad (no ``q``) query, fuzzy filtered.
        4. Fewer than ``FEW_RESULTS_THRESHOLD`` → the same broad query
           is merged in behind the candidate.
        """
        trimmed = (text or "").strip()
        if not trimmed:
            raise InputError(self._message("empty_query"))

        request = SearchRequest(
            scope=scope or self._default_scope(),
            text=trimmed,
            category=category or None,
        )
        sort = self.settings.DEFAULT_SORT
        stages: list[CascadeStage] = []

        primary = await self._fetch(
            request.to_params(sort), CascadeStage.PRIMARY, stages
        )

        candidate: list[ProductRecord] = []
        if primary:
            stages.append(CascadeStage.LOCAL_FILTER)
            candidate = filter_by_query(primary, trimmed) or primary

        broad_params = request.to_params(sort, include_text=False)
        if not candidate:
            broad = await self._fetch(
                broad_params, CascadeStage.BROAD_FALLBACK, stages
            )
            final = filter_by_query(broad, trimmed)
        elif len(candidate) < self.settings.FEW_RESULTS_THRESHOLD:
            try:
                broad = await self._fetch(
                    broad_params, CascadeStage.SUPPLEMENT, stages
                )
            except NetworkError as exc:
                logger.warning(
                    "Supplementary fallback failed, keeping %d "
                    "primary matches: %s",
                    len(candidate),
                    exc,
                )
                final = candidate
            else:
                final = ProductDeduplicator.merge(
                    candidate, filter_by_query(broad, trimmed)
                )
        else:
            final = candidate

        if not final:
            raise NoResultsError(self._message("no_text_results"))

        scope_country = (
            request.scope.code
            if isinstance(request.scope, CountryScope)
            else None
        )
        return ReconciledResult(
            kind=SearchKind.TEXT,
            items=final,
            applied_label=trimmed,
            applied_country=scope_country,
            bounds=(
                request.scope.bounds
                if isinstance(request.scope, BboxScope)
                else None
            ),
            stages=stages,
        )

    # ── Address search ───────────────────────────────────

    async def _geocode_address(
        self, text: str, stages: list[CascadeStage],
    ) -> tuple[Place, GeoBounds]:
        """Resolve *text* to a place and the box around it."""
        stages.append(CascadeStage.GEOCODE)
        try:
            place = await self.client.forward_geocode(text)
        except NetworkError as exc:
            raise GeocodingError(
                self._message("location_not_found")
            ) from exc
        bounds = (
            bounds_from_point(place.lat, place.lng)
            if place is not None
            and place.lat is not None
            and place.lng is not None
            else None
        )
        if place is None or bounds is None:
            logger.info("Forward geocode found nothing for '%s'", text)
            raise GeocodingError(self._message("location_not_found"))
        return place, bounds

    async def run_address_search(self, text: str) -> ReconciledResult:
        """Free-form address → bbox, then city, then city-filtered broad."""
        raw = (text or "").strip()
        if not raw:
            raise InputError(self._message("empty_address"))

        stages: list[CascadeStage] = []
        place, bounds = await self._geocode_address(raw, stages)

        sort = self.settings.DEFAULT_SORT
        products = await self._fetch(
            {"sort": sort, **bounds.to_params()},
            CascadeStage.BBOX,
            stages,
        )

        if not products and place.city:
            products = await self._fetch(
                {"sort": sort, "city": place.city},
                CascadeStage.CITY,
                stages,
            )

        if not products and place.city:
            broad = await self._fetch(
                {"sort": sort}, CascadeStage.BROAD_CITY_FILTER, stages
            )
            target = normalize(place.city)
            products = [p for p in broad if normalize(p.city) == target]

        if not products:
            raise NoResultsError(self._message("no_region_results"))

        return ReconciledResult(
            kind=SearchKind.ADDRESS,
            items=products,
            applied_label=build_location_label(place) or raw,
            applied_country=place.country or None,
            place=place,
            bounds=bounds,
            stages=stages,
        )

    # ── GPS search ───────────────────────────────────────

    async def _acquire_position(
        self, stages: list[CascadeStage],
    ) -> tuple[float, float]:
        """Single bounded attempt at a device fix."""
        stages.append(CascadeStage.POSITION)
        if self.position_provider is None:
            raise PositionUnavailableError(self._message("gps_unavailable"))
        try:
            return await asyncio.wait_for(
                self.position_provider.current_position(),
                timeout=self.settings.GPS_TIMEOUT,
            )
        except asyncio.TimeoutError as exc:
            logger.warning(
                "No position fix within %.1fs", self.settings.GPS_TIMEOUT
            )
            raise PositionUnavailableError(
                self._message("gps_unavailable")
            ) from exc

    async def _reverse_geocode_best_effort(
        self, lat: float, lng: float, stages: list[CascadeStage],
    ) -> Place | None:
        stages.append(CascadeStage.REVERSE_GEOCODE)
        try:
            return await self.client.reverse_geocode(lat, lng)
        except NetworkError as exc:
            logger.warning("Reverse geocode failed, label degraded: %s", exc)
            return None

    async def run_gps_search(self) -> ReconciledResult:
        """Device position → bbox, then city (+country) fallback."""
        stages: list[CascadeStage] = []
        lat, lng = await self._acquire_position(stages)
        bounds = bounds_from_point(lat, lng)
        if bounds is None:
            raise PositionUnavailableError(self._message("gps_unavailable"))

        place = await self._reverse_geocode_best_effort(lat, lng, stages)

        sort = self.settings.DEFAULT_SORT
        products = await self._fetch(
            {"sort": sort, **bounds.to_params()},
            CascadeStage.BBOX,
            stages,
        )

        if not products and place is not None and place.city:
            params: dict[str, Any] = {"sort": sort, "city": place.city}
            if place.country:
                params["country"] = place.country
            products = await self._fetch(params, CascadeStage.CITY, stages)

        if not products:
            raise NoResultsError(self._message("no_nearby_results"))

        return ReconciledResult(
            kind=SearchKind.GPS,
            items=products,
            applied_label=near_label(place),
            applied_country=(place.country or None) if place else None,
            place=place or Place(lat=lat, lng=lng),
            bounds=bounds,
            stages=stages,
        )

    # ── Map-region search ────────────────────────────────

    async def run_region_search(self, bounds: Any) -> ReconciledResult:
        """Bounding box → bbox listings plus unlocated national listings.

        The centroid is reverse-geocoded concurrently with the bbox
        query.  When the centroid resolves to a country, that country's
        listings are fetched as a secondary source: they replace an
        empty bbox result, otherwise only those without coordinates are
        merged in behind the bbox listings.
        """
        region = normalize_bounds(bounds)
        center = centroid(region)
        if region is None or center is None:
            raise InputError(self._message("invalid_bounds"))

        sort = self.settings.DEFAULT_SORT
        stages: list[CascadeStage] = []
        primary_outcome, place_outcome = await asyncio.gather(
            self._fetch(
                {"sort": sort, **region.to_params()},
                CascadeStage.BBOX,
                stages,
            ),
            self._reverse_geocode_best_effort(center[0], center[1], stages),
            return_exceptions=True,
        )
        if isinstance(place_outcome, BaseException):
            raise place_outcome
        if isinstance(primary_outcome, BaseException):
            raise primary_outcome
        primary: list[ProductRecord] = primary_outcome
        place: Place | None = place_outcome

        country = place.country if place is not None else ""
        national: list[ProductRecord] = []
        if country:
            try:
                national = await self._fetch(
                    {"sort": sort, "country": country},
                    CascadeStage.COUNTRY_SECONDARY,
                    stages,
                )
            except NetworkError as exc:
                logger.warning(
                    "Country listing for %s failed: %s", country, exc
                )

        stages.append(CascadeStage.MERGE)
        if not primary:
            final = national
        else:
            unlocated = [p for p in national if not has_valid_coords(p)]
            final = ProductDeduplicator.merge(primary, unlocated)

        if not final:
            raise NoResultsError(self._message("no_results"))

        priority_keys = [k for k in (key_of(p) for p in primary) if k]
        label = build_location_label(place) if place is not None else ""
        return ReconciledResult(
            kind=SearchKind.REGION,
            items=final,
            applied_label=label or self.settings.MAP_REGION_LABEL,
            applied_country=country or None,
            priority_keys=priority_keys,
            place=place,
            bounds=region,
            stages=stages,
        )

    # ── Facets ───────────────────────────────────────────

    async def run_country_filter(self, code: str) -> ReconciledResult:
        """Country facet: code, label or alias → country listing."""
        normalized = normalize_country_code(code)
        if not normalized:
            raise InputError(self._message("unknown_country"))

        stages: list[CascadeStage] = []
        products = await self._fetch(
            {"sort": self.settings.DEFAULT_SORT, "country": normalized},
            CascadeStage.PRIMARY,
            stages,
        )
        if not products:
            raise NoResultsError(self._message("no_country_results"))
        return ReconciledResult(
            kind=SearchKind.COUNTRY,
            items=products,
            applied_label=country_name(normalized),
            applied_country=normalized,
            stages=stages,
        )

    async def run_category_filter(
        self, category: str, scope: GeoScope | None = None,
    ) -> ReconciledResult:
        """Category facet inside the current scope."""
        label = (category or "").strip()
        if not label:
            raise InputError(self._message("empty_category"))

        request = SearchRequest(
            scope=scope or self._default_scope(), category=label
        )
        stages: list[CascadeStage] = []
        products = await self._fetch(
            request.to_params(self.settings.DEFAULT_SORT),
            CascadeStage.PRIMARY,
            stages,
        )
        if not products:
            raise NoResultsError(self._message("no_category_results"))
        return ReconciledResult(
            kind=SearchKind.CATEGORY,
            items=products,
            applied_label=label,
            applied_country=(
                request.scope.code
                if isinstance(request.scope, CountryScope)
                else None
            ),
            bounds=(
                request.scope.bounds
                if isinstance(request.scope, BboxScope)
                else None
            ),
            stages=stages,
        )

    async def run_reset(self, country: str | None = None) -> ReconciledResult:
        """Default listing for a country; an empty listing is not an error.

        Cached catalog responses are dropped first so the listing is fresh.
        """
        code = self.settings.DEFAULT_COUNTRY
        if country and country.strip():
            code = normalize_country_code(country)
            if not code:
                raise InputError(self._message("unknown_country"))
        self.client.clear_cache()
        stages: list[CascadeStage] = []
        products = await self._fetch(
            {"sort": self.settings.DEFAULT_SORT, "country": code},
            CascadeStage.PRIMARY,
            stages,
        )
        return ReconciledResult(
            kind=SearchKind.RESET,
            items=products,
            applied_label=country_name(code),
            applied_country=code,
            stages=stages,
        )

    async def list_active_countries(self) -> list[CountryCount]:
        """Countries that currently have listings, with their totals."""
        return await self.client.list_active_countries()

    # ── Direct merge access ──────────────────────────────

    @staticmethod
    def merge_into_current(
        existing: list[ProductRecord],
        incoming: list[ProductRecord],
        priority_keys: list[str] | None = None,
    ) -> list[ProductRecord]:
        """Fold *incoming* into *existing* for callers owning the display."""
        return ProductDeduplicator.merge_into_current(
            existing, incoming, priority_keys
        )
