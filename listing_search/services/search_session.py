# listing_search/services/search_session.py

"""Display-state owner that applies only the newest search outcome."""

import logging
from collections.abc import Awaitable
from typing import Any

from listing_search.config.settings import Settings
from listing_search.filters.deduplicator import (
    ProductDeduplicator,
    derive_category_options,
)
from listing_search.filters.product_validator import ProductValidator
from listing_search.models.geo import BboxScope, CountryScope, GeoScope
from listing_search.models.product import ProductRecord
from listing_search.models.search import ReconciledResult, SearchKind
from listing_search.services.errors import NetworkError, SearchError
from listing_search.services.events import (
    EventChannel,
    ResultsApplied,
    ResultsDiscarded,
    SearchFailed,
)
from listing_search.services.search_orchestrator import SearchOrchestrator

logger = logging.getLogger("listing_search.session")

_BBOX_KINDS = (SearchKind.ADDRESS, SearchKind.GPS, SearchKind.REGION)
_COUNTRY_KINDS = (SearchKind.COUNTRY, SearchKind.RESET)


def scope_for(result: ReconciledResult) -> GeoScope | None:
    """Scope that later searches inherit from a successful result."""
    if result.kind in _BBOX_KINDS and result.bounds is not None:
        return BboxScope(result.bounds)
    if result.kind in _COUNTRY_KINDS and result.applied_country:
        return CountryScope(result.applied_country)
    return None


class SearchSession:
    """Owns the displayed listings and the last applied filter.

    Every operation takes a generation ticket when it starts.  When it
    finishes, its outcome is applied (or reported) only if no newer
    operation has started in the meantime; otherwise it is discarded so
    a slow response can never overwrite fresher state.  The display is
    written once per successful operation and never on failure.
    """

    def __init__(
        self,
        orchestrator: SearchOrchestrator,
        channel: EventChannel | None = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.channel = channel if channel is not None else EventChannel()
        self.products: list[ProductRecord] = []
        self.category_options: list[tuple[str, int]] = []
        self.applied: ReconciledResult | None = None
        self.scope: GeoScope | None = None
        self._generation = 0

    # ── Operations ───────────────────────────────────────

    async def text_search(
        self, text: str, category: str | None = None,
    ) -> ReconciledResult | None:
        """Free-text search inside the currently applied scope."""
        return await self._run(
            SearchKind.TEXT,
            self.orchestrator.run_text_search(text, self.scope, category),
        )

    async def address_search(self, text: str) -> ReconciledResult | None:
        """Search around a free-form address."""
        return await self._run(
            SearchKind.ADDRESS, self.orchestrator.run_address_search(text)
        )

    async def gps_search(self) -> ReconciledResult | None:
        """Search around the device position."""
        return await self._run(
            SearchKind.GPS, self.orchestrator.run_gps_search()
        )

    async def region_search(
        self, bounds: Any, keep_existing: bool = False,
    ) -> ReconciledResult | None:
        """Search a map region.

        The bbox-native listings lead the display.  By default the
        display is replaced; *keep_existing* folds the region into what
        is already shown instead.
        """
        return await self._run(
            SearchKind.REGION,
            self.orchestrator.run_region_search(bounds),
            keep_existing=keep_existing,
        )

    async def country_filter(self, code: str) -> ReconciledResult | None:
        """Switch to a country facet."""
        return await self._run(
            SearchKind.COUNTRY, self.orchestrator.run_country_filter(code)
        )

    async def category_filter(
        self, category: str,
    ) -> ReconciledResult | None:
        """Narrow to a category inside the current scope."""
        return await self._run(
            SearchKind.CATEGORY,
            self.orchestrator.run_category_filter(category, self.scope),
        )

    async def reset(self, country: str | None = None) -> ReconciledResult | None:
        """Return to the default country listing."""
        return await self._run(
            SearchKind.RESET, self.orchestrator.run_reset(country)
        )

    # ── Private helpers ──────────────────────────────────

    def _is_current(self, ticket: int, kind: SearchKind) -> bool:
        if ticket == self._generation:
            return True
        logger.info(
            "Discarding stale %s outcome (ticket %d, current %d)",
            kind.value,
            ticket,
            self._generation,
        )
        self.channel.publish(ResultsDiscarded(kind=kind))
        return False

    async def _run(
        self,
        kind: SearchKind,
        operation: Awaitable[ReconciledResult],
        keep_existing: bool = False,
    ) -> ReconciledResult | None:
        self._generation += 1
        ticket = self._generation

        try:
            result = await operation
        except SearchError as exc:
            if not self._is_current(ticket, kind):
                return None
            log = logger.info if exc.kind == "no_results" else logger.warning
            log("%s search failed (%s): %s", kind.value, exc.kind, exc.message)
            # Transport details stay in the log; the user sees a generic notice
            message = (
                Settings.MESSAGES["fetch_error"]
                if isinstance(exc, NetworkError)
                else exc.message
            )
            self.channel.publish(
                SearchFailed(kind=kind, error_kind=exc.kind, message=message)
            )
            return None

        if not self._is_current(ticket, kind):
            return None

        self._apply(result, keep_existing)
        self.channel.publish(
            ResultsApplied(
                kind=kind,
                result=result,
                products=self.products,
                category_options=self.category_options,
            )
        )
        return result

    def _apply(self, result: ReconciledResult, keep_existing: bool) -> None:
        """Replace (or merge into) the display in one step."""
        incoming, _sold = ProductValidator.filter_active(result.items)
        if keep_existing:
            products = ProductDeduplicator.merge_into_current(
                self.products, incoming, result.priority_keys
            )
        else:
            products = ProductDeduplicator.prioritize(
                incoming, result.priority_keys
            )
        self.products = products
        self.category_options = derive_category_options(products)
        self.applied = result
        next_scope = scope_for(result)
        if next_scope is not None:
            self.scope = next_scope
        logger.info(
            "Applied %s result: %d listings, label '%s'",
            result.kind.value,
            len(products),
            result.applied_label,
        )
