# listing_search/models/search.py

"""Request/result containers for one reconciliation cycle."""

from dataclasses import dataclass, field
from enum import Enum

from listing_search.models.geo import GeoBounds, GeoScope, Place
from listing_search.models.product import ProductRecord


class SearchKind(Enum):
    """Discovery path that produced a result."""

    TEXT = "search"
    ADDRESS = "address"
    GPS = "gps"
    REGION = "region"
    COUNTRY = "country"
    CATEGORY = "category"
    RESET = "reset"


class CascadeStage(Enum):
    """Named states a reconciliation passes through."""

    PRIMARY = "primary"
    LOCAL_FILTER = "local_filter"
    BROAD_FALLBACK = "broad_fallback"
    SUPPLEMENT = "supplement"
    GEOCODE = "geocode"
    POSITION = "position"
    REVERSE_GEOCODE = "reverse_geocode"
    BBOX = "bbox"
    CITY = "city"
    BROAD_CITY_FILTER = "broad_city_filter"
    COUNTRY_SECONDARY = "country_secondary"
    MERGE = "merge"


@dataclass
class SearchRequest:
    """Normalised input to one reconciliation cycle."""

    scope: GeoScope
    text: str | None = None
    category: str | None = None

    def to_params(self, sort: str, include_text: bool = True) -> dict[str, object]:
        """Render as ``/products`` query parameters."""
        params: dict[str, object] = {"sort": sort}
        if include_text and self.text:
            params["q"] = self.text
        params.update(self.scope.to_params())
        if self.category:
            params["category"] = self.category
        return params


@dataclass
class ReconciledResult:
    """Final list plus the summary of the scope that produced it."""

    kind: SearchKind
    items: list[ProductRecord] = field(
        default_factory=lambda: list[ProductRecord]()
    )
    applied_label: str = ""
    applied_country: str | None = None
    priority_keys: list[str] = field(
        default_factory=lambda: list[str]()
    )
    place: Place | None = None
    bounds: GeoBounds | None = None
    stages: list[CascadeStage] = field(
        default_factory=lambda: list[CascadeStage]()
    )
