# listing_search/models/geo.py

"""Geographic value types: bounds, scopes, places."""

from dataclasses import dataclass


@dataclass(frozen=True)
class GeoBounds:
    """Axis-aligned lat/lng rectangle (flat, not geodesic)."""

    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def to_params(self) -> dict[str, float]:
        """Render as catalog query parameters."""
        return {
            "minLat": self.min_lat,
            "maxLat": self.max_lat,
            "minLng": self.min_lng,
            "maxLng": self.max_lng,
        }


@dataclass(frozen=True)
class CountryScope:
    """Restrict a catalog query to one ISO alpha-2 country."""

    code: str

    def to_params(self) -> dict[str, str]:
        """Render as catalog query parameters."""
        return {"country": self.code}


@dataclass(frozen=True)
class BboxScope:
    """Restrict a catalog query to a bounding box."""

    bounds: GeoBounds

    def to_params(self) -> dict[str, float]:
        """Render as catalog query parameters."""
        return self.bounds.to_params()


GeoScope = CountryScope | BboxScope


@dataclass
class Place:
    """A geocoder answer; any field may be missing."""

    lat: float | None = None
    lng: float | None = None
    city: str = ""
    state: str = ""
    country: str = ""


@dataclass
class CountryCount:
    """Number of active listings in a country."""

    country: str
    total: int
