# listing_search/geo/bounds.py

"""Bounding-box derivation and validation in flat lat/lng space.

Every helper here is total: anything that cannot produce finite
coordinates returns ``None`` (or ``False``) and the caller falls back
to a country-level scope.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from listing_search.config.settings import Settings
from listing_search.models.geo import GeoBounds
from listing_search.models.product import ProductRecord


@dataclass
class Viewport:
    """What an interactive map reports about its current view."""

    center_lat: float | None = None
    center_lng: float | None = None
    zoom: float | None = None
    bounds: Mapping[str, Any] | GeoBounds | None = None


def _finite(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


_EDGE_KEYS = (
    ("minLat", "min_lat"),
    ("maxLat", "max_lat"),
    ("minLng", "min_lng"),
    ("maxLng", "max_lng"),
)


def _edges(
    raw: Mapping[str, Any] | GeoBounds,
) -> tuple[float | None, float | None, float | None, float | None]:
    """Read the four edges as finite floats (None where unusable)."""
    if isinstance(raw, GeoBounds):
        values = [raw.min_lat, raw.max_lat, raw.min_lng, raw.max_lng]
    else:
        values = [raw.get(camel, raw.get(snake)) for camel, snake in _EDGE_KEYS]
    min_lat, max_lat, min_lng, max_lng = (_finite(v) for v in values)
    return min_lat, max_lat, min_lng, max_lng


def bounds_from_point(
    lat: float,
    lng: float,
    delta: float = Settings.DEFAULT_BBOX_DELTA,
) -> GeoBounds | None:
    """Square of half-side *delta* degrees centred on (lat, lng)."""
    lat_f, lng_f, delta_f = _finite(lat), _finite(lng), _finite(delta)
    if lat_f is None or lng_f is None or delta_f is None or delta_f <= 0:
        return None
    return GeoBounds(
        min_lat=lat_f - delta_f,
        max_lat=lat_f + delta_f,
        min_lng=lng_f - delta_f,
        max_lng=lng_f + delta_f,
    )


def delta_for_zoom(zoom: float | None) -> float:
    """Half-side for a map zoom level: ``max(0.02, zoom * 0.003)``."""
    zoom_f = _finite(zoom)
    if zoom_f is None:
        return Settings.DEFAULT_BBOX_DELTA
    return max(Settings.MIN_ZOOM_DELTA, zoom_f * Settings.ZOOM_DELTA_FACTOR)


def normalize_bounds(
    raw: Mapping[str, Any] | GeoBounds | None,
) -> GeoBounds | None:
    """Coerce raw bounds to floats, swapping inverted axes.

    Accepts a :class:`GeoBounds` or a mapping with either camelCase
    (``minLat``) or snake_case (``min_lat``) keys.
    """
    if raw is None:
        return None
    min_lat, max_lat, min_lng, max_lng = _edges(raw)
    if min_lat is None or max_lat is None or min_lng is None or max_lng is None:
        return None
    return GeoBounds(
        min_lat=min(min_lat, max_lat),
        max_lat=max(min_lat, max_lat),
        min_lng=min(min_lng, max_lng),
        max_lng=max(min_lng, max_lng),
    )


def is_valid(bounds: GeoBounds | Mapping[str, Any] | None) -> bool:
    """All four edges finite and ``min <= max`` on both axes."""
    if bounds is None:
        return False
    min_lat, max_lat, min_lng, max_lng = _edges(bounds)
    if min_lat is None or max_lat is None or min_lng is None or max_lng is None:
        return False
    return min_lat <= max_lat and min_lng <= max_lng


def centroid(bounds: GeoBounds | None) -> tuple[float, float] | None:
    """Arithmetic midpoint ``(lat, lng)``; no great-circle correction."""
    if bounds is None or not is_valid(bounds):
        return None
    return (
        (bounds.min_lat + bounds.max_lat) / 2,
        (bounds.min_lng + bounds.max_lng) / 2,
    )


def bounds_from_viewport(viewport: Viewport | None) -> GeoBounds | None:
    """Prefer the map's own bounds, else a zoom-scaled box at its centre."""
    if viewport is None:
        return None
    exposed = normalize_bounds(viewport.bounds)
    if exposed is not None:
        return exposed
    lat, lng = _finite(viewport.center_lat), _finite(viewport.center_lng)
    if lat is None or lng is None:
        return None
    return bounds_from_point(lat, lng, delta_for_zoom(viewport.zoom))


def has_valid_coords(record: ProductRecord) -> bool:
    """True when the listing is pinned somewhere other than (0, 0)."""
    if record.lat is None or record.lng is None:
        return False
    return not (record.lat == 0 and record.lng == 0)
