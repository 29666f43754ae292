# listing_search/models/product.py

"""Catalog listing model with alias resolution at ingestion."""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

# Canonical attribute name -> payload aliases; distinct values of every
# present alias are kept, joined by a space.
# Covers the real-estate, service and job attribute bags.
ATTRIBUTE_ALIASES: dict[str, tuple[str, ...]] = {
    "seller_name": ("seller_name", "sellerName"),
    "subtitle": ("subtitle",),
    "brand": ("brand",),
    "model": ("model",),
    "color": ("color",),
    "property_type": ("propertyType", "property_type"),
    "service_type": ("serviceType", "service_type"),
    "service_duration": ("serviceDuration", "service_duration"),
    "service_rate": ("serviceRate", "service_rate"),
    "service_location": ("serviceLocation", "service_location"),
    "area": ("area",),
    "bedrooms": ("bedrooms",),
    "bathrooms": ("bathrooms",),
    "parking": ("parking",),
    "rent_type": ("rentType", "rent_type"),
    "job_title": ("jobTitle", "job_title"),
    "job_type": ("jobType", "job_type"),
    "job_salary": ("jobSalary", "job_salary"),
    "job_requirements": ("jobRequirements", "job_requirements"),
    "neighborhood": ("neighborhood",),
    "zip": ("zip", "zipCode", "zip_code"),
}

_LAT_ALIASES = ("lat", "latitude", "geo_lat")
_LNG_ALIASES = ("lng", "longitude", "geo_lng")
_LIKE_ALIASES = ("likes_count", "likes", "favorites_count")


def _first_present(
    payload: Mapping[str, Any], aliases: tuple[str, ...],
) -> Any:
    """Return the first alias value that is not None/empty."""
    for name in aliases:
        value = payload.get(name)
        if value is not None and value != "":
            return value
    return None


def _to_float(value: Any) -> float | None:
    """Coerce a coordinate to a finite float, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _to_text(value: Any) -> str:
    """Render a scalar as text; None becomes the empty string."""
    if value is None:
        return ""
    return str(value)


def _to_tags(value: Any) -> list[str]:
    """Normalise a tags field (list or comma string) to a list."""
    if value is None:
        return []
    if isinstance(value, str):
        return [t.strip() for t in value.split(",") if t.strip()]
    if isinstance(value, (list, tuple)):
        return [str(t) for t in value if t is not None and str(t)]
    return [str(value)]


@dataclass
class ProductRecord:
    """A single catalog listing.

    ``raw`` keeps the payload exactly as the catalog returned it; the
    remaining fields are resolved once from ``raw`` so the rest of the
    engine reads one stable shape.
    """

    raw: dict[str, Any] = field(
        default_factory=lambda: dict[str, Any]()
    )
    id: Any = None
    product_id: Any = None
    title: str = ""
    description: str = ""
    category: str = ""
    tags: list[str] = field(
        default_factory=lambda: list[str]()
    )
    city: str = ""
    state: str = ""
    country: str = ""
    lat: float | None = None
    lng: float | None = None
    status: str = "active"
    likes: int = 0
    attributes: dict[str, str] = field(
        default_factory=lambda: dict[str, str]()
    )

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ProductRecord":
        """Build a record from a raw catalog payload."""
        raw = dict(payload)
        attributes: dict[str, str] = {}
        for canonical, aliases in ATTRIBUTE_ALIASES.items():
            values: list[str] = []
            for name in aliases:
                text = _to_text(raw.get(name)).strip()
                if text and text not in values:
                    values.append(text)
            if values:
                attributes[canonical] = " ".join(values)

        likes_raw = _first_present(raw, _LIKE_ALIASES)
        likes = _to_float(likes_raw)

        return cls(
            raw=raw,
            id=_first_present(raw, ("id",)),
            product_id=_first_present(raw, ("product_id", "productId")),
            title=_to_text(raw.get("title")),
            description=_to_text(raw.get("description")),
            category=_to_text(raw.get("category")),
            tags=_to_tags(raw.get("tags")),
            city=_to_text(raw.get("city")),
            state=_to_text(raw.get("state")),
            country=_to_text(raw.get("country")).upper(),
            lat=_to_float(_first_present(raw, _LAT_ALIASES)),
            lng=_to_float(_first_present(raw, _LNG_ALIASES)),
            status=_to_text(raw.get("status")) or "active",
            likes=int(likes) if likes is not None and likes >= 0 else 0,
            attributes=attributes,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the original payload for JSON output."""
        return dict(self.raw)
