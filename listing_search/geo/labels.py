# listing_search/geo/labels.py

"""Human-readable labels for places and countries."""

from listing_search.config.settings import Settings
from listing_search.data.countries import get_country_label
from listing_search.models.geo import Place


def country_name(code: str | None) -> str:
    """Display name for a country code, falling back to the code itself."""
    if not code:
        return ""
    normalized = str(code).strip().upper()
    return get_country_label(normalized) or normalized


def build_location_label(place: Place | None) -> str:
    """``"City, State, Country"`` with empty and repeated parts skipped."""
    if place is None:
        return ""
    parts: list[str] = []
    if place.city:
        parts.append(place.city)
    if place.state and place.state != place.city:
        parts.append(place.state)
    if place.country:
        parts.append(country_name(place.country))
    return ", ".join(p for p in parts if p)


def near_label(place: Place | None) -> str:
    """Label for a GPS search; degrades to a generic "near you"."""
    return build_location_label(place) or Settings.NEAR_YOU_LABEL
