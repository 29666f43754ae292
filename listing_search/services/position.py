# listing_search/services/position.py

"""Device position sources for "near me" searches."""

from typing import Protocol

from listing_search.config.settings import Settings
from listing_search.services.errors import PositionUnavailableError


class PositionProvider(Protocol):
    """Anything that can report the user's current coordinates.

    Implementations raise :class:`PositionUnavailableError` when no fix
    is available; the orchestrator bounds the wait and never retries.
    """

    async def current_position(self) -> tuple[float, float]:
        """Return ``(lat, lng)`` in decimal degrees."""
        ...


class FixedPositionProvider:
    """Report a position known up front (CLI flags, tests, kiosks)."""

    def __init__(self, lat: float | None, lng: float | None) -> None:
        self._lat = lat
        self._lng = lng

    async def current_position(self) -> tuple[float, float]:
        """Return the configured coordinates."""
        if self._lat is None or self._lng is None:
            raise PositionUnavailableError(
                Settings.MESSAGES["gps_unavailable"]
            )
        return self._lat, self._lng
