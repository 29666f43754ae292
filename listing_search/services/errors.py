# listing_search/services/errors.py

"""Failure taxonomy surfaced by the reconciliation orchestrator."""


class SearchError(Exception):
    """Base class; ``message`` is safe to show to the user."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InputError(SearchError):
    """Rejected before any network call (blank query, bad bounds...)."""

    kind = "input"


class GeocodingError(SearchError):
    """A location could not be resolved to finite coordinates."""

    kind = "geocoding"


class PositionUnavailableError(GeocodingError):
    """The device position could not be acquired in time."""

    kind = "position"


class NetworkError(SearchError):
    """An essential catalog or geocoding call failed."""

    kind = "network"


class NoResultsError(SearchError):
    """Every cascade tier came back empty. Not a fault."""

    kind = "no_results"
