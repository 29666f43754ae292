# listing_search/services/events.py

"""Explicit message passing between the search core and its UI."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from listing_search.models.product import ProductRecord
from listing_search.models.search import ReconciledResult, SearchKind

logger = logging.getLogger("listing_search.events")


@dataclass
class ResultsApplied:
    """A search succeeded and the displayed list was replaced."""

    kind: SearchKind
    result: ReconciledResult
    products: list[ProductRecord] = field(
        default_factory=lambda: list[ProductRecord]()
    )
    category_options: list[tuple[str, int]] = field(
        default_factory=lambda: list[tuple[str, int]]()
    )


@dataclass
class SearchFailed:
    """A search ended without results; the display is untouched."""

    kind: SearchKind
    error_kind: str
    message: str


@dataclass
class ResultsDiscarded:
    """A superseded search finished after a newer one started."""

    kind: SearchKind


SearchEvent = ResultsApplied | SearchFailed | ResultsDiscarded
Subscriber = Callable[[SearchEvent], None]


class EventChannel:
    """Fan out search events to registered UI callbacks."""

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register *callback*; returns a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, event: SearchEvent) -> None:
        """Deliver *event* to every subscriber in registration order.

        A failing subscriber is logged and does not prevent delivery
        to the others.
        """
        logger.debug("Publishing %s", type(event).__name__)
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                logger.error(
                    "Subscriber %r failed on %s",
                    callback,
                    type(event).__name__,
                    exc_info=True,
                )
