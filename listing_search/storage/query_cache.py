# listing_search/storage/query_cache.py

"""Short-lived in-memory cache of catalog responses."""

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from listing_search.config.settings import Settings

logger = logging.getLogger("listing_search.cache")

ParamsKey = frozenset[tuple[str, str]]


def params_key(params: Mapping[str, Any]) -> ParamsKey:
    """Order-independent identity of a query-parameter set."""
    return frozenset(
        (name, str(value))
        for name, value in params.items()
        if value is not None
    )


@dataclass
class CacheEntry:
    """Payloads returned for one endpoint + parameter set."""

    path: str
    params: ParamsKey
    payloads: list[Any]
    timestamp: float


class QueryCache:
    """TTL cache keyed by endpoint and exact parameter set.

    A text search asks for the same broad fallback listing several
    times in quick succession; this keeps those repeats off the
    network without serving data older than ``QUERY_CACHE_TTL``.
    """

    def __init__(self, ttl: float | None = None) -> None:
        self._entries: dict[tuple[str, ParamsKey], CacheEntry] = {}
        self._ttl: float = (
            Settings.QUERY_CACHE_TTL if ttl is None else ttl
        )

    def find(
        self, path: str, params: Mapping[str, Any],
    ) -> list[Any] | None:
        """Return cached payloads for this request, or ``None`` on miss."""
        self._evict_expired(time.time())
        entry = self._entries.get((path, params_key(params)))
        if entry is None:
            return None
        logger.info(
            "Cache hit for %s %s (%d payloads)",
            path,
            dict(params),
            len(entry.payloads),
        )
        return list(entry.payloads)

    def store(
        self,
        path: str,
        params: Mapping[str, Any],
        payloads: list[Any],
    ) -> None:
        """Remember the payloads of a successful request."""
        key = params_key(params)
        self._entries[(path, key)] = CacheEntry(
            path=path,
            params=key,
            payloads=list(payloads),
            timestamp=time.time(),
        )
        logger.debug(
            "Cached %d payloads for %s %s",
            len(payloads),
            path,
            dict(params),
        )

    def clear(self) -> int:
        """Purge all cached entries.

        Returns the number of entries that were removed.
        """
        count = len(self._entries)
        self._entries.clear()
        logger.info("Cache manually purged (%d entries removed)", count)
        return count

    def _evict_expired(self, now: float) -> None:
        """Remove entries older than the TTL threshold."""
        expired = [
            key
            for key, entry in self._entries.items()
            if now - entry.timestamp >= self._ttl
        ]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug(
                "Evicted %d expired cache entries", len(expired)
            )
