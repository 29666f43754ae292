# listing_search/filters/deduplicator.py

"""Order-preserving merge, deduplication and prioritisation of listings."""

import logging
from collections.abc import Iterable

from listing_search.filters.product_keys import key_of
from listing_search.models.product import ProductRecord

logger = logging.getLogger("listing_search.filters")


class ProductDeduplicator:
    """Combine result lists from several cascade tiers by identity key."""

    @staticmethod
    def merge(*lists: Iterable[ProductRecord] | None) -> list[ProductRecord]:
        """Union *lists* in order, keeping the first copy of each key.

        Earlier lists take precedence.  Records without a derivable key
        cannot be compared, so they are always kept.
        """
        seen: set[str] = set()
        merged: list[ProductRecord] = []
        removed = 0

        for records in lists:
            for record in records or []:
                if record is None:
                    continue
                key = key_of(record)
                if key is None:
                    merged.append(record)
                    continue
                if key in seen:
                    removed += 1
                    continue
                seen.add(key)
                merged.append(record)

        if removed:
            logger.info(
                "Merge dropped %d duplicate listings", removed
            )
        return merged

    @staticmethod
    def prioritize(
        records: list[ProductRecord],
        priority_keys: Iterable[str] | None,
    ) -> list[ProductRecord]:
        """Move records whose key is in *priority_keys* to the front.

        Prioritised records keep their relative order from *records*.
        Each key is consumed by its first match, so a later duplicate
        of the same listing stays in the tail.
        """
        pending = set(priority_keys or ())
        if not pending:
            return list(records)

        front: list[ProductRecord] = []
        rest: list[ProductRecord] = []
        for record in records:
            key = key_of(record)
            if key is not None and key in pending:
                front.append(record)
                pending.discard(key)
            else:
                rest.append(record)
        return front + rest

    @staticmethod
    def merge_into_current(
        existing: list[ProductRecord],
        incoming: list[ProductRecord],
        priority_keys: Iterable[str] | None = None,
    ) -> list[ProductRecord]:
        """Fold fresh results into a displayed list.

        Incoming copies replace stale displayed copies of the same
        listing; *priority_keys* then float to the front.
        """
        merged = ProductDeduplicator.merge(incoming, existing)
        return ProductDeduplicator.prioritize(merged, priority_keys)


def derive_category_options(
    records: Iterable[ProductRecord],
) -> list[tuple[str, int]]:
    """Count listings per category, most populated first."""
    counts: dict[str, int] = {}
    for record in records:
        label = record.category.strip()
        if not label:
            continue
        counts[label] = counts.get(label, 0) + 1
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))
