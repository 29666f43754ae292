# listing_search/filters/product_validator.py

"""Listing validation: drop malformed payloads and sold listings."""

import logging
from collections.abc import Iterable
from typing import Any

from listing_search.models.product import ProductRecord

logger = logging.getLogger("listing_search.filters")

SOLD_STATUS = "sold"


class ProductValidator:
    """Turn raw catalog payloads into records and screen them."""

    @staticmethod
    def ingest(payloads: Iterable[Any] | None) -> list[ProductRecord]:
        """Resolve each mapping payload into a :class:`ProductRecord`.

        Non-mapping entries (``null``, bare strings) are dropped.
        """
        records: list[ProductRecord] = []
        dropped = 0
        for payload in payloads or []:
            if not isinstance(payload, dict):
                dropped += 1
                continue
            records.append(ProductRecord.from_payload(payload))
        if dropped:
            logger.info(
                "Ingestion dropped %d non-object payloads", dropped
            )
        return records

    @staticmethod
    def filter_active(
        records: list[ProductRecord],
    ) -> tuple[list[ProductRecord], int]:
        """Drop listings already marked as sold.

        Returns the active records and the count of dropped items.
        """
        active: list[ProductRecord] = []
        dropped = 0
        for record in records:
            if record.status.lower() == SOLD_STATUS:
                logger.debug(
                    "Dropped sold listing (id=%s, title=%s)",
                    record.id,
                    record.title,
                )
                dropped += 1
                continue
            active.append(record)

        if dropped:
            logger.info("Validation dropped %d sold listings", dropped)
        return active, dropped
