# listing_search/filters/product_keys.py

"""Stable identity keys for catalog listings."""

import json
from collections.abc import Mapping
from typing import Any

from listing_search.models.product import ProductRecord


def _present(value: Any) -> bool:
    return value is not None and value != ""


def key_of(record: ProductRecord | Mapping[str, Any] | None) -> str | None:
    """Derive the identity key used for dedup and prioritisation.

    Precedence, most specific first:
    ``id:<id>``, ``prod:<product_id>:<title>``, ``prod:<product_id>``,
    ``title:<title>``, then canonical JSON of the payload.  Returns
    ``None`` for empty or unserialisable payloads.
    """
    if record is None:
        return None
    if not isinstance(record, ProductRecord):
        record = ProductRecord.from_payload(record)

    if _present(record.id):
        return f"id:{record.id}"
    if _present(record.product_id) and record.title:
        return f"prod:{record.product_id}:{record.title}"
    if _present(record.product_id):
        return f"prod:{record.product_id}"
    if record.title:
        return f"title:{record.title}"
    if not record.raw:
        return None
    try:
        return json.dumps(record.raw, sort_keys=True, ensure_ascii=False)
    except (TypeError, ValueError):
        return None
