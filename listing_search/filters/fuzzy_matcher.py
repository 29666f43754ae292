# listing_search/filters/fuzzy_matcher.py

"""Typo-tolerant conjunctive matching of queries against listings."""

import logging

from rapidfuzz.distance import Levenshtein

from listing_search.config.settings import Settings
from listing_search.filters.text_normalizer import tokenize
from listing_search.models.product import ProductRecord

logger = logging.getLogger("listing_search.filters")


def distance(a: str, b: str) -> int:
    """Levenshtein edit distance with unit insert/delete/substitute costs."""
    return int(Levenshtein.distance(a, b))


def tolerance_for(query_token: str) -> int:
    """Edits allowed for a query token; short tokens get less slack."""
    if len(query_token) <= Settings.SHORT_TOKEN_LENGTH:
        return Settings.SHORT_TOKEN_TOLERANCE
    return Settings.LONG_TOKEN_TOLERANCE


def token_matches(candidate: str, query_token: str) -> bool:
    """Return True when *candidate* is close enough to *query_token*.

    Containment in either direction is an immediate match; otherwise
    the edit distance must be within :func:`tolerance_for`.
    """
    if not candidate or not query_token:
        return False
    if query_token in candidate or candidate in query_token:
        return True
    limit = tolerance_for(query_token)
    # score_cutoff lets rapidfuzz bail out early on distant pairs
    return (
        Levenshtein.distance(candidate, query_token, score_cutoff=limit)
        <= limit
    )


def searchable_text(record: ProductRecord) -> str:
    """Concatenate every text field a query may hit."""
    parts: list[str] = [
        record.title,
        record.description,
        record.category,
        " ".join(record.tags),
        record.city,
        record.state,
        record.country,
    ]
    parts.extend(record.attributes.values())
    return " ".join(p for p in parts if p)


def matches_query(
    record: ProductRecord, query_tokens: list[str],
) -> bool:
    """Every query token must match at least one record token."""
    if not query_tokens:
        return False
    record_tokens = tokenize(searchable_text(record))
    if not record_tokens:
        return False
    return all(
        any(token_matches(candidate, token) for candidate in record_tokens)
        for token in query_tokens
    )


def filter_by_query(
    records: list[ProductRecord], query: str,
) -> list[ProductRecord]:
    """Keep the records matching *query*, preserving order.

    An empty (or all-punctuation) query matches nothing.
    """
    tokens = tokenize(query)
    if not tokens:
        return []
    kept = [r for r in records if matches_query(r, tokens)]
    logger.debug(
        "Fuzzy filter kept %d of %d records for %s",
        len(kept),
        len(records),
        tokens,
    )
    return kept
