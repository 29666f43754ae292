# listing_search/filters/text_normalizer.py

"""Accent-insensitive text normalisation and tokenisation."""

import re
import unicodedata

_NON_ALNUM_RE = re.compile(r"[^a-z0-9 ]+")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize(text: str | None) -> str:
    """Fold *text* to lowercase ASCII words separated by single spaces.

    Combining diacritics are stripped after NFD decomposition, so
    ``"Imóveis"`` becomes ``"imoveis"``; every other run of characters
    outside ``[a-z0-9 ]`` collapses to one space.
    """
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", str(text))
    stripped = "".join(
        ch for ch in decomposed if not unicodedata.combining(ch)
    )
    lowered = stripped.lower()
    spaced = _NON_ALNUM_RE.sub(" ", lowered)
    return _WHITESPACE_RE.sub(" ", spaced).strip()


def tokenize(text: str | None) -> list[str]:
    """Split the normalised form of *text* into non-empty tokens."""
    normalized = normalize(text)
    if not normalized:
        return []
    return [token for token in normalized.split(" ") if token]
