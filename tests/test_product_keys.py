# tests/test_product_keys.py

"""Tests for identity key derivation."""

import unittest

from listing_search.filters.product_keys import key_of
from listing_search.models.product import ProductRecord


class TestKeyOf(unittest.TestCase):
    """key_of precedence and fallbacks."""

    def test_id_wins(self) -> None:
        """An id produces an ``id:`` key regardless of other fields."""
        self.assertEqual(key_of({"id": 5}), "id:5")
        self.assertEqual(
            key_of({"id": "abc", "product_id": 9, "title": "Sofa"}),
            "id:abc",
        )

    def test_product_id_with_title(self) -> None:
        """product_id + title combine when id is missing."""
        self.assertEqual(
            key_of({"product_id": 9, "title": "Sofa"}), "prod:9:Sofa"
        )

    def test_product_id_alone(self) -> None:
        """product_id without a title."""
        self.assertEqual(key_of({"product_id": 9}), "prod:9")

    def test_title_alone(self) -> None:
        """Title is the last named fallback."""
        self.assertEqual(key_of({"title": "Sofa"}), "title:Sofa")

    def test_empty_record_has_no_key(self) -> None:
        """An empty payload yields None."""
        self.assertIsNone(key_of({}))
        self.assertIsNone(key_of(None))

    def test_empty_id_is_absent(self) -> None:
        """Empty-string and null ids fall through to later rules."""
        self.assertEqual(key_of({"id": "", "title": "Mesa"}), "title:Mesa")
        self.assertEqual(key_of({"id": None, "product_id": 3}), "prod:3")

    def test_structural_fallback_is_order_independent(self) -> None:
        """Payloads with no named identity serialise canonically."""
        a = key_of({"city": "Recife", "lat": 1.5})
        b = key_of({"lat": 1.5, "city": "Recife"})
        self.assertIsNotNone(a)
        self.assertEqual(a, b)

    def test_unserialisable_payload_has_no_key(self) -> None:
        """Serialization failures return None instead of raising."""
        self.assertIsNone(key_of({"blob": object()}))

    def test_accepts_product_record(self) -> None:
        """Records and raw payloads derive the same key."""
        payload = {"id": 7, "title": "Bike"}
        self.assertEqual(
            key_of(ProductRecord.from_payload(payload)), key_of(payload)
        )


if __name__ == "__main__":
    unittest.main()
