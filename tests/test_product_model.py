# tests/test_product_model.py

"""Tests for ProductRecord alias resolution."""

import math
import unittest

from listing_search.models.product import ProductRecord


class TestFromPayload(unittest.TestCase):
    """ProductRecord.from_payload field resolution."""

    def test_core_fields(self) -> None:
        """Named fields are copied verbatim."""
        record = ProductRecord.from_payload(
            {
                "id": 10,
                "product_id": "P-1",
                "title": "Geladeira",
                "description": "Frost free",
                "category": "Eletrodomésticos",
                "city": "Recife",
                "state": "PE",
                "country": "br",
            }
        )
        self.assertEqual(record.id, 10)
        self.assertEqual(record.product_id, "P-1")
        self.assertEqual(record.title, "Geladeira")
        self.assertEqual(record.category, "Eletrodomésticos")
        self.assertEqual(record.country, "BR")

    def test_coordinate_aliases(self) -> None:
        """latitude/longitude and geo_* aliases resolve to lat/lng."""
        a = ProductRecord.from_payload({"latitude": "-8.05", "longitude": -34.9})
        b = ProductRecord.from_payload({"geo_lat": 1, "geo_lng": 2})
        self.assertAlmostEqual(a.lat or 0, -8.05)
        self.assertAlmostEqual(a.lng or 0, -34.9)
        self.assertEqual((b.lat, b.lng), (1.0, 2.0))

    def test_non_finite_coordinates_dropped(self) -> None:
        """NaN, infinities and junk become None."""
        record = ProductRecord.from_payload(
            {"lat": math.nan, "lng": "east"}
        )
        self.assertIsNone(record.lat)
        self.assertIsNone(record.lng)

    def test_attribute_aliases(self) -> None:
        """camelCase and snake_case attribute names share a slot."""
        camel = ProductRecord.from_payload({"serviceType": "Pintura"})
        snake = ProductRecord.from_payload({"service_type": "Pintura"})
        self.assertEqual(camel.attributes, {"service_type": "Pintura"})
        self.assertEqual(snake.attributes, camel.attributes)

    def test_attribute_aliases_with_different_text(self) -> None:
        """Distinct values under sibling aliases are all kept."""
        record = ProductRecord.from_payload(
            {"propertyType": "Casa", "property_type": "Sobrado", "rentType": "Mensal", "rent_type": "Mensal"}
        )
        self.assertEqual(record.attributes["property_type"], "Casa Sobrado")
        self.assertEqual(record.attributes["rent_type"], "Mensal")

    def test_tags_accept_list_or_string(self) -> None:
        """Tags may arrive as a list or a comma-separated string."""
        listed = ProductRecord.from_payload({"tags": ["a", None, "b"]})
        joined = ProductRecord.from_payload({"tags": "a, b ,"})
        self.assertEqual(listed.tags, ["a", "b"])
        self.assertEqual(joined.tags, ["a", "b"])

    def test_status_and_likes_defaults(self) -> None:
        """Missing status is active; likes fall back through aliases."""
        record = ProductRecord.from_payload({"favorites_count": "4"})
        self.assertEqual(record.status, "active")
        self.assertEqual(record.likes, 4)
        negative = ProductRecord.from_payload({"likes": -3})
        self.assertEqual(negative.likes, 0)

    def test_to_dict_returns_original_payload(self) -> None:
        """The raw payload round-trips untouched."""
        payload = {"id": 1, "serviceType": "Pintura", "extra": [1, 2]}
        self.assertEqual(ProductRecord.from_payload(payload).to_dict(), payload)


if __name__ == "__main__":
    unittest.main()
