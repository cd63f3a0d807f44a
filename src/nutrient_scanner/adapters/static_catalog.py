"""In-memory product catalog for local development."""

import copy
from dataclasses import dataclass, field

from nutrient_scanner.adapters.openfoodfacts_client import ProductSource


def _demo_products() -> dict[str, dict[str, object]]:
    return {
        "1234567890123": {
            "code": "1234567890123",
            "product_name": "Sample Cereal",
            "brands": "HealthyBrand",
            "nutriments": {
                "energy-kcal_100g": 150,
                "proteins_100g": 8.5,
                "carbohydrates_100g": 60,
                "fat_100g": 2.1,
                "fiber_100g": 5.2,
                "sugars_100g": 12,
                "sodium_100g": 0.18,
            },
        },
        "5000159407236": {
            "code": "5000159407236",
            "product_name": "Chocolate Sandwich Cookies",
            "brands": "SnackCo",
            "nutriments": {
                "energy-kcal_100g": 480,
                "proteins_100g": 6.2,
                "carbohydrates_100g": 65,
                "fat_100g": 22,
                "fiber_100g": 3.1,
                "sugars_100g": 28,
                "sodium_100g": 0.32,
            },
        },
        "20724696": {
            "code": "20724696",
            "product_name": "Plain Greek Yogurt",
            "brands": "Dairy Fields",
            "nutriments": {
                "energy-kj_100g": 406,
                "proteins_100g": 10,
                "carbohydrates_100g": 4,
                "fat_100g": 5,
                "fiber_100g": 0,
                "sugars_100g": 4,
                "salt_100g": 0.1,
            },
        },
    }


@dataclass
class StaticProductCatalog(ProductSource):
    """Product source answering from a fixed table of payloads."""

    products: dict[str, dict[str, object]] = field(default_factory=_demo_products)

    async def fetch_product(self, barcode: str) -> dict[str, object] | None:
        """Return a copy of the stored payload, or None."""
        product = self.products.get(barcode)
        if product is None:
            return None
        return copy.deepcopy(product)

    def add_product(self, barcode: str, payload: dict[str, object]) -> None:
        """Register or replace a product payload."""
        self.products[barcode] = payload
