"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from nutrient_scanner.adapters.in_memory_scan_history_repository import (
    InMemoryScanHistoryRepository,
)
from nutrient_scanner.adapters.openfoodfacts_client import ProductSource
from nutrient_scanner.adapters.static_catalog import StaticProductCatalog
from nutrient_scanner.config import Settings
from nutrient_scanner.containers import AppContainer
from nutrient_scanner.domain.scoring import NutrientAmount, NutrientProfile, Unit
from nutrient_scanner.services.cache import InMemoryCache
from nutrient_scanner.services.products import ProductService
from nutrient_scanner.services.scans import ScanService


def make_profile(**overrides: float | None) -> NutrientProfile:
    """Build a per-100g profile; pass None to leave a nutrient out."""
    values: dict[str, float | None] = {
        "calories": 150,
        "protein": 8.5,
        "carbohydrates": 60,
        "fat": 2.1,
        "fiber": 5.2,
        "sugar": 8,
        "sodium": 120,
    }
    values.update(overrides)
    units = {"calories": Unit.KCAL, "sodium": Unit.MG}
    return NutrientProfile(
        **{
            name: None
            if amount is None
            else NutrientAmount(
                amount_per_reference_quantity=amount,
                unit=units.get(name, Unit.G),
                reference_quantity="100g",
            )
            for name, amount in values.items()
        }
    )


@dataclass
class CountingProductSource(ProductSource):
    """Product source wrapping the demo catalog and counting calls."""

    catalog: StaticProductCatalog = field(default_factory=StaticProductCatalog)
    failures: list[Exception] = field(default_factory=list)
    calls: int = 0

    async def fetch_product(self, barcode: str) -> dict[str, object] | None:
        self.calls += 1
        if self.failures:
            raise self.failures.pop(0)
        return await self.catalog.fetch_product(barcode)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        product_source="static",
        history_backend="memory",
        environment="test",
    )


@pytest.fixture
def product_source() -> CountingProductSource:
    return CountingProductSource()


@pytest.fixture
def history_repository() -> InMemoryScanHistoryRepository:
    return InMemoryScanHistoryRepository()


@pytest.fixture
def product_service(product_source: CountingProductSource) -> ProductService:
    return ProductService(
        source=product_source,
        cache=InMemoryCache(),
        retry_delay_seconds=0,
    )


@pytest.fixture
def scan_service(
    product_service: ProductService,
    history_repository: InMemoryScanHistoryRepository,
) -> ScanService:
    return ScanService(
        product_service=product_service,
        history_repository=history_repository,
    )


@pytest.fixture
def container(
    settings: Settings,
    product_service: ProductService,
    scan_service: ScanService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        product_service=product_service,
        scan_service=scan_service,
        close_resources=close_resources,
    )
