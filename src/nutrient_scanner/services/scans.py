"""Scan workflow: lookup, scoring and history."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from nutrient_scanner.domain.products import ScannedItem, ScanOutcome
from nutrient_scanner.domain.scoring import NutrientProfile, ScoreResult
from nutrient_scanner.services.products import ProductService
from nutrient_scanner.services.scoring import compute_score
from nutrient_scanner.services.scoring_policy import DEFAULT_POLICY, ScoringPolicy

_logger = logging.getLogger(__name__)


class ScanHistoryRepository(Protocol):
    """Persistence interface for the scan history."""

    def add_item(self, item: ScannedItem) -> None:
        """Append an item to the history."""

    def list_items(self, limit: int) -> list[ScannedItem]:
        """Return up to limit items, most recent first."""

    def clear(self) -> None:
        """Remove every history item."""


@dataclass
class ScanService:
    """Application service behind the scan and history endpoints."""

    product_service: ProductService
    history_repository: ScanHistoryRepository
    policy: ScoringPolicy = field(default=DEFAULT_POLICY)

    async def scan(self, barcode: str) -> ScanOutcome:
        """Look up a barcode, score the product and record it."""
        product = await self.product_service.get_product(barcode)
        result = compute_score(product.profile, self.policy)
        self.history_repository.add_item(
            ScannedItem(
                barcode=product.barcode,
                name=product.name,
                brand=product.brand,
                score=result.score,
                rating=result.rating,
                scanned_at=datetime.now(tz=UTC),
            )
        )
        _logger.info(
            "Scanned barcode=%s score=%s rating=%s",
            product.barcode,
            result.score,
            result.rating.value,
        )
        return ScanOutcome(product=product, result=result)

    def score_profile(self, profile: NutrientProfile) -> ScoreResult:
        """Score a profile supplied directly by the caller."""
        return compute_score(profile, self.policy)

    def history(self, limit: int = 50) -> list[ScannedItem]:
        """Return recent scans, newest first."""
        if limit < 1:
            return []
        items = self.history_repository.list_items(limit)
        return sorted(items, key=lambda item: item.scanned_at, reverse=True)[:limit]

    def clear_history(self) -> None:
        """Forget every recorded scan."""
        self.history_repository.clear()
        _logger.info("Scan history cleared")
