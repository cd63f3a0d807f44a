"""Product and scan history domain models."""

from dataclasses import dataclass
from datetime import datetime

from nutrient_scanner.domain.scoring import NutrientProfile, Rating, ScoreResult


class InvalidBarcode(ValueError):
    """Raised when a barcode is not an 8-14 digit retail code."""


class ProductNotFound(LookupError):
    """Raised when no product is known for a barcode."""

    def __init__(self, barcode: str) -> None:
        super().__init__(f"No product found for barcode {barcode}")
        self.barcode = barcode


@dataclass(frozen=True)
class Product:
    """A product resolved from a barcode."""

    barcode: str
    name: str
    brand: str | None
    profile: NutrientProfile


@dataclass(frozen=True)
class ScannedItem:
    """One entry of the scan history."""

    barcode: str
    name: str
    brand: str | None
    score: int
    rating: Rating
    scanned_at: datetime


@dataclass(frozen=True)
class ScanOutcome:
    """A scanned product together with its score."""

    product: Product
    result: ScoreResult
