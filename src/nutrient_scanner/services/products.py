"""Product lookup service backed by an Open Food Facts style source."""

import asyncio
import logging
import math
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from nutrient_scanner.adapters.openfoodfacts_client import ProductSource
from nutrient_scanner.domain.products import InvalidBarcode, Product, ProductNotFound
from nutrient_scanner.domain.scoring import (
    InvalidProfile,
    Nutrient,
    NutrientAmount,
    NutrientProfile,
)
from nutrient_scanner.services.cache import Cache

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

_BARCODE_PATTERN = re.compile(r"[0-9]{8,14}")
_KJ_PER_KCAL = 4.184
_SODIUM_PER_SALT = 0.4

# Nutrients whose per-100g value is read directly, in grams.
_GRAM_FIELDS = {
    Nutrient.PROTEIN: "proteins_100g",
    Nutrient.CARBOHYDRATES: "carbohydrates_100g",
    Nutrient.FAT: "fat_100g",
    Nutrient.FIBER: "fiber_100g",
    Nutrient.SUGAR: "sugars_100g",
}

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _LookupMiss:
    """Cached record of a barcode that resolved to no scorable product."""

    not_found: bool
    message: str = ""


def normalize_barcode(barcode: str) -> str:
    """Strip whitespace and check the barcode is 8-14 digits."""
    cleaned = barcode.strip()
    if not _BARCODE_PATTERN.fullmatch(cleaned):
        raise InvalidBarcode(f"Barcode must be 8-14 digits, got {barcode!r}")
    return cleaned


@dataclass
class ProductService:
    """Resolves barcodes to products with caching and a short retry.

    Misses and unscorable products are cached for ``miss_ttl_seconds``.
    """

    source: ProductSource
    cache: Cache
    product_ttl_seconds: int = 86400
    miss_ttl_seconds: int = 300
    debug: bool = False
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def get_product(self, barcode: str) -> Product:
        """Return the product for a barcode.

        Raises ``InvalidBarcode`` for malformed codes, ``ProductNotFound`` when
        the source has no entry and ``InvalidProfile`` when the entry lacks a
        tracked nutrient.
        """
        code = normalize_barcode(barcode)
        cache_key = f"product:{code}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, Product):
            return cached
        if isinstance(cached, _LookupMiss):
            if cached.not_found:
                raise ProductNotFound(code)
            raise InvalidProfile(cached.message)

        payload = await self._call_with_retry(
            lambda: self.source.fetch_product(code),
            action=f"fetch_product:{code}",
        )
        if payload is None:
            if self.debug:
                _logger.info("Product lookup miss: barcode=%s", code)
            self.cache.set(
                cache_key,
                _LookupMiss(not_found=True),
                ttl_seconds=self.miss_ttl_seconds,
            )
            raise ProductNotFound(code)

        try:
            product = parse_product(code, payload)
        except InvalidProfile as exc:
            self.cache.set(
                cache_key,
                _LookupMiss(not_found=False, message=str(exc)),
                ttl_seconds=self.miss_ttl_seconds,
            )
            raise
        self.cache.set(cache_key, product, ttl_seconds=self.product_ttl_seconds)
        if self.debug:
            _logger.info("Product lookup hit: barcode=%s name=%s", code, product.name)
        return product

    async def _call_with_retry(
        self,
        func: "Callable[[], Awaitable[dict[str, object] | None]]",
        *,
        action: str,
    ) -> dict[str, object] | None:
        """Call the product source, retrying transient failures."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "Product %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def parse_product(barcode: str, payload: dict[str, object]) -> Product:
    """Map a raw product payload to a ``Product`` with a per-100g profile."""
    name = str(payload.get("product_name") or "").strip() or "Unknown product"
    brands = str(payload.get("brands") or "").strip()
    brand = brands.split(",")[0].strip() or None
    nutriments = payload.get("nutriments")
    if not isinstance(nutriments, dict):
        raise InvalidProfile(f"Product {barcode} has no nutrition data")
    return Product(
        barcode=barcode,
        name=name,
        brand=brand,
        profile=_extract_profile(nutriments),
    )


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"


def _extract_profile(nutriments: dict[str, object]) -> NutrientProfile:
    """Read the seven tracked nutrients; missing ones stay missing."""
    values: dict[str, NutrientAmount | None] = {
        nutrient.value: _amount(nutriments, field_name, nutrient)
        for nutrient, field_name in _GRAM_FIELDS.items()
    }

    calories = _number(nutriments, "energy-kcal_100g")
    if calories is None:
        kilojoules = _number(nutriments, "energy-kj_100g")
        if kilojoules is None:
            kilojoules = _number(nutriments, "energy_100g")
        if kilojoules is not None:
            calories = kilojoules / _KJ_PER_KCAL
    values[Nutrient.CALORIES.value] = _wrap(calories, Nutrient.CALORIES)

    sodium_g = _number(nutriments, "sodium_100g")
    if sodium_g is None:
        salt_g = _number(nutriments, "salt_100g")
        if salt_g is not None:
            sodium_g = salt_g * _SODIUM_PER_SALT
    values[Nutrient.SODIUM.value] = _wrap(
        None if sodium_g is None else sodium_g * 1000, Nutrient.SODIUM
    )

    return NutrientProfile.from_mapping(values)


def _amount(
    nutriments: dict[str, object], field_name: str, nutrient: Nutrient
) -> NutrientAmount | None:
    return _wrap(_number(nutriments, field_name), nutrient)


def _wrap(value: float | None, nutrient: Nutrient) -> NutrientAmount | None:
    if value is None:
        return None
    return NutrientAmount(
        amount_per_reference_quantity=value,
        unit=nutrient.unit,
        reference_quantity="100g",
    )


def _number(nutriments: dict[str, object], field_name: str) -> float | None:
    raw = nutriments.get(field_name)
    if raw is None or raw == "":
        return None
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise InvalidProfile(f"{field_name} is not a number: {raw!r}") from exc
    if not math.isfinite(value):
        raise InvalidProfile(f"{field_name} is not finite: {raw!r}")
    return value
