"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, HTTPException, Query, Request, status

from nutrient_scanner.api.models import ScoreRequest
from nutrient_scanner.app_logging import configure_logging
from nutrient_scanner.containers import AppContainer
from nutrient_scanner.domain.products import (
    InvalidBarcode,
    Product,
    ProductNotFound,
    ScannedItem,
)
from nutrient_scanner.domain.scoring import InvalidProfile, Nutrient, ScoreResult
from nutrient_scanner.services.scoring import normalize_profile

_UNPROCESSABLE = 422


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.debug)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="Nutrient Scanner", lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/score")
    async def score(body: ScoreRequest, request: Request) -> dict[str, object]:
        """Score a nutrient profile supplied in the request body."""
        state_container: AppContainer = request.app.state.container
        try:
            profile = body.to_profile()
            if body.serving_grams is not None:
                profile = normalize_profile(profile, body.serving_grams)
            result = state_container.scan_service.score_profile(profile)
        except InvalidProfile as exc:
            logger.warning("Rejected nutrient profile: %s", exc)
            raise HTTPException(
                status_code=_UNPROCESSABLE, detail=str(exc)
            ) from exc
        return _format_result(result)

    @app.get("/products/{barcode}")
    async def scan_product(barcode: str, request: Request) -> dict[str, object]:
        """Resolve a barcode, score the product and record the scan."""
        state_container: AppContainer = request.app.state.container
        try:
            outcome = await state_container.scan_service.scan(barcode)
        except InvalidBarcode as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        except ProductNotFound as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
            ) from exc
        except InvalidProfile as exc:
            logger.warning("Product %s cannot be scored: %s", barcode, exc)
            raise HTTPException(
                status_code=_UNPROCESSABLE, detail=str(exc)
            ) from exc
        except httpx.HTTPError as exc:
            logger.exception("Product lookup failed for %s", barcode)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Product lookup is unavailable",
            ) from exc
        return {
            "product": _format_product(outcome.product),
            "result": _format_result(outcome.result),
        }

    @app.get("/history")
    async def history(
        request: Request, limit: int | None = Query(default=None, ge=0)
    ) -> dict[str, object]:
        """Return recent scans, newest first."""
        state_container: AppContainer = request.app.state.container
        resolved_limit = (
            limit if limit is not None else state_container.settings.history_limit
        )
        items = state_container.scan_service.history(resolved_limit)
        return {"items": [_format_history_item(item) for item in items]}

    @app.delete("/history")
    async def clear_history(request: Request) -> dict[str, str]:
        """Clear the scan history."""
        state_container: AppContainer = request.app.state.container
        state_container.scan_service.clear_history()
        return {"status": "ok"}

    return app


def _format_result(result: ScoreResult) -> dict[str, object]:
    return {
        "score": result.score,
        "rating": result.rating.value,
        "warnings": [
            {
                "code": warning.code.value,
                "message": warning.message,
                "severity": warning.severity,
            }
            for warning in result.warnings
        ],
        "benefits": [
            {
                "code": benefit.code.value,
                "message": benefit.message,
                "strength": benefit.strength,
            }
            for benefit in result.benefits
        ],
    }


def _format_product(product: Product) -> dict[str, object]:
    nutrients: dict[str, object] = {}
    for nutrient in Nutrient:
        value = product.profile.get(nutrient)
        if value is None:
            continue
        nutrients[nutrient.value] = {
            "amount": round(value.amount_per_reference_quantity, 2),
            "unit": value.unit.value,
            "per": value.reference_quantity,
        }
    return {
        "barcode": product.barcode,
        "name": product.name,
        "brand": product.brand,
        "nutrients": nutrients,
    }


def _format_history_item(item: ScannedItem) -> dict[str, object]:
    return {
        "barcode": item.barcode,
        "name": item.name,
        "brand": item.brand,
        "score": item.score,
        "rating": item.rating.value,
        "scanned_at": item.scanned_at.isoformat(),
    }
