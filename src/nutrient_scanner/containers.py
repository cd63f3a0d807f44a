"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutrient_scanner.adapters.in_memory_scan_history_repository import (
    InMemoryScanHistoryRepository,
)
from nutrient_scanner.adapters.openfoodfacts_client import (
    HttpxOpenFoodFactsClient,
    ProductSource,
)
from nutrient_scanner.adapters.static_catalog import StaticProductCatalog
from nutrient_scanner.adapters.supabase_scan_history_repository import (
    SupabaseScanHistoryRepository,
)
from nutrient_scanner.config import Settings
from nutrient_scanner.services.cache import InMemoryCache
from nutrient_scanner.services.products import ProductService
from nutrient_scanner.services.scans import ScanHistoryRepository, ScanService
from nutrient_scanner.services.scoring_policy import load_scoring_policy


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    product_service: ProductService
    scan_service: ScanService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()

    source: ProductSource
    off_client: HttpxOpenFoodFactsClient | None = None
    if resolved_settings.product_source == "openfoodfacts":
        off_client = HttpxOpenFoodFactsClient.create(
            base_url=resolved_settings.openfoodfacts_base_url,
            user_agent=resolved_settings.openfoodfacts_user_agent,
        )
        source = off_client
    else:
        source = StaticProductCatalog()

    history_repository: ScanHistoryRepository
    if resolved_settings.history_backend == "supabase":
        if not (
            resolved_settings.supabase_url and resolved_settings.supabase_service_key
        ):
            raise ValueError(
                "SUPABASE_URL and SUPABASE_SERVICE_KEY are required "
                "for the supabase history backend"
            )
        supabase_client = create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_service_key
        )
        history_repository = SupabaseScanHistoryRepository(supabase_client)
    else:
        history_repository = InMemoryScanHistoryRepository()

    product_service = ProductService(
        source=source,
        cache=InMemoryCache(),
        product_ttl_seconds=resolved_settings.product_cache_ttl_seconds,
        miss_ttl_seconds=resolved_settings.product_miss_ttl_seconds,
        debug=resolved_settings.debug,
        retry_attempts=resolved_settings.lookup_retry_attempts,
    )
    scan_service = ScanService(
        product_service=product_service,
        history_repository=history_repository,
        policy=load_scoring_policy(resolved_settings.scoring_policy_path),
    )

    async def close_resources() -> None:
        if off_client is not None:
            await off_client.close()

    return AppContainer(
        settings=resolved_settings,
        product_service=product_service,
        scan_service=scan_service,
        close_resources=close_resources,
    )
