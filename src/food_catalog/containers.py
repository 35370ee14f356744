"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from food_catalog.adapters.cached_fdc_client import CachedFdcClient
from food_catalog.adapters.fdc_client import FdcClient, HttpxFdcClient
from food_catalog.adapters.in_memory_repositories import (
    InMemoryFoodLogRepository,
    InMemoryFoodRefRepository,
)
from food_catalog.adapters.mock_clients import MockFdcClient, MockOffClient
from food_catalog.adapters.off_client import HttpxOffClient, OffClient
from food_catalog.adapters.supabase_food_log_repository import (
    SupabaseFoodLogRepository,
)
from food_catalog.adapters.supabase_food_ref_repository import (
    SupabaseFoodRefRepository,
)
from food_catalog.config import Settings
from food_catalog.services.cache import ResultCache
from food_catalog.services.catalog import FoodCatalogService
from food_catalog.services.food_log import FoodLogRepository, FoodLogService
from food_catalog.services.food_refs import FoodRefRepository, FoodRefService
from food_catalog.services.generations import RequestGeneration


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    fdc_client: FdcClient
    off_client: OffClient
    cache: ResultCache
    catalog_service: FoodCatalogService
    food_ref_service: FoodRefService
    food_log_service: FoodLogService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()

    base_fdc_client: FdcClient
    off_client: OffClient
    if resolved_settings.use_mock_data:
        base_fdc_client = MockFdcClient()
        off_client = MockOffClient()
    else:
        base_fdc_client = HttpxFdcClient.create(
            api_key=resolved_settings.fdc_api_key,
            base_url=resolved_settings.fdc_base_url,
            timeout_seconds=resolved_settings.http_timeout_seconds,
        )
        off_client = HttpxOffClient.create(
            base_url=resolved_settings.off_base_url,
            timeout_seconds=resolved_settings.http_timeout_seconds,
        )

    generation = RequestGeneration()
    cache = ResultCache(resolved_settings.cache_configuration())
    fdc_client = CachedFdcClient(
        inner=base_fdc_client, cache=cache, generation=generation
    )
    catalog_service = FoodCatalogService(
        fdc_client=fdc_client,
        off_client=off_client,
        generation=generation,
        retry_attempts=resolved_settings.retry_attempts,
    )

    food_ref_repository: FoodRefRepository
    food_log_repository: FoodLogRepository
    if resolved_settings.supabase_url and resolved_settings.supabase_service_key:
        supabase_client = create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_service_key
        )
        food_ref_repository = SupabaseFoodRefRepository(supabase_client)
        food_log_repository = SupabaseFoodLogRepository(supabase_client)
    else:
        food_ref_repository = InMemoryFoodRefRepository()
        food_log_repository = InMemoryFoodLogRepository()

    async def close_resources() -> None:
        await fdc_client.close()
        await off_client.close()

    return AppContainer(
        settings=resolved_settings,
        fdc_client=fdc_client,
        off_client=off_client,
        cache=cache,
        catalog_service=catalog_service,
        food_ref_service=FoodRefService(food_ref_repository),
        food_log_service=FoodLogService(
            food_refs=food_ref_repository, repository=food_log_repository
        ),
        close_resources=close_resources,
    )
