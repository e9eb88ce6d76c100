"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import create_client

from dish_explorer.adapters.file_kv_store import JsonFileKeyValueStore
from dish_explorer.adapters.mealdb_client import HttpxMealDbClient
from dish_explorer.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient
from dish_explorer.adapters.supabase_kv_store import SupabaseKeyValueStore
from dish_explorer.config import Settings, parse_storage_backend
from dish_explorer.services.cache import InMemoryProductCache
from dish_explorer.services.details import DishDetailsService
from dish_explorer.services.enrichment import IngredientEnricher
from dish_explorer.services.favorites import FavoritesStore
from dish_explorer.services.history import HistoryStore
from dish_explorer.services.local_dataset import LocalDataset
from dish_explorer.services.remote import CatalogRemoteFetcher
from dish_explorer.services.resolver import IdentityResolver
from dish_explorer.services.storage import InMemoryKeyValueStore, KeyValueStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    dataset: LocalDataset
    favorites: FavoritesStore
    history: HistoryStore
    details_service: DishDetailsService
    close_resources: Callable[[], Awaitable[None]]


def build_storage(settings: Settings) -> KeyValueStore:
    """Create the configured persistence backend."""
    backend = parse_storage_backend(settings.storage_backend)
    if backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError(
                "Supabase storage requires supabase_url and supabase_service_key"
            )
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseKeyValueStore(client, table=settings.supabase_table)
    if backend == "memory":
        return InMemoryKeyValueStore()
    return JsonFileKeyValueStore(Path(settings.storage_path))


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    storage = build_storage(resolved_settings)
    dataset = LocalDataset.load(resolved_settings.local_dataset_path)
    mealdb_client = HttpxMealDbClient.create(
        base_url=resolved_settings.mealdb_base_url,
        timeout=resolved_settings.http_timeout_seconds,
    )
    openfoodfacts_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.openfoodfacts_base_url,
        timeout=resolved_settings.http_timeout_seconds,
    )
    fetcher = CatalogRemoteFetcher(
        mealdb_client=mealdb_client,
        openfoodfacts_client=openfoodfacts_client,
        cache=InMemoryProductCache(
            ttl_seconds=resolved_settings.lookup_cache_ttl_seconds
        ),
        retry_attempts=resolved_settings.fetch_retry_attempts,
        retry_delay_seconds=resolved_settings.fetch_retry_delay_seconds,
    )
    favorites = FavoritesStore(storage)
    history = HistoryStore(storage, max_entries=resolved_settings.max_history)
    details_service = DishDetailsService(
        resolver=IdentityResolver(dataset),
        fetcher=fetcher,
        enricher=IngredientEnricher(fetcher),
        favorites=favorites,
        history=history,
    )

    async def close_resources() -> None:
        await mealdb_client.close()
        await openfoodfacts_client.close()

    return AppContainer(
        settings=resolved_settings,
        dataset=dataset,
        favorites=favorites,
        history=history,
        details_service=details_service,
        close_resources=close_resources,
    )
