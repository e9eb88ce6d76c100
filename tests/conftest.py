"""Shared test fixtures."""

import time
from dataclasses import dataclass, field

import pytest

from dish_explorer.config import Settings
from dish_explorer.containers import AppContainer
from dish_explorer.domain.dishes import (
    MAX_INGREDIENT_SLOTS,
    IngredientSlot,
    RemoteDish,
)
from dish_explorer.domain.errors import (
    NetworkError,
    NotFoundError,
    StorageError,
    UnknownIngredientError,
)
from dish_explorer.domain.nutrition import NutritionFacts
from dish_explorer.services.details import DishDetailsService
from dish_explorer.services.enrichment import IngredientEnricher
from dish_explorer.services.favorites import FavoritesStore
from dish_explorer.services.history import HistoryStore
from dish_explorer.services.local_dataset import LocalDataset
from dish_explorer.services.remote import RemoteFetcher
from dish_explorer.services.resolver import IdentityResolver
from dish_explorer.services.storage import InMemoryKeyValueStore, KeyValueStore


def make_remote_dish(
    dish_id: str = "52772",
    name: str = "Teriyaki Chicken Casserole",
    ingredients: dict[int, tuple[str, str]] | None = None,
) -> RemoteDish:
    """Build a remote dish with ingredients placed in the given 1-based slots."""
    slots: list[IngredientSlot | None] = [None] * MAX_INGREDIENT_SLOTS
    for index, (ingredient, measure) in (ingredients or {}).items():
        slots[index - 1] = IngredientSlot(name=ingredient, measure=measure)
    return RemoteDish(
        id=dish_id,
        name=name,
        thumbnail_url=f"https://img.test/{dish_id}.jpg",
        instructions="Preheat oven to 350F.",
        category="Chicken",
        ingredient_slots=tuple(slots),
    )


def facts(calories: float) -> NutritionFacts:
    return NutritionFacts(
        calories=calories, protein=1.0, fat=2.0, sugars=3.0, sodium=0.1
    )


@dataclass
class FakeRemoteFetcher(RemoteFetcher):
    """Fake fetcher with per-name responses and failures."""

    dishes: dict[str, RemoteDish] = field(default_factory=dict)
    nutrition: dict[str, NutritionFacts] = field(default_factory=dict)
    allergens: dict[str, set[str]] = field(default_factory=dict)
    failing_dishes: set[str] = field(default_factory=set)
    failing_nutrition: set[str] = field(default_factory=set)
    failing_allergens: set[str] = field(default_factory=set)
    dish_calls: list[str] = field(default_factory=list)
    nutrition_calls: list[str] = field(default_factory=list)
    allergen_calls: list[str] = field(default_factory=list)

    async def fetch_dish_details(self, dish_id: str) -> RemoteDish:
        self.dish_calls.append(dish_id)
        if dish_id in self.failing_dishes:
            raise NetworkError("connection reset")
        dish = self.dishes.get(dish_id)
        if dish is None:
            raise NotFoundError(dish_id)
        return dish

    async def fetch_nutrition(self, ingredient_name: str) -> NutritionFacts:
        self.nutrition_calls.append(ingredient_name)
        if ingredient_name in self.failing_nutrition:
            raise NetworkError("timeout")
        if ingredient_name not in self.nutrition:
            raise UnknownIngredientError(ingredient_name)
        return self.nutrition[ingredient_name]

    async def fetch_allergens(self, ingredient_name: str) -> set[str]:
        self.allergen_calls.append(ingredient_name)
        if ingredient_name in self.failing_allergens:
            raise NetworkError("timeout")
        return set(self.allergens.get(ingredient_name, set()))


@dataclass
class FailingKeyValueStore(KeyValueStore):
    """Store whose reads and/or writes raise StorageError."""

    fail_reads: bool = False
    fail_writes: bool = True
    values: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        if self.fail_reads:
            raise StorageError("read failed")
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageError("write failed")
        self.values[key] = value


@dataclass
class SlowKeyValueStore(KeyValueStore):
    """In-memory store that pauses between a read and the following write."""

    delay_seconds: float = 0.01
    values: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        value = self.values.get(key)
        time.sleep(self.delay_seconds)
        return value

    def set(self, key: str, value: str) -> None:
        self.values[key] = value


@dataclass
class StepClock:
    """Deterministic millisecond clock advancing one step per call."""

    now: int = 1_700_000_000_000
    step: int = 1000

    def __call__(self) -> int:
        self.now += self.step
        return self.now


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        storage_backend="memory",
        storage_path=str(tmp_path / "storage.json"),
        mealdb_base_url="https://mealdb.test/api/json/v1/1",
        openfoodfacts_base_url="https://off.test",
    )


@pytest.fixture
def storage() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def dataset() -> LocalDataset:
    return LocalDataset.from_records(
        [
            {
                "id": "local-dal",
                "name": "Dal",
                "thumbnail": "images/dal.jpg",
                "instructions": "Simmer the lentils.",
                "category": "Vegetarian",
                "ingredients": ["1 cup lentils", "1 tsp turmeric"],
                "nutrition": {"calories": 320, "protein": 18, "fat": 9, "carbs": 42},
            },
            {
                "id": "52772",
                "name": "Local Teriyaki",
                "thumbnail": "images/teriyaki.jpg",
                "instructions": "Local version.",
                "category": "Chicken",
                "ingredients": ["chicken"],
                "nutrition": {"calories": 500, "protein": 40, "fat": 10, "carbs": 30},
            },
        ]
    )


@pytest.fixture
def fetcher() -> FakeRemoteFetcher:
    dish = make_remote_dish(
        dish_id="53000",
        name="Remote Pasta",
        ingredients={1: ("Pasta", "200g"), 2: ("Milk", "100ml"), 3: ("Salt", "pinch")},
    )
    return FakeRemoteFetcher(
        dishes={"53000": dish, "52772": make_remote_dish()},
        nutrition={"Pasta": facts(350), "Milk": facts(60), "Salt": facts(0)},
        allergens={"Pasta": {"en:gluten"}, "Milk": {"en:milk"}},
    )


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def favorites(storage: InMemoryKeyValueStore) -> FavoritesStore:
    return FavoritesStore(storage)


@pytest.fixture
def history(storage: InMemoryKeyValueStore, clock: StepClock) -> HistoryStore:
    return HistoryStore(storage, clock=clock)


@pytest.fixture
def details_service(
    dataset: LocalDataset,
    fetcher: FakeRemoteFetcher,
    favorites: FavoritesStore,
    history: HistoryStore,
) -> DishDetailsService:
    return DishDetailsService(
        resolver=IdentityResolver(dataset),
        fetcher=fetcher,
        enricher=IngredientEnricher(fetcher),
        favorites=favorites,
        history=history,
    )


@pytest.fixture
def container(
    settings: Settings,
    dataset: LocalDataset,
    favorites: FavoritesStore,
    history: HistoryStore,
    details_service: DishDetailsService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        dataset=dataset,
        favorites=favorites,
        history=history,
        details_service=details_service,
        close_resources=close_resources,
    )
