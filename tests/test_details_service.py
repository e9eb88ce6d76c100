"""Tests for the dish details pipeline and view session."""

import asyncio
from dataclasses import dataclass, field

import pytest

from dish_explorer.domain.dishes import LocalDish, RemoteDish
from dish_explorer.domain.errors import NetworkError, NotFoundError
from dish_explorer.domain.nutrition import ZERO_NUTRITION
from dish_explorer.services.details import (
    DishDetailsService,
    DishView,
    DishViewSession,
    PipelineState,
)
from dish_explorer.services.enrichment import IngredientEnricher
from dish_explorer.services.favorites import FavoritesStore
from dish_explorer.services.history import HistoryStore
from dish_explorer.services.resolver import IdentityResolver
from tests.conftest import FailingKeyValueStore, FakeRemoteFetcher, make_remote_dish


def test_local_dish_skips_enrichment(
    details_service: DishDetailsService,
    fetcher: FakeRemoteFetcher,
    history: HistoryStore,
) -> None:
    views: list[DishView] = []

    view = asyncio.run(details_service.load("local-dal", views.append))

    assert view.state is PipelineState.LOCAL_READY
    assert isinstance(view.dish, LocalDish)
    assert view.ingredients is None
    assert [item.state for item in views] == [
        PipelineState.RESOLVING,
        PipelineState.LOCAL_READY,
    ]
    assert fetcher.nutrition_calls == []
    assert fetcher.allergen_calls == []
    assert [entry.id for entry in history.list_history()] == ["local-dal"]


def test_remote_dish_is_recorded_and_enriched(
    details_service: DishDetailsService,
    history: HistoryStore,
) -> None:
    views: list[DishView] = []

    view = asyncio.run(details_service.load("53000", views.append))

    assert [item.state for item in views] == [
        PipelineState.RESOLVING,
        PipelineState.REMOTE_FETCHING,
        PipelineState.REMOTE_READY,
        PipelineState.ENRICHING_INGREDIENTS,
        PipelineState.REMOTE_COMPLETE,
    ]
    assert views[2].ingredients is None
    assert views[2].ingredients_loading is True
    assert view.is_terminal is True
    assert isinstance(view.dish, RemoteDish)
    assert view.ingredients is not None
    assert [info.name for info in view.ingredients] == ["Pasta", "Milk", "Salt"]
    assert view.ingredients[1].allergens == frozenset({"en:milk"})
    assert history.list_history()[0].dish == view.dish.summary()


def test_remote_dish_reports_favorite_state(
    details_service: DishDetailsService,
    favorites: FavoritesStore,
    fetcher: FakeRemoteFetcher,
) -> None:
    favorites.toggle_favorite(fetcher.dishes["53000"].summary())

    view = asyncio.run(details_service.load("53000"))

    assert view.is_favorite is True


def test_remote_not_found_has_no_side_effects(
    details_service: DishDetailsService,
    history: HistoryStore,
) -> None:
    views: list[DishView] = []

    with pytest.raises(NotFoundError):
        asyncio.run(details_service.load("99999", views.append))

    assert views[-1].state is PipelineState.REMOTE_FAILED
    assert isinstance(views[-1].error, NotFoundError)
    assert history.list_history() == []


def test_remote_network_error_propagates(
    details_service: DishDetailsService,
    fetcher: FakeRemoteFetcher,
) -> None:
    fetcher.failing_dishes.add("53000")

    with pytest.raises(NetworkError):
        asyncio.run(details_service.load("53000"))

    assert fetcher.nutrition_calls == []


def test_enrichment_failures_do_not_fail_pipeline(
    details_service: DishDetailsService,
    fetcher: FakeRemoteFetcher,
) -> None:
    fetcher.failing_nutrition.add("Milk")

    view = asyncio.run(details_service.load("53000"))

    assert view.state is PipelineState.REMOTE_COMPLETE
    assert view.ingredients is not None
    assert view.ingredients[1].nutrition == ZERO_NUTRITION
    assert view.ingredients[0].nutrition.calories == 350


def test_history_write_failure_still_displays_dish(
    dataset, fetcher: FakeRemoteFetcher
) -> None:
    storage = FailingKeyValueStore()
    service = DishDetailsService(
        resolver=IdentityResolver(dataset),
        fetcher=fetcher,
        enricher=IngredientEnricher(fetcher),
        favorites=FavoritesStore(storage),
        history=HistoryStore(storage),
    )

    view = asyncio.run(service.load("53000"))

    assert view.state is PipelineState.REMOTE_COMPLETE
    assert view.is_favorite is False


def test_summary_for_does_not_record_history(
    details_service: DishDetailsService, history: HistoryStore
) -> None:
    local = asyncio.run(details_service.summary_for("local-dal"))
    remote = asyncio.run(details_service.summary_for("53000"))

    assert local.name == "Dal"
    assert remote.name == "Remote Pasta"
    assert history.list_history() == []


def test_session_toggle_favorite_updates_current_view(
    details_service: DishDetailsService, favorites: FavoritesStore
) -> None:
    published: list[DishView] = []
    session = DishViewSession(details_service, listener=published.append)
    asyncio.run(session.open("local-dal"))

    assert session.toggle_favorite() is True

    assert session.current is not None
    assert session.current.is_favorite is True
    assert published[-1].is_favorite is True
    assert favorites.is_favorite("local-dal") is True


def test_session_toggle_without_dish_raises(details_service: DishDetailsService) -> None:
    session = DishViewSession(details_service)

    with pytest.raises(RuntimeError):
        session.toggle_favorite()


@dataclass
class _GatedFetcher(FakeRemoteFetcher):
    release: dict[str, asyncio.Event] = field(default_factory=dict)

    async def fetch_dish_details(self, dish_id: str) -> RemoteDish:
        gate = self.release.get(dish_id)
        if gate is not None:
            await gate.wait()
        return await super().fetch_dish_details(dish_id)


def test_session_discards_results_of_superseded_invocation(
    dataset, favorites: FavoritesStore, history: HistoryStore
) -> None:
    fetcher = _GatedFetcher(
        dishes={
            "slow": make_remote_dish(dish_id="slow", name="Slow"),
            "fast": make_remote_dish(dish_id="fast", name="Fast"),
        }
    )
    service = DishDetailsService(
        resolver=IdentityResolver(dataset),
        fetcher=fetcher,
        enricher=IngredientEnricher(fetcher),
        favorites=favorites,
        history=history,
    )
    session = DishViewSession(service)

    async def scenario() -> tuple[DishView | None, DishView | None]:
        gate = asyncio.Event()
        fetcher.release["slow"] = gate
        slow = asyncio.create_task(session.open("slow"))
        await asyncio.sleep(0)
        fast = await session.open("fast")
        gate.set()
        return await slow, fast

    slow_view, fast_view = asyncio.run(scenario())

    assert slow_view is None
    assert fast_view is not None
    assert session.current is not None
    assert session.current.dish_id == "fast"
    assert session.current.state is PipelineState.REMOTE_COMPLETE
    assert [entry.id for entry in history.list_history()] == ["fast"]


def test_session_close_discards_in_flight_result(
    dataset, favorites: FavoritesStore, history: HistoryStore
) -> None:
    fetcher = _GatedFetcher(dishes={"slow": make_remote_dish(dish_id="slow")})
    service = DishDetailsService(
        resolver=IdentityResolver(dataset),
        fetcher=fetcher,
        enricher=IngredientEnricher(fetcher),
        favorites=favorites,
        history=history,
    )
    session = DishViewSession(service)

    async def scenario() -> DishView | None:
        gate = asyncio.Event()
        fetcher.release["slow"] = gate
        task = asyncio.create_task(session.open("slow"))
        await asyncio.sleep(0)
        session.close()
        gate.set()
        return await task

    assert asyncio.run(scenario()) is None
    assert session.current is None
    assert history.list_history() == []
