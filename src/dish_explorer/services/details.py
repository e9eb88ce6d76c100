"""Dish details pipeline: resolve, record, and enrich a single dish."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from enum import StrEnum

from dish_explorer.domain.dishes import Dish, DishSummary, LocalDish, RemoteDish
from dish_explorer.domain.errors import DishExplorerError, StorageError
from dish_explorer.domain.nutrition import IngredientInfo
from dish_explorer.services.enrichment import IngredientEnricher
from dish_explorer.services.favorites import FavoritesStore
from dish_explorer.services.history import HistoryStore
from dish_explorer.services.remote import RemoteFetcher
from dish_explorer.services.resolver import IdentityResolver

_logger = logging.getLogger(__name__)


class PipelineState(StrEnum):
    """Lifecycle of one dish view."""

    RESOLVING = "resolving"
    LOCAL_READY = "local_ready"
    REMOTE_FETCHING = "remote_fetching"
    REMOTE_READY = "remote_ready"
    ENRICHING_INGREDIENTS = "enriching_ingredients"
    REMOTE_COMPLETE = "remote_complete"
    REMOTE_FAILED = "remote_failed"


TERMINAL_STATES = frozenset(
    {
        PipelineState.LOCAL_READY,
        PipelineState.REMOTE_COMPLETE,
        PipelineState.REMOTE_FAILED,
    }
)


@dataclass(frozen=True)
class DishView:
    """Snapshot handed to the presentation layer.

    ``ingredients`` stays ``None`` for local dishes and while a remote dish is
    still being enriched.
    """

    dish_id: str
    state: PipelineState
    dish: Dish | None = None
    ingredients: tuple[IngredientInfo, ...] | None = None
    is_favorite: bool = False
    error: DishExplorerError | None = None

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def ingredients_loading(self) -> bool:
        return self.state in {
            PipelineState.REMOTE_READY,
            PipelineState.ENRICHING_INGREDIENTS,
        }


ViewListener = Callable[[DishView], None]


def _ignore(_view: DishView) -> None:
    return None


def _always_current() -> bool:
    return True


@dataclass
class DishDetailsService:
    """Runs the resolve -> fetch -> record -> enrich pipeline for a dish id."""

    resolver: IdentityResolver
    fetcher: RemoteFetcher
    enricher: IngredientEnricher
    favorites: FavoritesStore
    history: HistoryStore

    async def load(
        self,
        dish_id: str,
        listener: ViewListener | None = None,
        is_current: Callable[[], bool] | None = None,
    ) -> DishView:
        """Run the pipeline to a terminal state, publishing every transition.

        Raises NotFoundError or NetworkError when the remote dish cannot be
        fetched. ``is_current`` lets the caller abandon an invocation: once it
        returns False no further side effects are performed.
        """
        publish = listener or _ignore
        still_current = is_current or _always_current
        publish(DishView(dish_id=dish_id, state=PipelineState.RESOLVING))

        resolved = self.resolver.resolve(dish_id)
        if isinstance(resolved, LocalDish):
            _logger.info("Resolved dish locally: dish_id=%s", dish_id)
            view = DishView(
                dish_id=dish_id,
                state=PipelineState.LOCAL_READY,
                dish=resolved,
                is_favorite=self._open(resolved.summary()),
            )
            publish(view)
            return view

        publish(DishView(dish_id=dish_id, state=PipelineState.REMOTE_FETCHING))
        try:
            dish = await self.fetcher.fetch_dish_details(resolved.dish_id)
        except DishExplorerError as exc:
            _logger.warning(
                "Remote dish unavailable: dish_id=%s error=%s", dish_id, exc
            )
            publish(
                DishView(dish_id=dish_id, state=PipelineState.REMOTE_FAILED, error=exc)
            )
            raise
        if not still_current():
            _logger.debug("Dropping abandoned remote dish: dish_id=%s", dish_id)
            return DishView(
                dish_id=dish_id, state=PipelineState.REMOTE_READY, dish=dish
            )

        view = DishView(
            dish_id=dish_id,
            state=PipelineState.REMOTE_READY,
            dish=dish,
            is_favorite=self._open(dish.summary()),
        )
        publish(view)

        view = replace(view, state=PipelineState.ENRICHING_INGREDIENTS)
        publish(view)
        ingredients = await self.enricher.enrich(dish)
        view = replace(
            view,
            state=PipelineState.REMOTE_COMPLETE,
            ingredients=tuple(ingredients),
        )
        publish(view)
        return view

    async def summary_for(self, dish_id: str) -> DishSummary:
        """Return the summary of a dish without recording a view."""
        resolved = self.resolver.resolve(dish_id)
        if isinstance(resolved, LocalDish):
            return resolved.summary()
        dish = await self.fetcher.fetch_dish_details(resolved.dish_id)
        return dish.summary()

    def _open(self, summary: DishSummary) -> bool:
        """Check favorite membership and record the view."""
        is_favorite = self.favorites.is_favorite(summary.id)
        try:
            self.history.record_view(summary)
        except StorageError:
            _logger.exception("Failed to record history: dish_id=%s", summary.id)
        return is_favorite


@dataclass
class DishViewSession:
    """Holds the view of the dish currently on screen.

    Opening a new dish or closing the session supersedes any invocation still
    in flight; its late results are discarded instead of overwriting
    ``current``.
    """

    service: DishDetailsService
    listener: ViewListener | None = None
    current: DishView | None = None
    _generation: int = field(default=0, init=False, repr=False)

    async def open(self, dish_id: str) -> DishView | None:
        """Load a dish; returns None if the invocation was superseded."""
        self._generation += 1
        generation = self._generation

        def is_current() -> bool:
            return generation == self._generation

        def publish(view: DishView) -> None:
            if not is_current():
                _logger.debug("Discarding stale view: dish_id=%s", view.dish_id)
                return
            self._apply(view)

        try:
            view = await self.service.load(dish_id, publish, is_current)
        except DishExplorerError:
            if not is_current():
                return None
            raise
        return view if is_current() else None

    def close(self) -> None:
        """Abandon the current view and any invocation still running."""
        self._generation += 1
        self.current = None

    def toggle_favorite(self) -> bool:
        """Toggle the favorite state of the dish currently shown."""
        view = self.current
        if view is None or not isinstance(view.dish, LocalDish | RemoteDish):
            raise RuntimeError("No dish is loaded")
        is_favorite = self.service.favorites.toggle_favorite(view.dish.summary())
        self._apply(replace(view, is_favorite=is_favorite))
        return is_favorite

    def _apply(self, view: DishView) -> None:
        self.current = view
        if self.listener is not None:
            self.listener(view)
