"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status

from dish_explorer.api.schemas import (
    DishDetailModel,
    DishSummaryModel,
    FavoriteToggleModel,
    HistoryEntryModel,
)
from dish_explorer.app_logging import configure_logging
from dish_explorer.containers import AppContainer
from dish_explorer.domain.errors import NetworkError, NotFoundError, StorageError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/dishes/{dish_id}")
    async def dish_detail(dish_id: str, request: Request) -> DishDetailModel:
        """Resolve a dish, record the view and return it with ingredients."""
        state_container: AppContainer = request.app.state.container
        try:
            view = await state_container.details_service.load(dish_id)
        except NotFoundError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
            ) from exc
        except NetworkError as exc:
            logger.warning("Dish fetch failed: dish_id=%s", dish_id)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Dish catalog unavailable",
            ) from exc
        return DishDetailModel.from_view(view)

    @app.post("/dishes/{dish_id}/favorite")
    async def toggle_favorite(dish_id: str, request: Request) -> FavoriteToggleModel:
        """Toggle whether a dish is a favorite."""
        state_container: AppContainer = request.app.state.container
        try:
            summary = await state_container.details_service.summary_for(dish_id)
            is_favorite = state_container.favorites.toggle_favorite(summary)
        except NotFoundError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
            ) from exc
        except NetworkError as exc:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Dish catalog unavailable",
            ) from exc
        except StorageError as exc:
            logger.exception("Failed to toggle favorite: dish_id=%s", dish_id)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Favorites storage unavailable",
            ) from exc
        return FavoriteToggleModel(id=summary.id, is_favorite=is_favorite)

    @app.get("/favorites")
    async def list_favorites(request: Request) -> dict[str, list[DishSummaryModel]]:
        """Return favorite dishes in the order they were added."""
        state_container: AppContainer = request.app.state.container
        favorites = state_container.favorites.list_favorites()
        return {"favorites": [DishSummaryModel.from_domain(item) for item in favorites]}

    @app.get("/history")
    async def list_history(request: Request) -> dict[str, list[HistoryEntryModel]]:
        """Return recently viewed dishes, newest first."""
        state_container: AppContainer = request.app.state.container
        entries = state_container.history.list_history()
        return {"history": [HistoryEntryModel.from_entry(entry) for entry in entries]}

    @app.delete("/history", status_code=status.HTTP_204_NO_CONTENT)
    async def clear_history(request: Request) -> None:
        """Remove all history entries."""
        state_container: AppContainer = request.app.state.container
        try:
            state_container.history.clear_history()
        except StorageError as exc:
            logger.exception("Failed to clear history")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="History storage unavailable",
            ) from exc

    return app
