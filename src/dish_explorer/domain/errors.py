"""Error taxonomy for dish resolution, enrichment and storage."""


class DishExplorerError(Exception):
    """Base class for dish explorer errors."""


class NotFoundError(DishExplorerError):
    """The remote catalog does not know the requested dish."""

    def __init__(self, dish_id: str) -> None:
        super().__init__(f"Dish {dish_id!r} not found")
        self.dish_id = dish_id


class NetworkError(DishExplorerError):
    """A remote call failed at the transport level."""


class UnknownIngredientError(DishExplorerError):
    """No nutrition or allergen record exists for an ingredient."""

    def __init__(self, ingredient: str) -> None:
        super().__init__(f"Unknown ingredient {ingredient!r}")
        self.ingredient = ingredient


class StorageError(DishExplorerError):
    """The persistence backend failed to read or write a key."""
