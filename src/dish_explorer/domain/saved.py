"""Domain models for favorites and view history."""

from dataclasses import dataclass

from dish_explorer.domain.dishes import DishSummary

MAX_HISTORY = 50

FavoriteEntry = DishSummary


@dataclass(frozen=True)
class HistoryEntry:
    """A viewed dish with the time it was last opened (epoch milliseconds)."""

    dish: DishSummary
    viewed_at: int

    @property
    def id(self) -> str:
        return self.dish.id
