"""Dish domain models."""

from dataclasses import dataclass, field

MAX_INGREDIENT_SLOTS = 20


@dataclass(frozen=True)
class DishSummary:
    """Minimal projection of a dish kept in favorites and history."""

    id: str
    name: str
    thumbnail_ref: str


@dataclass(frozen=True)
class LocalNutrition:
    """Whole-dish nutrition embedded in the local dataset."""

    calories: float
    protein: float
    fat: float
    carbs: float


@dataclass(frozen=True)
class LocalDish:
    """Self-contained dish from the bundled dataset."""

    id: str
    name: str
    thumbnail: str
    instructions: str
    category: str
    ingredients: tuple[str, ...]
    nutrition: LocalNutrition

    def summary(self) -> DishSummary:
        """Return the favorites/history projection."""
        return DishSummary(id=self.id, name=self.name, thumbnail_ref=self.thumbnail)


@dataclass(frozen=True)
class IngredientSlot:
    """A populated ingredient/measure slot of a remote dish."""

    name: str
    measure: str


@dataclass(frozen=True)
class RemoteDish:
    """Dish fetched from the remote catalog.

    ``ingredient_slots`` always holds exactly ``MAX_INGREDIENT_SLOTS`` entries;
    blank slots are ``None``.
    """

    id: str
    name: str
    thumbnail_url: str
    instructions: str
    category: str | None = None
    area: str | None = None
    ingredient_slots: tuple[IngredientSlot | None, ...] = field(
        default=(None,) * MAX_INGREDIENT_SLOTS
    )

    def summary(self) -> DishSummary:
        """Return the favorites/history projection."""
        return DishSummary(id=self.id, name=self.name, thumbnail_ref=self.thumbnail_url)


@dataclass(frozen=True)
class RemoteFetchRequest:
    """Signals that a dish id must be fetched from the remote catalog."""

    dish_id: str


Dish = LocalDish | RemoteDish
