"""Nutrition domain models."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class NutritionFacts:
    """Per-ingredient nutrition values."""

    calories: float
    protein: float
    fat: float
    sugars: float
    sodium: float


ZERO_NUTRITION = NutritionFacts(
    calories=0.0, protein=0.0, fat=0.0, sugars=0.0, sodium=0.0
)


@dataclass(frozen=True)
class IngredientInfo:
    """Ingredient of a remote dish enriched with nutrition and allergens."""

    name: str
    measure: str
    nutrition: NutritionFacts
    allergens: frozenset[str] = field(default_factory=frozenset)


def allergen_label(tag: str) -> str:
    """Strip the language prefix from an allergen tag, e.g. ``en:milk``."""
    return tag.removeprefix("en:")
