"""Response models for the dish explorer API."""

from pydantic import BaseModel, Field

from dish_explorer.domain.dishes import DishSummary, LocalDish, RemoteDish
from dish_explorer.domain.nutrition import IngredientInfo, allergen_label
from dish_explorer.domain.saved import HistoryEntry
from dish_explorer.services.details import DishView


class DishSummaryModel(BaseModel):
    id: str
    name: str
    thumbnail: str

    @classmethod
    def from_domain(cls, summary: DishSummary) -> "DishSummaryModel":
        return cls(id=summary.id, name=summary.name, thumbnail=summary.thumbnail_ref)


class HistoryEntryModel(DishSummaryModel):
    viewed_at: int

    @classmethod
    def from_entry(cls, entry: HistoryEntry) -> "HistoryEntryModel":
        return cls(
            id=entry.dish.id,
            name=entry.dish.name,
            thumbnail=entry.dish.thumbnail_ref,
            viewed_at=entry.viewed_at,
        )


class IngredientModel(BaseModel):
    name: str
    measure: str
    calories: float
    protein: float
    fat: float
    sugars: float
    sodium: float
    allergens: list[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, info: IngredientInfo) -> "IngredientModel":
        return cls(
            name=info.name,
            measure=info.measure,
            calories=info.nutrition.calories,
            protein=info.nutrition.protein,
            fat=info.nutrition.fat,
            sugars=info.nutrition.sugars,
            sodium=info.nutrition.sodium,
            allergens=sorted(allergen_label(tag) for tag in info.allergens),
        )


class LocalNutritionModel(BaseModel):
    calories: float
    protein: float
    fat: float
    carbs: float


class DishDetailModel(BaseModel):
    id: str
    name: str
    thumbnail: str
    instructions: str
    category: str | None = None
    source: str
    is_favorite: bool
    state: str
    ingredients: list[str] | None = None
    nutrition: LocalNutritionModel | None = None
    enriched_ingredients: list[IngredientModel] | None = None

    @classmethod
    def from_view(cls, view: DishView) -> "DishDetailModel":
        dish = view.dish
        if isinstance(dish, LocalDish):
            return cls(
                id=dish.id,
                name=dish.name,
                thumbnail=dish.thumbnail,
                instructions=dish.instructions,
                category=dish.category,
                source="local",
                is_favorite=view.is_favorite,
                state=view.state.value,
                ingredients=list(dish.ingredients),
                nutrition=LocalNutritionModel(
                    calories=dish.nutrition.calories,
                    protein=dish.nutrition.protein,
                    fat=dish.nutrition.fat,
                    carbs=dish.nutrition.carbs,
                ),
            )
        if not isinstance(dish, RemoteDish):
            raise ValueError(f"View for {view.dish_id} has no dish")
        return cls(
            id=dish.id,
            name=dish.name,
            thumbnail=dish.thumbnail_url,
            instructions=dish.instructions,
            category=dish.category,
            source="remote",
            is_favorite=view.is_favorite,
            state=view.state.value,
            enriched_ingredients=[
                IngredientModel.from_domain(info) for info in view.ingredients or ()
            ],
        )


class FavoriteToggleModel(BaseModel):
    id: str
    is_favorite: bool
