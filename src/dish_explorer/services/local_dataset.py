"""Bundled local dish dataset."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from dish_explorer.domain.dishes import LocalDish, LocalNutrition

BUNDLED_DATASET_PATH = (
    Path(__file__).resolve().parents[1] / "data" / "local_dishes.json"
)

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocalDataset:
    """Static, read-only table of local dishes keyed by id."""

    dishes: dict[str, LocalDish]

    @classmethod
    def from_records(cls, records: list[dict[str, object]]) -> "LocalDataset":
        """Build a dataset from raw JSON-like records."""
        dishes: dict[str, LocalDish] = {}
        for record in records:
            dish = _parse_local_dish(record)
            if dish.id in dishes:
                raise ValueError(f"Duplicate local dish id: {dish.id}")
            dishes[dish.id] = dish
        return cls(dishes=dishes)

    @classmethod
    def load(cls, path: Path | str | None = None) -> "LocalDataset":
        """Load the dataset from a JSON file, defaulting to the bundled one."""
        resolved = Path(path) if path else BUNDLED_DATASET_PATH
        records = json.loads(resolved.read_text(encoding="utf-8"))
        dataset = cls.from_records(records)
        _logger.info("Loaded %s local dishes from %s", len(dataset.dishes), resolved)
        return dataset

    def get_dish_by_id(self, dish_id: str) -> LocalDish | None:
        """Return the local dish for an id, if present."""
        return self.dishes.get(dish_id)

    def __contains__(self, dish_id: object) -> bool:
        return dish_id in self.dishes


def _parse_local_dish(record: dict[str, object]) -> LocalDish:
    nutrition = record.get("nutrition") or {}
    return LocalDish(
        id=str(record["id"]),
        name=str(record.get("name", "")),
        thumbnail=str(record.get("thumbnail", "")),
        instructions=str(record.get("instructions", "")),
        category=str(record.get("category", "")),
        ingredients=tuple(str(item) for item in record.get("ingredients", [])),
        nutrition=LocalNutrition(
            calories=float(nutrition.get("calories", 0.0)),
            protein=float(nutrition.get("protein", 0.0)),
            fat=float(nutrition.get("fat", 0.0)),
            carbs=float(nutrition.get("carbs", 0.0)),
        ),
    )
