"""Domain models for scraped asken days."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

NutrientRecord = dict[str, str]


class MealType(str, Enum):
    """Meal slots as labelled by asken."""

    BREAKFAST = "朝食"
    LUNCH = "昼食"
    DINNER = "夕食"
    SNACK = "間食"


# Only these slots have an advice page with a nutrient breakdown.
ADVICE_MEAL_TYPES = (MealType.BREAKFAST, MealType.LUNCH, MealType.DINNER)


@dataclass(frozen=True)
class ScrapeTarget:
    """A date and meal slot to scrape or probe."""

    day: date
    meal_type: MealType = MealType.BREAKFAST


@dataclass(frozen=True)
class ScrapedItem:
    """A single food row from the day overview."""

    meal_type: MealType
    name: str
    amount: str
    calories: int

    def to_dict(self) -> dict[str, object]:
        return {
            "mealType": self.meal_type.value,
            "name": self.name,
            "amount": self.amount,
            "calories": self.calories,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, object]) -> "ScrapedItem":
        return cls(
            meal_type=MealType(payload["mealType"]),
            name=str(payload.get("name", "")),
            amount=str(payload.get("amount", "")),
            calories=int(payload.get("calories", 0)),
        )


@dataclass(frozen=True)
class ExerciseData:
    """Step count and exercise calories for a day."""

    steps: int
    calories: int


@dataclass
class DayResult:
    """Assembled output of one date's scrape.

    ``nutrients`` never holds a snack entry; snack rows in ``items`` are
    calorie-only for downstream consumers.
    """

    day: date
    items: list[ScrapedItem] = field(default_factory=list)
    nutrients: dict[MealType, NutrientRecord] = field(default_factory=dict)
    exercise: ExerciseData | None = None

    def __post_init__(self) -> None:
        if MealType.SNACK in self.nutrients:
            raise ValueError("Snack slot has no nutrient breakdown")

    def to_dict(self) -> dict[str, object]:
        """Serialize to the JSON payload handed to the data sink."""
        payload: dict[str, object] = {
            "date": self.day.isoformat(),
            "items": [item.to_dict() for item in self.items],
            "nutrients": {
                meal_type.value: dict(record)
                for meal_type, record in self.nutrients.items()
            },
        }
        if self.exercise is not None:
            payload["exercise"] = {
                "steps": self.exercise.steps,
                "calories": self.exercise.calories,
            }
        return payload

    @classmethod
    def from_dict(cls, payload: dict[str, object]) -> "DayResult":
        """Parse a payload produced by ``to_dict``."""
        raw_items = payload.get("items") or []
        raw_nutrients = payload.get("nutrients") or {}
        raw_exercise = payload.get("exercise")
        exercise = None
        if isinstance(raw_exercise, dict):
            exercise = ExerciseData(
                steps=int(raw_exercise.get("steps", 0)),
                calories=int(raw_exercise.get("calories", 0)),
            )
        return cls(
            day=date.fromisoformat(str(payload["date"])),
            items=[ScrapedItem.from_dict(item) for item in raw_items],
            nutrients={
                MealType(meal): {str(k): str(v) for k, v in record.items()}
                for meal, record in raw_nutrients.items()
            },
            exercise=exercise,
        )
