"""Nutrient aggregation for meals and days of a nutrition plan.

Turns (food reference, quantity) pairs into calorie and macronutrient totals
using the food catalogue's per-serving facts, scaled by
``quantity / serving_size``. Meal totals roll up into day totals.

The functions here never raise on bad data. An entry whose food cannot be
resolved is logged and skipped; a zero, negative or non-numeric serving size
or quantity contributes nothing. Sums are kept as floats and are only rounded
by :func:`round_totals` at presentation time.
"""

import math
from dataclasses import dataclass, asdict
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from core.logger import get_logger

logger = get_logger("services.nutrient_aggregator")

NUTRIENT_FIELDS = ("calories", "protein", "carbs", "fat")


@dataclass(frozen=True)
class NutrientTotals:
    """Calorie (kcal) and macronutrient (g) totals."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0

    def __add__(self, other: "NutrientTotals") -> "NutrientTotals":
        return NutrientTotals(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fat=self.fat + other.fat,
        )

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


ZERO_TOTALS = NutrientTotals()

FoodLookup = Union[Mapping[Any, Any], Iterable[Any]]


class _Indexed(dict):
    """Marker for a lookup that has already been keyed by :func:`index_foods`."""


def _as_list(value: Any, what: str) -> List[Any]:
    """Materialize an iterable input, or log and return [] when it is not one."""
    if value is None or isinstance(value, (str, bytes, Mapping)):
        if value is not None:
            logger.warning("Ignoring %s given as %s", what, type(value).__name__)
        return []
    try:
        return list(value)
    except TypeError:
        logger.warning("Ignoring %s given as non-iterable %s", what, type(value).__name__)
        return []


def _field(obj: Any, name: str, default: Any = None) -> Any:
    # Entries and facts arrive either as dicts (stored JSON) or as objects (ORM rows, schemas).
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


def _number(value: Any) -> Optional[float]:
    """Return `value` as a finite float, or None when it is not usable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def index_foods(food_lookup: FoodLookup) -> Dict[str, Any]:
    """Key a food lookup by the string form of each food id.

    Accepts a mapping of id to food, or any iterable of food objects/dicts
    exposing an ``id`` field. String keys let ``1`` and ``"1"`` resolve to
    the same food, since ids in stored plan JSON may come back either way.
    """
    if isinstance(food_lookup, Mapping):
        return {str(key): food for key, food in food_lookup.items()}
    indexed = {}
    for food in _as_list(food_lookup, "food lookup"):
        food_id = _field(food, "id")
        if food_id is not None:
            indexed[str(food_id)] = food
    return indexed


def scale_factor(quantity: Any, serving_size: Any) -> float:
    """Return ``quantity / serving_size``, or 0.0 when the ratio is undefined."""
    qty = _number(quantity)
    size = _number(serving_size)
    if qty is None or size is None or size <= 0 or qty < 0:
        return 0.0
    return qty / size


def _entry_totals(entry: Any, foods: Dict[str, Any]) -> NutrientTotals:
    food_id = _field(entry, "food_id")
    food = foods.get(str(food_id)) if food_id is not None else None
    if food is None:
        logger.warning("Skipping meal entry with unresolved food_id=%s", food_id)
        return ZERO_TOTALS

    factor = scale_factor(_field(entry, "quantity"), _field(food, "serving_size"))
    if factor == 0.0:
        logger.debug("Food %s contributes nothing (quantity=%s, serving_size=%s)",
                     food_id, _field(entry, "quantity"), _field(food, "serving_size"))
        return ZERO_TOTALS

    values = {}
    for name in NUTRIENT_FIELDS:
        per_serving = _number(_field(food, name))
        values[name] = per_serving * factor if per_serving is not None else 0.0
    return NutrientTotals(**values)


def compute_meal_totals(entries: Optional[Iterable[Any]], food_lookup: FoodLookup) -> NutrientTotals:
    """Total calories and macros for one meal's food entries.

    Args:
        entries: Iterable of entries with ``food_id`` and ``quantity``.
        food_lookup: Foods with ``id``, per-serving nutrients and
            ``serving_size``, as an iterable or an id-keyed mapping.

    Returns:
        Unrounded `NutrientTotals`; all zeros for an empty or missing list.
    """
    entries = _as_list(entries, "meal entries")
    if not entries:
        return ZERO_TOTALS
    foods = food_lookup if isinstance(food_lookup, _Indexed) else index_foods(food_lookup)
    totals = ZERO_TOTALS
    for entry in entries:
        totals = totals + _entry_totals(entry, foods)
    return totals


def compute_day_totals(meals: Optional[Iterable[Any]], food_lookup: FoodLookup) -> NutrientTotals:
    """Sum of :func:`compute_meal_totals` over every meal of a day.

    Each meal exposes its entries as ``foods``.
    """
    meals = _as_list(meals, "day meals")
    if not meals:
        return ZERO_TOTALS
    foods = _Indexed(index_foods(food_lookup))
    totals = ZERO_TOTALS
    for meal in meals:
        totals = totals + compute_meal_totals(_field(meal, "foods"), foods)
    return totals


def _round_half_up(value: float, places: int) -> float:
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return float(rounded)


def round_totals(totals: NutrientTotals) -> NutrientTotals:
    """Round totals for display: whole calories, macros to one decimal.

    Halves round away from zero, so 247.5 kcal shows as 248.
    """
    return NutrientTotals(
        calories=_round_half_up(totals.calories, 0),
        protein=_round_half_up(totals.protein, 1),
        carbs=_round_half_up(totals.carbs, 1),
        fat=_round_half_up(totals.fat, 1),
    )


__all__ = [
    "NutrientTotals",
    "ZERO_TOTALS",
    "index_foods",
    "scale_factor",
    "compute_meal_totals",
    "compute_day_totals",
    "round_totals",
]
