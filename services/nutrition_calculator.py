"""Body and energy calculation helpers.

Provides BMI (with category), BMR/TDEE, goal-based calorie targets, macro
allocation and the weight-range buckets used by the dashboards.
"""

from datetime import date
from typing import Dict, Optional
from core.logger import get_logger

logger = get_logger("services.nutrition_calculator")

ACTIVITY_MULTIPLIERS = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very active": 1.9,
}

# (upper bound exclusive, label); the last bucket is open-ended.
WEIGHT_BUCKETS = (
    (60, "<60kg"),
    (70, "60-70kg"),
    (80, "70-80kg"),
    (90, "80-90kg"),
    (100, "90-100kg"),
    (None, ">100kg"),
)


class NutritionCalculator:
    """Class-based calculator shared by the client, measurement and report services."""

    def calculate_bmi(self, height_cm: float, weight_kg: float) -> Optional[float]:
        """Calculate BMI from height in cm and weight in kg, rounded to 2 decimals.

        Returns None when height or weight is missing or not positive.
        """
        if not height_cm or not weight_kg or height_cm <= 0 or weight_kg <= 0:
            return None
        h_m = height_cm / 100.0
        return round(weight_kg / (h_m * h_m), 2)

    def bmi_category(self, bmi: Optional[float]) -> Optional[str]:
        """Map a BMI value to the WHO adult category."""
        if bmi is None:
            return None
        if bmi < 18.5:
            return "underweight"
        if bmi < 25:
            return "normal"
        if bmi < 30:
            return "overweight"
        return "obese"

    def age_on(self, birth_date: date, today: Optional[date] = None) -> int:
        today = today or date.today()
        years = today.year - birth_date.year
        if (today.month, today.day) < (birth_date.month, birth_date.day):
            years -= 1
        return years

    def calculate_bmr(self, age: int, height_cm: float, weight_kg: float, gender: str) -> float:
        """Calculate BMR using Mifflin-St Jeor approximation."""
        base = 10 * weight_kg + 6.25 * height_cm - 5 * age
        if (gender or "").lower() in ("male", "m", "masculino"):
            return base + 5
        return base - 161

    def calculate_tdee(self, bmr: float, activity_level: str) -> float:
        """Estimate TDEE from BMR and activity multiplier."""
        val = bmr * ACTIVITY_MULTIPLIERS.get(activity_level, 1.2)
        logger.debug("TDEE calculated: %s", val)
        return val

    def calculate_target_calories(self, tdee: float, weight_goal: str) -> float:
        """Derive a daily calorie target from TDEE based on the client's weight goal."""
        if weight_goal == "lose":
            val = max(1200, tdee - 500)
        elif weight_goal == "gain":
            val = tdee + 300
        else:
            val = tdee
        logger.debug("Target calories for goal %s: %s", weight_goal, val)
        return val

    def calculate_macros(self, target_calories: float, dietary_preferences=None) -> Dict[str, float]:
        """Allocate macronutrient targets (grams) from a calorie target.

        Supports simple presets for 'keto' and 'high-protein' preferences.
        """
        prefs = {p.lower() for p in (dietary_preferences or [])}
        if "keto" in prefs:
            ratios = {"protein": 0.3, "carbs": 0.1, "fat": 0.6}
        elif "high-protein" in prefs:
            ratios = {"protein": 0.4, "carbs": 0.3, "fat": 0.3}
        else:
            ratios = {"protein": 0.3, "carbs": 0.4, "fat": 0.3}
        macros = {
            "protein": round(target_calories * ratios["protein"] / 4),
            "carbs": round(target_calories * ratios["carbs"] / 4),
            "fat": round(target_calories * ratios["fat"] / 9),
        }
        logger.debug("Macros calculated: %s", macros)
        return macros

    def weight_bucket(self, weight_kg: float) -> str:
        """Return the dashboard weight-range label for a weight in kg."""
        for upper, label in WEIGHT_BUCKETS:
            if upper is None or weight_kg < upper:
                return label
        return WEIGHT_BUCKETS[-1][1]


# export singleton
nutrition_calculator = NutritionCalculator()
__all__ = ["NutritionCalculator", "nutrition_calculator", "WEIGHT_BUCKETS", "ACTIVITY_MULTIPLIERS"]
