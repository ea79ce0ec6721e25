"""Schemas for nutrition plans, their days and meals.

Totals are never accepted from callers: any `total_*` keys sent inside a day
are ignored and recomputed from the food catalogue.
"""

from datetime import date
from pydantic import BaseModel, Field, model_validator
from typing import Dict, List, Literal, Optional

MealType = Literal["breakfast", "lunch", "dinner", "snack"]


class MealFoodEntry(BaseModel):
    """A quantity of one catalogue food inside a meal."""

    food_id: int = Field(..., examples=[1])
    quantity: float = Field(..., ge=0, examples=[150], description="Amount in the food's serving unit family")
    unit: Optional[str] = Field(None, examples=["g"])


class Meal(BaseModel):
    type: MealType = Field(..., examples=["lunch"])
    time: Optional[str] = Field(None, pattern=r"^\d{2}:\d{2}$", examples=["13:30"])
    foods: List[MealFoodEntry] = Field(default_factory=list)
    instructions: Optional[str] = None
    notes: Optional[str] = None


class DailyPlan(BaseModel):
    day: int = Field(..., ge=1, examples=[1], description="1-based day number within the plan")
    meals: List[Meal] = Field(default_factory=list)


class NutrientGoals(BaseModel):
    calories: Optional[float] = Field(None, ge=0)
    protein: Optional[float] = Field(None, ge=0)
    carbs: Optional[float] = Field(None, ge=0)
    fat: Optional[float] = Field(None, ge=0)


class Hydration(BaseModel):
    water_liters: float = Field(..., ge=0, examples=[2.0])
    daily_goal: float = Field(..., ge=0, examples=[2.5])
    reminders: List[str] = Field(default_factory=list, examples=[["09:00", "15:00"]])
    notes: Optional[str] = None


class SupplementDose(BaseModel):
    dose: str = Field(..., min_length=1, examples=["5 g"])
    supplement_id: Optional[int] = Field(None, description="Supplement catalogue entry being prescribed")
    name: Optional[str] = Field(None, examples=["Creatine"])
    time: Optional[str] = Field(None, examples=["after training"])


class NutritionPlanCreateRequest(BaseModel):
    """Payload for authoring a new nutrition plan for a client."""

    client_id: int = Field(..., examples=[1])
    title: str = Field(..., min_length=3, examples=["Cutting phase - 4 weeks"])
    description: Optional[str] = None
    start_date: date = Field(..., examples=["2026-01-05"])
    end_date: Optional[date] = Field(None, examples=["2026-02-01"])
    is_active: bool = True
    daily_plans: List[DailyPlan] = Field(default_factory=list)
    nutrient_goals: Optional[NutrientGoals] = None
    hydration: Optional[Hydration] = None
    supplements: Dict[str, SupplementDose] = Field(default_factory=dict)
    restrictions: List[str] = Field(default_factory=list)
    preferences: List[str] = Field(default_factory=list)
    allergies: List[str] = Field(default_factory=list)
    objectives: List[str] = Field(default_factory=list)
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class NutritionPlanUpdateRequest(BaseModel):
    """Partial update of a nutrition plan; omitted fields are left unchanged."""

    title: Optional[str] = Field(None, min_length=3)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: Optional[bool] = None
    daily_plans: Optional[List[DailyPlan]] = None
    nutrient_goals: Optional[NutrientGoals] = None
    hydration: Optional[Hydration] = None
    supplements: Optional[Dict[str, SupplementDose]] = None
    restrictions: Optional[List[str]] = None
    preferences: Optional[List[str]] = None
    allergies: Optional[List[str]] = None
    objectives: Optional[List[str]] = None
    notes: Optional[str] = None


class NutrientTotalsOut(BaseModel):
    calories: float
    protein: float
    carbs: float
    fat: float


class MealOut(Meal):
    totals: NutrientTotalsOut


class DailyPlanOut(BaseModel):
    day: int
    meals: List[MealOut]
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float


class NutritionPlanResponse(BaseModel):
    """Nutrition plan with display-rounded totals recomputed from current food data."""

    id: int
    client_id: int
    nutritionist_id: int
    title: str
    description: Optional[str] = None
    start_date: str
    end_date: Optional[str] = None
    is_active: bool
    daily_plans: List[DailyPlanOut]
    average_daily_totals: NutrientTotalsOut
    goal_progress: Optional[Dict[str, float]] = None
    nutrient_goals: Optional[NutrientGoals] = None
    hydration: Optional[Hydration] = None
    supplements: Dict[str, SupplementDose] = {}
    restrictions: List[str] = []
    preferences: List[str] = []
    allergies: List[str] = []
    objectives: List[str] = []
    notes: Optional[str] = None
    created_at: str
    updated_at: str


class PlanPreviewRequest(BaseModel):
    """Meals of an unsaved day, sent while a plan is being edited."""

    meals: List[Meal] = Field(default_factory=list)


class MealPreview(BaseModel):
    type: str
    totals: NutrientTotalsOut
    display: NutrientTotalsOut


class PlanPreviewResponse(BaseModel):
    meals: List[MealPreview]
    day_totals: NutrientTotalsOut
    day_display: NutrientTotalsOut
