"""Schemas for nutrition follow-ups recorded against a plan."""

import datetime as dt
from pydantic import BaseModel, Field
from typing import List, Literal, Optional

from .plan_schema import MealType

Mood = Literal["good", "normal", "bad"]


class CompletedMeal(BaseModel):
    """A plan meal the client reports as eaten; identified by plan day and meal type."""

    day: int = Field(..., ge=1, examples=[1])
    meal_type: MealType = Field(..., examples=["breakfast"])
    notes: str = ""


class FollowUpCreateRequest(BaseModel):
    client_id: int = Field(..., examples=[1])
    plan_id: int = Field(..., examples=[3])
    date: dt.date
    mood: Mood = Field(..., examples=["good"])
    weight: Optional[float] = Field(None, gt=0, examples=[71.4])
    notes: Optional[str] = None
    completed_meals: List[CompletedMeal] = Field(default_factory=list)


class FollowUpUpdateRequest(BaseModel):
    date: Optional[dt.date] = None
    mood: Optional[Mood] = None
    weight: Optional[float] = Field(None, gt=0)
    notes: Optional[str] = None
    completed_meals: Optional[List[CompletedMeal]] = None


class FollowUpResponse(BaseModel):
    id: int
    client_id: int
    plan_id: int
    created_by: int
    date: str
    mood: str
    weight: Optional[float] = None
    notes: Optional[str] = None
    completed_meals: List[CompletedMeal]
    planned_meals: int = Field(..., description="Meals the plan schedules across all its days")
    created_at: str
    updated_at: str
