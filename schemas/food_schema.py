"""Schemas for the food catalogue."""

from pydantic import BaseModel, Field
from typing import List, Optional


class FoodCreateRequest(BaseModel):
    """Nutritional facts for one food item per serving."""

    name: str = Field(..., min_length=1, examples=["Chicken Breast"])
    category: str = Field(..., min_length=1, examples=["protein"])
    calories: float = Field(..., ge=0, examples=[165], description="kcal per serving")
    protein: float = Field(..., ge=0, examples=[31], description="grams per serving")
    carbs: float = Field(..., ge=0, examples=[0], description="grams per serving")
    fat: float = Field(..., ge=0, examples=[3.6], description="grams per serving")
    fiber: Optional[float] = Field(None, ge=0)
    sugar: Optional[float] = Field(None, ge=0)
    sodium: Optional[float] = Field(None, ge=0, description="mg per serving")
    serving_size: float = Field(..., gt=0, examples=[100], description="Serving size in `serving_unit`")
    serving_unit: str = Field("g", min_length=1, examples=["g"])
    description: Optional[str] = None
    restrictions: List[str] = Field(default_factory=list, examples=[["gluten"]])


class FoodUpdateRequest(BaseModel):
    """Partial update of a food; omitted fields are left unchanged."""

    name: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1)
    calories: Optional[float] = Field(None, ge=0)
    protein: Optional[float] = Field(None, ge=0)
    carbs: Optional[float] = Field(None, ge=0)
    fat: Optional[float] = Field(None, ge=0)
    fiber: Optional[float] = Field(None, ge=0)
    sugar: Optional[float] = Field(None, ge=0)
    sodium: Optional[float] = Field(None, ge=0)
    serving_size: Optional[float] = Field(None, gt=0)
    serving_unit: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    restrictions: Optional[List[str]] = None


class FoodFact(BaseModel):
    """Representation of a catalogue food in responses."""

    id: int
    name: str
    category: str
    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: Optional[float] = None
    sugar: Optional[float] = None
    sodium: Optional[float] = None
    serving_size: float
    serving_unit: str
    description: Optional[str] = None
    restrictions: List[str] = []


class SimilarFood(FoodFact):
    """Catalogue food with an attached similarity score."""

    score: float


class FoodImportResponse(BaseModel):
    added: int
    total: int
