"""Schemas for body measurements and progress tracking."""

import datetime as dt
from pydantic import BaseModel, Field
from typing import List, Literal, Optional


class BodyMeasurementRequest(BaseModel):
    """Body measurement payload; BMI is computed by the server."""

    date: dt.date
    weight: float = Field(..., gt=0, le=400, examples=[72.4], description="kg")
    height: float = Field(..., ge=0, le=250, examples=[170], description="cm")
    chest: Optional[float] = Field(None, ge=0)
    waist: Optional[float] = Field(None, ge=0)
    hips: Optional[float] = Field(None, ge=0)
    arms: Optional[float] = Field(None, ge=0)
    thighs: Optional[float] = Field(None, ge=0)
    body_fat: Optional[float] = Field(None, ge=0, le=100, description="percent")
    muscle_mass: Optional[float] = Field(None, ge=0)
    visceral_fat: Optional[float] = Field(None, ge=0)
    basal_metabolic_rate: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None


class BodyMeasurementResponse(BaseModel):
    id: int
    client_id: int
    created_by: int
    date: str
    weight: float
    height: float
    bmi: Optional[float] = None
    bmi_category: Optional[str] = None
    chest: Optional[float] = None
    waist: Optional[float] = None
    hips: Optional[float] = None
    arms: Optional[float] = None
    thighs: Optional[float] = None
    body_fat: Optional[float] = None
    muscle_mass: Optional[float] = None
    visceral_fat: Optional[float] = None
    basal_metabolic_rate: Optional[float] = None
    notes: Optional[str] = None
    created_at: str
    updated_at: str


class Circumferences(BaseModel):
    chest: Optional[float] = Field(None, ge=0)
    waist: Optional[float] = Field(None, ge=0)
    hips: Optional[float] = Field(None, ge=0)
    arms: Optional[float] = Field(None, ge=0)
    thighs: Optional[float] = Field(None, ge=0)


class ProgressRecordRequest(BaseModel):
    date: dt.date
    weight: Optional[float] = Field(None, gt=0, le=400)
    measurements: Optional[Circumferences] = None
    notes: Optional[str] = None


class ProgressRecordResponse(BaseModel):
    id: int
    client_id: int
    date: str
    weight: Optional[float] = None
    measurements: Optional[Circumferences] = None
    notes: Optional[str] = None


class WeightPoint(BaseModel):
    date: str
    weight: float


class WeightMetrics(BaseModel):
    """Latest weight, change since the previous check-in and goal-relative trend."""

    latest_weight: Optional[float] = None
    target_weight: Optional[float] = None
    weight_difference: float
    weight_trend: Literal["up", "down", "neutral"]


class ProgressSummaryResponse(BaseModel):
    client_id: int
    metrics: WeightMetrics
    weight_series: List[WeightPoint]
