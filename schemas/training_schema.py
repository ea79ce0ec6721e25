"""Schemas for trainer-authored training plans."""

from datetime import date
from pydantic import BaseModel, Field, model_validator
from typing import List, Literal, Optional

TrainingStatus = Literal["active", "completed", "draft"]


class TrainingRoutine(BaseModel):
    day: str = Field(..., min_length=1, examples=["monday"])
    exercises: str = Field(..., min_length=1, examples=["Squat 4x8, Bench press 4x8, Row 3x10"])


class TrainingPlanCreateRequest(BaseModel):
    client_id: int = Field(..., examples=[1])
    title: str = Field(..., min_length=3, examples=["Strength base"])
    description: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None
    status: TrainingStatus = "draft"
    routines: List[TrainingRoutine] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class TrainingPlanUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=3)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[TrainingStatus] = None
    routines: Optional[List[TrainingRoutine]] = None


class TrainingPlanResponse(BaseModel):
    id: int
    client_id: int
    trainer_id: int
    title: str
    description: Optional[str] = None
    start_date: str
    end_date: Optional[str] = None
    status: str
    routines: List[TrainingRoutine]
    created_at: str
    updated_at: str
