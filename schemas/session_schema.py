"""Schemas for group nutrition sessions."""

from datetime import datetime
from pydantic import BaseModel, Field, model_validator
from typing import List, Literal, Optional

SessionStatus = Literal["scheduled", "completed", "cancelled"]


class NutritionSessionCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, examples=["Meal prep basics"])
    description: str = Field(..., min_length=1)
    start_datetime: datetime
    end_datetime: datetime
    meeting_link: Optional[str] = Field(None, pattern=r"^https?://\S+$", examples=["https://meet.example.com/abc"])
    max_patients: int = Field(..., ge=1, examples=[10])
    status: SessionStatus = "scheduled"
    patients: List[int] = Field(default_factory=list, description="Client IDs")

    @model_validator(mode="after")
    def check_schedule(self):
        if self.end_datetime <= self.start_datetime:
            raise ValueError("end_datetime must be after start_datetime")
        if len(set(self.patients)) > self.max_patients:
            raise ValueError("patients exceed max_patients")
        return self


class NutritionSessionUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    start_datetime: Optional[datetime] = None
    end_datetime: Optional[datetime] = None
    meeting_link: Optional[str] = Field(None, pattern=r"^https?://\S+$")
    max_patients: Optional[int] = Field(None, ge=1)
    status: Optional[SessionStatus] = None
    patients: Optional[List[int]] = None


class NutritionSessionResponse(BaseModel):
    id: int
    nutritionist_id: int
    title: str
    description: str
    start_datetime: str
    end_datetime: str
    duration_minutes: int
    meeting_link: Optional[str] = None
    max_patients: int
    status: str
    patients: List[int]
    created_at: str
    updated_at: str
