"""Schemas for users and client profiles."""

from datetime import date
from pydantic import BaseModel, Field
from typing import List, Literal, Optional

UserRole = Literal["nutritionist", "trainer", "client", "admin"]
ActivityLevel = Literal["sedentary", "light", "moderate", "active", "very active"]
WeightGoal = Literal["lose", "maintain", "gain"]


class UserCreateRequest(BaseModel):
    """Request payload for registering an application user."""

    name: str = Field(..., min_length=1, examples=["Ana Torres"], description="Full name")
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", examples=["ana@example.com"], description="Unique login email")
    role: UserRole = Field(..., examples=["nutritionist"], description="nutritionist, trainer, client or admin")


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    role: str
    created_at: str


class ClientCreateRequest(BaseModel):
    """Request payload for creating a client profile for an existing client user."""

    user_id: int = Field(..., examples=[3], description="ID of a user with the client role")
    nutritionist_id: Optional[int] = Field(None, examples=[1], description="Assigned nutritionist user ID")
    trainer_id: Optional[int] = Field(None, examples=[2], description="Assigned trainer user ID")
    birth_date: Optional[date] = Field(None, examples=["1990-04-12"])
    gender: Optional[str] = Field(None, examples=["female"])
    height: Optional[float] = Field(None, gt=0, le=250, examples=[165.0], description="Height in centimeters")
    weight: Optional[float] = Field(None, gt=0, le=400, examples=[68.5], description="Weight in kilograms")
    phone: Optional[str] = None
    address: Optional[str] = None
    activity_level: ActivityLevel = Field("moderate", examples=["moderate"])
    weight_goal: WeightGoal = Field("maintain", examples=["lose"])
    target_weight: Optional[float] = Field(None, gt=0, le=400, examples=[62.0])
    dietary_preferences: List[str] = Field(default_factory=list, examples=[["high-protein"]])
    medical_conditions: List[str] = Field(default_factory=list)
    allergies: List[str] = Field(default_factory=list, examples=[["peanuts"]])
    medications: List[str] = Field(default_factory=list)
    dietary_restrictions: List[str] = Field(default_factory=list, examples=[["lactose"]])
    notes: Optional[str] = None


class ClientUpdateRequest(BaseModel):
    """Partial update of a client profile; omitted fields are left unchanged."""

    nutritionist_id: Optional[int] = None
    trainer_id: Optional[int] = None
    birth_date: Optional[date] = None
    gender: Optional[str] = None
    height: Optional[float] = Field(None, gt=0, le=250)
    weight: Optional[float] = Field(None, gt=0, le=400)
    phone: Optional[str] = None
    address: Optional[str] = None
    activity_level: Optional[ActivityLevel] = None
    weight_goal: Optional[WeightGoal] = None
    target_weight: Optional[float] = Field(None, gt=0, le=400)
    dietary_preferences: Optional[List[str]] = None
    medical_conditions: Optional[List[str]] = None
    allergies: Optional[List[str]] = None
    medications: Optional[List[str]] = None
    dietary_restrictions: Optional[List[str]] = None
    notes: Optional[str] = None


class ClientTargets(BaseModel):
    """Energy targets derived from the client's body data and goal."""

    bmi: Optional[float] = None
    bmi_category: Optional[str] = None
    target_calories: Optional[float] = None
    target_macros: Optional[dict] = None


class ClientResponse(BaseModel):
    id: int
    user_id: int
    name: str
    email: str
    nutritionist_id: Optional[int] = None
    trainer_id: Optional[int] = None
    birth_date: Optional[str] = None
    gender: Optional[str] = None
    height: Optional[float] = None
    weight: Optional[float] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    activity_level: str
    weight_goal: str
    target_weight: Optional[float] = None
    dietary_preferences: List[str] = []
    medical_conditions: List[str] = []
    allergies: List[str] = []
    medications: List[str] = []
    dietary_restrictions: List[str] = []
    notes: Optional[str] = None
    targets: ClientTargets
    created_at: str
    updated_at: str
