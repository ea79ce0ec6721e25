"""Schemas for dashboard and monthly report responses."""

from pydantic import BaseModel
from typing import List, Optional


class NamedCount(BaseModel):
    name: str
    value: int


class ClientStats(BaseModel):
    total: int
    new_this_month: int
    with_active_plan: int
    by_goal: List[NamedCount]
    by_weight: List[NamedCount]


class PlanKindStats(BaseModel):
    total: int
    active: int


class PlanStats(BaseModel):
    nutrition: PlanKindStats
    training: PlanKindStats
    completion_rate: float
    by_type: List[NamedCount]
    by_status: List[NamedCount]


class SessionStats(BaseModel):
    total: int
    average_duration_minutes: float
    attendance_rate: float
    by_day: List[NamedCount]


class ReportResponse(BaseModel):
    """Aggregated figures for the caller's clients, optionally for one month."""

    month: Optional[int] = None
    year: Optional[int] = None
    clients: ClientStats
    plans: PlanStats
    sessions: SessionStats
