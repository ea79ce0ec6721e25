"""Schemas for reminders and in-app notifications."""

from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Literal, Optional

NotificationType = Literal["session", "meal", "workout", "general"]


class ReminderCreateRequest(BaseModel):
    title: str = Field(..., min_length=3, examples=["Weekly meal prep"])
    message: str = Field(..., min_length=5, examples=["Prepare lunches for the week"])
    type: NotificationType = "general"
    reminder_at: datetime = Field(..., examples=["2026-01-10T09:00:00"])
    client_id: Optional[int] = None


class ReminderUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=3)
    message: Optional[str] = Field(None, min_length=5)
    type: Optional[NotificationType] = None
    reminder_at: Optional[datetime] = None
    client_id: Optional[int] = None
    completed: Optional[bool] = None


class ReminderResponse(BaseModel):
    id: int
    user_id: int
    client_id: Optional[int] = None
    title: str
    message: str
    type: str
    reminder_at: str
    completed: bool
    created_at: str


class NotificationResponse(BaseModel):
    id: int
    user_id: int
    reminder_id: Optional[int] = None
    title: str
    message: str
    type: str
    read: bool
    created_at: str


class NotificationListResponse(BaseModel):
    unread_count: int
    notifications: List[NotificationResponse]


class ReminderCheckResponse(BaseModel):
    created: int
    notifications: List[NotificationResponse]
