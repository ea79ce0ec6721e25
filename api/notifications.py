"""Reminder and notification API router.

The front end calls `POST /api/notifications/check-reminders` on its own
schedule to turn reminders that are coming due into notifications.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from database.deps import get_db_read, get_db_write
from core.context import RequestContext, get_request_context
from core.logger import get_logger
from services import notification_service
from schemas import (
    ReminderCreateRequest,
    ReminderUpdateRequest,
    ReminderResponse,
    NotificationResponse,
    NotificationListResponse,
    ReminderCheckResponse,
)

logger = get_logger("api.notifications")
router = APIRouter(prefix="/api", tags=["notifications"])


@router.post("/reminders", response_model=ReminderResponse, status_code=201)
def create_reminder(payload: ReminderCreateRequest, ctx: RequestContext = Depends(get_request_context),
                    db: Session = Depends(get_db_write)):
    return notification_service.reminder_to_response(notification_service.create_reminder(db, ctx, payload))


@router.get("/reminders", response_model=List[ReminderResponse])
def list_reminders(completed: Optional[bool] = None, ctx: RequestContext = Depends(get_request_context),
                   db: Session = Depends(get_db_read)):
    """The caller's reminders in due order."""
    return [notification_service.reminder_to_response(r)
            for r in notification_service.list_reminders(db, ctx, completed)]


@router.patch("/reminders/{reminder_id}", response_model=ReminderResponse)
def update_reminder(reminder_id: int, payload: ReminderUpdateRequest,
                    ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_write)):
    reminder = notification_service.update_reminder(db, ctx, reminder_id, payload)
    return notification_service.reminder_to_response(reminder)


@router.post("/reminders/{reminder_id}/complete", response_model=ReminderResponse)
def complete_reminder(reminder_id: int, ctx: RequestContext = Depends(get_request_context),
                      db: Session = Depends(get_db_write)):
    reminder = notification_service.complete_reminder(db, ctx, reminder_id)
    return notification_service.reminder_to_response(reminder)


@router.delete("/reminders/{reminder_id}", status_code=204)
def delete_reminder(reminder_id: int, ctx: RequestContext = Depends(get_request_context),
                    db: Session = Depends(get_db_write)):
    notification_service.delete_reminder(db, ctx, reminder_id)


@router.get("/notifications", response_model=NotificationListResponse)
def list_notifications(unread_only: bool = False, ctx: RequestContext = Depends(get_request_context),
                       db: Session = Depends(get_db_read)):
    """The caller's notifications, newest first, with the unread count."""
    items = notification_service.list_notifications(db, ctx, unread_only=unread_only)
    return NotificationListResponse(
        unread_count=notification_service.unread_count(db, ctx),
        notifications=[notification_service.notification_to_response(n) for n in items],
    )


@router.post("/notifications/check-reminders", response_model=ReminderCheckResponse)
def check_reminders(ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_write)):
    """Create notifications for reminders due within the look-ahead window.

    Returns:
        `ReminderCheckResponse` with only the notifications created by this call.
    """
    created = notification_service.check_due_reminders(db, ctx)
    return ReminderCheckResponse(
        created=len(created),
        notifications=[notification_service.notification_to_response(n) for n in created],
    )


@router.post("/notifications/read-all")
def mark_all_read(ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_write)):
    return {"updated": notification_service.mark_all_read(db, ctx)}


@router.post("/notifications/{notification_id}/read", response_model=NotificationResponse)
def mark_read(notification_id: int, ctx: RequestContext = Depends(get_request_context),
              db: Session = Depends(get_db_write)):
    return notification_service.notification_to_response(notification_service.mark_read(db, ctx, notification_id))


@router.delete("/notifications/{notification_id}", status_code=204)
def delete_notification(notification_id: int, ctx: RequestContext = Depends(get_request_context),
                        db: Session = Depends(get_db_write)):
    notification_service.delete_notification(db, ctx, notification_id)
