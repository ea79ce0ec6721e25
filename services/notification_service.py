"""Reminders and in-app notifications.

Reminders are owned by the user who created them and may point at a client.
`check_due_reminders` is called by the front end on its own schedule; it turns
reminders due within the look-ahead window into notifications, once per
reminder and recipient.
"""

from datetime import datetime, timedelta
from typing import List, Optional
from sqlalchemy.orm import Session
from core import config
from core.context import RequestContext
from core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from core.logger import get_logger
from core.repository import iso, save
from database import models
from schemas.notification_schema import (
    NotificationResponse,
    ReminderCreateRequest,
    ReminderResponse,
    ReminderUpdateRequest,
)
from services.client_service import client_for_user, get_client_for

logger = get_logger("services.notification_service")


def reminder_to_response(r: models.Reminder) -> ReminderResponse:
    return ReminderResponse(
        id=r.id,
        user_id=r.user_id,
        client_id=r.client_id,
        title=r.title,
        message=r.message,
        type=r.type,
        reminder_at=iso(r.reminder_at),
        completed=bool(r.completed),
        created_at=iso(r.created_at),
    )


def notification_to_response(n: models.Notification) -> NotificationResponse:
    return NotificationResponse(
        id=n.id,
        user_id=n.user_id,
        reminder_id=n.reminder_id,
        title=n.title,
        message=n.message,
        type=n.type,
        read=bool(n.read),
        created_at=iso(n.created_at),
    )


def create_reminder(db: Session, ctx: RequestContext, payload: ReminderCreateRequest) -> models.Reminder:
    if payload.client_id is not None:
        get_client_for(db, ctx, payload.client_id)
    reminder = save(db, models.Reminder(
        user_id=ctx.user_id,
        client_id=payload.client_id,
        title=payload.title,
        message=payload.message,
        type=payload.type,
        reminder_at=payload.reminder_at,
    ))
    logger.info("Reminder %s set for %s by user %s", reminder.id, iso(reminder.reminder_at), ctx.user_id)
    return reminder


def get_reminder_for(db: Session, ctx: RequestContext, reminder_id: int) -> models.Reminder:
    reminder = db.get(models.Reminder, reminder_id)
    if reminder is None:
        raise NotFoundError("Reminder", reminder_id)
    if not (ctx.is_admin or reminder.user_id == ctx.user_id):
        raise PermissionDeniedError(f"access reminder {reminder_id}", role=ctx.role)
    return reminder


def list_reminders(db: Session, ctx: RequestContext, completed: Optional[bool] = None) -> List[models.Reminder]:
    query = db.query(models.Reminder).filter(models.Reminder.user_id == ctx.user_id)
    if completed is not None:
        query = query.filter(models.Reminder.completed == completed)
    return query.order_by(models.Reminder.reminder_at.asc(), models.Reminder.id.asc()).all()


def update_reminder(db: Session, ctx: RequestContext, reminder_id: int,
                    payload: ReminderUpdateRequest) -> models.Reminder:
    reminder = get_reminder_for(db, ctx, reminder_id)
    changes = payload.model_dump(exclude_unset=True)
    for name in ("title", "message", "type", "reminder_at", "completed"):
        if name in changes and changes[name] is None:
            raise ValidationError(f"{name} cannot be cleared", field=name)
    if changes.get("client_id") is not None:
        get_client_for(db, ctx, changes["client_id"])
    for name, value in changes.items():
        setattr(reminder, name, value)
    db.commit()
    db.refresh(reminder)
    return reminder


def complete_reminder(db: Session, ctx: RequestContext, reminder_id: int) -> models.Reminder:
    reminder = get_reminder_for(db, ctx, reminder_id)
    reminder.completed = True
    db.commit()
    db.refresh(reminder)
    logger.info("Reminder %s completed", reminder.id)
    return reminder


def delete_reminder(db: Session, ctx: RequestContext, reminder_id: int) -> None:
    reminder = get_reminder_for(db, ctx, reminder_id)
    db.query(models.Notification).filter(models.Notification.reminder_id == reminder.id).update(
        {models.Notification.reminder_id: None}, synchronize_session=False)
    db.delete(reminder)
    db.commit()


def list_notifications(db: Session, ctx: RequestContext, unread_only: bool = False) -> List[models.Notification]:
    query = db.query(models.Notification).filter(models.Notification.user_id == ctx.user_id)
    if unread_only:
        query = query.filter(models.Notification.read.is_(False))
    return query.order_by(models.Notification.created_at.desc(), models.Notification.id.desc()).all()


def unread_count(db: Session, ctx: RequestContext) -> int:
    return (db.query(models.Notification)
            .filter(models.Notification.user_id == ctx.user_id, models.Notification.read.is_(False))
            .count())


def _own_notification(db: Session, ctx: RequestContext, notification_id: int) -> models.Notification:
    n = db.get(models.Notification, notification_id)
    if n is None or n.user_id != ctx.user_id:
        raise NotFoundError("Notification", notification_id)
    return n


def mark_read(db: Session, ctx: RequestContext, notification_id: int) -> models.Notification:
    n = _own_notification(db, ctx, notification_id)
    n.read = True
    db.commit()
    db.refresh(n)
    return n


def mark_all_read(db: Session, ctx: RequestContext) -> int:
    """Mark every unread notification of the caller as read; returns how many changed."""
    updated = (db.query(models.Notification)
               .filter(models.Notification.user_id == ctx.user_id, models.Notification.read.is_(False))
               .update({models.Notification.read: True}, synchronize_session=False))
    db.commit()
    return updated


def delete_notification(db: Session, ctx: RequestContext, notification_id: int) -> None:
    n = _own_notification(db, ctx, notification_id)
    db.delete(n)
    db.commit()


def check_due_reminders(db: Session, ctx: RequestContext, now: Optional[datetime] = None,
                        lookahead_minutes: Optional[int] = None) -> List[models.Notification]:
    """Create notifications for the caller's reminders due in the look-ahead window.

    Considers uncompleted reminders the caller created, plus those aimed at the
    caller's own client profile, whose time falls in `[now, now + window]`.
    A reminder that already produced a notification for the caller is skipped.

    Returns:
        The notifications created by this call.
    """
    now = now or datetime.utcnow()
    window = timedelta(minutes=config.REMINDER_LOOKAHEAD_MINUTES if lookahead_minutes is None
                       else lookahead_minutes)

    owner_filter = models.Reminder.user_id == ctx.user_id
    client = client_for_user(db, ctx.user_id) if ctx.role == "client" else None
    if client is not None:
        owner_filter = owner_filter | (models.Reminder.client_id == client.id)

    due = (db.query(models.Reminder)
           .filter(owner_filter,
                   models.Reminder.completed.is_(False),
                   models.Reminder.reminder_at >= now,
                   models.Reminder.reminder_at <= now + window)
           .order_by(models.Reminder.reminder_at.asc())
           .all())
    if not due:
        return []

    already = {rid for (rid,) in db.query(models.Notification.reminder_id)
               .filter(models.Notification.user_id == ctx.user_id,
                       models.Notification.reminder_id.in_([r.id for r in due]))
               .all()}
    created = []
    for reminder in due:
        if reminder.id in already:
            continue
        n = models.Notification(
            user_id=ctx.user_id,
            reminder_id=reminder.id,
            title=f"Reminder: {reminder.title}",
            message=reminder.message,
            type=reminder.type,
        )
        db.add(n)
        created.append(n)
    db.commit()
    for n in created:
        db.refresh(n)
    logger.info("Reminder check for user %s: %s due, %s notifications created",
                ctx.user_id, len(due), len(created))
    return created
