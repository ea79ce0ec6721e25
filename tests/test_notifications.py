"""Tests for reminders and the notifications generated from them."""
from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError as SchemaError

from core.exceptions import NotFoundError, PermissionDeniedError
from schemas.notification_schema import ReminderCreateRequest, ReminderUpdateRequest
from services import notification_service

NOW = datetime(2026, 6, 1, 9, 0)


def _remind(db, ctx, minutes, title="Weekly check-in", **extra):
    return notification_service.create_reminder(db, ctx, ReminderCreateRequest(
        title=title, message="Time for your weekly check-in", reminder_at=NOW + timedelta(minutes=minutes),
        **extra))


def test_reminder_text_lengths_are_validated():
    with pytest.raises(SchemaError):
        ReminderCreateRequest(title="Hi", message="Long enough", reminder_at=NOW)
    with pytest.raises(SchemaError):
        ReminderCreateRequest(title="Hello", message="Hey", reminder_at=NOW)


def test_due_reminders_become_notifications_once(db, make_user):
    user = make_user("nutritionist")
    due = _remind(db, user, 30, title="Prepare session")
    _remind(db, user, 600, title="Too far ahead")
    _remind(db, user, -5, title="Already past")
    done = _remind(db, user, 10, title="Completed one")
    notification_service.complete_reminder(db, user, done.id)

    created = notification_service.check_due_reminders(db, user, now=NOW, lookahead_minutes=60)
    assert [n.reminder_id for n in created] == [due.id]
    assert created[0].title == "Reminder: Prepare session"
    assert created[0].read is False

    assert notification_service.check_due_reminders(db, user, now=NOW, lookahead_minutes=60) == []
    assert notification_service.unread_count(db, user) == 1


def test_client_is_notified_of_reminders_about_them(db, make_user, make_client):
    nutritionist = make_user("nutritionist")
    client, client_ctx = make_client(nutritionist)
    reminder = _remind(db, nutritionist, 15, title="Log breakfast", type="meal", client_id=client.id)
    created = notification_service.check_due_reminders(db, client_ctx, now=NOW, lookahead_minutes=60)
    assert [(n.user_id, n.reminder_id, n.type) for n in created] == [(client_ctx.user_id, reminder.id, "meal")]


def test_mark_read_and_mark_all_read(db, make_user):
    user = make_user("trainer")
    for minutes in (5, 10, 15):
        _remind(db, user, minutes, title=f"Workout {minutes}", type="workout")
    created = notification_service.check_due_reminders(db, user, now=NOW, lookahead_minutes=60)
    assert len(created) == 3

    notification_service.mark_read(db, user, created[0].id)
    assert notification_service.unread_count(db, user) == 2
    assert notification_service.mark_all_read(db, user) == 2
    assert notification_service.unread_count(db, user) == 0

    notification_service.delete_notification(db, user, created[1].id)
    assert len(notification_service.list_notifications(db, user)) == 2


def test_notifications_and_reminders_are_private(db, make_user):
    owner = make_user("nutritionist")
    other = make_user("nutritionist")
    reminder = _remind(db, owner, 5)
    created = notification_service.check_due_reminders(db, owner, now=NOW, lookahead_minutes=60)
    with pytest.raises(NotFoundError):
        notification_service.mark_read(db, other, created[0].id)
    with pytest.raises(PermissionDeniedError):
        notification_service.update_reminder(db, other, reminder.id, ReminderUpdateRequest(completed=True))


def test_deleting_reminder_keeps_its_notifications(db, make_user):
    user = make_user("client")
    reminder = _remind(db, user, 5)
    created = notification_service.check_due_reminders(db, user, now=NOW, lookahead_minutes=60)
    notification_service.delete_reminder(db, user, reminder.id)
    remaining = notification_service.list_notifications(db, user)
    assert [n.id for n in remaining] == [created[0].id]
    assert remaining[0].reminder_id is None
