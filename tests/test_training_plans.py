"""Tests for trainer-authored training plans."""
from datetime import date

import pytest
from pydantic import ValidationError as SchemaError

from core.exceptions import PermissionDeniedError, ValidationError
from schemas.training_schema import TrainingPlanCreateRequest, TrainingPlanUpdateRequest
from services import training_service


def _payload(client_id, **overrides):
    data = dict(client_id=client_id, title="Strength base", start_date=date(2026, 2, 2),
                routines=[{"day": "monday", "exercises": "Squat 4x8"}])
    data.update(overrides)
    return TrainingPlanCreateRequest(**data)


def test_assigned_trainer_creates_and_edits(db, make_user, make_client):
    nutritionist = make_user("nutritionist")
    trainer = make_user("trainer")
    client, client_ctx = make_client(nutritionist, trainer_id=trainer.user_id)
    plan = training_service.create_plan(db, trainer, _payload(client.id))
    res = training_service.plan_to_response(plan)
    assert res.status == "draft"
    assert res.routines[0].day == "monday"

    plan = training_service.update_plan(db, trainer, plan.id, TrainingPlanUpdateRequest(status="active"))
    assert plan.status == "active"
    assert [p.id for p in training_service.list_plans(db, client_ctx)] == [plan.id]
    assert [p.id for p in training_service.list_plans(db, trainer, status="completed")] == []


def test_unassigned_trainer_is_refused(db, make_user, make_client):
    nutritionist = make_user("nutritionist")
    client, _ = make_client(nutritionist)
    with pytest.raises(PermissionDeniedError):
        training_service.create_plan(db, make_user("trainer"), _payload(client.id))


def test_end_date_must_follow_start(db, make_user, make_client):
    with pytest.raises(SchemaError):
        _payload(1, end_date=date(2026, 1, 1))

    trainer = make_user("trainer")
    client, _ = make_client(trainer)
    plan = training_service.create_plan(db, trainer, _payload(client.id))
    with pytest.raises(ValidationError):
        training_service.update_plan(db, trainer, plan.id, TrainingPlanUpdateRequest(end_date=date(2026, 1, 1)))


def test_nutritionist_cannot_edit_training_plan(db, make_user, make_client):
    trainer = make_user("trainer")
    nutritionist = make_user("nutritionist")
    client, _ = make_client(nutritionist, trainer_id=trainer.user_id)
    plan = training_service.create_plan(db, trainer, _payload(client.id))
    assert training_service.get_plan_for(db, nutritionist, plan.id).id == plan.id
    with pytest.raises(PermissionDeniedError):
        training_service.delete_plan(db, nutritionist, plan.id)
