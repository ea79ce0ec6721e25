"""Tests for nutrition follow-ups recorded against a plan."""
import uuid
from datetime import date

import pytest
from pydantic import ValidationError as SchemaError

from core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from schemas.follow_up_schema import FollowUpCreateRequest, FollowUpUpdateRequest
from schemas.food_schema import FoodCreateRequest
from schemas.plan_schema import NutritionPlanCreateRequest
from services import follow_up_service, food_service, plan_service


@pytest.fixture
def nutritionist(make_user):
    return make_user("nutritionist")


@pytest.fixture
def planned(db, nutritionist, make_client):
    """A client with a two-day plan: breakfast and lunch on day 1, lunch on day 2."""
    oats = food_service.create_food(db, nutritionist, FoodCreateRequest(
        name=f"Follow-up Oats {uuid.uuid4().hex[:6]}", category="grain",
        calories=379, protein=13, carbs=68, fat=6.5, serving_size=100))
    entry = {"food_id": oats.id, "quantity": 50}
    client, client_ctx = make_client(nutritionist)
    plan = plan_service.create_plan(db, nutritionist, NutritionPlanCreateRequest(
        client_id=client.id, title="Steady week", start_date=date(2026, 3, 2),
        daily_plans=[{"day": 1, "meals": [{"type": "breakfast", "foods": [entry]}, {"type": "lunch"}]},
                     {"day": 2, "meals": [{"type": "lunch", "foods": [entry]}]}]))
    return client, client_ctx, plan


def _payload(client, plan, **overrides):
    data = dict(client_id=client.id, plan_id=plan.id, date=date(2026, 3, 3), mood="good", weight=71.2,
                completed_meals=[{"day": 1, "meal_type": "breakfast"}, {"day": 1, "meal_type": "breakfast"}])
    data.update(overrides)
    return FollowUpCreateRequest(**data)


def test_record_follow_up_against_plan(db, nutritionist, planned):
    client, client_ctx, plan = planned
    f = follow_up_service.create_follow_up(db, nutritionist, _payload(client, plan))
    res = follow_up_service.follow_up_to_response(db, f)
    assert res.mood == "good"
    assert [(m.day, m.meal_type) for m in res.completed_meals] == [(1, "breakfast")]
    assert res.planned_meals == 3
    assert res.created_by == nutritionist.user_id

    assert [x.id for x in follow_up_service.list_follow_ups(db, client_ctx, client.id)] == [f.id]
    assert follow_up_service.list_follow_ups(db, nutritionist, client.id, plan_id=plan.id + 10 ** 6) == []


def test_meal_must_exist_in_plan(db, nutritionist, planned):
    client, _, plan = planned
    with pytest.raises(ValidationError) as exc_info:
        follow_up_service.create_follow_up(db, nutritionist, _payload(
            client, plan, completed_meals=[{"day": 2, "meal_type": "dinner"}]))
    assert exc_info.value.details["field"] == "completed_meals"


def test_plan_must_belong_to_client(db, nutritionist, make_client, planned):
    _, _, plan = planned
    other, _ = make_client(nutritionist)
    with pytest.raises(ValidationError):
        follow_up_service.create_follow_up(db, nutritionist, _payload(other, plan, completed_meals=[]))


def test_mood_is_restricted():
    with pytest.raises(SchemaError):
        FollowUpCreateRequest(client_id=1, plan_id=1, date=date(2026, 3, 3), mood="great")


def test_only_assigned_nutritionist_records_and_author_edits(db, nutritionist, make_user, planned):
    client, client_ctx, plan = planned
    with pytest.raises(PermissionDeniedError):
        follow_up_service.create_follow_up(db, client_ctx, _payload(client, plan))
    with pytest.raises(PermissionDeniedError):
        follow_up_service.create_follow_up(db, make_user("nutritionist"), _payload(client, plan))

    f = follow_up_service.create_follow_up(db, nutritionist, _payload(client, plan))
    admin = make_user("admin")
    updated = follow_up_service.update_follow_up(db, admin, f.id, FollowUpUpdateRequest(
        mood="bad", completed_meals=[{"day": 2, "meal_type": "lunch"}]))
    assert updated.mood == "bad"
    with pytest.raises(ValidationError):
        follow_up_service.update_follow_up(db, nutritionist, f.id, FollowUpUpdateRequest(mood=None))


def test_deleting_plan_removes_its_follow_ups(db, nutritionist, planned):
    client, _, plan = planned
    f = follow_up_service.create_follow_up(db, nutritionist, _payload(client, plan))
    plan_service.delete_plan(db, nutritionist, plan.id)
    with pytest.raises(NotFoundError):
        follow_up_service.get_follow_up_for(db, nutritionist, f.id)
