"""Tests for nutrition plan authoring and the totals computed for it."""
import uuid
from datetime import date

import pytest

from core.exceptions import DatabaseError, PermissionDeniedError, ValidationError
from schemas.food_schema import FoodCreateRequest, FoodUpdateRequest
from schemas.plan_schema import (
    Meal,
    NutrientGoals,
    NutritionPlanCreateRequest,
    NutritionPlanUpdateRequest,
)
from services import food_service, plan_service


@pytest.fixture
def nutritionist(make_user):
    return make_user("nutritionist")


@pytest.fixture
def chicken(db, nutritionist):
    return food_service.create_food(db, nutritionist, FoodCreateRequest(
        name=f"Test Chicken {uuid.uuid4().hex[:6]}", category="protein",
        calories=165, protein=31, carbs=0, fat=3.6, serving_size=100))


def _day(day, *meals):
    return {"day": day, "meals": list(meals)}


def _meal(kind, *entries):
    return {"type": kind, "foods": [{"food_id": fid, "quantity": qty} for fid, qty in entries]}


def _create(db, ctx, client, days, **extra):
    payload = NutritionPlanCreateRequest(client_id=client.id, title="Cutting phase",
                                         start_date=date(2026, 1, 5), daily_plans=days, **extra)
    return plan_service.create_plan(db, ctx, payload)


def test_plan_response_carries_rounded_meal_and_day_totals(db, nutritionist, make_client, chicken):
    client, _ = make_client(nutritionist)
    plan = _create(db, nutritionist, client, [_day(1, _meal("lunch", (chicken.id, 150)), _meal("dinner"))])
    res = plan_service.plan_to_response(db, plan)

    day = res.daily_plans[0]
    assert day.total_calories == 248
    assert day.total_protein == 46.5
    assert day.total_fat == 5.4
    assert day.meals[0].totals.calories == 248
    assert day.meals[1].totals.calories == 0
    assert plan_service.stored_day_totals(plan)[0]["calories"] == 247.5


def test_caller_supplied_totals_are_ignored(db, nutritionist, make_client, chicken):
    client, _ = make_client(nutritionist)
    day = _day(1, _meal("lunch", (chicken.id, 100)))
    day["total_calories"] = 9999
    plan = _create(db, nutritionist, client, [day])
    assert plan_service.stored_day_totals(plan)[0]["calories"] == 165


def test_food_edit_is_reflected_on_next_read_and_save(db, nutritionist, make_client, chicken):
    client, _ = make_client(nutritionist)
    plan = _create(db, nutritionist, client, [_day(1, _meal("lunch", (chicken.id, 100)))])
    food_service.update_food(db, nutritionist, chicken.id, FoodUpdateRequest(calories=200))

    assert plan_service.plan_to_response(db, plan).daily_plans[0].total_calories == 200

    plan = plan_service.update_plan(db, nutritionist, plan.id, NutritionPlanUpdateRequest(notes="refresh"))
    assert plan_service.stored_day_totals(plan)[0]["calories"] == 200


def test_unknown_food_is_rejected_on_write(db, nutritionist, make_client):
    client, _ = make_client(nutritionist)
    with pytest.raises(ValidationError) as exc_info:
        _create(db, nutritionist, client, [_day(1, _meal("lunch", (987654, 100)))])
    assert exc_info.value.status_code == 400
    assert "987654" in exc_info.value.message


def test_deleted_food_is_skipped_when_rendering(db, nutritionist, make_client, chicken):
    client, _ = make_client(nutritionist)
    other = food_service.create_food(db, nutritionist, FoodCreateRequest(
        name=f"Test Rice {uuid.uuid4().hex[:6]}", category="grain",
        calories=112, protein=2.3, carbs=24, fat=0.8, serving_size=100))
    plan = _create(db, nutritionist, client, [_day(1, _meal("lunch", (chicken.id, 100), (other.id, 200)))])
    food_service.delete_food(db, nutritionist, other.id)

    res = plan_service.plan_to_response(db, plan)
    assert res.daily_plans[0].total_calories == 165
    assert len(res.daily_plans[0].meals[0].foods) == 2


def test_average_daily_totals_and_goal_progress(db, nutritionist, make_client, chicken):
    client, _ = make_client(nutritionist)
    days = [_day(1, _meal("lunch", (chicken.id, 100))), _day(2, _meal("lunch", (chicken.id, 300)))]
    plan = _create(db, nutritionist, client, days, nutrient_goals=NutrientGoals(calories=330, protein=124))
    res = plan_service.plan_to_response(db, plan)
    assert res.average_daily_totals.calories == 330
    assert res.goal_progress == {"calories": 1.0, "protein": 0.5}


def test_only_the_owning_nutritionist_edits(db, nutritionist, make_user, make_client, chicken):
    client, client_ctx = make_client(nutritionist)
    plan = _create(db, nutritionist, client, [])
    other = make_user("nutritionist")
    with pytest.raises(PermissionDeniedError):
        plan_service.update_plan(db, other, plan.id, NutritionPlanUpdateRequest(title="Hijacked"))
    with pytest.raises(PermissionDeniedError):
        plan_service.update_plan(db, client_ctx, plan.id, NutritionPlanUpdateRequest(title="Mine now"))


def test_trainer_cannot_author_nutrition_plans(db, nutritionist, make_user, make_client):
    trainer = make_user("trainer")
    client, _ = make_client(nutritionist, trainer_id=trainer.user_id)
    with pytest.raises(PermissionDeniedError):
        _create(db, trainer, client, [])


def test_client_sees_only_own_active_plans(db, nutritionist, make_client, chicken):
    client, client_ctx = make_client(nutritionist)
    active = _create(db, nutritionist, client, [])
    _create(db, nutritionist, client, [], is_active=False)
    mine = plan_service.my_active_plans(db, client_ctx)
    assert [p.id for p in mine] == [active.id]


def test_preview_tolerates_unknown_foods(db, chicken):
    meals = [Meal(type="lunch", foods=[{"food_id": chicken.id, "quantity": 150},
                                       {"food_id": 987654, "quantity": 100}]),
             Meal(type="snack")]
    res = plan_service.preview_meals(db, meals)
    assert res.meals[0].totals.calories == 247.5
    assert res.meals[0].display.calories == 248
    assert res.day_display.calories == 248


def test_malformed_stored_days_raise_database_error(db, nutritionist, make_client):
    client, _ = make_client(nutritionist)
    plan = _create(db, nutritionist, client, [])
    plan.daily_plans = '[{"day": "not a number", "meals": 3}]'
    db.commit()
    with pytest.raises(DatabaseError):
        plan_service.plan_to_response(db, plan)


def test_food_changes_refresh_cached_totals_without_a_plan_save(db, nutritionist, make_client, chicken):
    client, _ = make_client(nutritionist)
    rice = food_service.create_food(db, nutritionist, FoodCreateRequest(
        name=f"Test Rice {uuid.uuid4().hex[:6]}", category="grain",
        calories=112, protein=2.3, carbs=24, fat=0.8, serving_size=100))
    plan = _create(db, nutritionist, client, [_day(1, _meal("lunch", (chicken.id, 100), (rice.id, 100)))])
    untouched = _create(db, nutritionist, client, [_day(1, _meal("lunch", (chicken.id, 100)))])
    assert plan_service.stored_day_totals(plan)[0]["calories"] == 277

    food_service.update_food(db, nutritionist, rice.id, FoodUpdateRequest(calories=130))
    db.refresh(plan)
    assert plan_service.stored_day_totals(plan)[0]["calories"] == 295

    food_service.delete_food(db, nutritionist, rice.id)
    db.refresh(plan)
    db.refresh(untouched)
    assert plan_service.stored_day_totals(plan)[0]["calories"] == 165
    assert plan_service.stored_day_totals(untouched)[0]["calories"] == 165


def test_refresh_skips_plans_with_corrupt_days(db, nutritionist, make_client, chicken):
    client, _ = make_client(nutritionist)
    broken = _create(db, nutritionist, client, [])
    broken.daily_plans = "{not json"
    db.commit()
    good = _create(db, nutritionist, client, [_day(1, _meal("lunch", (chicken.id, 100)))])
    assert plan_service.refresh_plan_totals(db, chicken.id) >= 1
    db.refresh(good)
    assert plan_service.stored_day_totals(good)[0]["calories"] == 165
