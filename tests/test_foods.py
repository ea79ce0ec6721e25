"""Tests for the food catalogue service and CSV ingestion in `data/ingest_foods.py`."""
import io
import uuid

import pytest
from pydantic import ValidationError as SchemaError

from core.exceptions import ConflictError, PermissionDeniedError, ValidationError
from data.ingest_foods import parse_foods_csv, seed_foods_from_csv
from database import models
from schemas.food_schema import FoodCreateRequest, FoodUpdateRequest
from services import food_service

FIXTURE = "data/fixtures/foods.csv"


def _payload(name=None, **overrides):
    data = dict(name=name or f"Food {uuid.uuid4().hex[:8]}", category="fruit",
                calories=52, protein=0.3, carbs=14, fat=0.2, serving_size=100)
    data.update(overrides)
    return FoodCreateRequest(**data)


def test_seeded_catalogue_is_searchable(db):
    found = food_service.search_foods(db, q="chicken")
    assert any(f.name == "Chicken Breast" for f in found)
    grains = food_service.search_foods(db, category="grain")
    assert grains and all(f.category == "grain" for f in grains)


def test_only_nutritionists_manage_foods(db, make_user):
    trainer = make_user("trainer")
    with pytest.raises(PermissionDeniedError) as exc_info:
        food_service.create_food(db, trainer, _payload())
    assert exc_info.value.status_code == 403


def test_duplicate_food_name_conflicts(db, make_user):
    nutritionist = make_user("nutritionist")
    food = food_service.create_food(db, nutritionist, _payload())
    with pytest.raises(ConflictError):
        food_service.create_food(db, nutritionist, _payload(name=food.name))


def test_required_food_fields_cannot_be_cleared(db, make_user):
    nutritionist = make_user("nutritionist")
    food = food_service.create_food(db, nutritionist, _payload())
    with pytest.raises(ValidationError):
        food_service.update_food(db, nutritionist, food.id, FoodUpdateRequest(serving_size=None))


def test_serving_size_must_be_positive():
    with pytest.raises(SchemaError):
        _payload(serving_size=0)


def test_similar_foods_returns_scored_facts(db):
    chicken = db.query(models.Food).filter(models.Food.name == "Chicken Breast").first()
    similar = food_service.similar_foods(db, chicken.id, top_k=3)
    assert 0 < len(similar) <= 3
    assert all(s.id != chicken.id for s in similar)
    assert similar[0].score >= similar[-1].score


def test_parse_foods_csv_skips_invalid_rows():
    rows = parse_foods_csv(FIXTURE)
    names = [r["name"] for r in rows]
    assert "Turkey Breast" in names
    assert "Broken Row" not in names and "Zero Serving" not in names
    quinoa = next(r for r in rows if r["name"].startswith("Quinoa"))
    assert quinoa["restrictions"] == ["vegan", "vegetarian"]
    assert quinoa["category"] == "grain"


def test_parse_foods_csv_requires_columns():
    with pytest.raises(ValidationError):
        parse_foods_csv(io.StringIO("name,calories\nApple,95\n"))


def test_seed_foods_is_idempotent(db):
    first = seed_foods_from_csv(FIXTURE, session=db)
    second = seed_foods_from_csv(FIXTURE, session=db)
    assert second["added"] == 0
    assert second["total"] == first["total"]


def test_import_requires_nutritionist(db, make_user):
    client = make_user("client")
    with pytest.raises(PermissionDeniedError):
        food_service.import_foods(db, client, FIXTURE)
