"""Food catalogue service: CRUD, search and lookup snapshots for aggregation."""

from typing import Dict, Iterable, List, Optional
from sqlalchemy.orm import Session
from core.context import RequestContext
from core.exceptions import ConflictError, ValidationError
from core.logger import get_logger
from core.repository import BaseRepository, dump_json, load_json, save
from database import models
from data.ingest_foods import seed_foods_from_csv
from schemas.food_schema import FoodCreateRequest, FoodFact, FoodImportResponse, FoodUpdateRequest, SimilarFood
from services import plan_service
from services.food_recommender import food_recommender

logger = get_logger("services.food_service")


def food_to_fact(food: models.Food) -> FoodFact:
    return FoodFact(
        id=food.id,
        name=food.name,
        category=food.category,
        calories=food.calories,
        protein=food.protein,
        carbs=food.carbs,
        fat=food.fat,
        fiber=food.fiber,
        sugar=food.sugar,
        sodium=food.sodium,
        serving_size=food.serving_size,
        serving_unit=food.serving_unit,
        description=food.description,
        restrictions=load_json(food.restrictions, [], "restrictions"),
    )


def _ensure_unique_name(db: Session, name: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(models.Food).filter(models.Food.name == name)
    if exclude_id is not None:
        query = query.filter(models.Food.id != exclude_id)
    if query.first():
        raise ConflictError(f"A food named '{name}' already exists", field="name")


def create_food(db: Session, ctx: RequestContext, payload: FoodCreateRequest) -> models.Food:
    ctx.require_role("nutritionist", action="add foods")
    name = payload.name.strip()
    _ensure_unique_name(db, name)
    data = payload.model_dump()
    data["name"] = name
    data["restrictions"] = dump_json(data["restrictions"])
    food = save(db, models.Food(**data))
    logger.info("Food '%s' added to catalogue (id=%s) by %s", food.name, food.id, ctx.user_id)
    return food


def update_food(db: Session, ctx: RequestContext, food_id: int, payload: FoodUpdateRequest) -> models.Food:
    ctx.require_role("nutritionist", action="edit foods")
    repo = BaseRepository(models.Food, db, "Food")
    food = repo.get_or_404(food_id)
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("name") is not None:
        changes["name"] = changes["name"].strip()
        _ensure_unique_name(db, changes["name"], exclude_id=food.id)
    for name, value in changes.items():
        if value is None and name in ("name", "category", "calories", "protein", "carbs", "fat",
                                       "serving_size", "serving_unit"):
            raise ValidationError(f"{name} cannot be cleared", field=name)
        if name == "restrictions":
            value = dump_json(value or [])
        setattr(food, name, value)
    food = repo.update(food)
    logger.info("Food %s updated (%s)", food.id, ", ".join(sorted(changes)) or "no changes")
    plan_service.refresh_plan_totals(db, food.id)
    return food


def delete_food(db: Session, ctx: RequestContext, food_id: int) -> None:
    """Remove a food. Plans that reference it keep their entries; the
    aggregation skips the now-unresolved reference."""
    ctx.require_role("nutritionist", action="delete foods")
    repo = BaseRepository(models.Food, db, "Food")
    repo.delete(repo.get_or_404(food_id))
    logger.info("Food %s deleted by %s", food_id, ctx.user_id)
    plan_service.refresh_plan_totals(db, food_id)


def search_foods(db: Session, q: Optional[str] = None, category: Optional[str] = None,
                 skip: int = 0, limit: int = 100) -> List[models.Food]:
    query = db.query(models.Food)
    if q:
        query = query.filter(models.Food.name.ilike(f"%{q.strip()}%"))
    if category:
        query = query.filter(models.Food.category == category)
    return query.order_by(models.Food.name).offset(skip).limit(limit).all()


def food_lookup(db: Session, food_ids: Optional[Iterable[int]] = None) -> Dict[int, models.Food]:
    """Snapshot of catalogue foods keyed by id, for one aggregation pass.

    When `food_ids` is given only those foods are loaded.
    """
    query = db.query(models.Food)
    if food_ids is not None:
        ids = {int(i) for i in food_ids}
        if not ids:
            return {}
        query = query.filter(models.Food.id.in_(ids))
    return {food.id: food for food in query.all()}


def similar_foods(db: Session, food_id: int, top_k: int = 5, same_category: bool = False) -> List[SimilarFood]:
    """Rank catalogue foods by nutrient-profile similarity to `food_id`."""
    BaseRepository(models.Food, db, "Food").get_or_404(food_id)
    ranked = food_recommender.recommend_similar(db, food_id, top_k=top_k, same_category=same_category)
    foods = food_lookup(db, [fid for fid, _ in ranked])
    return [SimilarFood(**food_to_fact(foods[fid]).model_dump(), score=round(score, 4))
            for fid, score in ranked if fid in foods]


def import_foods(db: Session, ctx: RequestContext, source) -> FoodImportResponse:
    """Add the foods of a CSV upload to the catalogue, skipping known names."""
    ctx.require_role("nutritionist", action="import foods")
    result = seed_foods_from_csv(source, session=db)
    logger.info("Food import by %s added %s foods", ctx.user_id, result["added"])
    return FoodImportResponse(**result)
