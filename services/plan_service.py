"""Nutrition plan service.

Plans persist their days as JSON. The per-day totals written alongside are a
cache of :mod:`services.nutrient_aggregator`: they are recomputed from the
current food catalogue whenever a plan is saved or rendered, and whenever a food
it uses is edited or deleted, so a response never shows totals computed against
food data that has since changed.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional
from pydantic import TypeAdapter, ValidationError as SchemaError
from sqlalchemy.orm import Session
from core.context import RequestContext
from core.exceptions import DatabaseError, PermissionDeniedError, ValidationError
from core.logger import get_logger
from core.repository import BaseRepository, dump_json, iso, load_json, save
from database import models
from schemas.plan_schema import (
    DailyPlan,
    DailyPlanOut,
    Hydration,
    Meal,
    MealOut,
    MealPreview,
    NutrientGoals,
    NutrientTotalsOut,
    NutritionPlanCreateRequest,
    NutritionPlanResponse,
    NutritionPlanUpdateRequest,
    PlanPreviewResponse,
    SupplementDose,
)
from services.client_service import client_for_user, get_client_for
from services import food_service, library_service
from services.nutrient_aggregator import (
    NUTRIENT_FIELDS,
    NutrientTotals,
    ZERO_TOTALS,
    compute_day_totals,
    compute_meal_totals,
    round_totals,
)

logger = get_logger("services.plan_service")

_days_adapter = TypeAdapter(List[DailyPlan])
_supplements_adapter = TypeAdapter(Dict[str, SupplementDose])

LIST_FIELDS = ("restrictions", "preferences", "allergies", "objectives")


def _totals_out(totals: NutrientTotals) -> NutrientTotalsOut:
    return NutrientTotalsOut(**totals.to_dict())


def referenced_food_ids(days: Iterable[DailyPlan]) -> set:
    return {entry.food_id for day in days for meal in day.meals for entry in meal.foods}


def decode_days(plan: models.NutritionPlan) -> List[DailyPlan]:
    """Validate a plan's stored days.

    Raises:
        DatabaseError: If the stored JSON does not match the day/meal shape.
    """
    raw = load_json(plan.daily_plans, [], "daily_plans")
    try:
        return _days_adapter.validate_python(raw)
    except SchemaError as exc:
        logger.error("Nutrition plan %s has malformed daily_plans: %s", plan.id, exc)
        raise DatabaseError(
            f"Nutrition plan {plan.id} has malformed daily plans",
            operation="decode",
            details={"errors": exc.error_count()},
        )


def encode_days(days: List[DailyPlan], foods) -> str:
    """Serialize days with freshly computed, unrounded cached totals."""
    stored = []
    for day in days:
        totals = compute_day_totals(day.meals, foods)
        entry = day.model_dump()
        entry.update({f"total_{name}": getattr(totals, name) for name in NUTRIENT_FIELDS})
        stored.append(entry)
    return dump_json(stored)


def render_days(days: List[DailyPlan], foods) -> List[DailyPlanOut]:
    """Attach display-rounded meal and day totals to each day."""
    rendered = []
    for day in days:
        meals_out = []
        day_totals = ZERO_TOTALS
        for meal in day.meals:
            meal_totals = compute_meal_totals(meal.foods, foods)
            day_totals = day_totals + meal_totals
            meals_out.append(MealOut(**meal.model_dump(), totals=_totals_out(round_totals(meal_totals))))
        shown = round_totals(day_totals)
        rendered.append(DailyPlanOut(
            day=day.day,
            meals=meals_out,
            total_calories=shown.calories,
            total_protein=shown.protein,
            total_carbs=shown.carbs,
            total_fat=shown.fat,
        ))
    return rendered


def average_daily_totals(days: List[DailyPlan], foods) -> NutrientTotals:
    """Unrounded mean of the day totals; zeros for a plan without days."""
    if not days:
        return ZERO_TOTALS
    total = ZERO_TOTALS
    for day in days:
        total = total + compute_day_totals(day.meals, foods)
    n = len(days)
    return NutrientTotals(**{name: getattr(total, name) / n for name in NUTRIENT_FIELDS})


def goal_progress(average: NutrientTotals, goals: Optional[NutrientGoals]) -> Optional[Dict[str, float]]:
    """Ratio of the average day to each positive nutrient goal (1.0 = on target)."""
    if goals is None:
        return None
    progress = {}
    for name in NUTRIENT_FIELDS:
        goal = getattr(goals, name)
        if goal:
            progress[name] = round(getattr(average, name) / goal, 2)
    return progress or None


def plan_to_response(db: Session, plan: models.NutritionPlan) -> NutritionPlanResponse:
    days = decode_days(plan)
    foods = food_service.food_lookup(db, referenced_food_ids(days))
    goals_raw = load_json(plan.nutrient_goals, None, "nutrient_goals")
    hydration_raw = load_json(plan.hydration, None, "hydration")
    try:
        goals = NutrientGoals(**goals_raw) if goals_raw else None
        hydration = Hydration(**hydration_raw) if hydration_raw else None
        supplements = _supplements_adapter.validate_python(load_json(plan.supplements, {}, "supplements"))
    except SchemaError as exc:
        raise DatabaseError(f"Nutrition plan {plan.id} has malformed settings", operation="decode",
                            details={"errors": exc.error_count()})
    average = average_daily_totals(days, foods)
    return NutritionPlanResponse(
        id=plan.id,
        client_id=plan.client_id,
        nutritionist_id=plan.nutritionist_id,
        title=plan.title,
        description=plan.description,
        start_date=iso(plan.start_date),
        end_date=iso(plan.end_date),
        is_active=plan.is_active,
        daily_plans=render_days(days, foods),
        average_daily_totals=_totals_out(round_totals(average)),
        goal_progress=goal_progress(average, goals),
        nutrient_goals=goals,
        hydration=hydration,
        supplements=supplements,
        notes=plan.notes,
        created_at=iso(plan.created_at),
        updated_at=iso(plan.updated_at),
        **{name: load_json(getattr(plan, name), [], name) for name in LIST_FIELDS},
    )


def _foods_for_write(db: Session, days: List[DailyPlan]):
    ids = referenced_food_ids(days)
    foods = food_service.food_lookup(db, ids)
    missing = sorted(ids - set(foods))
    if missing:
        raise ValidationError(f"Unknown food ids: {missing}", field="daily_plans")
    return foods


def _check_supplements(db: Session, supplements: Dict[str, SupplementDose]) -> None:
    missing = library_service.missing_supplements(
        db, [dose.supplement_id for dose in supplements.values() if dose.supplement_id is not None])
    if missing:
        raise ValidationError(f"Unknown supplement ids: {missing}", field="supplements")


def _can_author_for(ctx: RequestContext, client: models.Client) -> bool:
    return ctx.is_admin or (ctx.role == "nutritionist" and client.nutritionist_id == ctx.user_id)


def create_plan(db: Session, ctx: RequestContext, payload: NutritionPlanCreateRequest) -> models.NutritionPlan:
    """Create a plan for a client assigned to the calling nutritionist."""
    ctx.require_role("nutritionist", action="create nutrition plans")
    client = get_client_for(db, ctx, payload.client_id)
    if not _can_author_for(ctx, client):
        raise PermissionDeniedError(f"author plans for client {client.id}", role=ctx.role)
    foods = _foods_for_write(db, payload.daily_plans)
    _check_supplements(db, payload.supplements)

    nutritionist_id = ctx.user_id
    if ctx.is_admin and client.nutritionist_id is not None:
        nutritionist_id = client.nutritionist_id

    plan = models.NutritionPlan(
        client_id=client.id,
        nutritionist_id=nutritionist_id,
        title=payload.title,
        description=payload.description,
        start_date=payload.start_date,
        end_date=payload.end_date,
        is_active=payload.is_active,
        daily_plans=encode_days(payload.daily_plans, foods),
        nutrient_goals=dump_json(payload.nutrient_goals.model_dump() if payload.nutrient_goals else None),
        hydration=dump_json(payload.hydration.model_dump() if payload.hydration else None),
        supplements=dump_json({k: v.model_dump() for k, v in payload.supplements.items()}),
        notes=payload.notes,
        **{name: dump_json(getattr(payload, name)) for name in LIST_FIELDS},
    )
    plan = save(db, plan)
    logger.info("Nutrition plan %s created for client %s with %s days", plan.id, client.id,
                len(payload.daily_plans))
    return plan


def get_plan_for(db: Session, ctx: RequestContext, plan_id: int) -> models.NutritionPlan:
    plan = BaseRepository(models.NutritionPlan, db, "NutritionPlan").get_or_404(plan_id)
    get_client_for(db, ctx, plan.client_id)
    return plan


def _require_owner(ctx: RequestContext, plan: models.NutritionPlan, action: str) -> None:
    if not (ctx.is_admin or ctx.user_id == plan.nutritionist_id):
        raise PermissionDeniedError(f"{action} nutrition plan {plan.id}", role=ctx.role)


def update_plan(db: Session, ctx: RequestContext, plan_id: int,
                payload: NutritionPlanUpdateRequest) -> models.NutritionPlan:
    """Apply a partial update; only the owning nutritionist (or an admin) may edit."""
    plan = get_plan_for(db, ctx, plan_id)
    _require_owner(ctx, plan, "edit")
    changes = payload.model_dump(exclude_unset=True)

    start = changes.get("start_date", plan.start_date)
    end = changes.get("end_date", plan.end_date)
    if start and end and end < start:
        raise ValidationError("end_date must not be before start_date", field="end_date")

    for name, value in changes.items():
        if name == "daily_plans":
            days = payload.daily_plans or []
            value = encode_days(days, _foods_for_write(db, days))
        elif name == "supplements":
            _check_supplements(db, payload.supplements or {})
            value = dump_json({k: v.model_dump() for k, v in (payload.supplements or {}).items()})
        elif name in ("nutrient_goals", "hydration"):
            value = dump_json(value)
        elif name in LIST_FIELDS:
            value = dump_json(value or [])
        elif name in ("title", "start_date", "is_active") and value is None:
            raise ValidationError(f"{name} cannot be cleared", field=name)
        setattr(plan, name, value)

    if "daily_plans" not in changes:
        days = decode_days(plan)
        plan.daily_plans = encode_days(days, food_service.food_lookup(db, referenced_food_ids(days)))
    plan.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(plan)
    logger.info("Nutrition plan %s updated (%s)", plan.id, ", ".join(sorted(changes)) or "no changes")
    return plan


def delete_plan(db: Session, ctx: RequestContext, plan_id: int) -> None:
    """Delete a plan together with the follow-ups recorded against it."""
    plan = get_plan_for(db, ctx, plan_id)
    _require_owner(ctx, plan, "delete")
    db.query(models.NutritionFollowUp).filter(models.NutritionFollowUp.plan_id == plan.id).delete(
        synchronize_session=False)
    db.delete(plan)
    db.commit()
    logger.info("Nutrition plan %s deleted by %s", plan_id, ctx.user_id)


def list_plans(db: Session, ctx: RequestContext, client_id: Optional[int] = None,
               active: Optional[bool] = None) -> List[models.NutritionPlan]:
    """Plans visible to the caller, optionally for one client or by active flag."""
    query = db.query(models.NutritionPlan)
    if client_id is not None:
        get_client_for(db, ctx, client_id)
        query = query.filter(models.NutritionPlan.client_id == client_id)
    elif ctx.role == "client":
        client = client_for_user(db, ctx.user_id)
        if client is None:
            return []
        query = query.filter(models.NutritionPlan.client_id == client.id)
    elif not ctx.is_admin:
        visible = db.query(models.Client.id).filter(
            (models.Client.nutritionist_id == ctx.user_id) | (models.Client.trainer_id == ctx.user_id))
        query = query.filter(
            (models.NutritionPlan.nutritionist_id == ctx.user_id) | models.NutritionPlan.client_id.in_(visible))
    if active is not None:
        query = query.filter(models.NutritionPlan.is_active == active)
    return query.order_by(models.NutritionPlan.created_at.desc(), models.NutritionPlan.id.desc()).all()


def my_active_plans(db: Session, ctx: RequestContext) -> List[models.NutritionPlan]:
    """Active plans of the calling client."""
    ctx.require_role("client", action="view own plans")
    return list_plans(db, ctx, active=True)


def preview_meals(db: Session, meals: List[Meal]) -> PlanPreviewResponse:
    """Live totals for meals being edited; unknown foods are skipped, not rejected."""
    ids = {entry.food_id for meal in meals for entry in meal.foods}
    foods = food_service.food_lookup(db, ids)
    previews = []
    for meal in meals:
        totals = compute_meal_totals(meal.foods, foods)
        previews.append(MealPreview(type=meal.type, totals=_totals_out(totals),
                                    display=_totals_out(round_totals(totals))))
    day = compute_day_totals(meals, foods)
    return PlanPreviewResponse(meals=previews, day_totals=_totals_out(day),
                               day_display=_totals_out(round_totals(day)))


def stored_day_totals(plan: models.NutritionPlan) -> List[Dict[str, Any]]:
    """The cached per-day totals exactly as last written."""
    raw = load_json(plan.daily_plans, [], "daily_plans")
    return [{name: day.get(f"total_{name}") for name in NUTRIENT_FIELDS} for day in raw]


def refresh_plan_totals(db: Session, food_id: int) -> int:
    """Recompute the cached day totals of every plan that uses `food_id`.

    Called after a catalogue food is edited or deleted. Plans whose stored
    days cannot be decoded are logged and left alone. Returns the number of
    plans rewritten.
    """
    refreshed = 0
    for plan in db.query(models.NutritionPlan).all():
        try:
            days = decode_days(plan)
        except DatabaseError:
            logger.error("Skipping totals refresh of nutrition plan %s", plan.id)
            continue
        ids = referenced_food_ids(days)
        if food_id not in ids:
            continue
        plan.daily_plans = encode_days(days, food_service.food_lookup(db, ids))
        refreshed += 1
    if refreshed:
        db.commit()
        logger.info("Refreshed cached totals of %s nutrition plans after food %s changed", refreshed, food_id)
    return refreshed
