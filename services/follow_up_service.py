"""Nutrition follow-ups: dated check-ins against a client's nutrition plan."""

from datetime import datetime
from typing import List, Optional, Set, Tuple
from pydantic import TypeAdapter, ValidationError as SchemaError
from sqlalchemy.orm import Session
from core.context import RequestContext
from core.exceptions import DatabaseError, PermissionDeniedError, ValidationError
from core.logger import get_logger
from core.repository import BaseRepository, dump_json, iso, load_json, save
from database import models
from schemas.follow_up_schema import (
    CompletedMeal,
    FollowUpCreateRequest,
    FollowUpResponse,
    FollowUpUpdateRequest,
)
from services.client_service import get_client_for
from services.plan_service import decode_days, get_plan_for

logger = get_logger("services.follow_up_service")

_meals_adapter = TypeAdapter(List[CompletedMeal])


def _plan_slots(plan: models.NutritionPlan) -> Set[Tuple[int, str]]:
    """(day, meal type) pairs scheduled by the plan."""
    return {(day.day, meal.type) for day in decode_days(plan) for meal in day.meals}


def follow_up_to_response(db: Session, f: models.NutritionFollowUp) -> FollowUpResponse:
    try:
        meals = _meals_adapter.validate_python(load_json(f.completed_meals, [], "completed_meals"))
    except SchemaError as exc:
        raise DatabaseError(f"Follow-up {f.id} has malformed completed meals", operation="decode",
                            details={"errors": exc.error_count()})
    plan = db.get(models.NutritionPlan, f.plan_id)
    planned = sum(len(day.meals) for day in decode_days(plan)) if plan else 0
    return FollowUpResponse(
        id=f.id,
        client_id=f.client_id,
        plan_id=f.plan_id,
        created_by=f.created_by,
        date=iso(f.date),
        mood=f.mood,
        weight=f.weight,
        notes=f.notes,
        completed_meals=meals,
        planned_meals=planned,
        created_at=iso(f.created_at),
        updated_at=iso(f.updated_at),
    )


def _check_meals(plan: models.NutritionPlan, meals: List[CompletedMeal]) -> str:
    """Validate reported meals against the plan and encode them, dropping repeats."""
    slots = _plan_slots(plan)
    unique = {}
    for meal in meals:
        key = (meal.day, meal.meal_type)
        if key not in slots:
            raise ValidationError(f"Plan {plan.id} has no {meal.meal_type} on day {meal.day}",
                                  field="completed_meals")
        unique.setdefault(key, meal)
    return dump_json([m.model_dump() for m in unique.values()])


def create_follow_up(db: Session, ctx: RequestContext, payload: FollowUpCreateRequest) -> models.NutritionFollowUp:
    """Record a follow-up for a client of the calling nutritionist.

    Raises:
        ValidationError: If the plan belongs to another client or a reported
            meal is not part of the plan.
    """
    ctx.require_role("nutritionist", action="record nutrition follow-ups")
    client = get_client_for(db, ctx, payload.client_id)
    if not (ctx.is_admin or client.nutritionist_id == ctx.user_id):
        raise PermissionDeniedError(f"record follow-ups for client {client.id}", role=ctx.role)
    plan = get_plan_for(db, ctx, payload.plan_id)
    if plan.client_id != client.id:
        raise ValidationError(f"Nutrition plan {plan.id} does not belong to client {client.id}", field="plan_id")

    f = save(db, models.NutritionFollowUp(
        client_id=client.id,
        plan_id=plan.id,
        created_by=ctx.user_id,
        date=payload.date,
        mood=payload.mood,
        weight=payload.weight,
        notes=payload.notes,
        completed_meals=_check_meals(plan, payload.completed_meals),
    ))
    logger.info("Follow-up %s recorded for client %s on plan %s", f.id, client.id, plan.id)
    return f


def get_follow_up_for(db: Session, ctx: RequestContext, follow_up_id: int) -> models.NutritionFollowUp:
    f = BaseRepository(models.NutritionFollowUp, db, "NutritionFollowUp").get_or_404(follow_up_id)
    get_client_for(db, ctx, f.client_id)
    return f


def _require_author(ctx: RequestContext, f: models.NutritionFollowUp, action: str) -> None:
    if not (ctx.is_admin or f.created_by == ctx.user_id):
        raise PermissionDeniedError(f"{action} follow-up {f.id}", role=ctx.role)


def update_follow_up(db: Session, ctx: RequestContext, follow_up_id: int,
                     payload: FollowUpUpdateRequest) -> models.NutritionFollowUp:
    f = get_follow_up_for(db, ctx, follow_up_id)
    _require_author(ctx, f, "edit")
    changes = payload.model_dump(exclude_unset=True)
    for name in ("date", "mood", "completed_meals"):
        if name in changes and changes[name] is None:
            raise ValidationError(f"{name} cannot be cleared", field=name)
    if "completed_meals" in changes:
        plan = BaseRepository(models.NutritionPlan, db, "NutritionPlan").get_or_404(f.plan_id)
        changes["completed_meals"] = _check_meals(plan, payload.completed_meals)
    for name, value in changes.items():
        setattr(f, name, value)
    f.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(f)
    logger.info("Follow-up %s updated", f.id)
    return f


def delete_follow_up(db: Session, ctx: RequestContext, follow_up_id: int) -> None:
    f = get_follow_up_for(db, ctx, follow_up_id)
    _require_author(ctx, f, "delete")
    db.delete(f)
    db.commit()
    logger.info("Follow-up %s deleted by %s", follow_up_id, ctx.user_id)


def list_follow_ups(db: Session, ctx: RequestContext, client_id: int,
                    plan_id: Optional[int] = None) -> List[models.NutritionFollowUp]:
    """A client's follow-ups, most recent first."""
    get_client_for(db, ctx, client_id)
    query = db.query(models.NutritionFollowUp).filter(models.NutritionFollowUp.client_id == client_id)
    if plan_id is not None:
        query = query.filter(models.NutritionFollowUp.plan_id == plan_id)
    return query.order_by(models.NutritionFollowUp.date.desc(), models.NutritionFollowUp.id.desc()).all()
