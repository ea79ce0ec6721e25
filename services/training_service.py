"""Training plan service."""

from datetime import datetime
from typing import List, Optional
from pydantic import TypeAdapter, ValidationError as SchemaError
from sqlalchemy.orm import Session
from core.context import RequestContext
from core.exceptions import DatabaseError, PermissionDeniedError, ValidationError
from core.logger import get_logger
from core.repository import BaseRepository, dump_json, iso, load_json, save
from database import models
from schemas.training_schema import (
    TrainingPlanCreateRequest,
    TrainingPlanResponse,
    TrainingPlanUpdateRequest,
    TrainingRoutine,
)
from services.client_service import client_for_user, get_client_for

logger = get_logger("services.training_service")

_routines_adapter = TypeAdapter(List[TrainingRoutine])


def plan_to_response(plan: models.TrainingPlan) -> TrainingPlanResponse:
    try:
        routines = _routines_adapter.validate_python(load_json(plan.routines, [], "routines"))
    except SchemaError as exc:
        raise DatabaseError(f"Training plan {plan.id} has malformed routines", operation="decode",
                            details={"errors": exc.error_count()})
    return TrainingPlanResponse(
        id=plan.id,
        client_id=plan.client_id,
        trainer_id=plan.trainer_id,
        title=plan.title,
        description=plan.description,
        start_date=iso(plan.start_date),
        end_date=iso(plan.end_date),
        status=plan.status,
        routines=routines,
        created_at=iso(plan.created_at),
        updated_at=iso(plan.updated_at),
    )


def create_plan(db: Session, ctx: RequestContext, payload: TrainingPlanCreateRequest) -> models.TrainingPlan:
    ctx.require_role("trainer", action="create training plans")
    client = get_client_for(db, ctx, payload.client_id)
    if not (ctx.is_admin or client.trainer_id == ctx.user_id):
        raise PermissionDeniedError(f"author training plans for client {client.id}", role=ctx.role)
    trainer_id = client.trainer_id if ctx.is_admin and client.trainer_id else ctx.user_id
    plan = save(db, models.TrainingPlan(
        client_id=client.id,
        trainer_id=trainer_id,
        title=payload.title,
        description=payload.description,
        start_date=payload.start_date,
        end_date=payload.end_date,
        status=payload.status,
        routines=dump_json([r.model_dump() for r in payload.routines]),
    ))
    logger.info("Training plan %s created for client %s", plan.id, client.id)
    return plan


def get_plan_for(db: Session, ctx: RequestContext, plan_id: int) -> models.TrainingPlan:
    plan = BaseRepository(models.TrainingPlan, db, "TrainingPlan").get_or_404(plan_id)
    get_client_for(db, ctx, plan.client_id)
    return plan


def _require_owner(ctx: RequestContext, plan: models.TrainingPlan, action: str) -> None:
    if not (ctx.is_admin or ctx.user_id == plan.trainer_id):
        raise PermissionDeniedError(f"{action} training plan {plan.id}", role=ctx.role)


def update_plan(db: Session, ctx: RequestContext, plan_id: int,
                payload: TrainingPlanUpdateRequest) -> models.TrainingPlan:
    plan = get_plan_for(db, ctx, plan_id)
    _require_owner(ctx, plan, "edit")
    changes = payload.model_dump(exclude_unset=True)
    start = changes.get("start_date", plan.start_date)
    end = changes.get("end_date", plan.end_date)
    if start and end and end < start:
        raise ValidationError("end_date must not be before start_date", field="end_date")
    for name, value in changes.items():
        if name == "routines":
            value = dump_json(value or [])
        elif name in ("title", "start_date", "status") and value is None:
            raise ValidationError(f"{name} cannot be cleared", field=name)
        setattr(plan, name, value)
    plan.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(plan)
    logger.info("Training plan %s updated (%s)", plan.id, ", ".join(sorted(changes)) or "no changes")
    return plan


def delete_plan(db: Session, ctx: RequestContext, plan_id: int) -> None:
    plan = get_plan_for(db, ctx, plan_id)
    _require_owner(ctx, plan, "delete")
    db.delete(plan)
    db.commit()
    logger.info("Training plan %s deleted by %s", plan_id, ctx.user_id)


def list_plans(db: Session, ctx: RequestContext, client_id: Optional[int] = None,
               status: Optional[str] = None) -> List[models.TrainingPlan]:
    query = db.query(models.TrainingPlan)
    if client_id is not None:
        get_client_for(db, ctx, client_id)
        query = query.filter(models.TrainingPlan.client_id == client_id)
    elif ctx.role == "client":
        client = client_for_user(db, ctx.user_id)
        if client is None:
            return []
        query = query.filter(models.TrainingPlan.client_id == client.id)
    elif not ctx.is_admin:
        visible = db.query(models.Client.id).filter(
            (models.Client.nutritionist_id == ctx.user_id) | (models.Client.trainer_id == ctx.user_id))
        query = query.filter(
            (models.TrainingPlan.trainer_id == ctx.user_id) | models.TrainingPlan.client_id.in_(visible))
    if status:
        query = query.filter(models.TrainingPlan.status == status)
    return query.order_by(models.TrainingPlan.start_date.desc(), models.TrainingPlan.id.desc()).all()
