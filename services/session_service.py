"""Group nutrition session scheduling."""

from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session
from core.context import RequestContext
from core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from core.logger import get_logger
from core.repository import BaseRepository, dump_json, iso, load_json, save
from database import models
from schemas.session_schema import (
    NutritionSessionCreateRequest,
    NutritionSessionResponse,
    NutritionSessionUpdateRequest,
)
from services.client_service import client_for_user

logger = get_logger("services.session_service")


def duration_minutes(s: models.NutritionSession) -> int:
    return int((s.end_datetime - s.start_datetime).total_seconds() // 60)


def session_to_response(s: models.NutritionSession) -> NutritionSessionResponse:
    return NutritionSessionResponse(
        id=s.id,
        nutritionist_id=s.nutritionist_id,
        title=s.title,
        description=s.description,
        start_datetime=iso(s.start_datetime),
        end_datetime=iso(s.end_datetime),
        duration_minutes=duration_minutes(s),
        meeting_link=s.meeting_link,
        max_patients=s.max_patients,
        status=s.status,
        patients=load_json(s.patients, [], "patients"),
        created_at=iso(s.created_at),
        updated_at=iso(s.updated_at),
    )


def _check_patients(db: Session, patients: List[int], max_patients: int) -> List[int]:
    unique = list(dict.fromkeys(patients))
    if len(unique) > max_patients:
        raise ValidationError(f"Session allows at most {max_patients} patients", field="patients")
    found = {cid for (cid,) in db.query(models.Client.id).filter(models.Client.id.in_(unique)).all()} if unique else set()
    missing = [cid for cid in unique if cid not in found]
    if missing:
        raise NotFoundError("Client", missing[0])
    return unique


def create_session(db: Session, ctx: RequestContext, payload: NutritionSessionCreateRequest) -> models.NutritionSession:
    ctx.require_role("nutritionist", action="schedule nutrition sessions")
    patients = _check_patients(db, payload.patients, payload.max_patients)
    s = save(db, models.NutritionSession(
        nutritionist_id=ctx.user_id,
        title=payload.title,
        description=payload.description,
        start_datetime=payload.start_datetime,
        end_datetime=payload.end_datetime,
        meeting_link=payload.meeting_link,
        max_patients=payload.max_patients,
        status=payload.status,
        patients=dump_json(patients),
    ))
    logger.info("Session %s scheduled for %s with %s patients", s.id, iso(s.start_datetime), len(patients))
    return s


def _visible(ctx: RequestContext, db: Session, s: models.NutritionSession) -> bool:
    if ctx.is_admin or s.nutritionist_id == ctx.user_id:
        return True
    if ctx.role == "client":
        client = client_for_user(db, ctx.user_id)
        return client is not None and client.id in load_json(s.patients, [], "patients")
    return False


def get_session_for(db: Session, ctx: RequestContext, session_id: int) -> models.NutritionSession:
    s = BaseRepository(models.NutritionSession, db, "NutritionSession").get_or_404(session_id)
    if not _visible(ctx, db, s):
        raise PermissionDeniedError(f"view session {session_id}", role=ctx.role)
    return s


def _require_owner(ctx: RequestContext, s: models.NutritionSession, action: str) -> None:
    if not (ctx.is_admin or s.nutritionist_id == ctx.user_id):
        raise PermissionDeniedError(f"{action} session {s.id}", role=ctx.role)


def update_session(db: Session, ctx: RequestContext, session_id: int,
                   payload: NutritionSessionUpdateRequest) -> models.NutritionSession:
    s = get_session_for(db, ctx, session_id)
    _require_owner(ctx, s, "edit")
    changes = payload.model_dump(exclude_unset=True)
    for name in ("title", "description", "start_datetime", "end_datetime", "max_patients", "status", "patients"):
        if name in changes and changes[name] is None:
            raise ValidationError(f"{name} cannot be cleared", field=name)

    start = changes.get("start_datetime", s.start_datetime)
    end = changes.get("end_datetime", s.end_datetime)
    if end <= start:
        raise ValidationError("end_datetime must be after start_datetime", field="end_datetime")
    max_patients = changes.get("max_patients", s.max_patients)
    patients = changes.get("patients", load_json(s.patients, [], "patients"))
    changes["patients"] = dump_json(_check_patients(db, patients, max_patients))

    for name, value in changes.items():
        setattr(s, name, value)
    s.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(s)
    logger.info("Session %s updated", s.id)
    return s


def delete_session(db: Session, ctx: RequestContext, session_id: int) -> None:
    s = get_session_for(db, ctx, session_id)
    _require_owner(ctx, s, "delete")
    db.delete(s)
    db.commit()
    logger.info("Session %s deleted by %s", session_id, ctx.user_id)


def list_sessions(db: Session, ctx: RequestContext, status: Optional[str] = None) -> List[models.NutritionSession]:
    """Sessions run by the caller, or attended by the caller when they are a client."""
    query = db.query(models.NutritionSession)
    if status:
        query = query.filter(models.NutritionSession.status == status)
    sessions = query.order_by(models.NutritionSession.start_datetime.asc()).all()
    if ctx.is_admin:
        return sessions
    return [s for s in sessions if _visible(ctx, db, s)]
