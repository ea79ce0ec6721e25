"""Body measurements, progress check-ins and weight-trend metrics."""

from datetime import datetime
from typing import List, Optional, Sequence
from sqlalchemy.orm import Session
from core.context import RequestContext
from core.exceptions import NotFoundError
from core.logger import get_logger
from core.repository import dump_json, iso, load_json, save
from database import models
from schemas.measurement_schema import (
    BodyMeasurementRequest,
    BodyMeasurementResponse,
    Circumferences,
    ProgressRecordRequest,
    ProgressRecordResponse,
    ProgressSummaryResponse,
    WeightMetrics,
    WeightPoint,
)
from services.client_service import get_client_for
from services.nutrition_calculator import nutrition_calculator

logger = get_logger("services.measurement_service")

SERIES_LENGTH = 10


def measurement_to_response(m: models.BodyMeasurement) -> BodyMeasurementResponse:
    return BodyMeasurementResponse(
        id=m.id,
        client_id=m.client_id,
        created_by=m.created_by,
        date=iso(m.date),
        weight=m.weight,
        height=m.height,
        bmi=m.bmi,
        bmi_category=nutrition_calculator.bmi_category(m.bmi),
        chest=m.chest,
        waist=m.waist,
        hips=m.hips,
        arms=m.arms,
        thighs=m.thighs,
        body_fat=m.body_fat,
        muscle_mass=m.muscle_mass,
        visceral_fat=m.visceral_fat,
        basal_metabolic_rate=m.basal_metabolic_rate,
        notes=m.notes,
        created_at=iso(m.created_at),
        updated_at=iso(m.updated_at),
    )


def _get_measurement(db: Session, ctx: RequestContext, client_id: int, measurement_id: int) -> models.BodyMeasurement:
    get_client_for(db, ctx, client_id)
    m = db.get(models.BodyMeasurement, measurement_id)
    if m is None or m.client_id != client_id:
        raise NotFoundError("BodyMeasurement", measurement_id)
    return m


def add_measurement(db: Session, ctx: RequestContext, client_id: int,
                    payload: BodyMeasurementRequest) -> models.BodyMeasurement:
    """Record a measurement; BMI is derived from weight and height."""
    client = get_client_for(db, ctx, client_id)
    data = payload.model_dump()
    m = save(db, models.BodyMeasurement(
        client_id=client.id,
        created_by=ctx.user_id,
        bmi=nutrition_calculator.calculate_bmi(payload.height, payload.weight),
        **data,
    ))
    logger.info("Measurement %s recorded for client %s (bmi=%s)", m.id, client.id, m.bmi)
    return m


def update_measurement(db: Session, ctx: RequestContext, client_id: int, measurement_id: int,
                       payload: BodyMeasurementRequest) -> models.BodyMeasurement:
    m = _get_measurement(db, ctx, client_id, measurement_id)
    for name, value in payload.model_dump().items():
        setattr(m, name, value)
    m.bmi = nutrition_calculator.calculate_bmi(m.height, m.weight)
    m.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(m)
    return m


def delete_measurement(db: Session, ctx: RequestContext, client_id: int, measurement_id: int) -> None:
    m = _get_measurement(db, ctx, client_id, measurement_id)
    db.delete(m)
    db.commit()
    logger.info("Measurement %s deleted by %s", measurement_id, ctx.user_id)


def list_measurements(db: Session, ctx: RequestContext, client_id: int) -> List[models.BodyMeasurement]:
    get_client_for(db, ctx, client_id)
    return (db.query(models.BodyMeasurement)
            .filter(models.BodyMeasurement.client_id == client_id)
            .order_by(models.BodyMeasurement.date.desc(), models.BodyMeasurement.id.desc())
            .all())


def record_to_response(r: models.ProgressRecord) -> ProgressRecordResponse:
    raw = load_json(r.measurements, None, "measurements")
    return ProgressRecordResponse(
        id=r.id,
        client_id=r.client_id,
        date=iso(r.date),
        weight=r.weight,
        measurements=Circumferences(**raw) if raw else None,
        notes=r.notes,
    )


def add_progress_record(db: Session, ctx: RequestContext, client_id: int,
                        payload: ProgressRecordRequest) -> models.ProgressRecord:
    client = get_client_for(db, ctx, client_id)
    record = save(db, models.ProgressRecord(
        client_id=client.id,
        date=payload.date,
        weight=payload.weight,
        measurements=dump_json(payload.measurements.model_dump() if payload.measurements else None),
        notes=payload.notes,
    ))
    if payload.weight is not None:
        latest = (db.query(models.ProgressRecord)
                  .filter(models.ProgressRecord.client_id == client.id, models.ProgressRecord.weight.isnot(None))
                  .order_by(models.ProgressRecord.date.desc(), models.ProgressRecord.id.desc())
                  .first())
        # The profile weight follows the most recent dated check-in.
        if latest is not None and latest.id == record.id:
            client.weight = payload.weight
            db.commit()
    logger.info("Progress record %s logged for client %s", record.id, client.id)
    return record


def list_progress_records(db: Session, ctx: RequestContext, client_id: int) -> List[models.ProgressRecord]:
    get_client_for(db, ctx, client_id)
    return (db.query(models.ProgressRecord)
            .filter(models.ProgressRecord.client_id == client_id)
            .order_by(models.ProgressRecord.date.asc(), models.ProgressRecord.id.asc())
            .all())


def weight_metrics(records: Sequence[models.ProgressRecord], weight_goal: str,
                   target_weight: Optional[float]) -> WeightMetrics:
    """Latest weight, change since the previous weigh-in and trend toward the goal.

    The trend is "up" when the last change moves toward the goal (a loss on a
    "lose" goal, a gain on a "gain" goal), "down" when it moves away, and
    "neutral" for a maintain goal or no change. Without weigh-ins the target
    weight stands in as the latest weight.
    """
    weighed = sorted((r for r in records if r.weight is not None), key=lambda r: (r.date, r.id))
    if not weighed:
        return WeightMetrics(latest_weight=target_weight, target_weight=target_weight,
                             weight_difference=0.0, weight_trend="neutral")
    latest = weighed[-1].weight
    difference = round(latest - weighed[-2].weight, 2) if len(weighed) > 1 else 0.0
    if difference == 0:
        trend = "neutral"
    elif weight_goal == "lose":
        trend = "up" if difference < 0 else "down"
    elif weight_goal == "gain":
        trend = "up" if difference > 0 else "down"
    else:
        trend = "neutral"
    return WeightMetrics(latest_weight=latest, target_weight=target_weight,
                         weight_difference=difference, weight_trend=trend)


def weight_series(records: Sequence[models.ProgressRecord], length: int = SERIES_LENGTH) -> List[WeightPoint]:
    """The last `length` weigh-ins in date order, for charting."""
    weighed = sorted((r for r in records if r.weight is not None), key=lambda r: (r.date, r.id))
    return [WeightPoint(date=iso(r.date), weight=r.weight) for r in weighed[-length:]]


def progress_summary(db: Session, ctx: RequestContext, client_id: int) -> ProgressSummaryResponse:
    client = get_client_for(db, ctx, client_id)
    records = list_progress_records(db, ctx, client_id)
    return ProgressSummaryResponse(
        client_id=client.id,
        metrics=weight_metrics(records, client.weight_goal, client.target_weight),
        weight_series=weight_series(records),
    )
