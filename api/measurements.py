"""Body measurement and progress API router.

All routes are nested under a client; access follows the client's
assignments (admins, the assigned staff, or the client themselves).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from database.deps import get_db_read, get_db_write
from core.context import RequestContext, get_request_context
from core.logger import get_logger
from services import measurement_service
from schemas import (
    BodyMeasurementRequest,
    BodyMeasurementResponse,
    ProgressRecordRequest,
    ProgressRecordResponse,
    ProgressSummaryResponse,
)

logger = get_logger("api.measurements")
router = APIRouter(prefix="/api/clients/{client_id}", tags=["measurements"])


@router.post("/measurements", response_model=BodyMeasurementResponse, status_code=201)
def add_measurement(client_id: int, payload: BodyMeasurementRequest,
                    ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_write)):
    """Record a body measurement; BMI and its category are derived server-side."""
    m = measurement_service.add_measurement(db, ctx, client_id, payload)
    return measurement_service.measurement_to_response(m)


@router.get("/measurements", response_model=List[BodyMeasurementResponse])
def list_measurements(client_id: int, ctx: RequestContext = Depends(get_request_context),
                      db: Session = Depends(get_db_read)):
    """Return the client's measurements, most recent first."""
    return [measurement_service.measurement_to_response(m)
            for m in measurement_service.list_measurements(db, ctx, client_id)]


@router.put("/measurements/{measurement_id}", response_model=BodyMeasurementResponse)
def update_measurement(client_id: int, measurement_id: int, payload: BodyMeasurementRequest,
                       ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_write)):
    m = measurement_service.update_measurement(db, ctx, client_id, measurement_id, payload)
    return measurement_service.measurement_to_response(m)


@router.delete("/measurements/{measurement_id}", status_code=204)
def delete_measurement(client_id: int, measurement_id: int, ctx: RequestContext = Depends(get_request_context),
                       db: Session = Depends(get_db_write)):
    measurement_service.delete_measurement(db, ctx, client_id, measurement_id)


@router.post("/progress", response_model=ProgressRecordResponse, status_code=201)
def add_progress(client_id: int, payload: ProgressRecordRequest,
                 ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_write)):
    """Log a progress check-in; the newest weigh-in also updates the profile weight."""
    record = measurement_service.add_progress_record(db, ctx, client_id, payload)
    return measurement_service.record_to_response(record)


@router.get("/progress", response_model=List[ProgressRecordResponse])
def list_progress(client_id: int, ctx: RequestContext = Depends(get_request_context),
                  db: Session = Depends(get_db_read)):
    return [measurement_service.record_to_response(r)
            for r in measurement_service.list_progress_records(db, ctx, client_id)]


@router.get("/progress/summary", response_model=ProgressSummaryResponse)
def progress_summary(client_id: int, ctx: RequestContext = Depends(get_request_context),
                     db: Session = Depends(get_db_read)):
    """Latest weight, change, trend toward the goal and the recent weight series."""
    return measurement_service.progress_summary(db, ctx, client_id)
