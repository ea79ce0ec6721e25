"""Training plan API router."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from database.deps import get_db_read, get_db_write
from core.context import RequestContext, get_request_context
from core.logger import get_logger
from services import training_service
from schemas import TrainingPlanCreateRequest, TrainingPlanUpdateRequest, TrainingPlanResponse

logger = get_logger("api.training_plans")
router = APIRouter(prefix="/api", tags=["training-plans"])


@router.post("/training-plans", response_model=TrainingPlanResponse, status_code=201)
def create_plan(payload: TrainingPlanCreateRequest, ctx: RequestContext = Depends(get_request_context),
                db: Session = Depends(get_db_write)):
    """Create a training plan for a client assigned to the calling trainer."""
    return training_service.plan_to_response(training_service.create_plan(db, ctx, payload))


@router.get("/training-plans", response_model=List[TrainingPlanResponse])
def list_plans(client_id: Optional[int] = None, status: Optional[str] = None,
               ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_read)):
    plans = training_service.list_plans(db, ctx, client_id=client_id, status=status)
    return [training_service.plan_to_response(p) for p in plans]


@router.get("/training-plans/{plan_id}", response_model=TrainingPlanResponse)
def get_plan(plan_id: int, ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_read)):
    return training_service.plan_to_response(training_service.get_plan_for(db, ctx, plan_id))


@router.patch("/training-plans/{plan_id}", response_model=TrainingPlanResponse)
def update_plan(plan_id: int, payload: TrainingPlanUpdateRequest,
                ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_write)):
    return training_service.plan_to_response(training_service.update_plan(db, ctx, plan_id, payload))


@router.delete("/training-plans/{plan_id}", status_code=204)
def delete_plan(plan_id: int, ctx: RequestContext = Depends(get_request_context),
                db: Session = Depends(get_db_write)):
    training_service.delete_plan(db, ctx, plan_id)
