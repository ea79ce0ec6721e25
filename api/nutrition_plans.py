"""Nutrition plan API router.

Plans are returned with per-meal and per-day totals computed from the current
food catalogue at read time, so editing a food shows up in every plan that
references it. The preview endpoint gives the same totals for meals that are
still being edited.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from database.deps import get_db_read, get_db_write
from core.context import RequestContext, get_request_context
from core.logger import get_logger
from services import plan_service
from schemas import (
    NutritionPlanCreateRequest,
    NutritionPlanUpdateRequest,
    NutritionPlanResponse,
    PlanPreviewRequest,
    PlanPreviewResponse,
)

logger = get_logger("api.nutrition_plans")
router = APIRouter(prefix="/api", tags=["nutrition-plans"])


@router.post("/nutrition-plans", response_model=NutritionPlanResponse, status_code=201)
def create_plan(payload: NutritionPlanCreateRequest, ctx: RequestContext = Depends(get_request_context),
                db: Session = Depends(get_db_write)):
    """Create a nutrition plan for a client assigned to the caller.

    Args:
        payload: `NutritionPlanCreateRequest` with dates, days and meals.
        ctx: Caller context; must be the client's nutritionist or an admin.
        db: SQLAlchemy session (write) injected by dependency.

    Returns:
        `NutritionPlanResponse` with computed totals.

    Raises:
        ValidationError: If a meal references a food that does not exist.
    """
    plan = plan_service.create_plan(db, ctx, payload)
    return plan_service.plan_to_response(db, plan)


@router.post("/nutrition-plans/preview", response_model=PlanPreviewResponse)
def preview_plan(payload: PlanPreviewRequest, ctx: RequestContext = Depends(get_request_context),
                 db: Session = Depends(get_db_read)):
    """Compute meal and day totals for unsaved meals.

    Unknown food ids contribute nothing instead of failing the request.
    """
    return plan_service.preview_meals(db, payload.meals)


@router.get("/nutrition-plans", response_model=List[NutritionPlanResponse])
def list_plans(client_id: Optional[int] = None, active: Optional[bool] = None,
               ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_read)):
    """Return the plans visible to the caller, newest first."""
    plans = plan_service.list_plans(db, ctx, client_id=client_id, active=active)
    return [plan_service.plan_to_response(db, p) for p in plans]


@router.get("/nutrition-plans/mine", response_model=List[NutritionPlanResponse])
def my_plans(ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_read)):
    """Active plans of the calling client."""
    return [plan_service.plan_to_response(db, p) for p in plan_service.my_active_plans(db, ctx)]


@router.get("/nutrition-plans/{plan_id}", response_model=NutritionPlanResponse)
def get_plan(plan_id: int, ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_read)):
    return plan_service.plan_to_response(db, plan_service.get_plan_for(db, ctx, plan_id))


@router.patch("/nutrition-plans/{plan_id}", response_model=NutritionPlanResponse)
def update_plan(plan_id: int, payload: NutritionPlanUpdateRequest,
                ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_write)):
    """Partially update a plan; only its nutritionist (or an admin) may edit."""
    plan = plan_service.update_plan(db, ctx, plan_id, payload)
    return plan_service.plan_to_response(db, plan)


@router.delete("/nutrition-plans/{plan_id}", status_code=204)
def delete_plan(plan_id: int, ctx: RequestContext = Depends(get_request_context),
                db: Session = Depends(get_db_write)):
    plan_service.delete_plan(db, ctx, plan_id)
