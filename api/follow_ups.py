"""Nutrition follow-up API router."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from database.deps import get_db_read, get_db_write
from core.context import RequestContext, get_request_context
from core.logger import get_logger
from services import follow_up_service
from schemas import FollowUpCreateRequest, FollowUpUpdateRequest, FollowUpResponse

logger = get_logger("api.follow_ups")
router = APIRouter(prefix="/api", tags=["follow-ups"])


@router.post("/follow-ups", response_model=FollowUpResponse, status_code=201)
def create_follow_up(payload: FollowUpCreateRequest, ctx: RequestContext = Depends(get_request_context),
                     db: Session = Depends(get_db_write)):
    """Record a check-in against one of the client's nutrition plans.

    Raises:
        ValidationError: If the plan is not the client's, or a completed meal
            does not exist in the plan.
    """
    f = follow_up_service.create_follow_up(db, ctx, payload)
    return follow_up_service.follow_up_to_response(db, f)


@router.get("/follow-ups", response_model=List[FollowUpResponse])
def list_follow_ups(client_id: int, plan_id: Optional[int] = None,
                    ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_read)):
    """Follow-ups of one client, most recent first."""
    return [follow_up_service.follow_up_to_response(db, f)
            for f in follow_up_service.list_follow_ups(db, ctx, client_id, plan_id)]


@router.get("/follow-ups/{follow_up_id}", response_model=FollowUpResponse)
def get_follow_up(follow_up_id: int, ctx: RequestContext = Depends(get_request_context),
                  db: Session = Depends(get_db_read)):
    return follow_up_service.follow_up_to_response(db, follow_up_service.get_follow_up_for(db, ctx, follow_up_id))


@router.patch("/follow-ups/{follow_up_id}", response_model=FollowUpResponse)
def update_follow_up(follow_up_id: int, payload: FollowUpUpdateRequest,
                     ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_write)):
    f = follow_up_service.update_follow_up(db, ctx, follow_up_id, payload)
    return follow_up_service.follow_up_to_response(db, f)


@router.delete("/follow-ups/{follow_up_id}", status_code=204)
def delete_follow_up(follow_up_id: int, ctx: RequestContext = Depends(get_request_context),
                     db: Session = Depends(get_db_write)):
    follow_up_service.delete_follow_up(db, ctx, follow_up_id)
