"""Group nutrition session API router."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from database.deps import get_db_read, get_db_write
from core.context import RequestContext, get_request_context
from core.logger import get_logger
from services import session_service
from schemas import NutritionSessionCreateRequest, NutritionSessionUpdateRequest, NutritionSessionResponse

logger = get_logger("api.sessions")
router = APIRouter(prefix="/api", tags=["sessions"])


@router.post("/sessions", response_model=NutritionSessionResponse, status_code=201)
def create_session(payload: NutritionSessionCreateRequest, ctx: RequestContext = Depends(get_request_context),
                   db: Session = Depends(get_db_write)):
    """Schedule a group session.

    Raises:
        ValidationError: If more patients than `max_patients` are listed.
        NotFoundError: If a listed patient is not a known client.
    """
    return session_service.session_to_response(session_service.create_session(db, ctx, payload))


@router.get("/sessions", response_model=List[NutritionSessionResponse])
def list_sessions(status: Optional[str] = None, ctx: RequestContext = Depends(get_request_context),
                  db: Session = Depends(get_db_read)):
    """Sessions the caller runs or attends, in start order."""
    return [session_service.session_to_response(s) for s in session_service.list_sessions(db, ctx, status)]


@router.get("/sessions/{session_id}", response_model=NutritionSessionResponse)
def get_session(session_id: int, ctx: RequestContext = Depends(get_request_context),
                db: Session = Depends(get_db_read)):
    return session_service.session_to_response(session_service.get_session_for(db, ctx, session_id))


@router.patch("/sessions/{session_id}", response_model=NutritionSessionResponse)
def update_session(session_id: int, payload: NutritionSessionUpdateRequest,
                   ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_write)):
    return session_service.session_to_response(session_service.update_session(db, ctx, session_id, payload))


@router.delete("/sessions/{session_id}", status_code=204)
def delete_session(session_id: int, ctx: RequestContext = Depends(get_request_context),
                   db: Session = Depends(get_db_write)):
    session_service.delete_session(db, ctx, session_id)
