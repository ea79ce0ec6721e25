"""Dashboard report API router."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from database.deps import get_db_read
from core.context import RequestContext, get_request_context
from core.logger import get_logger
from services import report_service
from schemas import ReportResponse

logger = get_logger("api.reports")
router = APIRouter(prefix="/api", tags=["reports"])


@router.get("/reports", response_model=ReportResponse)
def get_report(month: Optional[int] = Query(None, ge=1, le=12), year: Optional[int] = Query(None, ge=2000, le=2100),
               ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_read)):
    """Client, plan and session figures for the caller's caseload.

    Args:
        month: Optional month (1-12); requires `year`.
        year: Optional year; alone it selects the whole year.

    Returns:
        `ReportResponse` with client, plan and session statistics.
    """
    return report_service.build_report(db, ctx, month=month, year=year)
