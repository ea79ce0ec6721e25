"""Dashboard and monthly report aggregation.

Figures are computed over the clients the caller can see. A month/year filter
narrows plans to those starting in the period and sessions to those held in
it; client totals always cover every visible client.
"""

import calendar
from collections import Counter
from datetime import date, datetime
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from core.context import RequestContext
from core.exceptions import ValidationError
from core.logger import get_logger
from core.repository import load_json
from database import models
from schemas.report_schema import (
    ClientStats,
    NamedCount,
    PlanKindStats,
    PlanStats,
    ReportResponse,
    SessionStats,
)
from services.client_service import list_clients
from services.nutrition_calculator import WEIGHT_BUCKETS, nutrition_calculator
from services.session_service import duration_minutes

logger = get_logger("services.report_service")

TRAINING_STATUSES = ("active", "completed", "draft")


def period_bounds(month: Optional[int], year: Optional[int]) -> Optional[Tuple[date, date]]:
    """Return the `[start, end)` dates of the requested period, or None for all time.

    A year alone selects the whole year.
    """
    if month is None and year is None:
        return None
    if year is None:
        raise ValidationError("year is required when month is given", field="year")
    if month is None:
        return date(year, 1, 1), date(year + 1, 1, 1)
    if not 1 <= month <= 12:
        raise ValidationError("month must be between 1 and 12", field="month")
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return date(year, month, 1), end


def _in_period(value, bounds) -> bool:
    if bounds is None:
        return True
    if value is None:
        return False
    if isinstance(value, datetime):
        value = value.date()
    return bounds[0] <= value < bounds[1]


def _percent(part: int, whole: int) -> float:
    return round(100.0 * part / whole, 1) if whole else 0.0


def client_stats(clients: List[models.Client], nutrition_plans: List[models.NutritionPlan],
                 training_plans: List[models.TrainingPlan], today: date,
                 bounds=None) -> ClientStats:
    month_bounds = bounds
    if month_bounds is None:
        month_bounds = period_bounds(today.month, today.year)
    active_ids = {p.client_id for p in nutrition_plans if p.is_active}
    active_ids.update(p.client_id for p in training_plans if p.status == "active")

    goals = Counter(c.weight_goal for c in clients if c.weight_goal)
    buckets = Counter(nutrition_calculator.weight_bucket(c.weight) for c in clients if c.weight is not None)
    return ClientStats(
        total=len(clients),
        new_this_month=sum(1 for c in clients if _in_period(c.created_at, month_bounds)),
        with_active_plan=sum(1 for c in clients if c.id in active_ids),
        by_goal=[NamedCount(name=g, value=n) for g, n in sorted(goals.items())],
        by_weight=[NamedCount(name=label, value=buckets.get(label, 0)) for _, label in WEIGHT_BUCKETS],
    )


def plan_stats(nutrition_plans: List[models.NutritionPlan],
               training_plans: List[models.TrainingPlan]) -> PlanStats:
    status_counts = Counter("active" if p.is_active else "inactive" for p in nutrition_plans)
    status_counts.update(p.status for p in training_plans)
    completed = status_counts.get("completed", 0)
    return PlanStats(
        nutrition=PlanKindStats(total=len(nutrition_plans),
                                active=sum(1 for p in nutrition_plans if p.is_active)),
        training=PlanKindStats(total=len(training_plans),
                               active=sum(1 for p in training_plans if p.status == "active")),
        completion_rate=_percent(completed, len(training_plans)),
        by_type=[NamedCount(name="nutrition", value=len(nutrition_plans)),
                 NamedCount(name="training", value=len(training_plans))],
        by_status=[NamedCount(name=s, value=n) for s, n in sorted(status_counts.items())],
    )


def session_stats(sessions: List[models.NutritionSession]) -> SessionStats:
    """Count, mean duration, attendance (completed over total) and weekday spread."""
    days = Counter(s.start_datetime.weekday() for s in sessions)
    durations = [duration_minutes(s) for s in sessions]
    return SessionStats(
        total=len(sessions),
        average_duration_minutes=round(sum(durations) / len(durations), 1) if durations else 0.0,
        attendance_rate=_percent(sum(1 for s in sessions if s.status == "completed"), len(sessions)),
        by_day=[NamedCount(name=calendar.day_name[i], value=days.get(i, 0)) for i in range(7)],
    )


def _visible_sessions(db: Session, ctx: RequestContext, client_ids) -> List[models.NutritionSession]:
    sessions = db.query(models.NutritionSession).order_by(models.NutritionSession.start_datetime).all()
    if ctx.is_admin:
        return sessions
    return [s for s in sessions
            if s.nutritionist_id == ctx.user_id
            or client_ids.intersection(load_json(s.patients, [], "patients"))]


def build_report(db: Session, ctx: RequestContext, month: Optional[int] = None,
                 year: Optional[int] = None, today: Optional[date] = None) -> ReportResponse:
    """Aggregate client, plan and session figures for the caller's caseload."""
    ctx.require_role("nutritionist", "trainer", action="view reports")
    bounds = period_bounds(month, year)
    today = today or date.today()

    clients = list_clients(db, ctx, skip=0, limit=None)
    client_ids = {c.id for c in clients}
    if client_ids:
        nutrition = db.query(models.NutritionPlan).filter(models.NutritionPlan.client_id.in_(client_ids)).all()
        training = db.query(models.TrainingPlan).filter(models.TrainingPlan.client_id.in_(client_ids)).all()
    else:
        nutrition, training = [], []
    sessions = _visible_sessions(db, ctx, client_ids)

    period_nutrition = [p for p in nutrition if _in_period(p.start_date, bounds)]
    period_training = [p for p in training if _in_period(p.start_date, bounds)]
    period_sessions = [s for s in sessions if _in_period(s.start_datetime, bounds)]

    report = ReportResponse(
        month=month,
        year=year,
        clients=client_stats(clients, nutrition, training, today, bounds),
        plans=plan_stats(period_nutrition, period_training),
        sessions=session_stats(period_sessions),
    )
    logger.info("Report built for user %s (month=%s year=%s): %s clients, %s sessions",
                ctx.user_id, month, year, len(clients), len(period_sessions))
    return report
