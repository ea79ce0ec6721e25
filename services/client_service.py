"""User and client profile service.

Holds the access rules shared by every client-scoped resource: admins see
everything, staff see the clients assigned to them, and a client sees only
their own profile.
"""

from typing import List, Optional
from sqlalchemy.orm import Session
from core.context import RequestContext
from core.exceptions import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from core.logger import get_logger
from core.repository import BaseRepository, dump_json, iso, load_json, save
from database import models
from schemas.user_schema import (
    ClientCreateRequest,
    ClientResponse,
    ClientTargets,
    ClientUpdateRequest,
    UserCreateRequest,
    UserResponse,
)
from services.nutrition_calculator import nutrition_calculator

logger = get_logger("services.client_service")

LIST_FIELDS = ("dietary_preferences", "medical_conditions", "allergies", "medications", "dietary_restrictions")


def user_to_response(user: models.User) -> UserResponse:
    return UserResponse(id=user.id, name=user.name, email=user.email, role=user.role,
                        created_at=iso(user.created_at))


def create_user(db: Session, payload: UserCreateRequest) -> models.User:
    """Register a user, rejecting duplicate emails."""
    email = payload.email.strip().lower()
    if db.query(models.User).filter(models.User.email == email).first():
        raise ConflictError(f"A user with email '{email}' already exists", field="email")
    user = save(db, models.User(name=payload.name.strip(), email=email, role=payload.role))
    logger.info("User %s created with role %s (id=%s)", user.email, user.role, user.id)
    return user


def list_users(db: Session, ctx: RequestContext, role: Optional[str] = None) -> List[models.User]:
    ctx.require_role("nutritionist", "trainer", action="list users")
    query = db.query(models.User)
    if role:
        query = query.filter(models.User.role == role)
    return query.order_by(models.User.id).all()


def get_user(db: Session, ctx: RequestContext, user_id: int) -> models.User:
    """Load a user; non-staff callers may only load themselves."""
    if user_id != ctx.user_id and not ctx.is_staff:
        raise PermissionDeniedError(f"view user {user_id}", role=ctx.role)
    return BaseRepository(models.User, db, "User").get_or_404(user_id)


def _require_user_with_role(db: Session, user_id: int, roles, field: str) -> models.User:
    user = db.get(models.User, user_id)
    if not user:
        raise NotFoundError("User", user_id)
    if user.role not in roles:
        raise ValidationError(f"User {user_id} must have role {' or '.join(roles)}", field=field)
    return user


def can_view_client(ctx: RequestContext, client: models.Client) -> bool:
    if ctx.is_admin:
        return True
    if ctx.role == "client":
        return client.user_id == ctx.user_id
    return ctx.user_id in (client.nutritionist_id, client.trainer_id)


def get_client_for(db: Session, ctx: RequestContext, client_id: int) -> models.Client:
    """Load a client the caller is allowed to see.

    Raises:
        NotFoundError: If the client does not exist.
        PermissionDeniedError: If the caller is not linked to the client.
    """
    client = BaseRepository(models.Client, db, "Client").get_or_404(client_id)
    if not can_view_client(ctx, client):
        raise PermissionDeniedError(f"access client {client_id}", role=ctx.role)
    return client


def client_for_user(db: Session, user_id: int) -> Optional[models.Client]:
    return db.query(models.Client).filter(models.Client.user_id == user_id).first()


def compute_targets(client: models.Client) -> ClientTargets:
    """BMI and daily energy targets; empty when body data is incomplete."""
    calc = nutrition_calculator
    bmi = calc.calculate_bmi(client.height, client.weight)
    targets = ClientTargets(bmi=bmi, bmi_category=calc.bmi_category(bmi))
    if bmi is None or client.birth_date is None:
        return targets
    age = calc.age_on(client.birth_date)
    bmr = calc.calculate_bmr(age, client.height, client.weight, client.gender)
    tdee = calc.calculate_tdee(bmr, client.activity_level)
    target_calories = calc.calculate_target_calories(tdee, client.weight_goal)
    targets.target_calories = round(target_calories)
    targets.target_macros = calc.calculate_macros(
        target_calories, load_json(client.dietary_preferences, [], "dietary_preferences"))
    return targets


def client_to_response(db: Session, client: models.Client) -> ClientResponse:
    user = db.get(models.User, client.user_id)
    lists = {name: load_json(getattr(client, name), [], name) for name in LIST_FIELDS}
    return ClientResponse(
        id=client.id,
        user_id=client.user_id,
        name=user.name if user else "",
        email=user.email if user else "",
        nutritionist_id=client.nutritionist_id,
        trainer_id=client.trainer_id,
        birth_date=iso(client.birth_date),
        gender=client.gender,
        height=client.height,
        weight=client.weight,
        phone=client.phone,
        address=client.address,
        activity_level=client.activity_level,
        weight_goal=client.weight_goal,
        target_weight=client.target_weight,
        notes=client.notes,
        targets=compute_targets(client),
        created_at=iso(client.created_at),
        updated_at=iso(client.updated_at),
        **lists,
    )


def _check_assignments(db: Session, nutritionist_id: Optional[int], trainer_id: Optional[int]) -> None:
    if nutritionist_id is not None:
        _require_user_with_role(db, nutritionist_id, ("nutritionist",), "nutritionist_id")
    if trainer_id is not None:
        _require_user_with_role(db, trainer_id, ("trainer",), "trainer_id")


def create_client(db: Session, ctx: RequestContext, payload: ClientCreateRequest) -> models.Client:
    """Create the client profile of a client-role user.

    A nutritionist or trainer creating the profile is assigned to it when the
    payload leaves their slot empty.
    """
    ctx.require_role("nutritionist", "trainer", action="create clients")
    _require_user_with_role(db, payload.user_id, ("client",), "user_id")
    if client_for_user(db, payload.user_id):
        raise ConflictError(f"User {payload.user_id} already has a client profile", field="user_id")

    data = payload.model_dump()
    if ctx.role == "nutritionist" and data["nutritionist_id"] is None:
        data["nutritionist_id"] = ctx.user_id
    if ctx.role == "trainer" and data["trainer_id"] is None:
        data["trainer_id"] = ctx.user_id
    _check_assignments(db, data["nutritionist_id"], data["trainer_id"])

    for name in LIST_FIELDS:
        data[name] = dump_json(data[name])
    client = save(db, models.Client(**data))
    logger.info("Client profile %s created for user %s by %s", client.id, client.user_id, ctx.user_id)
    return client


def update_client(db: Session, ctx: RequestContext, client_id: int, payload: ClientUpdateRequest) -> models.Client:
    client = get_client_for(db, ctx, client_id)
    if ctx.role == "client":
        raise PermissionDeniedError("edit client profiles", role=ctx.role)
    changes = payload.model_dump(exclude_unset=True)
    _check_assignments(db, changes.get("nutritionist_id"), changes.get("trainer_id"))
    for name, value in changes.items():
        if name in LIST_FIELDS:
            value = dump_json(value or [])
        setattr(client, name, value)
    db.commit()
    db.refresh(client)
    logger.info("Client %s updated (%s)", client.id, ", ".join(sorted(changes)) or "no changes")
    return client


def delete_client(db: Session, ctx: RequestContext, client_id: int) -> None:
    """Delete a client and everything recorded for them."""
    client = get_client_for(db, ctx, client_id)
    if not (ctx.is_admin or ctx.user_id == client.nutritionist_id):
        raise PermissionDeniedError(f"delete client {client_id}", role=ctx.role)
    for model in (models.NutritionFollowUp, models.NutritionPlan, models.TrainingPlan,
                  models.BodyMeasurement, models.ProgressRecord):
        db.query(model).filter(model.client_id == client.id).delete(synchronize_session=False)
    db.query(models.Reminder).filter(models.Reminder.client_id == client.id).update(
        {models.Reminder.client_id: None}, synchronize_session=False)
    db.delete(client)
    db.commit()
    logger.info("Client %s deleted by %s", client_id, ctx.user_id)


def list_clients(db: Session, ctx: RequestContext, skip: int = 0, limit: int = 50) -> List[models.Client]:
    """Clients visible to the caller, newest first."""
    query = db.query(models.Client)
    if ctx.role == "client":
        query = query.filter(models.Client.user_id == ctx.user_id)
    elif not ctx.is_admin:
        query = query.filter(
            (models.Client.nutritionist_id == ctx.user_id) | (models.Client.trainer_id == ctx.user_id))
    return query.order_by(models.Client.created_at.desc(), models.Client.id.desc()).offset(skip).limit(limit).all()
