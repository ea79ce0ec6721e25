"""User and client API router.

Registers users, and manages client profiles with their computed BMI and
energy targets. Every endpoint except user registration acts on behalf of the
caller named in the `X-User-Id` header.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from database.deps import get_db_read, get_db_write
from core.context import RequestContext, get_request_context
from core.logger import get_logger
from services import client_service
from schemas import (
    UserCreateRequest,
    UserResponse,
    ClientCreateRequest,
    ClientUpdateRequest,
    ClientResponse,
    ClientTargets,
)

logger = get_logger("api.users")
router = APIRouter(prefix="/api", tags=["users"])


@router.post("/users", response_model=UserResponse, status_code=201)
def create_user(payload: UserCreateRequest, db: Session = Depends(get_db_write)):
    """Register a user with a role.

    Raises:
        ConflictError: If the email is already registered.
    """
    return client_service.user_to_response(client_service.create_user(db, payload))


@router.get("/users/me", response_model=UserResponse)
def get_me(ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_read)):
    """Return the calling user."""
    return client_service.user_to_response(client_service.get_user(db, ctx, ctx.user_id))


@router.get("/users", response_model=List[UserResponse])
def list_users(role: Optional[str] = None, ctx: RequestContext = Depends(get_request_context),
               db: Session = Depends(get_db_read)):
    """List users, optionally by role. Staff only."""
    return [client_service.user_to_response(u) for u in client_service.list_users(db, ctx, role)]


@router.get("/users/{user_id}", response_model=UserResponse)
def get_user(user_id: int, ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_read)):
    """Return one user. Clients may only look themselves up."""
    return client_service.user_to_response(client_service.get_user(db, ctx, user_id))


@router.post("/clients", response_model=ClientResponse, status_code=201)
def create_client(payload: ClientCreateRequest, ctx: RequestContext = Depends(get_request_context),
                  db: Session = Depends(get_db_write)):
    """Create the client profile of a client-role user.

    Args:
        payload: `ClientCreateRequest` with body data, goals and assignments.
        ctx: Caller context; must be a nutritionist, trainer or admin.
        db: SQLAlchemy session (write) injected by dependency.

    Returns:
        `ClientResponse` including computed targets.
    """
    client = client_service.create_client(db, ctx, payload)
    return client_service.client_to_response(db, client)


@router.get("/clients", response_model=List[ClientResponse])
def list_clients(limit: int = Query(50, ge=1, le=500), skip: int = Query(0, ge=0),
                 ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_read)):
    """Return the clients the caller can see, newest first."""
    clients = client_service.list_clients(db, ctx, skip=skip, limit=limit)
    return [client_service.client_to_response(db, c) for c in clients]


@router.get("/clients/{client_id}", response_model=ClientResponse)
def get_client(client_id: int, ctx: RequestContext = Depends(get_request_context),
               db: Session = Depends(get_db_read)):
    return client_service.client_to_response(db, client_service.get_client_for(db, ctx, client_id))


@router.get("/clients/{client_id}/targets", response_model=ClientTargets)
def get_client_targets(client_id: int, ctx: RequestContext = Depends(get_request_context),
                       db: Session = Depends(get_db_read)):
    """BMI, target calories and macro split derived from the client's profile."""
    return client_service.compute_targets(client_service.get_client_for(db, ctx, client_id))


@router.patch("/clients/{client_id}", response_model=ClientResponse)
def update_client(client_id: int, payload: ClientUpdateRequest,
                  ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_write)):
    client = client_service.update_client(db, ctx, client_id, payload)
    return client_service.client_to_response(db, client)


@router.delete("/clients/{client_id}", status_code=204)
def delete_client(client_id: int, ctx: RequestContext = Depends(get_request_context),
                  db: Session = Depends(get_db_write)):
    """Delete a client together with their plans, measurements and progress records."""
    client_service.delete_client(db, ctx, client_id)
