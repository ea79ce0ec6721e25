"""Tests for users, client profiles and the access rules around them."""
import uuid
from datetime import date

import pytest

from core.exceptions import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from schemas.user_schema import ClientCreateRequest, ClientUpdateRequest, UserCreateRequest
from services import client_service


def test_duplicate_email_conflicts_case_insensitively(db):
    email = f"dup-{uuid.uuid4().hex[:8]}@example.com"
    client_service.create_user(db, UserCreateRequest(name="A", email=email, role="client"))
    with pytest.raises(ConflictError) as exc_info:
        client_service.create_user(db, UserCreateRequest(name="B", email=email.upper(), role="client"))
    assert exc_info.value.status_code == 409


def test_creating_nutritionist_is_assigned(make_user, make_client):
    nutritionist = make_user("nutritionist")
    client, _ = make_client(nutritionist)
    assert client.nutritionist_id == nutritionist.user_id


def test_profile_requires_client_role_user(db, make_user):
    nutritionist = make_user("nutritionist")
    trainer = make_user("trainer")
    with pytest.raises(ValidationError):
        client_service.create_client(db, nutritionist, ClientCreateRequest(user_id=trainer.user_id))


def test_one_profile_per_user(db, make_user, make_client):
    nutritionist = make_user("nutritionist")
    _, client_ctx = make_client(nutritionist)
    with pytest.raises(ConflictError):
        client_service.create_client(db, nutritionist, ClientCreateRequest(user_id=client_ctx.user_id))


def test_clients_cannot_create_profiles(db, make_user):
    client_ctx = make_user("client")
    with pytest.raises(PermissionDeniedError):
        client_service.create_client(db, client_ctx, ClientCreateRequest(user_id=client_ctx.user_id))


def test_visibility_is_scoped_to_assignments(db, make_user, make_client):
    nutritionist = make_user("nutritionist")
    stranger = make_user("nutritionist")
    admin = make_user("admin")
    client, client_ctx = make_client(nutritionist)
    _, other_client_ctx = make_client(nutritionist)

    assert client_service.get_client_for(db, client_ctx, client.id).id == client.id
    assert client_service.get_client_for(db, admin, client.id).id == client.id
    with pytest.raises(PermissionDeniedError):
        client_service.get_client_for(db, stranger, client.id)
    with pytest.raises(PermissionDeniedError):
        client_service.get_client_for(db, other_client_ctx, client.id)
    with pytest.raises(NotFoundError):
        client_service.get_client_for(db, admin, 10 ** 9)

    assert client.id in {c.id for c in client_service.list_clients(db, nutritionist)}
    assert client.id not in {c.id for c in client_service.list_clients(db, stranger)}
    assert [c.id for c in client_service.list_clients(db, client_ctx)] == [client.id]


def test_targets_need_complete_body_data(db, make_user, make_client):
    nutritionist = make_user("nutritionist")
    partial, _ = make_client(nutritionist, height=170)
    assert client_service.compute_targets(partial).target_calories is None

    full, _ = make_client(nutritionist, height=170, weight=70, birth_date=date(1990, 1, 1),
                          gender="female", weight_goal="lose")
    targets = client_service.compute_targets(full)
    assert targets.bmi == 24.22
    assert targets.bmi_category == "normal"
    assert targets.target_calories > 0
    assert set(targets.target_macros) == {"protein", "carbs", "fat"}


def test_client_cannot_edit_own_profile(db, make_user, make_client):
    nutritionist = make_user("nutritionist")
    client, client_ctx = make_client(nutritionist)
    with pytest.raises(PermissionDeniedError):
        client_service.update_client(db, client_ctx, client.id, ClientUpdateRequest(weight=60))
    updated = client_service.update_client(db, nutritionist, client.id, ClientUpdateRequest(allergies=["soy"]))
    assert client_service.client_to_response(db, updated).allergies == ["soy"]


def test_delete_client_is_limited_to_nutritionist_or_admin(db, make_user, make_client):
    nutritionist = make_user("nutritionist")
    trainer = make_user("trainer")
    client, _ = make_client(nutritionist, trainer_id=trainer.user_id)
    with pytest.raises(PermissionDeniedError):
        client_service.delete_client(db, trainer, client.id)
    client_service.delete_client(db, nutritionist, client.id)
    with pytest.raises(NotFoundError):
        client_service.get_client_for(db, nutritionist, client.id)


def test_clients_only_look_themselves_up(db, make_user):
    client_ctx = make_user("client")
    other = make_user("client")
    assert client_service.get_user(db, client_ctx, client_ctx.user_id).id == client_ctx.user_id
    with pytest.raises(PermissionDeniedError):
        client_service.get_user(db, client_ctx, other.user_id)
    assert client_service.get_user(db, make_user("trainer"), other.user_id).role == "client"
