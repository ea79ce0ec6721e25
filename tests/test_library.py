"""Tests for the supplement catalogue, exercise videos and guides."""
import uuid
from datetime import date

import pytest
from pydantic import ValidationError as SchemaError

from core.exceptions import ConflictError, PermissionDeniedError, ValidationError
from schemas.library_schema import (
    ExerciseVideoCreateRequest,
    ExerciseVideoUpdateRequest,
    GuideCreateRequest,
    SupplementCreateRequest,
    SupplementUpdateRequest,
)
from schemas.plan_schema import NutritionPlanCreateRequest
from services import library_service, plan_service


def _supplement(db, ctx, **overrides):
    data = dict(name=f"Creatine {uuid.uuid4().hex[:6]}", category="performance",
                instructions="5 g daily", benefits=["strength"])
    data.update(overrides)
    return library_service.create_supplement(db, ctx, SupplementCreateRequest(**data))


def test_supplement_catalogue_crud(db, make_user):
    nutritionist = make_user("nutritionist")
    s = _supplement(db, nutritionist)
    assert library_service.supplement_to_response(s).benefits == ["strength"]

    with pytest.raises(ConflictError):
        _supplement(db, nutritionist, name=s.name.upper())
    with pytest.raises(PermissionDeniedError):
        _supplement(db, make_user("trainer"))

    s = library_service.update_supplement(db, nutritionist, s.id, SupplementUpdateRequest(benefits=None))
    assert library_service.supplement_to_response(s).benefits == []
    assert s.id in {x.id for x in library_service.list_supplements(db, q=s.name[:8])}

    library_service.delete_supplement(db, nutritionist, s.id)
    assert s.id not in {x.id for x in library_service.list_supplements(db)}


def test_plans_may_only_reference_catalogue_supplements(db, make_user, make_client):
    nutritionist = make_user("nutritionist")
    client, _ = make_client(nutritionist)
    s = _supplement(db, nutritionist)

    def plan_with(supplement_id):
        return NutritionPlanCreateRequest(
            client_id=client.id, title="Supplemented", start_date=date(2026, 4, 6),
            supplements={"morning": {"dose": "5 g", "supplement_id": supplement_id}})

    plan = plan_service.create_plan(db, nutritionist, plan_with(s.id))
    assert plan_service.plan_to_response(db, plan).supplements["morning"].supplement_id == s.id
    with pytest.raises(ValidationError) as exc_info:
        plan_service.create_plan(db, nutritionist, plan_with(10 ** 9))
    assert exc_info.value.details["field"] == "supplements"


def test_private_videos_are_hidden_from_clients(db, make_user):
    trainer = make_user("trainer")
    client_ctx = make_user("client")
    public = library_service.create_video(db, trainer, ExerciseVideoCreateRequest(
        title="Goblet squat", video_url="https://videos.example.com/squat", muscle_group="legs"))
    private = library_service.create_video(db, trainer, ExerciseVideoCreateRequest(
        title="Rehab drill", video_url="https://videos.example.com/rehab", is_public=False))

    seen = {v.id for v in library_service.list_videos(db, client_ctx)}
    assert public.id in seen and private.id not in seen
    assert private.id in {v.id for v in library_service.list_videos(db, make_user("nutritionist"))}
    with pytest.raises(PermissionDeniedError):
        library_service.get_video_for(db, client_ctx, private.id)
    with pytest.raises(PermissionDeniedError):
        library_service.create_video(db, client_ctx, ExerciseVideoCreateRequest(
            title="Mine", video_url="https://videos.example.com/mine"))


def test_only_the_linking_trainer_edits_a_video(db, make_user):
    trainer = make_user("trainer")
    v = library_service.create_video(db, trainer, ExerciseVideoCreateRequest(
        title="Deadlift", video_url="https://videos.example.com/deadlift"))
    with pytest.raises(PermissionDeniedError):
        library_service.update_video(db, make_user("trainer"), v.id, ExerciseVideoUpdateRequest(title="Mine now"))
    v = library_service.update_video(db, trainer, v.id, ExerciseVideoUpdateRequest(difficulty="advanced"))
    assert v.difficulty == "advanced"
    with pytest.raises(SchemaError):
        ExerciseVideoCreateRequest(title="Bad link", video_url="ftp://example.com/x")


def test_guides_count_downloads(db, make_user):
    author = make_user("nutritionist", name="Dana Guide")
    title = f"Reading labels {uuid.uuid4().hex[:6]}"
    g = library_service.create_guide(db, author, GuideCreateRequest(
        title=title, description="How to read nutrition labels", file_url="https://files.example.com/labels.pdf"))
    library_service.record_download(db, g.id)
    g = library_service.record_download(db, g.id)
    res = library_service.guide_to_response(db, g)
    assert res.download_count == 2
    assert res.author_name == "Dana Guide"
    assert [x.id for x in library_service.list_guides(db, q=title)] == [g.id]

    with pytest.raises(PermissionDeniedError):
        library_service.create_guide(db, make_user("client"), GuideCreateRequest(
            title="Nope", description="x", file_url="https://files.example.com/x.pdf"))
    with pytest.raises(PermissionDeniedError):
        library_service.delete_guide(db, make_user("trainer"), g.id)
