"""Shared libraries: the supplement catalogue, exercise videos and guides.

Supplements are curated by nutritionists and can be referenced from a plan's
supplement schedule. Exercise videos belong to the trainer who linked them
and may be private to staff. Guides are published by any staff member and
count their downloads.
"""

from datetime import datetime
from typing import Iterable, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from core.context import RequestContext
from core.exceptions import ConflictError, PermissionDeniedError, ValidationError
from core.logger import get_logger
from core.repository import BaseRepository, dump_json, iso, load_json, save
from database import models
from schemas.library_schema import (
    ExerciseVideoCreateRequest,
    ExerciseVideoResponse,
    ExerciseVideoUpdateRequest,
    GuideCreateRequest,
    GuideResponse,
    GuideUpdateRequest,
    SupplementCreateRequest,
    SupplementResponse,
    SupplementUpdateRequest,
)

logger = get_logger("services.library_service")


def _reject_cleared(changes: dict, required: Iterable[str]) -> None:
    for name in required:
        if name in changes and changes[name] is None:
            raise ValidationError(f"{name} cannot be cleared", field=name)


# Supplements

def supplement_to_response(s: models.Supplement) -> SupplementResponse:
    return SupplementResponse(
        id=s.id,
        name=s.name,
        description=s.description,
        category=s.category,
        instructions=s.instructions,
        benefits=load_json(s.benefits, [], "benefits"),
        image_url=s.image_url,
        created_at=iso(s.created_at),
        updated_at=iso(s.updated_at),
    )


def get_supplement(db: Session, supplement_id: int) -> models.Supplement:
    return BaseRepository(models.Supplement, db, "Supplement").get_or_404(supplement_id)


def _ensure_unique_supplement(db: Session, name: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(models.Supplement).filter(func.lower(models.Supplement.name) == name.lower())
    if exclude_id is not None:
        query = query.filter(models.Supplement.id != exclude_id)
    if query.first():
        raise ConflictError(f"A supplement named '{name}' already exists", field="name")


def create_supplement(db: Session, ctx: RequestContext, payload: SupplementCreateRequest) -> models.Supplement:
    ctx.require_role("nutritionist", action="add supplements")
    name = payload.name.strip()
    _ensure_unique_supplement(db, name)
    data = payload.model_dump()
    data["name"] = name
    data["benefits"] = dump_json(data["benefits"])
    s = save(db, models.Supplement(**data))
    logger.info("Supplement '%s' added (id=%s) by %s", s.name, s.id, ctx.user_id)
    return s


def update_supplement(db: Session, ctx: RequestContext, supplement_id: int,
                      payload: SupplementUpdateRequest) -> models.Supplement:
    ctx.require_role("nutritionist", action="edit supplements")
    repo = BaseRepository(models.Supplement, db, "Supplement")
    s = repo.get_or_404(supplement_id)
    changes = payload.model_dump(exclude_unset=True)
    _reject_cleared(changes, ("name",))
    if "name" in changes:
        changes["name"] = changes["name"].strip()
        _ensure_unique_supplement(db, changes["name"], exclude_id=s.id)
    if "benefits" in changes:
        changes["benefits"] = dump_json(changes["benefits"] or [])
    for name, value in changes.items():
        setattr(s, name, value)
    s = repo.update(s)
    logger.info("Supplement %s updated (%s)", s.id, ", ".join(sorted(changes)) or "no changes")
    return s


def delete_supplement(db: Session, ctx: RequestContext, supplement_id: int) -> None:
    """Remove a supplement. Plan schedules that named it keep their free-text dose."""
    ctx.require_role("nutritionist", action="delete supplements")
    repo = BaseRepository(models.Supplement, db, "Supplement")
    repo.delete(repo.get_or_404(supplement_id))
    logger.info("Supplement %s deleted by %s", supplement_id, ctx.user_id)


def list_supplements(db: Session, q: Optional[str] = None, category: Optional[str] = None) -> List[models.Supplement]:
    query = db.query(models.Supplement)
    if q:
        query = query.filter(models.Supplement.name.ilike(f"%{q.strip()}%"))
    if category:
        query = query.filter(models.Supplement.category == category)
    return query.order_by(models.Supplement.name).all()


def missing_supplements(db: Session, supplement_ids: Iterable[int]) -> List[int]:
    """Ids from `supplement_ids` that are not in the catalogue, sorted."""
    ids = set(supplement_ids)
    if not ids:
        return []
    found = {sid for (sid,) in db.query(models.Supplement.id).filter(models.Supplement.id.in_(ids)).all()}
    return sorted(ids - found)


# Exercise videos

def video_to_response(v: models.ExerciseVideo) -> ExerciseVideoResponse:
    return ExerciseVideoResponse(
        id=v.id,
        created_by=v.created_by,
        title=v.title,
        description=v.description,
        video_url=v.video_url,
        thumbnail_url=v.thumbnail_url,
        difficulty=v.difficulty,
        muscle_group=v.muscle_group,
        is_public=v.is_public,
        created_at=iso(v.created_at),
        updated_at=iso(v.updated_at),
    )


def create_video(db: Session, ctx: RequestContext, payload: ExerciseVideoCreateRequest) -> models.ExerciseVideo:
    ctx.require_role("trainer", action="add exercise videos")
    v = save(db, models.ExerciseVideo(created_by=ctx.user_id, **payload.model_dump()))
    logger.info("Exercise video %s linked by %s", v.id, ctx.user_id)
    return v


def get_video_for(db: Session, ctx: RequestContext, video_id: int) -> models.ExerciseVideo:
    """Load a video; private videos are visible to staff only."""
    v = BaseRepository(models.ExerciseVideo, db, "ExerciseVideo").get_or_404(video_id)
    if not v.is_public and not ctx.is_staff:
        raise PermissionDeniedError(f"view exercise video {video_id}", role=ctx.role)
    return v


def _require_video_owner(ctx: RequestContext, v: models.ExerciseVideo, action: str) -> None:
    if not (ctx.is_admin or v.created_by == ctx.user_id):
        raise PermissionDeniedError(f"{action} exercise video {v.id}", role=ctx.role)


def update_video(db: Session, ctx: RequestContext, video_id: int,
                 payload: ExerciseVideoUpdateRequest) -> models.ExerciseVideo:
    v = get_video_for(db, ctx, video_id)
    _require_video_owner(ctx, v, "edit")
    changes = payload.model_dump(exclude_unset=True)
    _reject_cleared(changes, ("title", "video_url", "difficulty", "is_public"))
    for name, value in changes.items():
        setattr(v, name, value)
    v.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(v)
    logger.info("Exercise video %s updated", v.id)
    return v


def delete_video(db: Session, ctx: RequestContext, video_id: int) -> None:
    v = get_video_for(db, ctx, video_id)
    _require_video_owner(ctx, v, "delete")
    db.delete(v)
    db.commit()
    logger.info("Exercise video %s deleted by %s", video_id, ctx.user_id)


def list_videos(db: Session, ctx: RequestContext, muscle_group: Optional[str] = None,
                difficulty: Optional[str] = None) -> List[models.ExerciseVideo]:
    """Newest first. Clients only see public videos."""
    query = db.query(models.ExerciseVideo)
    if not ctx.is_staff:
        query = query.filter(models.ExerciseVideo.is_public.is_(True))
    if muscle_group:
        query = query.filter(models.ExerciseVideo.muscle_group == muscle_group)
    if difficulty:
        query = query.filter(models.ExerciseVideo.difficulty == difficulty)
    return query.order_by(models.ExerciseVideo.created_at.desc(), models.ExerciseVideo.id.desc()).all()


# Guides

def guide_to_response(db: Session, g: models.Guide) -> GuideResponse:
    author = db.get(models.User, g.author_id)
    return GuideResponse(
        id=g.id,
        author_id=g.author_id,
        author_name=author.name if author else None,
        title=g.title,
        description=g.description,
        file_url=g.file_url,
        file_size=g.file_size,
        download_count=g.download_count,
        created_at=iso(g.created_at),
    )


def create_guide(db: Session, ctx: RequestContext, payload: GuideCreateRequest) -> models.Guide:
    ctx.require_role("nutritionist", "trainer", action="publish guides")
    g = save(db, models.Guide(author_id=ctx.user_id, download_count=0, **payload.model_dump()))
    logger.info("Guide %s published by %s", g.id, ctx.user_id)
    return g


def _require_author(ctx: RequestContext, g: models.Guide, action: str) -> None:
    if not (ctx.is_admin or g.author_id == ctx.user_id):
        raise PermissionDeniedError(f"{action} guide {g.id}", role=ctx.role)


def update_guide(db: Session, ctx: RequestContext, guide_id: int, payload: GuideUpdateRequest) -> models.Guide:
    repo = BaseRepository(models.Guide, db, "Guide")
    g = repo.get_or_404(guide_id)
    _require_author(ctx, g, "edit")
    changes = payload.model_dump(exclude_unset=True)
    _reject_cleared(changes, ("title", "description", "file_url"))
    for name, value in changes.items():
        setattr(g, name, value)
    return repo.update(g)


def delete_guide(db: Session, ctx: RequestContext, guide_id: int) -> None:
    repo = BaseRepository(models.Guide, db, "Guide")
    g = repo.get_or_404(guide_id)
    _require_author(ctx, g, "delete")
    repo.delete(g)
    logger.info("Guide %s deleted by %s", guide_id, ctx.user_id)


def list_guides(db: Session, q: Optional[str] = None) -> List[models.Guide]:
    """Guides whose title or description contains `q`, newest first."""
    query = db.query(models.Guide)
    if q:
        pattern = f"%{q.strip()}%"
        query = query.filter(models.Guide.title.ilike(pattern) | models.Guide.description.ilike(pattern))
    return query.order_by(models.Guide.created_at.desc(), models.Guide.id.desc()).all()


def get_guide(db: Session, guide_id: int) -> models.Guide:
    return BaseRepository(models.Guide, db, "Guide").get_or_404(guide_id)


def record_download(db: Session, guide_id: int) -> models.Guide:
    """Count one download and return the guide so the caller can follow `file_url`."""
    repo = BaseRepository(models.Guide, db, "Guide")
    g = repo.get_or_404(guide_id)
    g.download_count = models.Guide.download_count + 1
    return repo.update(g)
