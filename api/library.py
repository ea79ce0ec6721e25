"""Supplement, exercise video and guide library API router.

Every authenticated user can browse the libraries; writes are limited to
staff as described on each route.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from database.deps import get_db_read, get_db_write
from core.context import RequestContext, get_request_context
from core.logger import get_logger
from services import library_service
from schemas import (
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

logger = get_logger("api.library")
router = APIRouter(prefix="/api", tags=["library"])


@router.get("/supplements", response_model=List[SupplementResponse])
def list_supplements(q: Optional[str] = None, category: Optional[str] = None,
                     ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_read)):
    """Search the supplement catalogue by name and category."""
    return [library_service.supplement_to_response(s) for s in library_service.list_supplements(db, q, category)]


@router.get("/supplements/{supplement_id}", response_model=SupplementResponse)
def get_supplement(supplement_id: int, ctx: RequestContext = Depends(get_request_context),
                   db: Session = Depends(get_db_read)):
    return library_service.supplement_to_response(library_service.get_supplement(db, supplement_id))


@router.post("/supplements", response_model=SupplementResponse, status_code=201)
def create_supplement(payload: SupplementCreateRequest, ctx: RequestContext = Depends(get_request_context),
                      db: Session = Depends(get_db_write)):
    """Add a supplement. Nutritionists only; names are unique ignoring case."""
    return library_service.supplement_to_response(library_service.create_supplement(db, ctx, payload))


@router.patch("/supplements/{supplement_id}", response_model=SupplementResponse)
def update_supplement(supplement_id: int, payload: SupplementUpdateRequest,
                      ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_write)):
    s = library_service.update_supplement(db, ctx, supplement_id, payload)
    return library_service.supplement_to_response(s)


@router.delete("/supplements/{supplement_id}", status_code=204)
def delete_supplement(supplement_id: int, ctx: RequestContext = Depends(get_request_context),
                      db: Session = Depends(get_db_write)):
    library_service.delete_supplement(db, ctx, supplement_id)


@router.get("/exercise-videos", response_model=List[ExerciseVideoResponse])
def list_videos(muscle_group: Optional[str] = None, difficulty: Optional[str] = None,
                ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_read)):
    videos = library_service.list_videos(db, ctx, muscle_group=muscle_group, difficulty=difficulty)
    return [library_service.video_to_response(v) for v in videos]


@router.get("/exercise-videos/{video_id}", response_model=ExerciseVideoResponse)
def get_video(video_id: int, ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_read)):
    return library_service.video_to_response(library_service.get_video_for(db, ctx, video_id))


@router.post("/exercise-videos", response_model=ExerciseVideoResponse, status_code=201)
def create_video(payload: ExerciseVideoCreateRequest, ctx: RequestContext = Depends(get_request_context),
                 db: Session = Depends(get_db_write)):
    """Link an exercise video. Trainers only."""
    return library_service.video_to_response(library_service.create_video(db, ctx, payload))


@router.patch("/exercise-videos/{video_id}", response_model=ExerciseVideoResponse)
def update_video(video_id: int, payload: ExerciseVideoUpdateRequest,
                 ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_write)):
    return library_service.video_to_response(library_service.update_video(db, ctx, video_id, payload))


@router.delete("/exercise-videos/{video_id}", status_code=204)
def delete_video(video_id: int, ctx: RequestContext = Depends(get_request_context),
                 db: Session = Depends(get_db_write)):
    library_service.delete_video(db, ctx, video_id)


@router.get("/guides", response_model=List[GuideResponse])
def list_guides(q: Optional[str] = None, ctx: RequestContext = Depends(get_request_context),
                db: Session = Depends(get_db_read)):
    return [library_service.guide_to_response(db, g) for g in library_service.list_guides(db, q)]


@router.get("/guides/{guide_id}", response_model=GuideResponse)
def get_guide(guide_id: int, ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_read)):
    return library_service.guide_to_response(db, library_service.get_guide(db, guide_id))


@router.post("/guides", response_model=GuideResponse, status_code=201)
def create_guide(payload: GuideCreateRequest, ctx: RequestContext = Depends(get_request_context),
                 db: Session = Depends(get_db_write)):
    """Publish a guide. Nutritionists and trainers only."""
    return library_service.guide_to_response(db, library_service.create_guide(db, ctx, payload))


@router.post("/guides/{guide_id}/download", response_model=GuideResponse)
def download_guide(guide_id: int, ctx: RequestContext = Depends(get_request_context),
                   db: Session = Depends(get_db_write)):
    """Count a download; the client then fetches `file_url`."""
    return library_service.guide_to_response(db, library_service.record_download(db, guide_id))


@router.patch("/guides/{guide_id}", response_model=GuideResponse)
def update_guide(guide_id: int, payload: GuideUpdateRequest, ctx: RequestContext = Depends(get_request_context),
                 db: Session = Depends(get_db_write)):
    return library_service.guide_to_response(db, library_service.update_guide(db, ctx, guide_id, payload))


@router.delete("/guides/{guide_id}", status_code=204)
def delete_guide(guide_id: int, ctx: RequestContext = Depends(get_request_context),
                 db: Session = Depends(get_db_write)):
    library_service.delete_guide(db, ctx, guide_id)
