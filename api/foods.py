"""Food catalogue API router.

Exposes catalogue search and CRUD, nutrient-profile similarity suggestions,
and CSV import for bulk additions.
"""

import io
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session
from typing import List, Optional
from database.deps import get_db_read, get_db_write
from core.context import RequestContext, get_request_context
from core.exceptions import ValidationError
from core.logger import get_logger
from core.repository import BaseRepository
from database import models
from services import food_service
from schemas import FoodCreateRequest, FoodUpdateRequest, FoodFact, SimilarFood, FoodImportResponse

logger = get_logger("api.foods")
router = APIRouter(prefix="/api", tags=["foods"])


@router.get("/foods", response_model=List[FoodFact])
def list_foods(q: Optional[str] = None, category: Optional[str] = None,
               limit: int = Query(100, ge=1, le=500), skip: int = Query(0, ge=0),
               ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_read)):
    """Search the catalogue by name fragment and/or category.

    Args:
        q: Case-insensitive substring of the food name.
        category: Exact category to filter by.
        limit (int): Maximum number of foods to return.
        skip (int): Number of foods to skip (pagination).

    Returns:
        List of `FoodFact` objects ordered by name.
    """
    foods = food_service.search_foods(db, q=q, category=category, skip=skip, limit=limit)
    return [food_service.food_to_fact(f) for f in foods]


@router.get("/foods/{food_id}", response_model=FoodFact)
def get_food(food_id: int, ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_read)):
    return food_service.food_to_fact(BaseRepository(models.Food, db, "Food").get_or_404(food_id))


@router.get("/foods/{food_id}/similar", response_model=List[SimilarFood])
def similar_foods(food_id: int, top_k: int = Query(5, ge=1, le=50), same_category: bool = False,
                  ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db_read)):
    """Suggest substitutes with the closest nutrient profile, best first."""
    return food_service.similar_foods(db, food_id, top_k=top_k, same_category=same_category)


@router.post("/foods", response_model=FoodFact, status_code=201)
def create_food(payload: FoodCreateRequest, ctx: RequestContext = Depends(get_request_context),
                db: Session = Depends(get_db_write)):
    """Add a food to the catalogue. Nutritionists only.

    Raises:
        ConflictError: If a food with the same name exists.
    """
    return food_service.food_to_fact(food_service.create_food(db, ctx, payload))


@router.patch("/foods/{food_id}", response_model=FoodFact)
def update_food(food_id: int, payload: FoodUpdateRequest, ctx: RequestContext = Depends(get_request_context),
                db: Session = Depends(get_db_write)):
    """Edit a food. Plans referencing it show the new values on their next read."""
    return food_service.food_to_fact(food_service.update_food(db, ctx, food_id, payload))


@router.delete("/foods/{food_id}", status_code=204)
def delete_food(food_id: int, ctx: RequestContext = Depends(get_request_context),
                db: Session = Depends(get_db_write)):
    food_service.delete_food(db, ctx, food_id)


@router.post("/foods/import", response_model=FoodImportResponse)
async def import_foods(request: Request, ctx: RequestContext = Depends(get_request_context),
                       db: Session = Depends(get_db_write)):
    """Import foods from a CSV request body (`Content-Type: text/csv`).

    Foods whose names already exist are skipped.

    Returns:
        `FoodImportResponse` with the number added and the catalogue size.
    """
    raw = await request.body()
    if not raw.strip():
        raise ValidationError("Request body must contain CSV data", field="body")
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise ValidationError("CSV must be UTF-8 encoded", field="body")
    return food_service.import_foods(db, ctx, io.StringIO(text))
