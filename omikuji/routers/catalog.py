# omikuji/routers/catalog.py

from fastapi import APIRouter, Depends, Request
from typing import List

from ..core.rate_limiter import READ_LIMIT, limiter_decorator
from ..models.fortune import Category, DrawType, FortuneLevel, OfferingTier
from ..services.taxonomy import Taxonomy
from .dependencies import get_taxonomy

router = APIRouter(prefix="/catalog", tags=["Catalog"])

@router.get("/levels", response_model=List[FortuneLevel])
@limiter_decorator(READ_LIMIT)
def list_levels(request: Request, taxonomy: Taxonomy = Depends(get_taxonomy)):
    """Fortune levels, best rank first."""
    return list(taxonomy.all_levels())

@router.get("/categories", response_model=List[Category])
@limiter_decorator(READ_LIMIT)
def list_categories(request: Request, taxonomy: Taxonomy = Depends(get_taxonomy)):
    return list(taxonomy.categories_in_order())

@router.get("/draw-types", response_model=List[DrawType])
@limiter_decorator(READ_LIMIT)
def list_draw_types(request: Request, taxonomy: Taxonomy = Depends(get_taxonomy)):
    return list(taxonomy.draw_types())

@router.get("/offerings", response_model=List[OfferingTier])
@limiter_decorator(READ_LIMIT)
def list_offerings(request: Request, taxonomy: Taxonomy = Depends(get_taxonomy)):
    return list(taxonomy.offering_tiers())
