# omikuji/routers/fortune.py

from fastapi import APIRouter, Depends, HTTPException, Request, status
from typing import Optional

from ..core.errors import PersistenceError
from ..core.rate_limiter import DRAW_LIMIT, READ_LIMIT, limiter_decorator
from ..models.fortune import DrawRequest, DrawResponse, PersistenceErrorInfo, ResetResponse, RestoreResponse
from ..services.fortune_service import FortuneService
from .dependencies import get_fortune_service

router = APIRouter(prefix="/fortune", tags=["Fortune"])

def _error_info(error: Optional[PersistenceError]) -> Optional[PersistenceErrorInfo]:
    return PersistenceErrorInfo(**error.to_dict()) if error else None

@router.post("/{draw_type_id}/draw", response_model=DrawResponse)
@limiter_decorator(DRAW_LIMIT)
def draw(
    request: Request,
    draw_type_id: str,
    body: Optional[DrawRequest] = None,
    service: FortuneService = Depends(get_fortune_service),
):
    """
    Draws a fortune for the draw type, or returns the one already stored for it.
    `fresh` tells whether a new draw happened.
    """
    body = body or DrawRequest()
    outcome = service.draw(draw_type_id, seed=body.seed, offering_tier=body.offering_tier)
    return DrawResponse(
        fortune=outcome.stored,
        fresh=outcome.fresh,
        persistence_error=_error_info(outcome.persistence_error),
    )

@router.get("/{draw_type_id}", response_model=RestoreResponse)
@limiter_decorator(READ_LIMIT)
def restore(request: Request, draw_type_id: str, service: FortuneService = Depends(get_fortune_service)):
    outcome = service.restore(draw_type_id)
    if outcome.stored is None:
        # A failed read also lands here; keep its signal in the body.
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "code": "no_stored_result",
                "message": "No fortune has been drawn for this type yet",
                "persistence_error": outcome.persistence_error.to_dict() if outcome.persistence_error else None,
            },
        )
    return RestoreResponse(fortune=outcome.stored, persistence_error=_error_info(outcome.persistence_error))

@router.delete("/{draw_type_id}", response_model=ResetResponse)
@limiter_decorator(DRAW_LIMIT)
def reset(request: Request, draw_type_id: str, service: FortuneService = Depends(get_fortune_service)):
    outcome = service.reset(draw_type_id)
    return ResetResponse(draw_type_id=draw_type_id, persistence_error=_error_info(outcome.persistence_error))
