# omikuji/models/fortune.py

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Dict, List, Optional, Tuple


class Tone(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


# --- Catalog models (loaded once from the taxonomy file, never mutated) ---

class FortuneLevel(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    weight: float = Field(..., gt=0, allow_inf_nan=False)
    rank: int  # 1 = best

class MessagePool(BaseModel):
    model_config = ConfigDict(frozen=True)

    positive_messages: Tuple[str, ...]
    negative_messages: Tuple[str, ...]
    neutral_messages: Optional[Tuple[str, ...]] = None

    def pool_for(self, tone: Tone) -> Tuple[str, ...]:
        if tone == Tone.POSITIVE:
            return self.positive_messages
        if tone == Tone.NEGATIVE:
            return self.negative_messages
        return self.neutral_messages or ()

class Category(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    icon: str = ""
    message_pool: MessagePool

class EmotionDistribution(BaseModel):
    model_config = ConfigDict(frozen=True)

    positive: float = Field(0.0, ge=0, allow_inf_nan=False)
    neutral: float = Field(0.0, ge=0, allow_inf_nan=False)
    negative: float = Field(0.0, ge=0, allow_inf_nan=False)

    def as_weights(self) -> List[float]:
        return [self.positive, self.neutral, self.negative]

class DrawType(BaseModel):
    """A kind of omikuji the caller can draw, with its overall messages per fortune level."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    description: str = ""
    messages: Dict[str, Tuple[str, ...]]

class OfferingTier(BaseModel):
    """
    One row of the offering table. Levels with rank <= max_rank get their
    weight multiplied by `multiplier` when this tier is offered.
    """
    model_config = ConfigDict(frozen=True)

    tier: int
    name: str
    description: str = ""
    multiplier: float = Field(1.0, ge=1, allow_inf_nan=False)
    max_rank: int = 0

class TaxonomyData(BaseModel):
    """Raw shape of the taxonomy file, checked for invariants by the loader."""
    levels: List[FortuneLevel]
    categories: List[Category]
    emotion_distributions: Dict[str, EmotionDistribution]
    draw_types: List[DrawType]
    offering_tiers: List[OfferingTier] = Field(default_factory=list)


# --- Draw results ---

class CategoryAdvice(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: str
    tone: Tone

class DrawResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    draw_type_id: str
    fortune_level_id: str
    message: str
    category_advice: Dict[str, CategoryAdvice]
    offering_tier: int = 0
    seed: Optional[str] = None
    drawn_at: datetime

class StoredFortuneResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    draw_type_id: str
    draw_type_name: str
    result: DrawResult


# --- API payloads ---

class DrawRequest(BaseModel):
    seed: Optional[str] = None
    offering_tier: Optional[int] = None

class PersistenceErrorInfo(BaseModel):
    code: str
    detail: str
    key: Optional[str] = None

class DrawResponse(BaseModel):
    fortune: StoredFortuneResult
    fresh: bool
    persistence_error: Optional[PersistenceErrorInfo] = None

class RestoreResponse(BaseModel):
    fortune: StoredFortuneResult
    persistence_error: Optional[PersistenceErrorInfo] = None

class ResetResponse(BaseModel):
    draw_type_id: str
    persistence_error: Optional[PersistenceErrorInfo] = None
