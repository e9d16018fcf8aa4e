# omikuji/services/draw_orchestrator.py

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence

from ..core.time_service import now_in_app_timezone
from ..models.fortune import Category, CategoryAdvice, DrawResult, FortuneLevel, OfferingTier, Tone
from .random_source import RandomSource, make_source
from .taxonomy import Taxonomy
from .weighted_selector import select

logger = logging.getLogger("api_logger.draw")

TONES = [Tone.POSITIVE, Tone.NEUTRAL, Tone.NEGATIVE]


def adjusted_weights(levels: Sequence[FortuneLevel], tier: OfferingTier) -> List[float]:
    """Applies the offering's multiplier to every level ranked at or above tier.max_rank."""
    return [
        level.weight * tier.multiplier if level.rank <= tier.max_rank else level.weight
        for level in levels
    ]


def pick_uniform(messages: Sequence[str], source: RandomSource) -> str:
    return select(messages, [1.0] * len(messages), source)


class DrawOrchestrator:
    """
    Produces one complete DrawResult: a fortune level, the draw type's overall
    message for it, and one piece of advice (with its tone) per category.

    Every random decision goes through a single RandomSource, consumed in a
    fixed order (level, overall message, then tone and message per category),
    so a seeded draw is fully reproducible for a given taxonomy.
    """

    def __init__(self, taxonomy: Taxonomy, clock: Callable[[], datetime] = now_in_app_timezone):
        self.taxonomy = taxonomy
        self.clock = clock

    def draw(self, draw_type_id: str, seed: Optional[str] = None, offering_tier: Optional[int] = None) -> DrawResult:
        draw_type = self.taxonomy.draw_type(draw_type_id)
        tier = self.taxonomy.offering_tier(offering_tier)
        source = make_source(seed)

        levels = self.taxonomy.all_levels()
        level = select(levels, adjusted_weights(levels, tier), source)
        message = pick_uniform(draw_type.messages[level.id], source)

        category_advice: Dict[str, CategoryAdvice] = {}
        for category in self.taxonomy.categories_in_order():
            category_advice[category.id] = self._advise(category, level, source)

        logger.info(
            f'draw_type="{draw_type.id}" level="{level.id}" tier={tier.tier} seeded={seed is not None}'
        )
        return DrawResult(
            draw_type_id=draw_type.id,
            fortune_level_id=level.id,
            message=message,
            category_advice=category_advice,
            offering_tier=tier.tier,
            seed=seed,
            drawn_at=self.clock(),
        )

    def _advise(self, category: Category, level: FortuneLevel, source: RandomSource) -> CategoryAdvice:
        distribution = self.taxonomy.emotion_distribution_for(level.id)
        weights = distribution.as_weights()
        if not category.message_pool.neutral_messages:
            weights[1] = 0.0
            if sum(weights) <= 0:
                # All-neutral distribution on a category without neutral advice.
                weights = [1.0, 0.0, 1.0]

        tone = select(TONES, weights, source)
        content = pick_uniform(category.message_pool.pool_for(tone), source)
        return CategoryAdvice(content=content, tone=tone)
