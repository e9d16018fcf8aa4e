# omikuji/services/taxonomy.py

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from pydantic import ValidationError

from ..core.errors import NotFoundError, InvalidInputError, TaxonomyConfigError
from ..models.fortune import (
    Category,
    DrawType,
    EmotionDistribution,
    FortuneLevel,
    OfferingTier,
    TaxonomyData,
    Tone,
)

logger = logging.getLogger("api_logger.taxonomy")

DEFAULT_TAXONOMY_PATH = Path(__file__).resolve().parent.parent / "data" / "taxonomy.json"

NO_OFFERING = OfferingTier(tier=0, name="No offering", multiplier=1.0, max_rank=0)


class Taxonomy:
    """
    Immutable catalog of fortune levels, categories, draw types and offering tiers.
    Build it with `Taxonomy.from_data` (or `load_taxonomy`) so the invariants are checked
    once, up front; a Taxonomy that exists is always usable for drawing.
    """

    def __init__(self, data: TaxonomyData):
        _validate(data)
        self._levels: Tuple[FortuneLevel, ...] = tuple(sorted(data.levels, key=lambda level: level.rank))
        self._levels_by_id: Dict[str, FortuneLevel] = {level.id: level for level in self._levels}
        self._categories: Tuple[Category, ...] = tuple(data.categories)
        self._categories_by_id: Dict[str, Category] = {category.id: category for category in self._categories}
        self._distributions: Dict[str, EmotionDistribution] = dict(data.emotion_distributions)
        self._draw_types: Tuple[DrawType, ...] = tuple(data.draw_types)
        self._draw_types_by_id: Dict[str, DrawType] = {draw_type.id: draw_type for draw_type in self._draw_types}
        tiers = data.offering_tiers or [NO_OFFERING]
        self._offering_tiers: Tuple[OfferingTier, ...] = tuple(sorted(tiers, key=lambda tier: tier.tier))

    @classmethod
    def from_data(cls, raw: Union[dict, TaxonomyData]) -> "Taxonomy":
        if isinstance(raw, TaxonomyData):
            return cls(raw)
        try:
            data = TaxonomyData.model_validate(raw)
        except ValidationError as e:
            raise TaxonomyConfigError(f"Taxonomy data has an invalid shape: {e}")
        return cls(data)

    # --- Levels ---

    def all_levels(self) -> Tuple[FortuneLevel, ...]:
        return self._levels

    def level(self, level_id: str) -> FortuneLevel:
        try:
            return self._levels_by_id[level_id]
        except KeyError:
            raise NotFoundError(f"Unknown fortune level: {level_id!r}", code="unknown_fortune_level")

    def emotion_distribution_for(self, level_id: str) -> EmotionDistribution:
        self.level(level_id)
        return self._distributions[level_id]

    # --- Categories ---

    def categories_in_order(self) -> Tuple[Category, ...]:
        return self._categories

    def category(self, category_id: str) -> Category:
        try:
            return self._categories_by_id[category_id]
        except KeyError:
            raise NotFoundError(f"Unknown category: {category_id!r}", code="unknown_category")

    def infer_tone(self, category_id: str, text: str) -> Optional[Tone]:
        """
        Legacy lookup for callers that only kept the advice text: finds which
        pool of the category contains it. Draw results already record the tone;
        prefer that. Returns None when the text is in no pool.
        """
        pool = self.category(category_id).message_pool
        for tone in (Tone.POSITIVE, Tone.NEGATIVE, Tone.NEUTRAL):
            if text in pool.pool_for(tone):
                return tone
        return None

    # --- Draw types ---

    def draw_types(self) -> Tuple[DrawType, ...]:
        return self._draw_types

    def draw_type(self, draw_type_id: str) -> DrawType:
        try:
            return self._draw_types_by_id[draw_type_id]
        except KeyError:
            raise NotFoundError(f"Unknown draw type: {draw_type_id!r}", code="unknown_draw_type")

    # --- Offerings ---

    def offering_tiers(self) -> Tuple[OfferingTier, ...]:
        return self._offering_tiers

    def offering_tier(self, tier: Optional[int]) -> OfferingTier:
        if tier is None:
            return self._offering_tiers[0]
        max_tier = len(self._offering_tiers) - 1
        if isinstance(tier, bool) or not isinstance(tier, int) or not 0 <= tier <= max_tier:
            raise InvalidInputError(
                f"Offering tier must be an integer between 0 and {max_tier}, got {tier!r}",
                code="invalid_offering_tier",
            )
        return self._offering_tiers[tier]


def _validate(data: TaxonomyData) -> None:
    """Checks the catalog invariants and raises TaxonomyConfigError on the first problem found."""
    def fail(message: str):
        raise TaxonomyConfigError(message)

    if not data.levels:
        fail("At least one fortune level is required")

    level_ids = [level.id for level in data.levels]
    if len(set(level_ids)) != len(level_ids):
        fail(f"Fortune level ids must be unique: {level_ids}")
    ranks = [level.rank for level in data.levels]
    if len(set(ranks)) != len(ranks):
        fail(f"Fortune level ranks must be unique: {ranks}")

    if not data.categories:
        fail("At least one category is required")
    category_ids = [category.id for category in data.categories]
    if len(set(category_ids)) != len(category_ids):
        fail(f"Category ids must be unique: {category_ids}")
    for category in data.categories:
        _validate_pool(category, fail)

    missing = set(level_ids) - set(data.emotion_distributions)
    extra = set(data.emotion_distributions) - set(level_ids)
    if missing or extra:
        fail(f"Emotion distributions must cover exactly the fortune levels (missing={sorted(missing)}, unknown={sorted(extra)})")
    for level_id, distribution in data.emotion_distributions.items():
        if sum(distribution.as_weights()) <= 0:
            fail(f"Emotion distribution for {level_id!r} must have a positive total")

    if not data.draw_types:
        fail("At least one draw type is required")
    draw_type_ids = [draw_type.id for draw_type in data.draw_types]
    if len(set(draw_type_ids)) != len(draw_type_ids):
        fail(f"Draw type ids must be unique: {draw_type_ids}")
    for draw_type in data.draw_types:
        unknown = set(draw_type.messages) - set(level_ids)
        if unknown:
            fail(f"Draw type {draw_type.id!r} has messages for unknown levels: {sorted(unknown)}")
        for level_id in level_ids:
            if not draw_type.messages.get(level_id):
                fail(f"Draw type {draw_type.id!r} has no messages for level {level_id!r}")

    tier_numbers = sorted(tier.tier for tier in data.offering_tiers)
    if tier_numbers and tier_numbers != list(range(len(tier_numbers))):
        fail(f"Offering tiers must be numbered 0..n without gaps, got {tier_numbers}")


def _validate_pool(category: Category, fail) -> None:
    pool = category.message_pool
    if not pool.positive_messages or not pool.negative_messages:
        fail(f"Category {category.id!r} needs non-empty positive and negative message pools")
    if pool.neutral_messages is not None and not pool.neutral_messages:
        fail(f"Category {category.id!r} has an empty neutral message pool")

    pools: List[Tuple[str, Tuple[str, ...]]] = [
        ("positive", pool.positive_messages),
        ("negative", pool.negative_messages),
        ("neutral", pool.neutral_messages or ()),
    ]
    for i, (name_a, messages_a) in enumerate(pools):
        for name_b, messages_b in pools[i + 1:]:
            shared = set(messages_a) & set(messages_b)
            if shared:
                fail(f"Category {category.id!r} has messages in both {name_a} and {name_b} pools: {sorted(shared)}")


def load_taxonomy(path: Optional[Union[str, Path]] = None) -> Taxonomy:
    """Reads and validates a taxonomy JSON file. Defaults to the bundled catalog."""
    taxonomy_path = Path(path) if path else DEFAULT_TAXONOMY_PATH
    try:
        raw = json.loads(taxonomy_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise TaxonomyConfigError(f"Cannot read taxonomy file {taxonomy_path}: {e}")
    except json.JSONDecodeError as e:
        raise TaxonomyConfigError(f"Taxonomy file {taxonomy_path} is not valid JSON: {e}")

    taxonomy = Taxonomy.from_data(raw)
    logger.info(
        f"Loaded taxonomy from {taxonomy_path}: {len(taxonomy.all_levels())} levels, "
        f"{len(taxonomy.categories_in_order())} categories, {len(taxonomy.draw_types())} draw types"
    )
    return taxonomy
