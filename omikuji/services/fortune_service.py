# omikuji/services/fortune_service.py

import logging
from dataclasses import dataclass
from typing import Optional

from ..core.errors import PersistenceError
from ..models.fortune import StoredFortuneResult
from .draw_orchestrator import DrawOrchestrator
from .random_source import validate_seed
from .result_store import ResultStore
from .taxonomy import Taxonomy

logger = logging.getLogger("api_logger.fortune")


@dataclass
class DrawOutcome:
    stored: StoredFortuneResult
    fresh: bool
    persistence_error: Optional[PersistenceError] = None


@dataclass
class RestoreOutcome:
    stored: Optional[StoredFortuneResult] = None
    persistence_error: Optional[PersistenceError] = None


@dataclass
class ResetOutcome:
    persistence_error: Optional[PersistenceError] = None


class FortuneService:
    """
    The draw/restore/reset API the HTTP layer depends on.

    A draw is idempotent per draw type: once a result is stored for a draw type,
    `draw` returns it unchanged (ignoring seed and offering) until `reset`.
    """

    def __init__(self, taxonomy: Taxonomy, store: ResultStore, orchestrator: Optional[DrawOrchestrator] = None):
        self.taxonomy = taxonomy
        self.store = store
        self.orchestrator = orchestrator or DrawOrchestrator(taxonomy)

    def draw(self, draw_type_id: str, seed: Optional[str] = None, offering_tier: Optional[int] = None) -> DrawOutcome:
        # Reject bad input even when a stored result would have been returned.
        draw_type = self.taxonomy.draw_type(draw_type_id)
        self.taxonomy.offering_tier(offering_tier)
        if seed is not None:
            validate_seed(seed)

        existing = self.store.get(draw_type.id)
        if existing.value is not None:
            return DrawOutcome(stored=existing.value, fresh=False, persistence_error=existing.error)

        result = self.orchestrator.draw(draw_type.id, seed=seed, offering_tier=offering_tier)
        stored = StoredFortuneResult(draw_type_id=draw_type.id, draw_type_name=draw_type.name, result=result)
        written = self.store.put(draw_type.id, stored)
        return DrawOutcome(stored=written.value, fresh=True, persistence_error=written.error or existing.error)

    def restore(self, draw_type_id: str) -> RestoreOutcome:
        draw_type = self.taxonomy.draw_type(draw_type_id)
        outcome = self.store.get(draw_type.id)
        return RestoreOutcome(stored=outcome.value, persistence_error=outcome.error)

    def reset(self, draw_type_id: str) -> ResetOutcome:
        draw_type = self.taxonomy.draw_type(draw_type_id)
        outcome = self.store.clear(draw_type.id)
        logger.info(f'Reset stored fortune for draw_type="{draw_type.id}"')
        return ResetOutcome(persistence_error=outcome.error)
