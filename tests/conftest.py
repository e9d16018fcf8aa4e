"""
Pytest configuration and fixtures
"""
import os
from datetime import datetime, timezone

import pytest

# Settings are read at import time; keep tests on the in-memory backend.
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("RATE_LIMITING_ENABLED", "false")

from omikuji.services.draw_orchestrator import DrawOrchestrator
from omikuji.services.fortune_service import FortuneService
from omikuji.services.result_store import InMemoryMedium, ResultStore
from omikuji.services.taxonomy import Taxonomy, load_taxonomy

FIXED_NOW = datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)


def small_taxonomy_data() -> dict:
    """Two levels, two categories (only `review` has neutral advice), one draw type `t`."""
    return {
        "levels": [
            {"id": "common", "name": "Common", "weight": 40, "rank": 2},
            {"id": "rare", "name": "Rare", "weight": 5, "rank": 1},
        ],
        "emotion_distributions": {
            "rare": {"positive": 1.0, "neutral": 0.0, "negative": 0.0},
            "common": {"positive": 0.5, "neutral": 0.3, "negative": 0.2},
        },
        "categories": [
            {
                "id": "coding",
                "name": "Coding",
                "icon": "💻",
                "message_pool": {
                    "positive_messages": ["ships clean", "tests pass"],
                    "negative_messages": ["write tests first", "slow down"],
                },
            },
            {
                "id": "review",
                "name": "Review",
                "icon": "👀",
                "message_pool": {
                    "positive_messages": ["approved at once"],
                    "neutral_messages": ["a few comments"],
                    "negative_messages": ["split the PR"],
                },
            },
        ],
        "draw_types": [
            {
                "id": "t",
                "name": "Test Draw",
                "messages": {"common": ["an ordinary day"], "rare": ["a rare day", "a lucky day"]},
            }
        ],
        "offering_tiers": [
            {"tier": 0, "name": "none", "multiplier": 1.0, "max_rank": 0},
            {"tier": 1, "name": "big", "multiplier": 2.0, "max_rank": 1},
        ],
    }


def fixed_clock() -> datetime:
    return FIXED_NOW


@pytest.fixture
def small_taxonomy() -> Taxonomy:
    return Taxonomy.from_data(small_taxonomy_data())


@pytest.fixture(scope="session")
def bundled_taxonomy() -> Taxonomy:
    return load_taxonomy()


@pytest.fixture
def medium() -> InMemoryMedium:
    return InMemoryMedium()


@pytest.fixture
def store(medium: InMemoryMedium) -> ResultStore:
    return ResultStore(medium)


@pytest.fixture
def service(small_taxonomy: Taxonomy, store: ResultStore) -> FortuneService:
    return FortuneService(small_taxonomy, store, DrawOrchestrator(small_taxonomy, clock=fixed_clock))
