# omikuji/core/rate_limiter.py

from typing import Callable, Optional, Tuple

from slowapi import Limiter
from slowapi.util import get_remote_address
from ..core.config import settings

# Stand-in for limiter.limit when rate limiting is switched off.
def no_op_decorator(*args, **kwargs):
    def decorator(func):
        return func
    return decorator

def build_limiter(enabled: bool, redis_url: Optional[str] = None) -> Tuple[Optional[Limiter], Callable]:
    """
    Returns the limiter and the decorator routes should use.
    Counters live in Redis when a URL is given, otherwise in process memory
    (per worker, so only suitable for a single-process deployment).
    """
    if not enabled:
        return None, no_op_decorator
    new_limiter = Limiter(key_func=get_remote_address, storage_uri=redis_url or "memory://")
    return new_limiter, new_limiter.limit

limiter, limiter_decorator = build_limiter(settings.RATE_LIMITING_ENABLED, settings.REDIS_URL)

# Per-route budgets, configurable through the environment.
DRAW_LIMIT = settings.DRAW_RATE_LIMIT
READ_LIMIT = settings.READ_RATE_LIMIT
