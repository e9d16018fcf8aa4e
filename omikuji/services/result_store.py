# omikuji/services/result_store.py

import logging
from dataclasses import dataclass
from typing import Dict, Generic, Optional, TypeVar

from pydantic import ValidationError

from ..core.errors import PersistenceError
from ..models.fortune import StoredFortuneResult

logger = logging.getLogger("api_logger.store")

V = TypeVar("V")


class StorageMedium:
    """
    Key/value capability the store persists into.
    `write` and `remove` may raise; `read` returns None for a missing key.
    """

    def read(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def write(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError


class InMemoryMedium(StorageMedium):
    def __init__(self):
        self._data: Dict[str, str] = {}

    def read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def write(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self):
        return list(self._data)


@dataclass
class StoreOutcome(Generic[V]):
    value: Optional[V] = None
    error: Optional[PersistenceError] = None


class ResultStore:
    """
    Persists one StoredFortuneResult per key. Each key is either Empty or Stored;
    put overwrites, clear empties.

    Medium failures never propagate: they come back as `StoreOutcome.error`.
    A value whose write failed is kept in an in-process shadow copy so it can
    still be read back (without the durability guarantee) until cleared.
    """

    def __init__(self, medium: StorageMedium, key_prefix: str = "omikuji-result:"):
        self.medium = medium
        self.key_prefix = key_prefix
        self._shadow: Dict[str, str] = {}

    def storage_key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def get(self, key: str) -> StoreOutcome[StoredFortuneResult]:
        storage_key = self.storage_key(key)
        error = None
        try:
            payload = self.medium.read(storage_key)
        except Exception as e:
            logger.warning(f"Reading {storage_key} failed: {e}")
            error = PersistenceError(f"Could not read stored result: {e}", code="read_failed", key=storage_key)
            payload = None

        if storage_key in self._shadow:
            payload = self._shadow[storage_key]
        if payload is None:
            return StoreOutcome(error=error)

        try:
            return StoreOutcome(value=StoredFortuneResult.model_validate_json(payload), error=error)
        except ValidationError as e:
            logger.warning(f"Discarding corrupt payload at {storage_key}: {e}")
            return StoreOutcome(
                error=PersistenceError("Stored result is corrupt and was ignored", code="corrupt_payload", key=storage_key)
            )

    def put(self, key: str, result: StoredFortuneResult) -> StoreOutcome[StoredFortuneResult]:
        storage_key = self.storage_key(key)
        payload = result.model_dump_json()
        error = None
        try:
            self.medium.write(storage_key, payload)
            self._shadow.pop(storage_key, None)
        except Exception as e:
            logger.warning(f"Writing {storage_key} failed, keeping the result in memory only: {e}")
            self._shadow[storage_key] = payload
            error = PersistenceError(f"Could not persist result: {e}", code="write_failed", key=storage_key)
        return StoreOutcome(value=StoredFortuneResult.model_validate_json(payload), error=error)

    def clear(self, key: str) -> StoreOutcome[None]:
        storage_key = self.storage_key(key)
        self._shadow.pop(storage_key, None)
        try:
            self.medium.remove(storage_key)
        except Exception as e:
            logger.warning(f"Removing {storage_key} failed: {e}")
            return StoreOutcome(error=PersistenceError(f"Could not remove stored result: {e}", code="remove_failed", key=storage_key))
        return StoreOutcome()
