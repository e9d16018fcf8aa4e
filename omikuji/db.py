from datetime import datetime, timezone
from typing import Optional

from pymongo import ASCENDING, IndexModel, MongoClient
from pymongo.collection import Collection

from .core.config import settings
from .services.result_store import InMemoryMedium, StorageMedium


class MongoMedium(StorageMedium):
    """Stores each serialized result as a {key, value, updated_at} document."""

    def __init__(self, collection: Collection):
        self.collection = collection

    def ensure_indexes(self) -> None:
        self.collection.create_indexes([
            IndexModel([("key", ASCENDING)], unique=True, name="result_key_unique")
        ])

    def read(self, key: str) -> Optional[str]:
        doc = self.collection.find_one({"key": key})
        return doc["value"] if doc else None

    def write(self, key: str, value: str) -> None:
        self.collection.update_one(
            {"key": key},
            {"$set": {"value": value, "updated_at": datetime.now(timezone.utc)}},
            upsert=True,
        )

    def remove(self, key: str) -> None:
        self.collection.delete_one({"key": key})


def create_medium() -> StorageMedium:
    """Builds the persistence medium selected by STORAGE_BACKEND."""
    if settings.STORAGE_BACKEND == "mongo":
        # tz_aware=True so dates read back are timezone-aware (UTC).
        client = MongoClient(settings.DATABASE_URL, tz_aware=True)
        return MongoMedium(client[settings.DATABASE_NAME][settings.RESULT_COLLECTION])
    return InMemoryMedium()
