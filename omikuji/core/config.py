# omikuji/core/config.py

from pydantic_settings import BaseSettings
from typing import List, Literal, Optional

class Settings(BaseSettings):
    # "memory" keeps results in-process, "mongo" persists them to DATABASE_URL.
    STORAGE_BACKEND: Literal["memory", "mongo"] = "memory"
    DATABASE_URL: str = "mongodb://localhost:27017"
    DATABASE_NAME: str = "omikuji"
    RESULT_COLLECTION: str = "fortune_results"
    STORAGE_KEY_PREFIX: str = "omikuji-result:"

    # Path to a taxonomy JSON file. The bundled catalog is used when unset.
    TAXONOMY_PATH: Optional[str] = None

    RATE_LIMITING_ENABLED: bool = False
    # Limiter counters go to Redis when set, otherwise to process memory.
    REDIS_URL: Optional[str] = None
    DRAW_RATE_LIMIT: str = "30/minute"
    READ_RATE_LIMIT: str = "60/minute"

    APP_TIMEZONE: str = "Asia/Tokyo"

    LOG_FILE: str = "api.log"

    # A comma-separated string of allowed frontend origins for CORS.
    CORS_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000"

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    class Config:
        env_file = ".env"

settings = Settings()
