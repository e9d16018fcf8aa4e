# omikuji/core/errors.py

from typing import Optional


class FortuneEngineError(Exception):
    """
    Base class for every error raised by the draw engine.
    Each error carries a machine-readable `code` alongside the human message.
    """
    code = "engine_error"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_dict(self) -> dict:
        return {"code": self.code, "detail": self.message}


class TaxonomyConfigError(FortuneEngineError):
    # Fatal: raised while loading the catalog, no draw can proceed.
    code = "invalid_taxonomy"


class InvalidInputError(FortuneEngineError):
    code = "invalid_input"


class NotFoundError(FortuneEngineError):
    code = "not_found"


class PersistenceError(FortuneEngineError):
    """
    Non-fatal signal describing a failed read/write/remove on the persistence medium.
    It is returned next to the value, never raised out of the store.
    """
    code = "persistence_failed"

    def __init__(self, message: str, code: Optional[str] = None, key: Optional[str] = None):
        super().__init__(message, code)
        self.key = key

    def to_dict(self) -> dict:
        return {"code": self.code, "detail": self.message, "key": self.key}
