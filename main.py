# main.py

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from contextlib import asynccontextmanager
import logging
from logging.handlers import RotatingFileHandler
import time

# --- Core Application Imports ---
from omikuji.db import MongoMedium, create_medium
from omikuji.routers import catalog, fortune
from omikuji.core.config import settings
from omikuji.core.errors import FortuneEngineError, InvalidInputError, NotFoundError
from omikuji.services.fortune_service import FortuneService
from omikuji.services.result_store import ResultStore
from omikuji.services.taxonomy import load_taxonomy

# --- Rate Limiting Imports (Conditional) ---
from omikuji.core.rate_limiter import limiter, limiter_decorator
if limiter:
    from slowapi.errors import RateLimitExceeded

# --- Logging Setup ---
logger = logging.getLogger("api_logger")
logger.setLevel(logging.INFO)
handler = RotatingFileHandler(settings.LOG_FILE, maxBytes=5*1024*1024, backupCount=5)
formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
handler.setFormatter(formatter)
logger.addHandler(handler)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Loads the taxonomy and wires the fortune service. A broken taxonomy
    stops startup here, before any draw can be served.
    """
    logger.info("Application startup: loading taxonomy...")
    taxonomy = load_taxonomy(settings.TAXONOMY_PATH)

    medium = create_medium()
    if isinstance(medium, MongoMedium):
        try:
            medium.ensure_indexes()
            logger.info("Result store indexes created successfully.")
        except PyMongoError as e:
            logger.error(f"An error occurred during index creation: {e}")

    store = ResultStore(medium, key_prefix=settings.STORAGE_KEY_PREFIX)
    app.state.fortune_service = FortuneService(taxonomy, store)
    logger.info(f"Fortune service ready (storage backend: {settings.STORAGE_BACKEND}).")
    yield
    logger.info("Application shutdown.")


app = FastAPI(
    title="Engineer Omikuji API",
    description="Fortune draws for software engineers: weighted fortune levels with category advice.",
    version="1.0.0",
    lifespan=lifespan
)

# --- Rate Limiting Setup (Conditional) ---
if settings.RATE_LIMITING_ENABLED and limiter:
    logger.info(f"Rate limiting is ENABLED. Storage: {settings.REDIS_URL or 'memory'}")
    app.state.limiter = limiter

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
        logger.warning(f"Rate limit exceeded for IP {request.client.host} on path {request.url.path}")
        return JSONResponse(
            status_code=429,
            content={"detail": f"Rate limit exceeded: {exc.detail}"},
        )
else:
    logger.info("Rate limiting is DISABLED.")

# --- Engine Errors ---
@app.exception_handler(FortuneEngineError)
async def fortune_engine_error_handler(request: Request, exc: FortuneEngineError):
    if isinstance(exc, NotFoundError):
        status_code = 404
    elif isinstance(exc, InvalidInputError):
        status_code = 400
    else:
        status_code = 500
    logger.warning(f'Engine error code="{exc.code}" path="{request.url.path}": {exc.message}')
    return JSONResponse(status_code=status_code, content=exc.to_dict())

# --- Logging Middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = (time.time() - start_time) * 1000
    ip_address = request.client.host if request.client else "unknown"

    log_message = (
        f'ip="{ip_address}" '
        f'method="{request.method}" '
        f'path="{request.url.path}" '
        f'status={response.status_code} '
        f'duration={process_time:.2f}ms'
    )
    logger.info(log_message)
    return response

# --- CORS Middleware Configuration ---
logger.info(f"CORS origins configured for: {settings.CORS_ORIGINS}")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- API Routers ---
app.include_router(catalog.router)
app.include_router(fortune.router)

# --- Root Endpoint ---
@app.get("/")
@limiter_decorator("100/minute")
def read_root(request: Request):
    """
    Root endpoint for health checks and welcome message.
    """
    return {"message": "Welcome to the Engineer Omikuji API!"}
