import os
import logging
import logging.config
import asyncio
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import JSONResponse
from datetime import datetime
from sqlalchemy import text
from contextlib import asynccontextmanager

from app.db.base import Base
from arq import create_pool
from arq.connections import RedisSettings
from app.core.config import CORS_ORIGINS, ENV, REDIS_URL, UPLOAD_DIR
from app.core.errors import AppError
from app.core.storage import PUBLIC_PREFIX
from app.db import models  # noqa: F401  registers tables on Base.metadata
from app.db.session import engine, async_session
from app.api.routes import (
    auth,
    boards,
    board_members,
    board_cards,
    board_views,
    imports,
    system,
)

# Load logging config if present
if os.path.exists("logging.conf"):
    logging.config.fileConfig("logging.conf", disable_existing_loggers=False)
else:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
logger = logging.getLogger("root")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup logic
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    app.state.redis = None
    if REDIS_URL:
        app.state.redis = await create_pool(RedisSettings.from_dsn(REDIS_URL))
    logger.info("Database initialized")

    yield  # App runs here

    # Shutdown logic
    if app.state.redis is not None:
        await app.state.redis.close()
        await app.state.redis.connection_pool.disconnect()
    logger.info("Shutting down...")


# Create FastAPI app with lifespan
app = FastAPI(
    title="Kanban API",
    version="1.0",
    lifespan=lifespan,
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


if ENV == "development":
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info("CORS open for development environment")
else:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

os.makedirs(UPLOAD_DIR, exist_ok=True)
# Imported attachments
app.mount(PUBLIC_PREFIX, StaticFiles(directory=UPLOAD_DIR), name="uploads")

# API routes
app.include_router(auth.router)
app.include_router(boards.router)
app.include_router(board_members.router)
app.include_router(board_cards.router)
app.include_router(board_views.router)
app.include_router(imports.router)
app.include_router(system.router)


@app.api_route("/api/health", methods=["GET", "HEAD"])
async def health(request: Request):
    status = {
        "api": "ok",
        "database": None,
        "redis": None,
        "worker": None,
    }

    http_status = 200

    # --- Database check ---
    try:
        async with async_session() as db:
            await db.execute(text("SELECT 1"))
        status["database"] = "connected"
    except Exception as e:
        status["database"] = f"error: {e}"
        http_status = 503

    redis = getattr(request.app.state, "redis", None)
    if redis is None:
        status["redis"] = "not configured"
        status["worker"] = "not configured"
        return JSONResponse(content=status, status_code=http_status)

    # --- Redis check with lazy reconnect + backoff ---
    try:
        try:
            await redis.ping()
            status["redis"] = "connected"
        except Exception:
            logger.warning("Redis connection lost, attempting reconnect...")
            redis = await reconnect_redis_with_backoff()
            request.app.state.redis = redis
            status["redis"] = "reinitialized"
    except Exception as e:
        status["redis"] = f"error: {e}"
        http_status = 503

    # --- Worker heartbeat ---
    try:
        heartbeat = await request.app.state.redis.get("arq:heartbeat")
        if heartbeat:
            last_heartbeat = datetime.fromtimestamp(float(heartbeat))
            status["worker"] = f"running (last heartbeat {last_heartbeat.isoformat()})"
        else:
            status["worker"] = "not reporting"
            http_status = 503
    except Exception as e:
        status["worker"] = f"error: {e}"
        http_status = 503

    return JSONResponse(content=status, status_code=http_status)


async def reconnect_redis_with_backoff(max_retries: int = 3, base_delay: float = 1.0):
    """
    Attempt to reconnect to Redis using exponential backoff.
    Returns the new Redis pool or raises after all retries fail.
    """
    for attempt in range(max_retries):
        try:
            redis = await create_pool(RedisSettings.from_dsn(REDIS_URL))
            await redis.ping()
            logger.info(f"Redis reconnected on attempt {attempt + 1}")
            return redis
        except Exception as e:
            wait_time = base_delay * (2**attempt)
            logger.warning(f"Redis reconnect attempt {attempt + 1} failed: {e}")
            await asyncio.sleep(wait_time)
    raise RuntimeError("Failed to reconnect to Redis after multiple attempts")
