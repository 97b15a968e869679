"""Fridge Fusion API – FastAPI application entry-point."""

import asyncio
from contextlib import asynccontextmanager, suppress
import logging
from collections.abc import AsyncIterator

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware

from src.fridge_fusion.config import UPLOAD_DIR, UPLOAD_URL_PREFIX, settings
from src.fridge_fusion.errors import http_exception_handler
from src.fridge_fusion.router import health, upload
from src.fridge_fusion.services.database import Database

# Configure logging from settings
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────
# Lifespan: connect to MongoDB on startup, disconnect on shutdown
# ──────────────────────────────────────────────
async def connect_database(database: Database) -> None:
    """Connect in a worker thread; requests are served in the meantime."""
    logger.info("🚀 Connecting to MongoDB …")
    if not await asyncio.to_thread(database.connect):
        logger.warning("⚠️  Running without a database connection.")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    database = Database()
    app.state.database = database
    connect_task = asyncio.create_task(connect_database(database))
    yield
    logger.info("🛑 Shutting down – closing MongoDB connection …")
    # A connect still in flight discards its client once close() has run
    connect_task.cancel()
    with suppress(asyncio.CancelledError):
        await connect_task
    database.close()


# ──────────────────────────────────────────────
# Application factory
# ──────────────────────────────────────────────
app = FastAPI(
    title="Fridge Fusion API",
    description="Backend for the Fridge Fusion app: profile image uploads.",
    version="1.0.0",
    lifespan=lifespan,
)

# ── CORS middleware (configured from environment variables) ──
app.add_middleware(
    middleware_class=CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_methods_list,
    allow_headers=settings.cors_headers_list,
)

logger.info("CORS configured with origins: %s", settings.cors_origins_list)

# ── error bodies use {"message": …} like the upload route ──
app.add_exception_handler(StarletteHTTPException, http_exception_handler)

# ── register routers ──
app.include_router(health.router)
app.include_router(upload.router)

# ── serve uploaded images statically ──
app.mount(UPLOAD_URL_PREFIX, StaticFiles(directory=str(UPLOAD_DIR)), name="uploads")
logger.info("Serving static files from: %s", UPLOAD_DIR)


def run() -> None:
    """Start the API with uvicorn on ``settings.port``."""
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
