"""
FastAPI Application - Furrys Nexus API
Backend for the Furrys Nexus art-sharing gallery
"""

import time
import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from nexus.api.routes import router as api_router
from nexus.config import settings
from nexus.core.database import engine, verify_connection
from nexus.core.errors import register_exception_handlers
from nexus.core.logging import clear_request_context, configure_logging, get_logger, set_request_context
from nexus.core.migrations import run_migrations

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan context manager for startup and shutdown events"""
    configure_logging()
    logger.info(
        "startup",
        environment=settings.ENVIRONMENT,
        database=settings.DATABASE_URL.split("@")[1] if "@" in settings.DATABASE_URL else "configured",
    )

    # An unreachable database is fatal; a failed table creation is not
    await verify_connection()
    await run_migrations(engine)

    yield

    await engine.dispose()
    logger.info("shutdown")


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Art-sharing gallery: artwork, galleries, comments and content filters",
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def log_requests(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    """Tag every request with an id and log API calls with status and duration."""
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    set_request_context(request_id)
    start = time.perf_counter()
    try:
        response = await call_next(request)
        if request.url.path.startswith(settings.API_PREFIX):
            logger.info(
                "request_completed",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                duration_ms=round((time.perf_counter() - start) * 1000, 1),
            )
        response.headers["X-Request-ID"] = request_id
        return response
    finally:
        clear_request_context()


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint - API information"""
    return {
        "name": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint"""
    return {"status": "healthy"}


app.include_router(api_router, prefix=settings.API_PREFIX)

# Uploaded images
Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
app.mount(settings.UPLOAD_URL_PREFIX, StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")
