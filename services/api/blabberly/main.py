"""FastAPI application entry point.

Blabberly Discovery API - explore, search and place pages for food posts.
"""

from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from blabberly.routes import api_router
from blabberly.schemas import ErrorDetail, ErrorResponse
from blabberly.settings import get_settings
from blabberly.stores.postgres import close_db, init_db, ping_db

logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events.
    """
    # Initialize database (skip in tests if no DB available)
    try:
        await init_db()
        await ping_db()
        logger.info("Postgres connected")
    except Exception:
        logger.exception("Postgres init failed")

    yield

    await close_db()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Discovery and ranking API for restaurant posts",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Render HTTP errors (404 etc.) in the structured error format."""
        code = "NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR"
        body = ErrorResponse(error=ErrorDetail(code=code, message=str(exc.detail)))
        return JSONResponse(status_code=exc.status_code, content=body.model_dump(), headers=exc.headers)

    # Exception handler for structured error format
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler returning structured error format."""
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        message = str(exc) if settings.debug else "Internal server error"
        body = ErrorResponse(error=ErrorDetail(code="INTERNAL_ERROR", message=message))
        return JSONResponse(status_code=500, content=body.model_dump())

    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, bool]:
        """Health check endpoint."""
        return {"ok": True}

    app.include_router(api_router)

    return app


# Application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "blabberly.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
