"""FastAPI application entry point.

Inventory Catalog API - JSON-file-backed item catalog with search and stats.
"""

from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalog_api.errors import CatalogError, StorageReadError, ValidationError
from catalog_api.routes import api_router
from catalog_api.schemas import ErrorDetail, ErrorResponse
from catalog_api.services.statistics import StatisticsEngine
from catalog_api.settings import Settings, get_settings
from catalog_api.stores.json_file import RecordStore

logger = logging.getLogger("uvicorn.error")


def _error_response(status_code: int, code: str, message: str, detail: dict | None = None) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message, detail=detail))
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _validation_error(exc: RequestValidationError) -> ValidationError:
    """Reduce FastAPI's error list to the first failure's message."""
    errors = exc.errors()
    if not errors:
        return ValidationError("Invalid request")
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ())]
    if loc == ["body"]:
        # Missing body, or a body that is not a JSON object
        return ValidationError("Request body must be a JSON object")
    return ValidationError(first.get("msg", "Invalid request"), detail={"loc": loc})


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Warms the record cache on startup; a missing or broken data file is
    logged and left for requests to report.
    """
    store: RecordStore = app.state.record_store
    try:
        snapshot = await store.ensure_fresh()
        logger.info(f"Catalog ready: {len(snapshot)} items")
    except StorageReadError:
        logger.exception(f"Catalog warm-up failed for {store.path}")

    yield


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure FastAPI application.

    The record store and statistics engine are built here, once per app, and
    reached from handlers through ``app.state``.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Inventory catalog with search, pagination and statistics",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.state.settings = settings
    app.state.record_store = RecordStore(settings.data_path)
    app.state.statistics_engine = StatisticsEngine(
        settings.data_path,
        ttl_seconds=settings.stats_cache_ttl_seconds,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(CatalogError)
    async def catalog_exception_handler(request: Request, exc: CatalogError) -> JSONResponse:
        """Map typed core failures to status codes."""
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}", exc_info=exc)
        else:
            logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
        return _error_response(exc.status_code, exc.code, exc.message, exc.detail)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Malformed request bodies are client errors (400), not 422."""
        return await catalog_exception_handler(request, _validation_error(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Keep router-level HTTP errors (unknown routes, bad methods) in the error format."""
        if exc.status_code == 404 and exc.detail == "Not Found":
            message = f"Route Not Found - {request.url.path}"
        else:
            message = str(exc.detail)
        code = "NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR"
        return _error_response(exc.status_code, code, message)

    # Exception handler for structured error format
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler returning structured error format."""
        logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
        return _error_response(
            500,
            "INTERNAL_ERROR",
            str(exc) if settings.debug else "Internal server error",
        )

    # Health check endpoint
    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, bool]:
        """Health check endpoint."""
        return {"ok": True}

    # Include API routes
    app.include_router(api_router)

    return app


# Application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "catalog_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
