"""
FastAPI application entry point.

This module creates and configures the FastAPI application.
Using an application factory pattern (create_app function) because:
- Easier to test with different configurations
- Explicit about initialization order
- Shared resources (asset writer, database client, site store) are built
  exactly once per app instead of living in module globals

For local development:
    uvicorn blog.main:app --reload

For production:
    gunicorn blog.main:app -w 4 -k uvicorn.workers.UvicornWorker
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .api.routes import health, pages, site, upload
from .config.settings import Settings, get_settings
from .core.site.store import SiteStore
from .core.uploads.dispatcher import UploadDispatcher
from .infrastructure.mongo.client import MongoConfig, create_mongo_client
from .infrastructure.mongo.repositories.sites import SiteRepository
from .infrastructure.storage.client import RetryPolicy, StorageConfig, create_asset_writer

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger(__name__)

UPLOAD_ROUTE_PREFIX = "/api/upload"


def build_storage_config(settings: Settings) -> StorageConfig:
    """Resolve storage credentials from their server-only or public names."""
    return StorageConfig(
        region=settings.storage_region,
        access_key_id=settings.storage_access_key_id,
        access_key_secret=settings.storage_access_key_secret,
        bucket=settings.storage_bucket,
        base_path=settings.storage_base_path,
        endpoint_url=settings.oss_endpoint_url,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup populates the site store so components have data; shutdown
    closes the database client.
    """
    # Startup
    settings: Settings = app.state.settings

    logger.info(
        "Blog API starting",
        extra={
            "version": settings.api_version,
            "mock_mode": {"mongodb": settings.mongodb_mock_mode},
        }
    )

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )

    # Local uploads are served from here, so it has to exist before requests
    Path(settings.upload_root).mkdir(parents=True, exist_ok=True)

    # pymongo blocks; keep it off the event loop
    await asyncio.to_thread(app.state.site_store.refresh, app.state.site_repository)

    yield

    # Shutdown
    app.state.mongo_client.close()
    logger.info("Blog API shutting down")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory.

    Creates and configures the FastAPI application. Tests pass their own
    Settings; production uses the cached environment settings.
    """
    settings = settings or get_settings()

    logging.getLogger().setLevel(settings.log_level.upper())

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="""
        Personal blog backend.

        ## Features

        - Server-rendered pages with SEO metadata from the site document
        - File uploads to object storage, or local disk when it isn't configured
        - Site configuration API for client-side stores
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Shared resources, built once
    storage_config = build_storage_config(settings)
    writer = create_asset_writer(
        storage_config,
        upload_root=settings.upload_root,
        url_prefix=settings.upload_url_prefix,
        retry_policy=RetryPolicy(
            max_attempts=settings.upload_retry_max_attempts,
            initial_delay=settings.upload_retry_initial_delay,
            max_delay=settings.upload_retry_max_delay,
        ),
    )

    mongo_client = create_mongo_client(
        config=MongoConfig(uri=settings.mongodb_uri, database=settings.mongodb_database),
        mock_mode=settings.mongodb_mock_mode,
    )

    app.state.settings = settings
    app.state.upload_dispatcher = UploadDispatcher(
        writer, max_size_bytes=settings.max_upload_size_bytes
    )
    app.state.mongo_client = mongo_client
    app.state.site_repository = SiteRepository(mongo_client[settings.mongodb_database])
    app.state.site_store = SiteStore()

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(
        health.router,
        prefix="/health",
        tags=["Health"],
    )

    app.include_router(
        upload.router,
        prefix=UPLOAD_ROUTE_PREFIX,
        tags=["Upload"],
    )

    app.include_router(
        site.router,
        prefix="/api/site",
        tags=["Site"],
    )

    app.include_router(pages.router, tags=["Pages"])

    # Locally stored uploads are served straight from disk.
    # The directory is created at startup, not when the app is built.
    app.mount(
        "/" + settings.upload_url_prefix.strip("/"),
        StaticFiles(directory=settings.upload_root, check_dir=False),
        name="uploads",
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Malformed upload forms answer like every other upload rejection.

        A "file" field sent as plain text fails FastAPI's UploadFile
        validation before the route runs; the client still gets
        400 {"error": ...} instead of a 422 detail list.
        """
        if not request.url.path.startswith(UPLOAD_ROUTE_PREFIX):
            return await request_validation_exception_handler(request, exc)

        fields = {str(part) for error in exc.errors() for part in error.get("loc", ())}
        message = "No file provided" if "file" in fields else "Invalid upload"

        logger.info(
            "Rejected upload",
            extra={"reason": message, "fields": sorted(fields)}
        )

        return JSONResponse(status_code=400, content={"error": message})

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """
        Catch-all exception handler.

        In production, this prevents stack traces from leaking to clients.
        We log the full error server-side but return a generic message.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )

        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"}
        )

    logger.info(
        "FastAPI application created",
        extra={
            "title": settings.api_title,
            "version": settings.api_version,
        }
    )

    return app


# Create the application instance
# This is what uvicorn/gunicorn will import
app = create_app()


# For debugging/development
if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "blog.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )
