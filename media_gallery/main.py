# media_gallery/main.py
"""
FastAPI application entry point for the media gallery backend.

This file should ONLY handle HTTP wiring and the application lifecycle.
Upload, deletion and metadata logic live in the pipelines under services/.
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from . import __version__
from .config import settings
from .dependencies import get_document_store, get_read_model
from .enums import LogEmoji, LoggerName, LogSource, ObjectStoreBackend
from .exceptions import GalleryError
from .routers import (
    delete_routers,
    gallery_routers,
    health_routers,
    metadata_routers,
    upload_routers,
)
from .services.logger import configure_logging, get_service_logger
from .stores import PostgresDocumentStore

logger = get_service_logger(LoggerName.SYSTEM, LogSource.SYSTEM)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Handle application startup and shutdown"""
    configure_logging(level=settings.log_level, log_file=settings.log_file)
    settings.ensure_directories()

    logger.info(
        "Starting media gallery API",
        extra_context={
            "operation": "application_startup",
            "environment": settings.environment,
            "document_store": settings.document_store_backend.value,
            "object_store": settings.object_store_backend.value,
        },
        emoji=LogEmoji.STARTUP,
    )

    document_store = get_document_store()
    if isinstance(document_store, PostgresDocumentStore):
        # Fail startup: nothing works without the document store
        await document_store.initialize()

    try:
        state = await get_read_model().refresh_all()
        logger.info(
            f"Gallery loaded: {state.media_count} media, {len(state.events)} events"
        )
    except GalleryError as e:
        logger.warning(
            f"Initial gallery load failed, continuing with an empty view: {e}",
            extra_context={"operation": "initial_refresh"},
        )

    yield

    logger.info(
        "Shutting down media gallery API",
        extra_context={"operation": "application_shutdown"},
        emoji=LogEmoji.SHUTDOWN,
    )
    if isinstance(document_store, PostgresDocumentStore):
        await document_store.close()
        logger.info(
            "Database connections closed",
            extra_context={"operation": "database_shutdown", "success": True},
        )


app = FastAPI(
    title="Media Gallery API",
    description="Event media gallery: uploads, deletions and metadata of images, videos and events",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(upload_routers.router, prefix="/api", tags=["uploads"])
app.include_router(delete_routers.router, prefix="/api", tags=["delete"])
app.include_router(metadata_routers.router, prefix="/api", tags=["metadata"])
app.include_router(gallery_routers.router, prefix="/api", tags=["gallery"])
app.include_router(health_routers.router, prefix="/api", tags=["health"])

# Objects written by the filesystem store are served back under public_base_url
if settings.object_store_backend is ObjectStoreBackend.FILESYSTEM:
    app.mount(
        "/media",
        StaticFiles(directory=settings.objects_directory, check_dir=False),
        name="media",
    )


@app.get("/")
async def root():
    """Root endpoint"""
    return {"message": "Media Gallery API", "version": __version__, "docs": "/docs"}


if __name__ == "__main__":
    uvicorn.run(
        "media_gallery.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.value.lower(),
    )
