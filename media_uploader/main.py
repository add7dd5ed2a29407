"""Media Uploader – FastAPI application entry point.

Registers the upload, page and health routers, sets up logging and a global
exception handler.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from media_uploader.config import get_settings
from media_uploader.pipeline.configuration import SettingsUploadRootProvider
from media_uploader.routes import health, page, upload

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle logic."""
    root = SettingsUploadRootProvider().get_upload_root()
    if root:
        logger.info("Media Uploader started – upload_path=%s", root)
    else:
        logger.warning("Media Uploader started without UPLOAD_PATH – uploads will be rejected until it is set")
    yield
    logger.info("Media Uploader shutting down")


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    app = FastAPI(
        title="Media Uploader",
        version="1.0.0",
        description="Upload media files into a configured directory.",
        lifespan=lifespan,
    )

    app.include_router(upload.router)
    app.include_router(page.router)
    app.include_router(health.router)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return PlainTextResponse("An internal server error occurred.", status_code=500)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "media_uploader.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    run()
