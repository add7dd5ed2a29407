"""Static upload page endpoint."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, PlainTextResponse

from media_uploader.config import WEB_DIR, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["page"])

ResourceLoader = Callable[[str], Optional[str]]


def load_web_resource(name: str) -> Optional[str]:
    """Return the text of a bundled web resource, or ``None`` if absent."""
    path = WEB_DIR / name
    if WEB_DIR not in path.resolve().parents or not path.is_file():
        return None
    return path.read_text(encoding="utf-8")


def get_resource_loader() -> ResourceLoader:
    return load_web_resource


@router.get("/page", response_class=HTMLResponse)
async def upload_page(loader: ResourceLoader = Depends(get_resource_loader)):
    """Serve the HTML upload form."""
    resource_name = get_settings().page_resource
    logger.info("Serving upload page '%s'", resource_name)
    try:
        html = loader(resource_name)
    except Exception:
        logger.exception("Error serving upload page")
        return PlainTextResponse("Error serving upload page", status_code=500)

    if html is None:
        logger.error("Could not find web resource: %s", resource_name)
        return PlainTextResponse(f"Resource not found: {resource_name}", status_code=404)
    return HTMLResponse(html)
