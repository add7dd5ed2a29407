"""Health-check and metadata endpoint."""

from fastapi import APIRouter, Depends

from media_uploader.models import HealthResponse
from media_uploader.routes.upload import get_root_provider
from media_uploader.pipeline.configuration import UploadRootProvider

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(root_provider: UploadRootProvider = Depends(get_root_provider)):
    """Return application health status."""
    root = root_provider.get_upload_root()
    return HealthResponse(upload_path_configured=bool(root and root.strip()))
