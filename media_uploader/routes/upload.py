"""File upload endpoint."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from media_uploader.config import get_settings
from media_uploader.models import UploadRequest
from media_uploader.pipeline.configuration import SettingsUploadRootProvider, UploadRootProvider
from media_uploader.pipeline.orchestrator import UploadOrchestrator

router = APIRouter(tags=["upload"])


def get_root_provider() -> UploadRootProvider:
    return SettingsUploadRootProvider()


def get_orchestrator(
    root_provider: UploadRootProvider = Depends(get_root_provider),
) -> UploadOrchestrator:
    settings = get_settings()
    return UploadOrchestrator(
        root_provider,
        case_sensitive=settings.path_case_sensitive,
        chunk_size=settings.upload_chunk_size,
        fsync=settings.fsync_uploads,
        cleanup=settings.cleanup_partial_uploads,
    )


@router.post("/upload", response_class=PlainTextResponse)
async def upload_file(
    request: Request,
    orchestrator: UploadOrchestrator = Depends(get_orchestrator),
):
    """Save one multipart file under the configured upload root.

    The ``file`` part is read from the form directly: a missing part or a
    plain text field under that name is treated as "no file".
    """
    async with request.form() as form:
        upload = form.get("file")
        if isinstance(upload, str):
            upload = None
        outcome = await orchestrator.upload(UploadRequest.from_upload(upload))
    return PlainTextResponse(outcome.message, status_code=outcome.status_code)
