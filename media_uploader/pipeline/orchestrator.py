"""Upload pipeline: configuration → file check → path containment → write.

Each stage either hands its result to the next one or ends the request with
a typed ``UploadOutcome``. There is no retry and no going back; the first
failure is the answer.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

from media_uploader.errors import (
    ConfigMissingError,
    FileInvalidError,
    PathInvalidError,
    UploadError,
    WriteUnexpectedError,
)
from media_uploader.models import OutcomeKind, UploadOutcome, UploadRequest
from media_uploader.pipeline.configuration import UploadRootProvider, resolve_upload_root
from media_uploader.pipeline.paths import FilenameSanitizer, get_valid_filename, sanitize_target
from media_uploader.pipeline.validation import validate_upload
from media_uploader.pipeline.writer import DEFAULT_CHUNK_SIZE, classify_write_error, save_stream

logger = logging.getLogger(__name__)

Writer = Callable[..., Awaitable[int]]


class UploadOrchestrator:
    """Runs one upload through the pipeline and produces its outcome.

    Collaborators are injected so callers (and tests) decide where the upload
    root comes from, how file names are cleaned and how bytes hit the disk.
    """

    def __init__(
        self,
        root_provider: UploadRootProvider,
        *,
        sanitizer: FilenameSanitizer = get_valid_filename,
        writer: Writer = save_stream,
        case_sensitive: Optional[bool] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        fsync: bool = True,
        cleanup: bool = True,
    ):
        self.root_provider = root_provider
        self.sanitizer = sanitizer
        self.writer = writer
        self.case_sensitive = case_sensitive
        self.chunk_size = chunk_size
        self.fsync = fsync
        self.cleanup = cleanup

    async def upload(self, request: Optional[UploadRequest]) -> UploadOutcome:
        logger.info("Upload request received")

        # ── 1. Configuration ───────────────────────────────────────
        try:
            root = resolve_upload_root(self.root_provider)
        except ConfigMissingError as exc:
            logger.error("Upload path is not configured in plugin settings!")
            return UploadOutcome(kind=exc.kind)
        logger.info("Using configured target directory: '%s'", root)

        file_name: Optional[str] = None
        try:
            # ── 2. File ────────────────────────────────────────────
            request = validate_upload(request)
            logger.info(
                "Received file '%s' (%d bytes), type: '%s'",
                request.file_name,
                request.size,
                request.content_type,
            )

            # ── 3. Target path ─────────────────────────────────────
            target = sanitize_target(
                root,
                request.file_name,
                self.sanitizer,
                case_sensitive=self.case_sensitive,
            )
            file_name = target.file_name
            logger.info("Attempting to save file '%s' to '%s'", file_name, target.full_path)

            # ── 4. Write ───────────────────────────────────────────
            written = await self._write(request.stream, target.full_path)
        except FileInvalidError as exc:
            logger.warning("No file uploaded or file is empty (%s)", exc.detail)
            return UploadOutcome(kind=exc.kind)
        except PathInvalidError as exc:
            return UploadOutcome(kind=exc.kind)
        except WriteUnexpectedError as exc:
            logger.exception("Unexpected error saving file '%s': %s", file_name, exc.detail)
            return UploadOutcome(kind=exc.kind, file_name=file_name, detail=exc.detail)
        except UploadError as exc:
            logger.error("Error saving file '%s': %s", file_name, exc.detail)
            return UploadOutcome(kind=exc.kind, file_name=file_name, detail=exc.detail)
        except Exception as exc:
            error = classify_write_error(exc)
            logger.exception("Error processing upload of '%s': %s", file_name, exc)
            return UploadOutcome(kind=error.kind, file_name=file_name, detail=error.detail)

        logger.info("File '%s' successfully saved to '%s' (%d bytes)", file_name, target.full_path, written)
        return UploadOutcome(kind=OutcomeKind.SUCCESS, file_name=file_name)

    async def _write(self, stream: Any, path: Path) -> int:
        return await self.writer(
            stream,
            path,
            chunk_size=self.chunk_size,
            fsync=self.fsync,
            cleanup=self.cleanup,
        )
