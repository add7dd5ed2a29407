"""Request, result and response models used across the application."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from fastapi import UploadFile
from pydantic import BaseModel


# ── Upload request ───────────────────────────────────────────────────────────

@dataclass
class UploadRequest:
    """One uploaded file as seen by the pipeline.

    ``stream`` only needs an awaitable ``read(size)``; the pipeline borrows it
    for the duration of the call and never closes it.
    """

    file_name: str
    size: int
    stream: Any
    content_type: str = "application/octet-stream"

    @classmethod
    def from_upload(cls, upload: Optional[UploadFile]) -> Optional[UploadRequest]:
        if upload is None:
            return None
        size = upload.size
        if size is None:
            upload.file.seek(0, os.SEEK_END)
            size = upload.file.tell()
            upload.file.seek(0)
        return cls(
            file_name=upload.filename or "",
            size=size,
            stream=upload,
            content_type=upload.content_type or "application/octet-stream",
        )


# ── Sanitized target ─────────────────────────────────────────────────────────

class SanitizedTarget(BaseModel):
    """Destination proven to lie inside the upload root."""
    directory: Path
    file_name: str
    full_path: Path


# ── Outcome ──────────────────────────────────────────────────────────────────

class OutcomeKind(str, Enum):
    CONFIG_MISSING = "config_missing"
    FILE_INVALID = "file_invalid"
    PATH_INVALID = "path_invalid"
    WRITE_IO_ERROR = "write_io_error"
    WRITE_PERMISSION_ERROR = "write_permission_error"
    WRITE_UNEXPECTED_ERROR = "write_unexpected_error"
    SUCCESS = "success"


_RESPONSES: dict[OutcomeKind, tuple[int, str]] = {
    OutcomeKind.CONFIG_MISSING: (500, "Upload path is not configured in plugin settings."),
    OutcomeKind.FILE_INVALID: (400, "No file uploaded or file is empty."),
    OutcomeKind.PATH_INVALID: (500, "Invalid target path."),
    OutcomeKind.WRITE_IO_ERROR: (500, "Error saving file {name}. IO Error: {detail}"),
    OutcomeKind.WRITE_PERMISSION_ERROR: (403, "Permission denied: {detail}"),
    OutcomeKind.WRITE_UNEXPECTED_ERROR: (500, "Unexpected error uploading file: {detail}"),
    OutcomeKind.SUCCESS: (200, "File {name} uploaded successfully."),
}


class UploadOutcome(BaseModel):
    """Terminal result of one upload; exactly one per request."""
    kind: OutcomeKind
    file_name: Optional[str] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    @property
    def status_code(self) -> int:
        return _RESPONSES[self.kind][0]

    @property
    def message(self) -> str:
        template = _RESPONSES[self.kind][1]
        return template.format(name=self.file_name or "", detail=self.detail or "")


# ── Health ───────────────────────────────────────────────────────────────────

class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "1.0.0"
    upload_path_configured: bool = False
