"""Typed failures raised by the upload pipeline stages."""

from __future__ import annotations

from media_uploader.models import OutcomeKind


class UploadError(Exception):
    """Base class for every failure a pipeline stage can report."""

    kind: OutcomeKind = OutcomeKind.WRITE_UNEXPECTED_ERROR

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__(detail or self.kind.value)


class ConfigMissingError(UploadError):
    kind = OutcomeKind.CONFIG_MISSING


class FileInvalidError(UploadError):
    kind = OutcomeKind.FILE_INVALID


class PathInvalidError(UploadError):
    """The sanitized target escaped the upload root."""

    kind = OutcomeKind.PATH_INVALID

    def __init__(self, attempted: str, resolved: str, allowed: str):
        self.attempted = attempted
        self.resolved = resolved
        self.allowed = allowed
        super().__init__(f"{resolved} is outside {allowed}")


class WriteIOError(UploadError):
    kind = OutcomeKind.WRITE_IO_ERROR


class WritePermissionError(UploadError):
    kind = OutcomeKind.WRITE_PERMISSION_ERROR


class WriteUnexpectedError(UploadError):
    kind = OutcomeKind.WRITE_UNEXPECTED_ERROR
