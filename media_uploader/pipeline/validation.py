"""Pre-I/O checks on the uploaded file."""

from __future__ import annotations

from typing import Optional

from media_uploader.errors import FileInvalidError
from media_uploader.models import UploadRequest


def validate_upload(request: Optional[UploadRequest]) -> UploadRequest:
    """Reject a missing or zero-length upload.

    Only the declared size is inspected; the stream is left untouched.
    """
    if request is None:
        raise FileInvalidError("no file in request")
    if request.size <= 0:
        raise FileInvalidError(f"{request.file_name!r} is empty")
    return request
