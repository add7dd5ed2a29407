"""Upload root lookup.

The root is read at call time, never cached, so a changed setting applies to
the next request without a restart.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from media_uploader.config import Settings
from media_uploader.errors import ConfigMissingError

logger = logging.getLogger(__name__)


class UploadRootProvider(Protocol):
    def get_upload_root(self) -> Optional[str]:
        ...


class SettingsUploadRootProvider:
    """Reads ``UPLOAD_PATH`` from the environment / ``.env`` on every call."""

    def get_upload_root(self) -> Optional[str]:
        return Settings().upload_path


def resolve_upload_root(provider: UploadRootProvider) -> str:
    """Return the configured upload root or raise ``ConfigMissingError``."""
    root = provider.get_upload_root()
    if root is None or not root.strip():
        raise ConfigMissingError("upload root is not set")
    return root
