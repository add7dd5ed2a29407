"""Application configuration loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings

BASE_DIR = Path(__file__).resolve().parent
WEB_DIR = BASE_DIR / "web"


class Settings(BaseSettings):
    """Central configuration – every value comes from .env or defaults."""

    # --- Uploads ---
    upload_path: str = ""
    path_case_sensitive: Optional[bool] = None
    upload_chunk_size: int = 1024 * 1024
    fsync_uploads: bool = True
    cleanup_partial_uploads: bool = True

    # --- Upload page ---
    page_resource: str = "uploadPage.html"

    # --- Server ---
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "info"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings singleton.

    Only server-level options are read from here. The upload root is looked
    up per request through an ``UploadRootProvider``.
    """
    return Settings()
