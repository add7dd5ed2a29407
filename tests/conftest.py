"""
Shared pytest fixtures for the media uploader tests.

Provides:
- In-memory upload streams and request factories
- Fake upload-root providers
- A FastAPI test client wired to injectable collaborators
"""

import io
from pathlib import Path
from typing import Callable, Optional

import pytest
from fastapi.testclient import TestClient

from media_uploader.main import create_app
from media_uploader.models import UploadRequest
from media_uploader.routes.upload import get_root_provider


class BytesStream:
    """Async byte source with the same ``read(size)`` shape as UploadFile."""

    def __init__(self, data: bytes):
        self._buffer = io.BytesIO(data)
        self.reads = 0

    async def read(self, size: int = -1) -> bytes:
        self.reads += 1
        return self._buffer.read(size)


class StaticRootProvider:
    """Upload-root provider returning a fixed (or mutable) value."""

    def __init__(self, root: Optional[str]):
        self.root = root
        self.calls = 0

    def get_upload_root(self) -> Optional[str]:
        self.calls += 1
        return self.root


# ============================================================================
# Paths and requests
# ============================================================================

@pytest.fixture
def upload_root(tmp_path: Path) -> Path:
    """Existing upload directory inside the per-test temp dir."""
    root = tmp_path / "up"
    root.mkdir()
    return root


@pytest.fixture
def make_request() -> Callable[..., UploadRequest]:
    def _make(name: str = "test.mp4", data: bytes = b"x" * 1024, size: Optional[int] = None) -> UploadRequest:
        return UploadRequest(
            file_name=name,
            size=len(data) if size is None else size,
            stream=BytesStream(data),
            content_type="video/mp4",
        )

    return _make


# ============================================================================
# API client
# ============================================================================

@pytest.fixture
def app():
    test_app = create_app()
    yield test_app
    test_app.dependency_overrides.clear()


@pytest.fixture
def client_for(app) -> Callable[[Optional[str]], TestClient]:
    """Build a test client whose upload root is *root*."""

    def _client(root: Optional[str]) -> TestClient:
        provider = StaticRootProvider(root)
        app.dependency_overrides[get_root_provider] = lambda: provider
        return TestClient(app)

    return _client
