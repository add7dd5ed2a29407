"""
HTTP tests for the upload, page and health endpoints.

Collaborators are swapped through ``app.dependency_overrides``.
"""

from conftest import StaticRootProvider
from media_uploader.errors import WritePermissionError
from media_uploader.pipeline.orchestrator import UploadOrchestrator
from media_uploader.routes.page import get_resource_loader
from media_uploader.routes.upload import get_orchestrator


def video(name="test.mp4", size=1024):
    return {"file": (name, b"v" * size, "video/mp4")}


# ========== POST /upload ==========

def test_unconfigured_root_returns_500(client_for):
    response = client_for("").post("/upload", files=video())

    assert response.status_code == 500
    assert response.text == "Upload path is not configured in plugin settings."


def test_no_file_returns_400(client_for, upload_root):
    response = client_for(str(upload_root)).post("/upload", data={"note": "no file"})

    assert response.status_code == 400
    assert response.text == "No file uploaded or file is empty."


def test_empty_file_returns_400(client_for, upload_root):
    response = client_for(str(upload_root)).post("/upload", files=video("empty.mp4", 0))

    assert response.status_code == 400
    assert response.text == "No file uploaded or file is empty."
    assert list(upload_root.iterdir()) == []


def test_valid_upload_returns_200_and_writes_file(client_for, upload_root):
    response = client_for(str(upload_root)).post("/upload", files=video("test video.mp4"))

    assert response.status_code == 200
    assert response.text == "File test video.mp4 uploaded successfully."
    assert response.headers["content-type"].startswith("text/plain")
    saved = upload_root / "test video.mp4"
    assert saved.stat().st_size == 1024


def test_traversal_returns_500_and_writes_nothing(app, client_for, upload_root):
    client = client_for(str(upload_root))
    app.dependency_overrides[get_orchestrator] = lambda: UploadOrchestrator(
        StaticRootProvider(str(upload_root)),
        sanitizer=lambda _: "../attempt_traversal.txt",
    )

    response = client.post("/upload", files=video("somefile.txt"))

    assert response.status_code == 500
    assert response.text == "Invalid target path."
    assert list(upload_root.iterdir()) == []
    assert not (upload_root.parent / "attempt_traversal.txt").exists()


def test_permission_error_returns_403(app, client_for, upload_root):
    async def writer(stream, path, **kwargs):
        raise WritePermissionError(f"[Errno 13] Permission denied: '{path}'")

    client = client_for(str(upload_root))
    app.dependency_overrides[get_orchestrator] = lambda: UploadOrchestrator(
        StaticRootProvider(str(upload_root)), writer=writer
    )

    response = client.post("/upload", files=video())

    assert response.status_code == 403
    assert response.text.startswith("Permission denied:")


def test_io_error_returns_500(app, client_for, upload_root):
    async def writer(stream, path, **kwargs):
        raise OSError(28, "No space left on device")

    client = client_for(str(upload_root))
    app.dependency_overrides[get_orchestrator] = lambda: UploadOrchestrator(
        StaticRootProvider(str(upload_root)), writer=writer
    )

    response = client.post("/upload", files=video())

    assert response.status_code == 500
    assert response.text.startswith("Error saving file test.mp4.")


# ========== GET /page ==========

def test_page_serves_bundled_form(client_for):
    response = client_for(None).get("/page")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert 'name="file"' in response.text


def test_page_missing_resource_returns_404(app, client_for):
    client = client_for(None)
    app.dependency_overrides[get_resource_loader] = lambda: (lambda name: None)

    response = client.get("/page")

    assert response.status_code == 404
    assert response.text == "Resource not found: uploadPage.html"


def test_page_loader_failure_returns_500(app, client_for):
    def broken(name):
        raise OSError("unreadable")

    client = client_for(None)
    app.dependency_overrides[get_resource_loader] = lambda: broken

    response = client.get("/page")

    assert response.status_code == 500
    assert response.text == "Error serving upload page"


# ========== GET /health ==========

def test_health_reports_configuration(client_for, upload_root):
    assert client_for(str(upload_root)).get("/health").json()["upload_path_configured"] is True
    assert client_for("").get("/health").json() == {
        "status": "ok",
        "version": "1.0.0",
        "upload_path_configured": False,
    }


def test_text_field_named_file_returns_400(client_for, upload_root):
    response = client_for(str(upload_root)).post("/upload", data={"file": "not a file"})

    assert response.status_code == 400
    assert response.text == "No file uploaded or file is empty."
    assert list(upload_root.iterdir()) == []


def test_text_field_named_file_without_root_returns_500(client_for):
    response = client_for("").post("/upload", data={"file": "not a file"})

    assert response.status_code == 500
    assert response.text == "Upload path is not configured in plugin settings."


def test_no_cross_origin_headers(client_for):
    response = client_for(None).get("/health", headers={"Origin": "https://elsewhere.example"})

    assert response.status_code == 200
    assert "access-control-allow-origin" not in response.headers
    assert "access-control-allow-credentials" not in response.headers
