"""
Shared pytest fixtures and configuration for all tests
"""
import base64
import pytest
import sys
from pathlib import Path
from unittest.mock import AsyncMock

# Add project root to Python path for imports
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

# 1x1 transparent PNG
PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)
EDITED_B64 = base64.b64encode(b"edited-image-bytes").decode("ascii")


@pytest.fixture
def png_bytes():
    """Provide raw PNG bytes"""
    return PNG_BYTES


@pytest.fixture
def png_file(tmp_path):
    """Write a small PNG to disk and return its path"""
    path = tmp_path / "photo.png"
    path.write_bytes(PNG_BYTES)
    return path


@pytest.fixture
def original_artifact():
    """Provide an encoded PNG artifact"""
    from models.image_edit import ImageArtifact
    encoded = base64.b64encode(PNG_BYTES).decode("ascii")
    return ImageArtifact(data_url=f"data:image/png;base64,{encoded}", mime_type="image/png")


@pytest.fixture
def edited_artifact():
    """Provide the artifact a remote edit returns"""
    from models.image_edit import ImageArtifact
    return ImageArtifact(data_url=f"data:image/webp;base64,{EDITED_B64}", mime_type="image/webp")


@pytest.fixture
def edit_service(edited_artifact):
    """Provide a remote edit service that always succeeds"""
    service = AsyncMock()
    service.edit_image.return_value = edited_artifact
    return service


@pytest.fixture
def storage_service():
    """Provide a storage service that records saves without touching disk"""
    service = AsyncMock()
    service.save_image_from_data_url.return_value = (True, "/downloads/edited-image.webp", None)
    return service


@pytest.fixture
def workflow(edit_service, storage_service):
    """Provide an EditWorkflowService wired to mocked collaborators"""
    from services.edit_workflow_service import EditWorkflowService
    return EditWorkflowService(edit_service, storage_service)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove provider settings from the environment"""
    for name in [
        "IMAGE_EDIT_PROVIDER", "GEMINI_API_KEY", "OPENROUTER_API_KEY",
        "IMAGE_EDIT_TIMEOUT", "DOWNLOAD_DIR", "DOWNLOAD_FILENAME",
    ]:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
