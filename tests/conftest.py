"""Shared fixtures for upload service tests."""

from dataclasses import dataclass
from io import BytesIO
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from app.core.auth import create_access_token
from app.core.config import Settings
from app.main import create_app
from app.utils.file_upload import UploadService

MiB = 1024 * 1024


@dataclass
class FakeUpload:
    """Stand-in for a parsed multipart UploadFile."""

    file: BytesIO
    filename: Optional[str]
    content_type: Optional[str]
    size: Optional[int] = None


@pytest.fixture
def settings(tmp_path):
    """Development settings with an isolated upload root."""
    return Settings(
        upload_root=str(tmp_path / "uploads"),
        environment="development",
        port=5000,
        jwt_secret_key="test-secret",
        log_level="DEBUG",
    )


@pytest.fixture
def service(settings):
    return UploadService.from_settings(settings)


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def student_headers(settings):
    token = create_access_token({"sub": "42", "role": "student"}, settings)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(settings):
    token = create_access_token({"sub": "1", "role": "admin"}, settings)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def payload():
    """Build an in-memory file of the given size."""

    def _payload(size: int = 1024) -> BytesIO:
        return BytesIO(b"\x00" * size)

    return _payload
