"""Shared test fixtures and configuration for backend tests."""
import os

import pytest
from fastapi.testclient import TestClient

from filedrop.config import AppSettings, UploadSettings, set_config
from filedrop.files.router import get_upload_settings
from filedrop.main import app

# Real-looking file prefixes, padded with bytes a sniffer treats as binary
PNG_HEADER = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"
JPEG_HEADER = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00"


def make_png(size: int = 2048) -> bytes:
    return PNG_HEADER + os.urandom(size - len(PNG_HEADER))


def make_jpeg(size: int = 2048) -> bytes:
    return JPEG_HEADER + os.urandom(size - len(JPEG_HEADER))


@pytest.fixture(autouse=True)
def default_config():
    """Use default settings instead of reading filedrop.settings.yaml."""
    set_config(AppSettings())
    yield
    set_config(None)


@pytest.fixture
def api_client():
    """Provide a TestClient for the main FastAPI app."""
    return TestClient(app)


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def upload_settings(upload_dir):
    """Route uploads into a temp directory; tests may mutate the returned settings."""
    settings = UploadSettings(upload_dir=str(upload_dir))
    app.dependency_overrides[get_upload_settings] = lambda: settings
    yield settings
    app.dependency_overrides.pop(get_upload_settings, None)
