"""
Shared pytest fixtures and configuration for all tests
"""
import base64
import io
import json
import pytest
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

# Add backend to Python path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from PIL import Image


def make_image(color=(255, 0, 0), size=(8, 8)) -> Image.Image:
    return Image.new("RGB", size, color)


def png_bytes(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def json_body(request) -> dict:
    return json.loads(request.content.decode("utf-8"))


@pytest.fixture
def sample_image():
    """Small red RGB image"""
    return make_image()


@pytest.fixture
def sample_png_b64(sample_image):
    return base64.b64encode(png_bytes(sample_image)).decode("ascii")


@pytest.fixture
def display():
    from core.lens import LensDisplay
    return LensDisplay()


@pytest.fixture
def camera(sample_image):
    """Camera that always returns the sample image"""
    fake = MagicMock()
    fake.capture = AsyncMock(return_value=sample_image)
    return fake


@pytest.fixture
def generator():
    fake = MagicMock()
    fake.generate_image = AsyncMock(return_value=make_image((0, 255, 0)))
    return fake


@pytest.fixture
def editor():
    fake = MagicMock()
    fake.edit_image = AsyncMock(return_value=make_image((0, 0, 255)))
    return fake


@pytest.fixture
def storage():
    fake = MagicMock()
    fake.upload_image = AsyncMock(side_effect=lambda image, filename: f"https://cdn.test/{filename}")
    fake.create_edit_record = AsyncMock(return_value="abc-123")
    fake.update_edit_record = AsyncMock(return_value=True)
    return fake
