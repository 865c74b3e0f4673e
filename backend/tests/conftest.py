"""
Test configuration and fixtures for ShirtSort tests.
"""
import io

import numpy as np
import pytest
from fastapi.testclient import TestClient
from PIL import Image

RED = (224, 16, 16)
BLUE = (16, 48, 208)
GREEN = (32, 160, 48)
SKIN = (220, 180, 140)
BACKGROUND = (250, 250, 250)


def encode_image(image: Image.Image, fmt: str = "PNG", **kwargs) -> bytes:
    """Encode a PIL image to raw bytes."""
    buffer = io.BytesIO()
    image.save(buffer, format=fmt, **kwargs)
    return buffer.getvalue()


def shirt_array(shirt_color, size=200, background=BACKGROUND):
    """RGB array with a shirt-shaped block covering the upper torso."""
    img = np.zeros((size, size, 3), dtype=np.uint8)
    img[:, :] = background
    y0, y1 = int(size * 0.15), int(size * 0.95)
    x0, x1 = int(size * 0.15), int(size * 0.85)
    img[y0:y1, x0:x1] = shirt_color
    return img


@pytest.fixture
def solid_image_bytes():
    """Factory for single-color images."""
    def _make(color, size=(200, 200), fmt="PNG", **kwargs):
        mode = "RGBA" if len(color) == 4 else "RGB"
        return encode_image(Image.new(mode, size, tuple(color)), fmt, **kwargs)
    return _make


@pytest.fixture
def shirt_image_bytes():
    """Factory for a synthetic photo of a shirt on a bright background."""
    def _make(shirt_color, size=200, fmt="PNG"):
        return encode_image(Image.fromarray(shirt_array(shirt_color, size)), fmt)
    return _make


@pytest.fixture
def shirt_image():
    """Factory for a decoded RGBA shirt image."""
    def _make(shirt_color, size=200):
        return Image.fromarray(shirt_array(shirt_color, size)).convert("RGBA")
    return _make


@pytest.fixture
def test_client():
    """Create test client for the FastAPI app."""
    from main import app
    return TestClient(app)


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics before each test."""
    from shirtsort.utils.metrics import reset_metrics
    reset_metrics()
