"""
Pytest configuration for pageflow
"""

import io
import logging
import sys
from typing import Dict, List, Tuple

import pytest
from PIL import Image

from pageflow.engine import LayoutEngine, PageGeometry
from pageflow.exceptions import ResourceError
from pageflow.media import PhysicalImage


def make_png(width: int, height: int, color=(200, 30, 30)) -> bytes:
    """Encode a solid-colour RGB image as PNG bytes."""
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


class FakeResolver:
    """In-memory resolver.

    References look like ``"<name>:<width>x<height>"``; anything starting
    with ``missing`` fails. Every call is recorded.
    """

    def __init__(self, sizes: Dict[str, Tuple[int, int]] = None):
        self.sizes = dict(sizes or {})
        self.calls: List[str] = []

    async def resolve(self, reference: str) -> PhysicalImage:
        self.calls.append(reference)
        if reference.startswith("missing"):
            raise ResourceError("Failed to load image", "not found", source=reference)
        if reference in self.sizes:
            width, height = self.sizes[reference]
        else:
            _, _, dims = reference.rpartition(":")
            width, height = (int(part) for part in dims.split("x"))
        return PhysicalImage(data=make_png(width, height), width=width, height=height, source=reference)


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests to avoid rich handlers leaking between tests."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter('%(name)s - %(levelname)s - %(message)s'))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    root_logger.handlers.clear()


@pytest.fixture
def png_bytes():
    """Factory fixture returning PNG bytes of the requested pixel size."""
    return make_png


@pytest.fixture
def resolver():
    return FakeResolver()


@pytest.fixture
def geometry():
    """Default A4 geometry (content area y=40..252)."""
    return PageGeometry()


@pytest.fixture
def engine_factory(resolver, geometry):
    """Build a LayoutEngine wired to the fake resolver; bands hidden by default."""

    def factory(**kwargs):
        kwargs.setdefault("header_policy", "none")
        kwargs.setdefault("footer_policy", "none")
        kwargs.setdefault("resolver", resolver)
        return LayoutEngine(kwargs.pop("geometry", geometry), **kwargs)

    return factory


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    # Ignore logging errors during tests
    logging.raiseExceptions = False
