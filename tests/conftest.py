"""Pytest configuration and shared fixtures for thumbserve tests."""

import pytest
from PIL import Image

from thumbserve.core.config import StoreConfig
from thumbserve.core.resize import resize_image
from thumbserve.core.resolver import ThumbnailResolver
from thumbserve.core.store import ArtifactStore

ORIGINAL_NAMES = ["encenadaport", "fjord", "palmtunnel"]


class CountingResize:
    """Resize double that records calls and delegates to the real resize."""

    def __init__(self):
        self.calls = []

    def __call__(self, source, target, width, height, **kwargs):
        self.calls.append((source, target, width, height))
        return resize_image(source, target, width, height, **kwargs)


@pytest.fixture
def images_dir(tmp_path):
    """Image root with a few small originals in ``full/``."""
    full = tmp_path / "images" / "full"
    full.mkdir(parents=True)
    for i, name in enumerate(ORIGINAL_NAMES):
        img = Image.new("RGB", (64, 48), (40 * i, 120, 200))
        img.save(full / f"{name}.jpg", "JPEG")
    return tmp_path / "images"


@pytest.fixture
def config(images_dir):
    return StoreConfig.from_images_dir(images_dir)


@pytest.fixture
def store(config):
    store = ArtifactStore(config)
    store.ensure_thumbnail_root()
    return store


@pytest.fixture
def counting_resize():
    return CountingResize()


@pytest.fixture
def resolver(store, counting_resize):
    return ThumbnailResolver(store, resize=counting_resize)


@pytest.fixture
def client(resolver):
    """Create test client for FastAPI app (shared fixture)."""
    from fastapi.testclient import TestClient
    from thumbserve.server.app import create_app

    with TestClient(create_app(resolver=resolver)) as client:
        yield client
