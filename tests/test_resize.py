"""Tests for the Pillow resize step."""

import pytest
from PIL import Image

from thumbserve.core.errors import ProcessingError
from thumbserve.core.resize import PROCESSING_FAILED_MESSAGE, resize_image


class TestResizeImage:

    def test_writes_exact_size(self, store):
        target = store.thumbnail_path("fjord", 99, 99)
        resize_image(store.original_path("fjord"), target, 99, 99)

        with Image.open(target) as img:
            assert img.size == (99, 99)
            assert img.format == "JPEG"

    def test_does_not_keep_aspect_ratio(self, store):
        target = store.thumbnail_path("fjord", 300, 10)
        resize_image(store.original_path("fjord"), target, 300, 10)

        with Image.open(target) as img:
            assert img.size == (300, 10)

    def test_converts_rgba_for_jpeg(self, store, config):
        source = config.originals_dir / "alpha.png"
        Image.new("RGBA", (20, 20), (255, 0, 0, 128)).save(source)
        target = store.thumbnail_path("alpha", 10, 10)

        resize_image(source, target, 10, 10)
        with Image.open(target) as img:
            assert img.mode == "RGB"

    def test_missing_source_raises(self, store):
        target = store.thumbnail_path("foo", 100, 500)
        with pytest.raises(ProcessingError, match=PROCESSING_FAILED_MESSAGE):
            resize_image(store.original_path("foo"), target, 100, 500)
        assert not target.exists()

    def test_invalid_size_leaves_no_files(self, store):
        """A failed encode leaves neither target nor temp file behind."""
        target = store.thumbnail_path("fjord", -100, 500)
        with pytest.raises(ProcessingError):
            resize_image(store.original_path("fjord"), target, -100, 500)
        assert list(store.thumbnails_dir.iterdir()) == []

    def test_corrupt_source_raises(self, store, config):
        source = config.originals_dir / "broken.jpg"
        source.write_bytes(b"not an image")
        with pytest.raises(ProcessingError):
            resize_image(source, store.thumbnail_path("broken", 5, 5), 5, 5)
