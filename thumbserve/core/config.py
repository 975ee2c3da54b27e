"""Configuration for the image and thumbnail directories."""

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_IMAGES_DIR = Path("assets") / "images"


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class StoreConfig:
    """Locations and encoding settings for originals and thumbnails.

    Originals live flat in ``originals_dir`` as ``<name>.<extension>``;
    thumbnails are written flat to ``thumbnails_dir``.
    """

    originals_dir: Path
    thumbnails_dir: Path
    extension: str = "jpg"
    image_format: str = "JPEG"
    quality: int = 90
    resize_concurrency: int = 2
    single_flight: bool = False

    @classmethod
    def from_images_dir(cls, images_dir, **kwargs) -> "StoreConfig":
        """Use the ``full/`` and ``thumb/`` layout below ``images_dir``."""
        images_dir = Path(images_dir)
        return cls(
            originals_dir=images_dir / "full",
            thumbnails_dir=images_dir / "thumb",
            **kwargs,
        )

    @classmethod
    def from_env(cls) -> "StoreConfig":
        """Build a config from environment variables.

        Recognised variables:
        1. THUMBSERVE_IMAGES_DIR - root holding ``full/`` and ``thumb/``
        2. THUMBSERVE_FULL_DIR / THUMBSERVE_THUMB_DIR - override either root
        3. THUMBSERVE_RESIZE_CONCURRENCY - simultaneous resize jobs
        4. THUMBSERVE_SINGLE_FLIGHT - one writer per thumbnail key
        """
        images_dir = Path(os.environ.get("THUMBSERVE_IMAGES_DIR", DEFAULT_IMAGES_DIR))

        full_dir = os.environ.get("THUMBSERVE_FULL_DIR")
        thumb_dir = os.environ.get("THUMBSERVE_THUMB_DIR")

        return cls(
            originals_dir=Path(full_dir) if full_dir else images_dir / "full",
            thumbnails_dir=Path(thumb_dir) if thumb_dir else images_dir / "thumb",
            resize_concurrency=max(
                1, int(os.getenv("THUMBSERVE_RESIZE_CONCURRENCY", "2"))
            ),
            single_flight=_env_flag("THUMBSERVE_SINGLE_FLIGHT"),
        )
