"""Thumbnail generation logic."""

import logging
import uuid
from pathlib import Path

from PIL import Image

from thumbserve.core.errors import ProcessingError

log = logging.getLogger(__name__)

PROCESSING_FAILED_MESSAGE = "Image could not be processed."

# Modes Pillow cannot write as JPEG
_NEEDS_RGB = {"RGBA", "LA", "P", "PA", "CMYK", "I", "I;16", "F"}


def resize_image(
    source: Path,
    target: Path,
    width: int,
    height: int,
    image_format: str = "JPEG",
    quality: int = 90,
) -> Path:
    """
    Resize ``source`` to exactly ``width`` x ``height`` and write it to ``target``.

    Aspect ratio is not preserved. The image is encoded to a temporary file
    next to ``target`` and renamed into place, so ``target`` either holds a
    complete image or does not exist.
    """
    source = Path(source)
    target = Path(target)
    tmp_path = target.with_name(f".{target.name}.{uuid.uuid4().hex}.tmp")

    try:
        with Image.open(source) as img:
            if image_format.upper() == "JPEG" and img.mode in _NEEDS_RGB:
                img = img.convert("RGB")

            resized = img.resize((width, height), Image.Resampling.LANCZOS)
            resized.save(tmp_path, image_format, quality=quality)

        # atomic replace
        tmp_path.replace(target)
    except Exception as e:
        log.warning(f"Error generating thumbnail for {source}: {e}")
        tmp_path.unlink(missing_ok=True)
        raise ProcessingError(PROCESSING_FAILED_MESSAGE) from e

    return target
