"""Request validation and on-demand thumbnail resolution."""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from functools import partial
from pathlib import Path
from typing import Callable, Optional

from thumbserve.core.errors import ProcessingError, UnknownImageError, ValidationError
from thumbserve.core.resize import resize_image
from thumbserve.core.store import ArtifactStore

log = logging.getLogger(__name__)

WIDTH_MESSAGE = "Please provide a positive numerical value for the 'width' query segment."
HEIGHT_MESSAGE = "Please provide a positive numerical value for the 'height' query segment."


@dataclass(frozen=True)
class ImageRequest:
    """Raw query values, as received from the caller."""

    name: Optional[str] = None
    width: Optional[str] = None
    height: Optional[str] = None


@dataclass(frozen=True)
class ValidatedRequest:
    name: str
    width: Optional[int] = None
    height: Optional[int] = None

    @property
    def resize(self) -> bool:
        return self.width is not None


class Outcome(Enum):
    SERVE = "serve"
    REJECTED = "rejected"
    NOT_FOUND = "not_found"
    PROCESSING_FAILED = "processing_failed"


@dataclass(frozen=True)
class Resolution:
    outcome: Outcome
    path: Optional[Path] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.SERVE


def _parse_positive(value) -> Optional[int]:
    """Parse a query value as an integer >= 1, or return None.

    Parsing is strict: "200px" and "1.5" are rejected rather than truncated
    to 200 and 1, so each size has exactly one spelling in the cache key.
    Surrounding whitespace and leading zeros are accepted ("099" is 99).
    """
    if value is None:
        return None
    try:
        number = int(str(value).strip())
    except ValueError:
        return None
    return number if number >= 1 else None


def unknown_image_message(available) -> str:
    names = ", ".join(sorted(available))
    return (
        "Please pass a valid filename in the 'filename' query segment. "
        f"Available filenames are: {names}."
    )


class ThumbnailResolver:
    """
    Turns an ImageRequest into a file to serve.

    Thumbnails are generated on the first request for a size and reused
    afterwards. Without ``single_flight`` two concurrent first requests for
    the same size both generate and the later write wins; the output is
    identical so only the work is duplicated.
    """

    def __init__(
        self,
        store: ArtifactStore,
        resize: Callable[..., Path] = resize_image,
        single_flight: Optional[bool] = None,
    ):
        self.store = store
        self.resize = resize
        config = store.config
        self.single_flight = config.single_flight if single_flight is None else single_flight
        self._semaphore = asyncio.Semaphore(config.resize_concurrency)
        self._in_flight: dict[Path, asyncio.Future] = {}
        self.generated = 0
        self.cache_hits = 0

    def validate(self, request: ImageRequest) -> ValidatedRequest:
        """Check request parameters; the first failing rule raises."""
        available = self.store.list_originals()
        if not request.name or request.name not in available:
            raise UnknownImageError(unknown_image_message(available), sorted(available))

        if not request.width and not request.height:
            return ValidatedRequest(name=request.name)

        width = _parse_positive(request.width)
        if width is None:
            raise ValidationError(WIDTH_MESSAGE)

        height = _parse_positive(request.height)
        if height is None:
            raise ValidationError(HEIGHT_MESSAGE)

        return ValidatedRequest(name=request.name, width=width, height=height)

    async def resolve(self, request: ImageRequest) -> Resolution:
        """Validate ``request`` and return the path to serve or an error message."""
        loop = asyncio.get_running_loop()
        try:
            valid = await loop.run_in_executor(None, self.validate, request)
        except UnknownImageError as e:
            return Resolution(Outcome.NOT_FOUND, message=str(e))
        except ValidationError as e:
            return Resolution(Outcome.REJECTED, message=str(e))

        if not valid.resize:
            return Resolution(Outcome.SERVE, path=self.store.original_path(valid.name))

        thumb_path = self.store.thumbnail_path(valid.name, valid.width, valid.height)
        if await loop.run_in_executor(None, self.store.exists, thumb_path):
            self.cache_hits += 1
            log.debug(f"Thumbnail cache hit {thumb_path}")
            return Resolution(Outcome.SERVE, path=thumb_path)

        if not self.single_flight:
            return await self._generate(valid, thumb_path)

        pending = self._in_flight.get(thumb_path)
        if pending is not None:
            log.debug(f"Waiting for in-flight thumbnail {thumb_path}")
            return await asyncio.shield(pending)

        future = loop.create_future()
        self._in_flight[thumb_path] = future
        try:
            result = await self._generate(valid, thumb_path)
            future.set_result(result)
            return result
        finally:
            if not future.done():
                future.cancel()
            self._in_flight.pop(thumb_path, None)

    async def _generate(self, valid: ValidatedRequest, thumb_path: Path) -> Resolution:
        source = self.store.original_path(valid.name)
        config = self.store.config

        log.info(f"Creating thumb {thumb_path}")
        job = partial(
            self.resize,
            source,
            thumb_path,
            valid.width,
            valid.height,
            image_format=config.image_format,
            quality=config.quality,
        )

        try:
            async with self._semaphore:
                # Run resizing in thread pool to avoid blocking event loop
                loop = asyncio.get_running_loop()
                await loop.run_in_executor(None, job)
        except ProcessingError as e:
            return Resolution(Outcome.PROCESSING_FAILED, message=str(e))

        self.generated += 1
        return Resolution(Outcome.SERVE, path=thumb_path)
