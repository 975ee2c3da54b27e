"""Exceptions raised by the thumbnail core."""


class ThumbserveError(Exception):
    """Base class for all thumbserve errors."""


class ValidationError(ThumbserveError):
    """Request parameters are missing or invalid."""


class UnknownImageError(ValidationError):
    """Requested filename is not among the available originals."""

    def __init__(self, message: str, available: list[str]):
        super().__init__(message)
        self.available = available


class ProcessingError(ThumbserveError):
    """The resize step could not produce a thumbnail."""
