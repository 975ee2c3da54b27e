"""Image storage, resizing and thumbnail resolution."""

from .config import StoreConfig
from .store import ArtifactStore, Probe
from .resolver import ImageRequest, Outcome, Resolution, ThumbnailResolver

__all__ = [
    "StoreConfig",
    "ArtifactStore",
    "Probe",
    "ImageRequest",
    "Outcome",
    "Resolution",
    "ThumbnailResolver",
]
