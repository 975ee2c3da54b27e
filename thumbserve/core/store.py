"""Original image and thumbnail storage on disk."""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from thumbserve.core.config import StoreConfig

log = logging.getLogger(__name__)


class Probe(Enum):
    """Result of looking for a file or directory on disk."""

    PRESENT = "present"
    NOT_PRESENT = "not_present"
    IO_FAILURE = "io_failure"


@dataclass(frozen=True)
class OriginalsScan:
    names: frozenset
    status: Probe


class ArtifactStore:
    """Maps image names and sizes to files below the two storage roots.

    Thumbnail filenames are ``{name}-{width}x{height}.{ext}``. Names must not
    contain ``-`` followed by a ``<int>x<int>`` tail, otherwise two keys could
    share a file. This is not checked at runtime.
    """

    def __init__(self, config: StoreConfig):
        self.config = config

    @property
    def originals_dir(self) -> Path:
        return self.config.originals_dir

    @property
    def thumbnails_dir(self) -> Path:
        return self.config.thumbnails_dir

    def original_path(self, name: str) -> Path:
        """Path of the original image called ``name``."""
        return (self.originals_dir / f"{name}.{self.config.extension}").absolute()

    def thumbnail_path(self, name: str, width: int, height: int) -> Path:
        """Path of the ``width`` x ``height`` thumbnail of ``name``."""
        filename = f"{name}-{width}x{height}.{self.config.extension}"
        return (self.thumbnails_dir / filename).absolute()

    def probe(self, path: Path) -> Probe:
        """Check whether ``path`` exists and can be read."""
        try:
            os.stat(path)
        except (FileNotFoundError, NotADirectoryError):
            return Probe.NOT_PRESENT
        except OSError as e:
            log.warning(f"Could not stat {path}: {e}")
            return Probe.IO_FAILURE

        if not os.access(path, os.R_OK):
            return Probe.IO_FAILURE
        return Probe.PRESENT

    def exists(self, path: Path) -> bool:
        """True only if ``path`` exists and is readable."""
        return self.probe(path) is Probe.PRESENT

    def scan_originals(self) -> OriginalsScan:
        """List original image names together with the listing status."""
        try:
            entries = list(self.originals_dir.iterdir())
        except (FileNotFoundError, NotADirectoryError):
            return OriginalsScan(frozenset(), Probe.NOT_PRESENT)
        except OSError as e:
            log.warning(f"Could not list originals in {self.originals_dir}: {e}")
            return OriginalsScan(frozenset(), Probe.IO_FAILURE)

        suffix = f".{self.config.extension}"
        names = set()
        for entry in entries:
            if entry.name.startswith(".") or entry.suffix != suffix:
                continue
            try:
                if not entry.is_file():
                    continue
            except OSError:
                continue
            names.add(entry.stem)

        return OriginalsScan(frozenset(names), Probe.PRESENT)

    def list_originals(self) -> set:
        """Available original names, empty if the root cannot be listed."""
        return set(self.scan_originals().names)

    def ensure_thumbnail_root(self) -> bool:
        """Create the thumbnail directory if it is missing."""
        try:
            self.thumbnails_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            log.error(f"Could not create thumbnail directory {self.thumbnails_dir}: {e}")
            return False
        return True
