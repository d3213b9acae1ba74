"""
journey.store.images — Flat directory of journal photos.

Each image is written once under a generated ``<UUID>.jpg`` name and is
referenced from journal records by that filename.  All operations are
best-effort: failures are logged and degrade to "no image".
"""

from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Iterable, List, Optional

log = logging.getLogger(__name__)

REMOTE_PREFIXES = ("http://", "https://")


def is_remote(ref: str) -> bool:
    """True for image references that are URLs rather than stored files."""
    return ref.startswith(REMOTE_PREFIXES)


class ImageStore:
    """Filesystem-backed image store.

    No reference counting: deleting a filename removes the file even if
    another record still lists it.
    """

    def __init__(self, images_dir: Path, extension: str = ".jpg") -> None:
        self.images_dir = Path(images_dir)
        self.extension = extension
        self.images_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, filename: str) -> Optional[Path]:
        """Resolve *filename* inside the store, or None if it escapes it."""
        if not filename or "/" in filename or "\\" in filename:
            return None
        path = (self.images_dir / filename).resolve()
        if path.parent != self.images_dir.resolve():
            return None
        return path

    def exists(self, filename: str) -> bool:
        path = self.path_for(filename)
        return path is not None and path.is_file()

    def save(self, data: bytes, prefix: str = "") -> Optional[str]:
        """Write *data* under a fresh name and return the filename."""
        filename = f"{prefix}{str(uuid.uuid4()).upper()}{self.extension}"
        path = self.images_dir / filename
        try:
            self.images_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError:
            log.error("Error saving image %s", filename, exc_info=True)
            return None
        log.debug("Saved image: %s (%d bytes)", filename, len(data), extra={"image": filename})
        return filename

    def load(self, filename: str) -> Optional[bytes]:
        """Return the image bytes, or None if missing or unreadable."""
        path = self.path_for(filename)
        if path is None:
            log.warning("Rejected image filename: %r", filename)
            return None
        if not path.is_file():
            log.info("Image file not found: %s", filename)
            return None
        try:
            return path.read_bytes()
        except OSError:
            log.warning("Error reading image data: %s", filename, exc_info=True)
            return None

    def delete(self, filename: str) -> None:
        path = self.path_for(filename)
        if path is None:
            log.warning("Refusing to delete image outside store: %r", filename)
            return
        try:
            path.unlink()
        except OSError as exc:
            log.warning("Error deleting image %s: %s", filename, exc)
            return
        log.debug("Deleted image: %s", filename, extra={"image": filename})

    def delete_many(self, filenames: Iterable[str]) -> None:
        for filename in filenames:
            self.delete(filename)

    def list_filenames(self) -> List[str]:
        """Sorted names of every stored image."""
        return sorted(p.name for p in self.images_dir.glob(f"*{self.extension}"))
