"""
journey.detail — Read-only presentation of one entry.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

from journey.core.types import Journal
from journey.store.images import ImageStore, is_remote
from journey.store.journals import JournalStore


class ImageKind(enum.Enum):
    REMOTE = "remote"
    LOCAL = "local"
    PLACEHOLDER = "placeholder"


@dataclass(frozen=True)
class ImageSource:
    kind: ImageKind
    ref: Optional[str] = None
    data: Optional[bytes] = None


PLACEHOLDER = ImageSource(ImageKind.PLACEHOLDER)


def resolve_image(ref: Optional[str], images: ImageStore) -> ImageSource:
    """URL refs load remotely; local files that are gone show the placeholder."""
    if not ref:
        return PLACEHOLDER
    if is_remote(ref):
        return ImageSource(ImageKind.REMOTE, ref=ref)
    data = images.load(ref)
    if data is None:
        return PLACEHOLDER
    return ImageSource(ImageKind.LOCAL, ref=ref, data=data)


def format_long_date(journal: Journal) -> str:
    """e.g. "November 12, 2025" (local time)."""
    local = journal.created_at.astimezone()
    return f"{local.strftime('%B')} {local.day}, {local.year}"


class JournalDetail:
    def __init__(self, journal: Journal, store: JournalStore, images: ImageStore) -> None:
        self.journal = journal
        self.store = store
        self.images = images

    @property
    def title(self) -> str:
        return self.journal.display_title

    @property
    def formatted_date(self) -> str:
        return format_long_date(self.journal)

    @property
    def has_location(self) -> bool:
        return bool(self.journal.location)

    def image_source(self) -> ImageSource:
        return resolve_image(self.journal.thumbnail_image, self.images)

    def delete(self) -> bool:
        return self.store.delete_by_id(self.journal.id)
