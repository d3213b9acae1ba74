"""
journey.editor — Form state for creating and editing an entry.

One ``JournalEditor`` backs one editing session.  With ``journal=None``
it creates a new entry; otherwise it edits that entry in place (same
id, same ``created_at``).
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, List, Optional

from journey.core.types import Journal, utcnow
from journey.location import LocationManager
from journey.store.images import ImageStore, is_remote
from journey.store.journals import JournalStore

log = logging.getLogger(__name__)

SaveCallback = Callable[[Journal], None]


def _blank_to_none(value: str) -> Optional[str]:
    return value if value else None


class JournalEditor:
    def __init__(
        self,
        store: JournalStore,
        images: ImageStore,
        journal: Optional[Journal] = None,
        location_manager: Optional[LocationManager] = None,
        on_save: Optional[SaveCallback] = None,
    ) -> None:
        self.store = store
        self.images = images
        self.existing = journal
        self.location_manager = location_manager
        self.on_save = on_save

        self.title = ""
        self.content = ""
        self.location = ""
        self.selected_date: datetime = utcnow()
        self.image_data: Optional[bytes] = None
        self._image_changed = False
        self._manual_location_request = False
        self._unsubscribe: Optional[Callable[[], None]] = None

        if journal is not None:
            self.title = journal.title or ""
            self.content = journal.content or ""
            self.location = journal.location or ""
            self.selected_date = journal.created_at
            first = journal.thumbnail_image
            if first and not is_remote(first):
                self.image_data = images.load(first)

        if location_manager is not None:
            self._unsubscribe = location_manager.subscribe(self._on_location)

    @property
    def is_editing(self) -> bool:
        return self.existing is not None

    def set_image(self, data: Optional[bytes]) -> None:
        """Pick a new photo, or clear it with None."""
        self.image_data = data
        self._image_changed = True

    # -- location -----------------------------------------------------------

    def appear(self) -> None:
        """Auto-request the current location for a new entry."""
        if not self.is_editing and self.location_manager is not None:
            self.location_manager.request_location()

    def request_current_location(self) -> None:
        """User tapped the location button."""
        if self.location_manager is None:
            return
        self._manual_location_request = True
        self.location_manager.request_location()

    def _on_location(self, value: Optional[str]) -> None:
        if value is None:
            return
        if self._manual_location_request or not self.is_editing:
            self.location = value
            self._manual_location_request = False

    # -- persistence --------------------------------------------------------

    def save(self) -> Journal:
        """Write the form to the store and return the saved entry."""
        previous = list(self.existing.images or []) if self.existing is not None else []
        image_filenames: List[str] = []
        if self.existing is not None and not self._image_changed:
            image_filenames = previous
        elif self.image_data is not None:
            filename = self.images.save(self.image_data)
            if filename is not None:
                image_filenames.append(filename)

        fields = dict(
            title=_blank_to_none(self.title),
            location=_blank_to_none(self.location),
            content=_blank_to_none(self.content),
            images=image_filenames or None,
        )

        if self.existing is not None:
            journal = replace(self.existing, updated_at=utcnow(), **fields)
        else:
            now = utcnow()
            journal = Journal(created_at=self.selected_date, updated_at=now, **fields)

        stored = self.store.upsert(journal)
        if self._image_changed:
            # the replaced photo is no longer referenced by this entry
            self.images.delete_many(
                f for f in previous if f not in image_filenames and not is_remote(f)
            )
            self._image_changed = False
        self.existing = stored
        if self.on_save is not None:
            self.on_save(stored)
        log.info("Saved journal: %s", stored.display_title)
        self.close()
        return stored

    def delete(self) -> bool:
        """Delete the entry being edited.  False when creating."""
        if self.existing is None:
            return False
        removed = self.store.delete_by_id(self.existing.id)
        if self.on_save is not None:
            self.on_save(self.existing)
        self.close()
        return removed

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
