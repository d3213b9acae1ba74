"""
journey.store.journals — The journal collection as one JSON file.

The whole collection lives in a single JSON array.  Every mutation
loads all entries, changes the in-memory list, and rewrites the file,
so each operation is O(n) in the number of entries.

Failures never reach the caller: an unreadable file loads as an empty
collection and a failed write is logged and dropped.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional

from journey.core.filelock import FileLock
from journey.core.types import Journal
from journey.store.images import ImageStore, is_remote

log = logging.getLogger(__name__)


class JournalStore:
    """Read-modify-write store for journal entries.

    Parameters
    ----------
    path:
        The JSON file holding the collection.
    images:
        Image store used to cascade-delete an entry's photos.
    lock_timeout:
        Seconds to wait for the read-modify-write lock in ``upsert``
        and ``delete_by_id``.
    """

    def __init__(
        self,
        path: Path,
        images: Optional[ImageStore] = None,
        lock_timeout: float = 5.0,
    ) -> None:
        self.path = Path(path)
        self.images = images
        self.lock_timeout = lock_timeout
        self.path.parent.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Whole-collection I/O
    # ------------------------------------------------------------------

    def load(self) -> List[Journal]:
        """Return every entry in stored order.

        Returns ``[]`` when the file is missing or cannot be decoded.
        """
        if not self.path.exists():
            log.debug("No saved journals at %s", self.path)
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(raw, list):
                raise ValueError("journal file does not hold a JSON array")
            journals = [Journal.from_dict(item) for item in raw]
        except (OSError, ValueError, KeyError, TypeError, RecursionError) as exc:
            log.warning("Error loading journals from %s: %s", self.path, exc)
            return []
        log.debug("Loaded %d journals", len(journals))
        return journals

    def save(self, journals: List[Journal]) -> None:
        """Overwrite the file with *journals*.  Errors are logged only."""
        payload = json.dumps([j.to_dict() for j in journals], indent=2, ensure_ascii=False)
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError:
            log.error("Error saving journals to %s", self.path, exc_info=True)
            return
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
        log.debug("Saved %d journals", len(journals))

    # ------------------------------------------------------------------
    # Entry operations
    # ------------------------------------------------------------------

    def get(self, journal_id: str) -> Optional[Journal]:
        for journal in self.load():
            if journal.id == journal_id:
                return journal
        return None

    def upsert(self, journal: Journal) -> Journal:
        """Replace the entry with the same id, or append a new one.

        A replaced entry gets a fresh ``updated_at``.  Returns the record
        as written.
        """
        with FileLock(self.path, timeout=self.lock_timeout):
            journals = self.load()
            for index, existing in enumerate(journals):
                if existing.id == journal.id:
                    stored = journal.touched()
                    journals[index] = stored
                    log.info(
                        "Updated existing journal: %s",
                        stored.display_title,
                        extra={"journal_id": stored.id},
                    )
                    break
            else:
                stored = journal
                journals.append(stored)
                log.info(
                    "Added new journal: %s",
                    stored.display_title,
                    extra={"journal_id": stored.id},
                )
            self.save(journals)
        return stored

    def delete_by_id(self, journal_id: str) -> bool:
        """Remove the entry and its stored images.

        Returns True if an entry with *journal_id* existed.
        """
        with FileLock(self.path, timeout=self.lock_timeout):
            journals = self.load()
            target = next((j for j in journals if j.id == journal_id), None)
            if target is not None and target.images and self.images is not None:
                self.images.delete_many(i for i in target.images if not is_remote(i))
            remaining = [j for j in journals if j.id != journal_id]
            self.save(remaining)
        log.info("Deleted journal with ID: %s", journal_id, extra={"journal_id": journal_id})
        return target is not None
