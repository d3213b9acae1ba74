"""
journey.dashboard — Listing, searching and sorting journal entries.

The dashboard keeps the full collection in memory and recomputes the
visible list from scratch whenever the search text or sort option
changes.  Search is debounced; sorting applies immediately.
"""

from __future__ import annotations

import enum
import locale
import logging
import threading
import unicodedata
from typing import Callable, Iterable, List, Optional, Tuple

from journey.core.types import Journal
from journey.debounce import Debouncer
from journey.store.journals import JournalStore

log = logging.getLogger(__name__)

DEFAULT_SEARCH_DELAY = 0.5


class SortOption(enum.Enum):
    DATE_DESCENDING = "newest"
    DATE_ASCENDING = "oldest"
    TITLE_AZ = "title-az"
    TITLE_ZA = "title-za"

    @property
    def label(self) -> str:
        return _LABELS[self][0]

    @property
    def short_label(self) -> str:
        return _LABELS[self][1]

    @classmethod
    def parse(cls, name: str) -> "SortOption":
        """Look up an option by value (``"title-az"``) or member name."""
        key = name.strip()
        for option in cls:
            if key.lower() == option.value or key.upper() == option.name:
                return option
        choices = ", ".join(o.value for o in cls)
        raise ValueError(f"Unknown sort option {name!r} (choose from {choices})")


_LABELS = {
    SortOption.DATE_DESCENDING: ("Date: Newest first", "Newest"),
    SortOption.DATE_ASCENDING: ("Date: Oldest first", "Oldest"),
    SortOption.TITLE_AZ: ("Title: A → Z", "Title A–Z"),
    SortOption.TITLE_ZA: ("Title: Z → A", "Title Z–A"),
}


# ---------------------------------------------------------------------------
# Pure filter / sort
# ---------------------------------------------------------------------------


def matches(journal: Journal, text: str) -> bool:
    """Case-insensitive substring match on title, location or content."""
    if not text:
        return True
    needle = text.casefold()
    return any(
        field is not None and needle in field.casefold()
        for field in (journal.title, journal.location, journal.content)
    )


def filter_journals(journals: Iterable[Journal], text: str) -> List[Journal]:
    return [j for j in journals if matches(j, text)]


def use_system_collation() -> bool:
    """Collate titles with the user's locale.  False if it is unavailable."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as exc:
        log.debug("Keeping default collation: %s", exc)
        return False
    return True


def _strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def title_key(journal: Journal) -> Tuple[str, str]:
    """Case- and accent-insensitive sort key; missing titles are ``""``.

    Base letters decide first, so "Éclair" sorts between "apple" and
    "Zebra" even under the C locale.  Ties fall back to full locale
    collation.
    """
    folded = (journal.title or "").casefold()
    return locale.strxfrm(_strip_accents(folded)), locale.strxfrm(folded)


def sort_journals(journals: Iterable[Journal], option: SortOption) -> List[Journal]:
    items = list(journals)
    if option is SortOption.DATE_DESCENDING:
        items.sort(key=lambda j: j.created_at, reverse=True)
    elif option is SortOption.DATE_ASCENDING:
        items.sort(key=lambda j: j.created_at)
    elif option is SortOption.TITLE_AZ:
        items.sort(key=title_key)
    elif option is SortOption.TITLE_ZA:
        items.sort(key=title_key, reverse=True)
    else:
        raise ValueError(f"Unsupported sort option: {option!r}")
    return items


def filter_and_sort(
    journals: Iterable[Journal], text: str, option: SortOption
) -> List[Journal]:
    return sort_journals(filter_journals(journals, text), option)


# ---------------------------------------------------------------------------
# Dashboard controller
# ---------------------------------------------------------------------------


class Dashboard:
    """State behind the main journal list.

    Parameters
    ----------
    store:
        Journal store to read from and delete through.
    search_delay:
        Debounce interval in seconds for ``set_search_text``.
    on_change:
        Called with the new visible list after every recompute.
    """

    def __init__(
        self,
        store: JournalStore,
        search_delay: float = DEFAULT_SEARCH_DELAY,
        on_change: Optional[Callable[[List[Journal]], None]] = None,
    ) -> None:
        self.store = store
        self.on_change = on_change
        self.journals: List[Journal] = []
        self.filtered: List[Journal] = []
        self.search_text = ""
        self.sort_option = SortOption.DATE_DESCENDING
        self.selected: Optional[Journal] = None
        self._lock = threading.RLock()
        self._search = Debouncer(search_delay, self._apply_search)

    @property
    def is_empty(self) -> bool:
        return not self.journals

    def reload(self) -> List[Journal]:
        """Re-read the store and recompute the visible list."""
        journals = self.store.load()
        with self._lock:
            self.journals = journals
        return self.refresh()

    def refresh(self) -> List[Journal]:
        with self._lock:
            self.filtered = filter_and_sort(self.journals, self.search_text, self.sort_option)
            visible = list(self.filtered)
        log.debug("Filtered to %d journals", len(visible))
        if self.on_change is not None:
            self.on_change(visible)
        return visible

    def set_search_text(self, text: str) -> None:
        """Record *text*; the list is recomputed once typing pauses."""
        with self._lock:
            self.search_text = text
        self._search.call(text)

    def flush(self) -> List[Journal]:
        """Apply a pending search immediately."""
        self._search.flush()
        with self._lock:
            return list(self.filtered)

    def set_sort_option(self, option: SortOption) -> List[Journal]:
        with self._lock:
            self.sort_option = option
        return self.refresh()

    def select(self, journal: Optional[Journal]) -> None:
        self.selected = journal

    def delete_selected(self) -> bool:
        """Delete the selected entry and reload.  False if none selected."""
        if self.selected is None:
            return False
        removed = self.store.delete_by_id(self.selected.id)
        self.selected = None
        self.reload()
        return removed

    def close(self) -> None:
        self._search.cancel()

    def _apply_search(self, text: str) -> None:
        with self._lock:
            # a newer keystroke already replaced the text
            if text != self.search_text:
                return
        self.refresh()
