"""journey.store — Local persistence: journal file, image directory, profile."""

from journey.store.defaults import KeyValueStore
from journey.store.images import ImageStore, is_remote
from journey.store.journals import JournalStore
from journey.store.profile import ProfileStore

__all__ = [
    "ImageStore",
    "JournalStore",
    "KeyValueStore",
    "ProfileStore",
    "is_remote",
]
