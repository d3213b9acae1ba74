"""
journey.store.profile — The single user profile.

The profile record is JSON-encoded under one key of a
:class:`~journey.store.defaults.KeyValueStore`.  At most one profile
picture exists on disk: saving a new picture removes every previous
``profile_*`` file first, and saving without one removes the old file.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Tuple

from journey.core.types import ProfileInfo, is_valid_email
from journey.store.defaults import KeyValueStore
from journey.store.images import ImageStore

log = logging.getLogger(__name__)

PROFILE_KEY = "profile.info"
PROFILE_IMAGE_PREFIX = "profile_"


class ProfileStore:
    def __init__(self, defaults: KeyValueStore, images_dir: Path) -> None:
        self.defaults = defaults
        self.images = ImageStore(images_dir)

    def load(self) -> Tuple[ProfileInfo, Optional[bytes]]:
        """Return the profile and its picture bytes (None if absent)."""
        info = self.load_info()
        image = self.images.load(info.image_filename) if info.image_filename else None
        return info, image

    def load_info(self) -> ProfileInfo:
        raw = self.defaults.get(PROFILE_KEY)
        if raw is None:
            return ProfileInfo()
        try:
            return ProfileInfo.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as exc:
            log.warning("Discarding unreadable profile record: %s", exc)
            return ProfileInfo()

    def save(
        self,
        name: str,
        email: str,
        bio: str,
        image: Optional[bytes] = None,
    ) -> ProfileInfo:
        """Persist the profile, replacing or clearing its picture.

        Raises ``ValueError`` for a non-empty email that is not an
        address.
        """
        if not is_valid_email(email):
            raise ValueError(f"Invalid email address: {email!r}")

        image_filename: Optional[str] = None
        if image is not None:
            self._remove_all_images()
            image_filename = self.images.save(image, prefix=PROFILE_IMAGE_PREFIX)
            if image_filename is None:
                log.error("Failed to save profile image")
        else:
            existing = self.load_info()
            if existing.image_filename:
                self.images.delete(existing.image_filename)

        info = ProfileInfo(name=name, email=email, bio=bio, image_filename=image_filename)
        self._save_info(info)
        return info

    def _save_info(self, info: ProfileInfo) -> None:
        self.defaults.set(PROFILE_KEY, json.dumps(info.to_dict()))

    def _remove_all_images(self) -> None:
        for filename in self.images.list_filenames():
            if filename.startswith(PROFILE_IMAGE_PREFIX):
                self.images.delete(filename)
