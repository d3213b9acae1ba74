"""
journey.core.types — Data types for the journey journal.

Every structure here is a plain dataclass: no ORM, no magic,
serialisable to a JSON-ready dict in one call.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

#: Foundation's reference date.  Older journal files store numeric
#: timestamps as seconds since this instant.
REFERENCE_DATE = datetime(2001, 1, 1, tzinfo=timezone.utc)

SNIPPET_LENGTH = 100

EMAIL_PATTERN = re.compile(r"^[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}$", re.IGNORECASE)


def generate_id() -> str:
    """12-hex-char unique identifier."""
    return uuid.uuid4().hex[:12]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def encode_date(value: datetime) -> str:
    """ISO-8601 in UTC with a ``Z`` suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def decode_date(value: Any) -> datetime:
    """Parse a stored timestamp.

    Accepts ISO-8601 strings (``Z`` or offset, naive read as UTC) and
    numbers, which are seconds since :data:`REFERENCE_DATE`.

    Raises ``ValueError`` for anything else.
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a timestamp: {value!r}")
    if isinstance(value, (int, float)):
        try:
            return REFERENCE_DATE + timedelta(seconds=value)
        except OverflowError as exc:
            raise ValueError(f"Timestamp out of range: {value!r}") from exc
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    raise ValueError(f"Not a timestamp: {value!r}")


def make_snippet(content: Optional[str], max_length: int = SNIPPET_LENGTH) -> str:
    """First *max_length* characters of *content*, ``...`` appended if cut."""
    if not content:
        return ""
    if len(content) <= max_length:
        return content
    return content[:max_length] + "..."


def is_valid_email(email: str) -> bool:
    """Empty is allowed; the user may not have set one yet."""
    if not email:
        return True
    return EMAIL_PATTERN.match(email) is not None


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"Expected a string, got {type(value).__name__}")
    return value


# ---------------------------------------------------------------------------
# Journal — one user-authored entry
# ---------------------------------------------------------------------------


@dataclass
class Journal:
    """
    A single journal entry.

    ``id`` never changes for the lifetime of the entry and is the only
    link between the entry and its image files.  ``images`` holds local
    filenames (resolved against the image store) or ``http(s)`` URLs.
    """

    id: str = field(default_factory=generate_id)
    title: Optional[str] = None
    location: Optional[str] = None
    content: Optional[str] = None
    images: Optional[List[str]] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    # -- derived display fields ---------------------------------------------

    @property
    def snippet(self) -> str:
        """Short preview of the content for list cards."""
        return make_snippet(self.content)

    @property
    def thumbnail_image(self) -> Optional[str]:
        """First image reference, or None."""
        if not self.images:
            return None
        return self.images[0]

    @property
    def display_title(self) -> str:
        return self.title or "Untitled"

    def touched(self, when: Optional[datetime] = None) -> "Journal":
        """Copy of this entry with ``updated_at`` refreshed."""
        return replace(self, updated_at=when or utcnow())

    # -- serialisation ------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "createdAt": encode_date(self.created_at),
            "updatedAt": encode_date(self.updated_at),
            "title": self.title,
            "location": self.location,
            "content": self.content,
            "images": list(self.images) if self.images is not None else None,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Journal":
        """Build from a stored record.

        Raises ``KeyError``/``ValueError``/``TypeError`` on malformed input
        so the caller can decide how to degrade.
        """
        if not isinstance(d, dict):
            raise TypeError(f"Journal record must be an object, got {type(d).__name__}")
        journal_id = d["id"]
        if not isinstance(journal_id, str):
            raise ValueError("Journal id must be a string")

        images = d.get("images")
        if images is not None:
            if not isinstance(images, list) or not all(isinstance(i, str) for i in images):
                raise ValueError("Journal images must be a list of strings")
            images = list(images)

        return cls(
            id=journal_id,
            title=_optional_str(d.get("title")),
            location=_optional_str(d.get("location")),
            content=_optional_str(d.get("content")),
            images=images,
            created_at=decode_date(d["createdAt"]),
            updated_at=decode_date(d["updatedAt"]),
        )


# ---------------------------------------------------------------------------
# ProfileInfo — the single user profile
# ---------------------------------------------------------------------------


@dataclass
class ProfileInfo:
    name: str = ""
    email: str = ""
    bio: str = ""
    image_filename: Optional[str] = None

    @property
    def has_valid_email(self) -> bool:
        return is_valid_email(self.email)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "bio": self.bio,
            "imageFilename": self.image_filename,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ProfileInfo":
        if not isinstance(d, dict):
            raise TypeError(f"Profile record must be an object, got {type(d).__name__}")
        return cls(
            name=str(d["name"]),
            email=str(d["email"]),
            bio=str(d["bio"]),
            image_filename=_optional_str(d.get("imageFilename")),
        )
