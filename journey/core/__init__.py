"""journey.core — Configuration, data types, logging, and file locking."""

from journey.core.config import Config
from journey.core.filelock import FileLock
from journey.core.types import (
    Journal,
    ProfileInfo,
    decode_date,
    encode_date,
    generate_id,
    is_valid_email,
    make_snippet,
    utcnow,
)

__all__ = [
    "Config",
    "FileLock",
    "Journal",
    "ProfileInfo",
    "decode_date",
    "encode_date",
    "generate_id",
    "is_valid_email",
    "make_snippet",
    "utcnow",
]
