"""Shared fixtures for Journey tests."""

from datetime import datetime, timedelta, timezone

import pytest

from journey.core.config import Config
from journey.core.types import Journal
from journey.store.defaults import KeyValueStore
from journey.store.images import ImageStore
from journey.store.journals import JournalStore
from journey.store.profile import ProfileStore


@pytest.fixture
def config(tmp_path):
    """Provide a Config pointing at a temp directory."""
    cfg = Config.from_data_dir(tmp_path, search_debounce_seconds=0.05, lock_timeout=1.0)
    cfg.ensure_directories()
    return cfg


@pytest.fixture
def images(config):
    return ImageStore(config.images_dir)


@pytest.fixture
def journals(config, images):
    return JournalStore(config.journals_path, images=images, lock_timeout=config.lock_timeout)


@pytest.fixture
def defaults(config):
    return KeyValueStore(config.defaults_path)


@pytest.fixture
def profile(defaults, config):
    return ProfileStore(defaults, config.profile_images_dir)


@pytest.fixture
def day():
    """A fixed reference instant."""
    return datetime(2025, 11, 12, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def make_journal(day):
    """Factory for entries created *days_ago* before ``day``."""

    def _make(days_ago=0, **fields):
        created = day - timedelta(days=days_ago)
        fields.setdefault("created_at", created)
        fields.setdefault("updated_at", created)
        return Journal(**fields)

    return _make
