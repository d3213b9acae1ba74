"""
journey.app -- Top-level JourneyApp: wires configuration and stores.

    from journey import JourneyApp

    with JourneyApp(data_dir="./journey_data") as app:
        editor = app.editor()
        editor.title = "First day"
        editor.save()
        for journal in app.dashboard().reload():
            print(journal.display_title)

Stores are built once from ``Config`` and shared by every controller
the app hands out.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from journey.core.config import Config
from journey.core.types import Journal
from journey.dashboard import Dashboard, use_system_collation
from journey.detail import JournalDetail
from journey.editor import JournalEditor, SaveCallback
from journey.location import LocationManager
from journey.samples import sample_journals
from journey.store.defaults import KeyValueStore
from journey.store.images import ImageStore
from journey.store.journals import JournalStore
from journey.store.profile import ProfileStore

log = logging.getLogger("journey.app")


class JourneyApp:
    """Public API for the journal.

    Parameters
    ----------
    config:
        Full ``Config`` object.  If not given, ``data_dir`` and
        ``**kwargs`` are forwarded to ``Config``.
    data_dir:
        Shortcut -- point at a directory and go.
    **kwargs:
        Extra keyword args forwarded to ``Config()``.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        data_dir: Optional[str | Path] = None,
        **kwargs: Any,
    ) -> None:
        if config is not None:
            self.config = config
        elif data_dir is not None:
            self.config = Config.from_data_dir(data_dir, **kwargs)
        else:
            self.config = Config(**kwargs)

        self.config.ensure_directories()
        use_system_collation()

        if self.config.structured_logging:
            from journey.core.logging import configure_logging

            configure_logging(structured=True, level=self.config.log_level)

        self.images = ImageStore(self.config.images_dir)
        self.journals = JournalStore(
            self.config.journals_path,
            images=self.images,
            lock_timeout=self.config.lock_timeout,
        )
        self.defaults = KeyValueStore(
            self.config.defaults_path, lock_timeout=self.config.lock_timeout
        )
        self.profile = ProfileStore(self.defaults, self.config.profile_images_dir)
        self._dashboards: List[Dashboard] = []

        log.debug("JourneyApp ready at %s", self.config.data_dir)

    # -- controllers --------------------------------------------------------

    def dashboard(self) -> Dashboard:
        dashboard = Dashboard(
            self.journals, search_delay=self.config.search_debounce_seconds
        )
        self._dashboards.append(dashboard)
        return dashboard

    def editor(
        self,
        journal: Optional[Journal] = None,
        location_manager: Optional[LocationManager] = None,
        on_save: Optional[SaveCallback] = None,
    ) -> JournalEditor:
        return JournalEditor(
            self.journals,
            self.images,
            journal=journal,
            location_manager=location_manager,
            on_save=on_save,
        )

    def detail(self, journal: Journal) -> JournalDetail:
        return JournalDetail(journal, self.journals, self.images)

    # -- housekeeping -------------------------------------------------------

    def seed_samples(self) -> int:
        """Add the demo entries to an empty journal.  Returns how many."""
        if self.journals.load():
            return 0
        samples = sample_journals()
        self.journals.save(samples)
        return len(samples)

    def get_stats(self) -> Dict[str, Any]:
        journals = self.journals.load()
        info = self.profile.load_info()
        return {
            "data_dir": str(self.config.data_dir),
            "journals": len(journals),
            "images": len(self.images.list_filenames()),
            "with_location": sum(1 for j in journals if j.location),
            "profile_name": info.name,
        }

    def close(self) -> None:
        for dashboard in self._dashboards:
            dashboard.close()
        self._dashboards.clear()

    def __enter__(self) -> "JourneyApp":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
