"""
Journey -- local-first personal journal: entries, photos, places.

    from journey import JourneyApp

    app = JourneyApp(data_dir="./journey_data")
    dashboard = app.dashboard()
    dashboard.reload()
    dashboard.set_sort_option(SortOption.TITLE_AZ)
"""

from journey.app import JourneyApp
from journey.core.config import Config
from journey.core.types import Journal, ProfileInfo
from journey.dashboard import Dashboard, SortOption
from journey.editor import JournalEditor
from journey.location import LocationManager, fetch_location

__version__ = "0.1.0"

__all__ = [
    "JourneyApp",
    "Config",
    "Journal",
    "ProfileInfo",
    "Dashboard",
    "SortOption",
    "JournalEditor",
    "LocationManager",
    "fetch_location",
]
