"""
journey.samples — Demo entries for a fresh data directory.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Optional

from journey.core.types import Journal, utcnow

_SAMPLES = [
    (
        "Morning Reflections",
        "San Francisco, CA",
        "Woke up early today and spent some time thinking about my goals for this "
        "year. I want to focus on personal growth and building meaningful connections.",
        ["https://i.imgur.com/IdorGF4.png"],
        1,
    ),
    (
        "Beach Day Adventures",
        "Malibu, CA",
        "The ocean was so calm today. Spent hours just walking along the shore, "
        "collecting shells and watching the sunset. Sometimes the simple moments "
        "are the best.",
        ["https://i.imgur.com/f45Vtup.png"],
        2,
    ),
    (
        "Coffee Shop Musings",
        "Seattle, WA",
        "Found this amazing little coffee shop downtown. The atmosphere is perfect "
        "for journaling. Met an interesting person who shared their travel stories "
        "with me.",
        ["https://i.imgur.com/HYXlcFI.jpeg"],
        3,
    ),
    (
        "My Trip to Paris",
        "Paris, France",
        "At vero eos et accusamus et iusto odio dignissimos ducimus qui blanditiis "
        "praesentium voluptatum deleniti atque corrupti quos dolores et quas "
        "molestias excepturi sint occaecati cupiditate non provident, similique sunt "
        "in culpa qui officia deserunt mollitia animi, id est laborum et dolorum fuga.",
        None,
        0,
    ),
]


def sample_journals(now: Optional[datetime] = None) -> List[Journal]:
    now = now or utcnow()
    journals = []
    for title, location, content, images, days_ago in _SAMPLES:
        created = now - timedelta(days=days_ago)
        journals.append(
            Journal(
                title=title,
                location=location,
                content=content,
                images=list(images) if images else None,
                created_at=created,
                updated_at=created,
            )
        )
    return journals
