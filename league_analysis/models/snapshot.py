"""Loaded league snapshot: topic catalog plus normalized entries."""

from dataclasses import dataclass, field
from typing import List, Optional, Set
from datetime import datetime

from .leaderboard import LeaderboardEntry
from .topic import Period, SourceKind, Topic


@dataclass
class LeagueSnapshot:
    """Raw material for every recomputation of a league view."""

    source_kind: SourceKind
    topics: List[Topic]
    entries: List[LeaderboardEntry] = field(default_factory=list)

    generation_date: Optional[str] = None  # As reported by precomputed files
    failed_topics: List[str] = field(default_factory=list)  # "slug/period" keys
    fetched_at: int = field(default_factory=lambda: int(datetime.now().timestamp()))

    def entries_for(self, period: Period) -> List[LeaderboardEntry]:
        return [e for e in self.entries if e.period == period]

    def topic_slugs_for(self, period: Period) -> Set[str]:
        """Slugs with at least one entry in the period."""
        return {e.topic_slug for e in self.entries if e.period == period}

    def topics_for(self, period: Period) -> List[Topic]:
        """Catalog topics present in the period, sorted by title."""
        present = self.topic_slugs_for(period)
        return sorted(
            (t for t in self.topics if t.slug in present),
            key=lambda t: (t.sort_title, t.slug),
        )
