"""Result dataclasses produced by the analysis layer."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .profile import Profile
from .topic import Metric, Period, Topic


@dataclass
class OverlapGroup:
    """Profiles sharing an identical topic-set membership."""

    key: str  # Sorted slugs joined with the overlap delimiter
    topics: List[str]  # Sorted slugs
    profiles: List[Profile] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.profiles)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "key": self.key,
            "topics": self.topics,
            "size": self.size,
            "profile_ids": [p.profile_id for p in self.profiles],
        }


@dataclass
class FarmingMetric:
    """Farming / organic statistics of one topic's top cohort."""

    topic_slug: str
    farming_score: float  # Mean number of other topics ranked well, >= 0
    organic_index: float  # 1 / (1 + farming_score), in (0, 1]
    exclusive_top_count: int

    exclusive_profiles: List[Profile] = field(default_factory=list)
    top_profiles: List[Profile] = field(default_factory=list)

    topic: Optional[Topic] = None  # Catalog metadata, when known

    @property
    def title(self) -> str:
        return self.topic.title if self.topic else self.topic_slug

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "topic_slug": self.topic_slug,
            "title": self.title,
            "farming_score": self.farming_score,
            "organic_index": self.organic_index,
            "exclusive_top_count": self.exclusive_top_count,
            "top_count": len(self.top_profiles),
            "exclusive_profile_ids": [p.profile_id for p in self.exclusive_profiles],
        }


@dataclass
class Page:
    """One page of an ordered profile list."""

    items: List[Profile]
    page: int  # 1-based
    page_size: int
    total: int  # Profiles across all pages

    @property
    def total_pages(self) -> int:
        return max(1, -(-self.total // self.page_size))


@dataclass
class LeagueView:
    """Everything the presentation layer needs for one render."""

    period: Period
    metric: Metric
    top_limit: int

    topics: List[Topic]  # Topics present in the period, sorted by title
    visible_topics: List[Topic]  # After the topic search query
    profiles: List[Profile]  # Ranked, all pages
    page: Page

    distribution: Dict[int, int]
    topic_count_options: Dict[int, int]
    leaderboard_entry_count: int

    overlap_groups: List[OverlapGroup] = field(default_factory=list)
    farming: List[FarmingMetric] = field(default_factory=list)

    @property
    def profile_count(self) -> int:
        return len(self.profiles)
