"""Option dataclasses passed in by the presentation layer."""

from dataclasses import dataclass, field
from typing import List, Optional

from .topic import Metric, Period
from ..config.settings import (
    DEFAULT_GOOD_RANK_THRESHOLD,
    DEFAULT_TOP_CUTOFF,
    DEFAULT_TOP_LIMIT,
    PAGE_SIZE,
)

# Extra sortable fields besides the rank metrics
RATIO_FIELD = "ratio"
RATIO_RANK_FIELD = "ratioRank"
SORT_DIRECTIONS = ("asc", "desc")
SORT_FIELDS = tuple(m.value for m in Metric) + (RATIO_FIELD, RATIO_RANK_FIELD)


@dataclass
class ManualSort:
    """Explicit column sort chosen by the user (topic + field + direction)."""

    topic_slug: str
    field: str = Metric.TOTAL.value  # Metric value, "ratio" or "ratioRank"
    direction: str = "asc"

    def __post_init__(self):
        if self.direction not in SORT_DIRECTIONS:
            raise ValueError(f"Unknown sort direction: {self.direction!r}")
        if self.field not in SORT_FIELDS:
            raise ValueError(f"Unknown sort field: {self.field!r}")


@dataclass
class RankingOptions:
    """Filters and sort settings for the ranking pipeline."""

    search_text: str = ""
    selected_topic_slugs: List[str] = field(default_factory=list)
    topic_count_filter: Optional[int] = None
    metric: Metric = Metric.TOTAL
    top_limit: int = DEFAULT_TOP_LIMIT
    manual_sort: Optional[ManualSort] = None


@dataclass
class ViewConfig:
    """Full input of one view computation."""

    period: Period = Period.TOURNAMENT
    ranking: RankingOptions = field(default_factory=RankingOptions)

    topic_query: str = ""
    page: int = 1
    page_size: int = PAGE_SIZE

    selected_topic_count: Optional[int] = None  # Distribution cell to drill into

    top_cutoff: int = DEFAULT_TOP_CUTOFF
    good_rank_threshold: int = DEFAULT_GOOD_RANK_THRESHOLD
