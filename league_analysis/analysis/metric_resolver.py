"""Resolve the rank value of an entry under a chosen metric."""

import math
from typing import Optional, Union

from ..models.leaderboard import LeaderboardEntry
from ..models.profile import TopicRanks
from ..models.topic import Metric
from ..models.options import RATIO_FIELD, RATIO_RANK_FIELD

# Fallback chain per metric. Tournament snapshots usually only carry `rank`,
# 7d/30d snapshots carry the total/signal/noise triple.
RANK_FALLBACKS = {
    Metric.TOTAL: ("rank_total", "rank"),
    Metric.SIGNAL: ("rank_signal", "rank_total", "rank"),
    Metric.NOISE: ("rank_noise", "rank_total", "rank"),
}

Ranked = Union[LeaderboardEntry, TopicRanks]


def _finite(value) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value if math.isfinite(value) else None


def resolve_rank(ranks: Optional[Ranked], metric: Metric) -> Optional[float]:
    """
    Rank of an entry under `metric`, following the fallback chain.

    The first field that is present wins; if that value is not a finite
    number of at least 1 the entry has no rank under this metric.
    """
    if ranks is None:
        return None
    for attr in RANK_FALLBACKS[metric]:
        value = getattr(ranks, attr, None)
        if value is not None:
            value = _finite(value)
            return value if value is not None and value >= 1 else None
    return None


def qualifies(ranks: Optional[Ranked], metric: Metric, top_limit: int) -> bool:
    """True when the resolved rank exists and is within the Top-N cutoff."""
    rank = resolve_rank(ranks, metric)
    return rank is not None and rank <= top_limit


def resolve_field(ranks: Optional[TopicRanks], field: str) -> Optional[float]:
    """Value of a sortable column: a metric (with fallback), the ratio or the ratio rank."""
    if ranks is None:
        return None
    if field == RATIO_FIELD:
        return _finite(ranks.ratio)
    if field == RATIO_RANK_FIELD:
        return _finite(ranks.ratio_rank)
    return resolve_rank(ranks, Metric(field))
