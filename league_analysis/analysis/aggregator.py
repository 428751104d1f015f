"""Merge per-topic leaderboard entries into one profile map per period."""

import logging
from typing import Dict, Iterable, Sequence

from ..models.leaderboard import LeaderboardEntry
from ..models.profile import Profile, TopicRanks
from ..models.topic import Metric, Period
from ..config.settings import DEFAULT_TOP_LIMIT
from .metric_resolver import qualifies

logger = logging.getLogger(__name__)


def validate_positive(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
    return value


class ProfileAggregator:
    """Builds the unified profile map for a period, Top-N cutoff and metric."""

    def __init__(self, top_limit: int = DEFAULT_TOP_LIMIT, metric: Metric = Metric.TOTAL):
        self.top_limit = validate_positive("top_limit", top_limit)
        self.metric = metric

    def aggregate(
        self,
        entries: Iterable[LeaderboardEntry],
        period: Period,
    ) -> Dict[str, Profile]:
        """
        Aggregate the entries of one period.

        Only entries ranked within the cutoff count. A second entry for the
        same profile and topic overwrites the first. Profiles without any
        qualifying entry never appear in the result.
        """
        profiles: Dict[str, Profile] = {}
        considered = 0

        for entry in entries:
            if entry.period != period:
                continue
            considered += 1
            if not qualifies(entry, self.metric, self.top_limit):
                continue

            profile = profiles.get(entry.profile_id)
            if profile is None:
                profile = Profile(profile_id=entry.profile_id)
                profiles[entry.profile_id] = profile

            # Fill display fields from the first entry that has them
            profile.handle = profile.handle or entry.handle
            profile.name = profile.name or entry.name
            profile.avatar_url = profile.avatar_url or entry.avatar_url

            profile.ranks[entry.topic_slug] = TopicRanks.from_entry(entry)

        logger.debug(
            f"Aggregated {len(profiles)} profiles from {considered} {period.value} entries "
            f"(top {self.top_limit}, {self.metric.value})"
        )
        return profiles

    def aggregate_periods(
        self,
        entries: Sequence[LeaderboardEntry],
        periods: Sequence[Period],
    ) -> Dict[Period, Dict[str, Profile]]:
        """One profile map per period."""
        return {period: self.aggregate(entries, period) for period in periods}
