"""Cross-topic overlap statistics: topic-count distribution, topic-set groups, ratio ranks."""

import logging
from collections import Counter, defaultdict
from dataclasses import replace
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from ..models.analysis_result import OverlapGroup
from ..models.profile import CrossPeriodProfile, Profile
from ..models.topic import Metric, Period
from ..config.settings import MISSING_AVERAGE_RANK, OVERLAP_KEY_DELIMITER, RATIO_SCALE
from .metric_resolver import resolve_rank

logger = logging.getLogger(__name__)


def matches_search(profile: Profile, search_text: str) -> bool:
    """Case-insensitive substring match on display name or handle."""
    q = search_text.strip().casefold()
    if not q:
        return True
    return q in (profile.name or "").casefold() or q in (profile.handle or "").casefold()


class OverlapAnalyzer:
    """Computes how profiles overlap across the topics of one period."""

    def __init__(self, delimiter: str = OVERLAP_KEY_DELIMITER):
        self.delimiter = delimiter

    def topic_set_key(self, topics: Iterable[str]) -> str:
        """Canonical key: deduplicated slugs sorted lexicographically."""
        return self.delimiter.join(sorted(set(topics)))

    def compute_distribution(
        self,
        profiles: Iterable[Profile],
        total_topics: int = 0,
    ) -> Dict[int, int]:
        """
        Number of profiles per topic count.

        Every count from 1 to max(total_topics, largest observed count) is
        present, empty cells included, so the values sum to the number of
        profiles with at least one topic.
        """
        counts = Counter(p.topic_count for p in profiles if p.topic_count > 0)
        upper = max([total_topics] + list(counts))
        return {n: counts.get(n, 0) for n in range(1, upper + 1)}

    def group_by_topic_set(
        self,
        profiles: Iterable[Profile],
        topic_count: Optional[int] = None,
    ) -> List[OverlapGroup]:
        """
        Group profiles by their exact topic set.

        Args:
            profiles: Profiles of one period
            topic_count: Only consider profiles in exactly this many topics

        Returns:
            Groups sorted by size descending, then key
        """
        groups: Dict[str, OverlapGroup] = {}

        for p in profiles:
            if not p.topic_count:
                continue
            if topic_count is not None and p.topic_count != topic_count:
                continue
            key = self.topic_set_key(p.topics)
            group = groups.get(key)
            if group is None:
                group = OverlapGroup(key=key, topics=sorted(p.topics))
                groups[key] = group
            group.profiles.append(p)

        return sorted(groups.values(), key=lambda g: (-g.size, g.key))

    def assign_ratio_ranks(self, profiles: Sequence[Profile]) -> List[Profile]:
        """
        Rank profiles per topic by noise/signal ratio (lowest first).

        The ratio is noisePoints / signalPoints * 100 and only exists when both
        point values are present and signal points are non-zero. Returns new
        profiles; the inputs are left untouched.
        """
        result: List[Profile] = []
        by_topic: Dict[str, List[tuple]] = defaultdict(list)

        for p in profiles:
            new_ranks = {}
            for slug, r in p.ranks.items():
                ratio = None
                if r.noise_points is not None and r.signal_points:
                    ratio = r.noise_points / r.signal_points * RATIO_SCALE
                new_ranks[slug] = replace(r, ratio=ratio, ratio_rank=None)
            copy = p.with_ranks(new_ranks)
            result.append(copy)

            for slug, r in new_ranks.items():
                if r.ratio is not None:
                    by_topic[slug].append((r.ratio, copy.sort_name, copy.profile_id, r))

        for slug, rows in by_topic.items():
            rows.sort(key=lambda row: row[:3])
            for position, row in enumerate(rows, start=1):
                row[3].ratio_rank = position

        return result

    def topic_count_options(
        self,
        profiles: Iterable[Profile],
        selected_topic_slugs: Sequence[str] = (),
    ) -> Dict[int, int]:
        """
        Options for the topic-count filter.

        With a selection: profiles qualifying in exactly i of the selected
        topics, for i = 1..len(selection). Without: nonzero global counts.
        """
        profiles = list(profiles)
        if selected_topic_slugs:
            selected = set(selected_topic_slugs)
            counts = Counter(len(selected & p.topics) for p in profiles)
            return {i: counts.get(i, 0) for i in range(1, len(selected) + 1)}

        counts = Counter(p.topic_count for p in profiles if p.topic_count > 0)
        return dict(sorted(counts.items()))

    def leaderboard_entry_count(self, profiles: Iterable[Profile]) -> int:
        """Total number of qualifying topic entries."""
        return sum(p.topic_count for p in profiles)

    def merge_periods(
        self,
        profile_maps: Mapping[Period, Mapping[str, Profile]],
        search_text: str = "",
        metric: Metric = Metric.TOTAL,
    ) -> List[CrossPeriodProfile]:
        """
        Cross-period overview of the 7d and 30d profile maps.

        Sorted by total topic count descending, then by the sum of the
        per-period average ranks ascending, then by name.
        """
        merged: Dict[str, CrossPeriodProfile] = {}
        for pid, p in profile_maps.get(Period.SEVEN_DAYS, {}).items():
            merged[pid] = CrossPeriodProfile(profile_id=pid, seven_day=p)
        for pid, p in profile_maps.get(Period.THIRTY_DAYS, {}).items():
            merged.setdefault(pid, CrossPeriodProfile(profile_id=pid)).thirty_day = p

        rows = [
            m for m in merged.values()
            if any(p is not None and matches_search(p, search_text) for p in (m.seven_day, m.thirty_day))
        ]

        def average_rank(p: Optional[Profile]) -> float:
            if p is None:
                return MISSING_AVERAGE_RANK
            values = [v for v in (resolve_rank(r, metric) for r in p.ranks.values()) if v is not None]
            if not values:
                return MISSING_AVERAGE_RANK
            return sum(values) / len(values)

        rows.sort(
            key=lambda m: (
                -m.total_topic_count,
                average_rank(m.seven_day) + average_rank(m.thirty_day),
                m.display_name.casefold(),
                m.profile_id,
            )
        )
        return rows
