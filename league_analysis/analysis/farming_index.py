"""Farming / organic index of each topic's top cohort."""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from ..models.analysis_result import FarmingMetric
from ..models.profile import Profile
from ..models.topic import Metric, Topic
from ..config.settings import DEFAULT_GOOD_RANK_THRESHOLD, DEFAULT_TOP_CUTOFF
from .aggregator import validate_positive
from .metric_resolver import resolve_rank

logger = logging.getLogger(__name__)


class FarmingIndexCalculator:
    """
    Measures whether a topic's top participants are also ranked well elsewhere.

    For each topic the top `top_cutoff` profiles are taken; each one counts the
    other topics where it ranks at or below `good_rank_threshold`. The mean of
    those counts is the farming score, and organic_index = 1 / (1 + score).

    A topic with no ranked profile gets score 0 and organic index 1.0. That
    only means no farming was observed, not that the topic has an organic
    top cohort.
    """

    def __init__(
        self,
        top_cutoff: int = DEFAULT_TOP_CUTOFF,
        good_rank_threshold: int = DEFAULT_GOOD_RANK_THRESHOLD,
        metric: Metric = Metric.TOTAL,
    ):
        self.top_cutoff = validate_positive("top_cutoff", top_cutoff)
        self.good_rank_threshold = validate_positive("good_rank_threshold", good_rank_threshold)
        self.metric = metric

    def _other_good_count(self, profile: Profile, topic_slug: str) -> int:
        count = 0
        for slug, r in profile.ranks.items():
            if slug == topic_slug:
                continue
            rank = resolve_rank(r, self.metric)
            if rank is not None and rank <= self.good_rank_threshold:
                count += 1
        return count

    def analyze_topic(
        self,
        topic_slug: str,
        profiles: Sequence[Profile],
        topic: Optional[Topic] = None,
    ) -> FarmingMetric:
        """Compute the farming metric of one topic."""
        ranked = []
        for p in profiles:
            rank = resolve_rank(p.ranks.get(topic_slug), self.metric)
            if rank is not None:
                ranked.append((rank, p.sort_name, p.profile_id, p))
        ranked.sort(key=lambda row: row[:3])
        top_profiles = [row[3] for row in ranked[: self.top_cutoff]]

        counts = []
        exclusive_profiles = []
        for p in top_profiles:
            other = self._other_good_count(p, topic_slug)
            counts.append(other)
            if other == 0:
                exclusive_profiles.append(p)

        farming_score = sum(counts) / len(counts) if counts else 0.0

        return FarmingMetric(
            topic_slug=topic_slug,
            farming_score=round(farming_score, 3),
            organic_index=round(1 / (1 + farming_score), 3),
            exclusive_top_count=len(exclusive_profiles),
            exclusive_profiles=exclusive_profiles,
            top_profiles=top_profiles,
            topic=topic,
        )

    def compute_farming_index(
        self,
        topics: Iterable[Topic],
        profiles: Iterable[Profile],
    ) -> List[FarmingMetric]:
        """
        Farming metrics for every topic appearing in the profile set.

        Returns:
            Metrics sorted by organic index descending (most organic first), then slug
        """
        profiles = list(profiles)
        catalog: Dict[str, Topic] = {t.slug: t for t in topics}

        slugs = sorted({slug for p in profiles for slug in p.ranks})
        metrics = [self.analyze_topic(slug, profiles, catalog.get(slug)) for slug in slugs]
        metrics.sort(key=lambda m: (-m.organic_index, m.topic_slug))

        logger.info(
            f"Computed farming index for {len(metrics)} topics "
            f"(top {self.top_cutoff}, good rank <= {self.good_rank_threshold})"
        )
        return metrics
