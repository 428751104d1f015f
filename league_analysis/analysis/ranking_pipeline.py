"""Filter and order profiles for display."""

import logging
import math
from typing import Iterable, List, Optional, Sequence

from ..models.analysis_result import Page
from ..models.options import ManualSort, RankingOptions
from ..models.profile import Profile
from ..models.topic import Metric
from ..config.settings import PAGE_SIZE
from .aggregator import validate_positive
from .metric_resolver import qualifies, resolve_field, resolve_rank
from .overlap_analyzer import OverlapAnalyzer, matches_search

logger = logging.getLogger(__name__)

INF = math.inf


def coverage_score(profile: Profile, metric: Metric, top_limit: int) -> float:
    """Sum over qualifying topics of (top_limit - rank + 1) / top_limit."""
    score = 0.0
    for r in profile.ranks.values():
        rank = resolve_rank(r, metric)
        if rank is not None:
            score += (top_limit - rank + 1) / top_limit
    return score


def toggle_sort(current: Optional[ManualSort], topic_slug: str, field: str) -> ManualSort:
    """Header click: same column flips direction, a new column starts ascending."""
    if current and current.topic_slug == topic_slug and current.field == field:
        direction = "desc" if current.direction == "asc" else "asc"
        return ManualSort(topic_slug=topic_slug, field=field, direction=direction)
    return ManualSort(topic_slug=topic_slug, field=field, direction="asc")


def paginate(profiles: Sequence[Profile], page: int = 1, page_size: int = PAGE_SIZE) -> Page:
    """Slice one page out of the ordered list; out-of-range pages fall back to page 1."""
    validate_positive("page_size", page_size)
    result = Page(items=[], page=page, page_size=page_size, total=len(profiles))
    if page < 1 or page > result.total_pages:
        result.page = 1
    start = (result.page - 1) * page_size
    result.items = list(profiles[start : start + page_size])
    return result


class RankingPipeline:
    """Applies the limit, text, topic and topic-count filters, then sorts."""

    def __init__(self, analyzer: Optional[OverlapAnalyzer] = None):
        self.analyzer = analyzer or OverlapAnalyzer()

    def apply_limit(self, profile: Profile, metric: Metric, top_limit: int) -> Profile:
        """Copy of the profile keeping only topics ranked within the cutoff."""
        ranks = {
            slug: r for slug, r in profile.ranks.items() if qualifies(r, metric, top_limit)
        }
        return profile.with_ranks(ranks)

    def rank_profiles(
        self,
        profiles: Iterable[Profile],
        options: RankingOptions,
    ) -> List[Profile]:
        """
        Run the ranking pipeline.

        Stages, in order: limit filter, text filter, ratio ranks, topic
        filter, topic-count filter, sort, drop profiles left without topics.
        Ordering is fully deterministic: every sort ends on the casefolded
        name and the id.
        """
        metric = options.metric
        top_limit = validate_positive("top_limit", options.top_limit)
        selected = list(dict.fromkeys(options.selected_topic_slugs))

        arr = [self.apply_limit(p, metric, top_limit) for p in profiles]
        if options.search_text.strip():
            arr = [p for p in arr if matches_search(p, options.search_text)]

        arr = self.analyzer.assign_ratio_ranks(arr)

        if selected:
            arr = [p for p in arr if any(s in p.ranks for s in selected)]

        if options.topic_count_filter is not None:
            wanted = options.topic_count_filter
            if selected:
                arr = [p for p in arr if sum(1 for s in selected if s in p.ranks) == wanted]
            else:
                arr = [p for p in arr if p.topic_count == wanted]

        arr = self.sort_profiles(arr, options, selected)

        return [p for p in arr if p.topic_count > 0]

    def sort_profiles(
        self,
        profiles: List[Profile],
        options: RankingOptions,
        selected: Sequence[str],
    ) -> List[Profile]:
        metric = options.metric

        if options.manual_sort:
            return self._manual_sort(profiles, options.manual_sort)

        if not selected:
            return sorted(
                profiles,
                key=lambda p: (
                    -coverage_score(p, metric, options.top_limit),
                    p.sort_name,
                    p.profile_id,
                ),
            )

        if len(selected) == 1:
            slug = selected[0]

            def single_key(p: Profile):
                rank = resolve_rank(p.ranks.get(slug), metric)
                return (INF if rank is None else rank, p.sort_name, p.profile_id)

            return sorted(profiles, key=single_key)

        def multi_key(p: Profile):
            values = [resolve_rank(p.ranks.get(s), metric) for s in selected]
            values = [v for v in values if v is not None]
            best = min(values) if values else INF
            total = sum(values) if values else INF
            return (best, total, p.sort_name, p.profile_id)

        return sorted(profiles, key=multi_key)

    def _manual_sort(self, profiles: List[Profile], manual: ManualSort) -> List[Profile]:
        """Sort by one column; profiles without a value always go last."""
        sign = -1 if manual.direction == "desc" else 1

        def key(p: Profile):
            value = resolve_field(p.ranks.get(manual.topic_slug), manual.field)
            if value is None:
                return (1, 0, p.sort_name, p.profile_id)
            return (0, sign * value, p.sort_name, p.profile_id)

        return sorted(profiles, key=key)
