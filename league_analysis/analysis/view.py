"""Pure view composition: snapshot + configuration -> everything a render needs."""

import logging
import sys

from ..models.analysis_result import LeagueView
from ..models.options import ViewConfig
from ..models.snapshot import LeagueSnapshot
from .aggregator import ProfileAggregator
from .farming_index import FarmingIndexCalculator
from .overlap_analyzer import OverlapAnalyzer
from .ranking_pipeline import RankingPipeline, paginate

logger = logging.getLogger(__name__)

# Farming looks at every ranked entry, not only those within the display cutoff
UNLIMITED_RANK = sys.maxsize


def compute_view(snapshot: LeagueSnapshot, config: ViewConfig) -> LeagueView:
    """
    Recompute the league view from scratch.

    Nothing is cached or mutated between calls: changing the period, metric,
    cutoff or any filter simply means calling this again.
    """
    ranking = config.ranking
    period_entries = snapshot.entries_for(config.period)

    aggregator = ProfileAggregator(top_limit=ranking.top_limit, metric=ranking.metric)
    profiles = list(aggregator.aggregate(period_entries, config.period).values())

    analyzer = OverlapAnalyzer()
    pipeline = RankingPipeline(analyzer)
    ranked = pipeline.rank_profiles(profiles, ranking)

    topics = snapshot.topics_for(config.period)
    visible_topics = [t for t in topics if t.matches(config.topic_query)]

    overlap_groups = []
    if config.selected_topic_count is not None:
        overlap_groups = analyzer.group_by_topic_set(profiles, config.selected_topic_count)

    farming_profiles = ProfileAggregator(
        top_limit=UNLIMITED_RANK, metric=ranking.metric
    ).aggregate(period_entries, config.period)
    farming = FarmingIndexCalculator(
        top_cutoff=config.top_cutoff,
        good_rank_threshold=config.good_rank_threshold,
        metric=ranking.metric,
    ).compute_farming_index(snapshot.topics, farming_profiles.values())

    view = LeagueView(
        period=config.period,
        metric=ranking.metric,
        top_limit=ranking.top_limit,
        topics=topics,
        visible_topics=visible_topics,
        profiles=ranked,
        page=paginate(ranked, config.page, config.page_size),
        distribution=analyzer.compute_distribution(profiles, len(topics)),
        topic_count_options=analyzer.topic_count_options(profiles, ranking.selected_topic_slugs),
        leaderboard_entry_count=analyzer.leaderboard_entry_count(ranked),
        overlap_groups=overlap_groups,
        farming=farming,
    )

    logger.debug(
        f"View {config.period.value}/{ranking.metric.value}: "
        f"{view.profile_count} ranked profiles, {len(topics)} topics"
    )
    return view
