#!/usr/bin/env python
"""
Load a league's leaderboard snapshots and print the cross-topic analysis.

Usage:
    python scripts/run_analysis.py --source xeet_global [--period 7d] [--metric rankSignal]
    python scripts/run_analysis.py --source wallchain --period 30d --output-dir out/
"""

import asyncio
import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from league_analysis.fetchers.league_loader import LeagueLoader
from league_analysis.fetchers.topic_fetcher import TopicCatalogError
from league_analysis.analysis.aggregator import ProfileAggregator
from league_analysis.analysis.overlap_analyzer import OverlapAnalyzer
from league_analysis.analysis.view import compute_view
from league_analysis.analysis.export import (
    distribution_to_dataframe,
    farming_to_dataframe,
    overlap_groups_to_dataframe,
    profiles_to_dataframe,
)
from league_analysis.models.options import RankingOptions, ViewConfig
from league_analysis.models.topic import Metric, Period, SourceKind
from league_analysis.config.settings import (
    DEFAULT_GOOD_RANK_THRESHOLD,
    DEFAULT_TOP_CUTOFF,
    DEFAULT_TOP_LIMIT,
    PAGE_SIZE,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def write_exports(view, output_dir: Path) -> None:
    """Write the view's tables as CSV files."""
    output_dir.mkdir(parents=True, exist_ok=True)
    slugs = [t.slug for t in view.topics]

    profiles_to_dataframe(view.profiles, slugs, view.metric).to_csv(
        output_dir / "profiles.csv", index=False
    )
    distribution_to_dataframe(view.distribution).to_csv(
        output_dir / "distribution.csv", index=False
    )
    farming_to_dataframe(view.farming).to_csv(output_dir / "farming_index.csv", index=False)
    if view.overlap_groups:
        overlap_groups_to_dataframe(view.overlap_groups).to_csv(
            output_dir / "overlap_groups.csv", index=False
        )
    logger.info(f"Exports written to {output_dir}")


def print_overview(snapshot, config, limit: int = 20) -> None:
    """Print profiles ranked across both the 7d and 30d windows."""
    ranking = config.ranking
    aggregator = ProfileAggregator(top_limit=ranking.top_limit, metric=ranking.metric)
    by_period = aggregator.aggregate_periods(
        snapshot.entries, [Period.SEVEN_DAYS, Period.THIRTY_DAYS]
    )
    rows = OverlapAnalyzer().merge_periods(by_period, ranking.search_text, ranking.metric)

    print(f"\nCross-period overview ({len(rows)} profiles):")
    for row in rows[:limit]:
        seven = row.seven_day.topic_count if row.seven_day else 0
        thirty = row.thirty_day.topic_count if row.thirty_day else 0
        print(f"  {row.display_name[:30]:<30} 7d {seven:>3}  30d {thirty:>3}")


async def run_analysis(args) -> int:
    """Load, compute and report."""
    source_kind = SourceKind(args.source)
    period = Period(args.period)

    periods = [period]
    if args.overview:
        periods = list(dict.fromkeys([period, Period.SEVEN_DAYS, Period.THIRTY_DAYS]))

    loader = LeagueLoader(base_url=args.base_url)
    try:
        snapshot = await loader.refresh(source_kind, periods=periods)
    except TopicCatalogError as e:
        logger.error(f"Analysis aborted: {e}")
        return 1

    if snapshot is None:
        logger.warning("Snapshot superseded by a newer load, nothing to report")
        return 1

    config = ViewConfig(
        period=period,
        ranking=RankingOptions(
            search_text=args.search,
            selected_topic_slugs=[s for s in args.topics.split(",") if s] if args.topics else [],
            topic_count_filter=args.topic_count,
            metric=Metric(args.metric),
            top_limit=args.top_limit,
        ),
        page=args.page,
        page_size=args.page_size,
        selected_topic_count=args.topic_count,
        top_cutoff=args.top_cutoff,
        good_rank_threshold=args.good_rank,
    )
    view = compute_view(snapshot, config)

    # Print summary
    print("\n" + "=" * 60)
    print(f"LEAGUE ANALYSIS - {source_kind.value} / {period.value} / {view.metric.value}")
    print("=" * 60)
    print(f"Profiles analyzed: {view.profile_count}")
    print(f"Active topics: {len(view.topics)}")
    print(f"Leaderboard entries: {view.leaderboard_entry_count}")
    if snapshot.generation_date:
        print(f"Generated: {snapshot.generation_date}")

    print("\nTopic count distribution:")
    for count, num in view.distribution.items():
        print(f"  {count:>3} topics: {num}")

    print(f"\nPage {view.page.page}/{view.page.total_pages}:")
    start = (view.page.page - 1) * view.page.page_size
    for i, p in enumerate(view.page.items, start=start + 1):
        topics = ", ".join(sorted(p.topics))
        print(f"  {i:>4}. {p.display_name[:30]:<30} {p.topic_count:>3} topics  [{topics[:60]}]")

    print("\nFarming index (most organic first):")
    for m in view.farming:
        print(
            f"  {m.title[:30]:<30} organic {m.organic_index:.3f}  "
            f"farming {m.farming_score:.3f}  exclusive {m.exclusive_top_count}/{len(m.top_profiles)}"
        )

    if view.overlap_groups:
        print(f"\nOverlap groups ({args.topic_count} topics):")
        for g in view.overlap_groups[:20]:
            print(f"  {g.size:>5}  {g.key}")
    print("=" * 60)

    if args.overview:
        print_overview(snapshot, config)

    if args.output_dir:
        write_exports(view, Path(args.output_dir))

    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Cross-topic leaderboard analysis for Xeet / Wallchain leagues"
    )
    parser.add_argument(
        "--source",
        choices=[k.value for k in SourceKind],
        default=SourceKind.XEET_GLOBAL.value,
        help="Snapshot source (default: xeet_global)",
    )
    parser.add_argument(
        "--period",
        choices=[p.value for p in Period],
        default=Period.TOURNAMENT.value,
        help="Aggregation window (default: tournament)",
    )
    parser.add_argument(
        "--metric",
        choices=[m.value for m in Metric],
        default=Metric.TOTAL.value,
        help="Rank field used for ranking (default: rankTotal)",
    )
    parser.add_argument(
        "--top-limit",
        type=int,
        default=DEFAULT_TOP_LIMIT,
        help=f"Maximum qualifying rank (default: {DEFAULT_TOP_LIMIT})",
    )
    parser.add_argument("--topics", default="", help="Comma-separated topic slugs to select")
    parser.add_argument("--search", default="", help="Filter profiles by name or handle")
    parser.add_argument(
        "--topic-count",
        type=int,
        default=None,
        help="Only profiles ranked in exactly this many topics",
    )
    parser.add_argument("--page", type=int, default=1)
    parser.add_argument("--page-size", type=int, default=PAGE_SIZE)
    parser.add_argument(
        "--top-cutoff",
        type=int,
        default=DEFAULT_TOP_CUTOFF,
        help=f"Farming index top cohort size (default: {DEFAULT_TOP_CUTOFF})",
    )
    parser.add_argument(
        "--good-rank",
        type=int,
        default=DEFAULT_GOOD_RANK_THRESHOLD,
        help=f"Farming index good rank threshold (default: {DEFAULT_GOOD_RANK_THRESHOLD})",
    )
    parser.add_argument("--base-url", default=None, help="Override LEAGUE_DATA_BASE_URL")
    parser.add_argument("--output-dir", default=None, help="Write CSV exports here")
    parser.add_argument(
        "--overview",
        action="store_true",
        help="Also load 7d and 30d and print the cross-period overview",
    )

    args = parser.parse_args()
    sys.exit(asyncio.run(run_analysis(args)))


if __name__ == "__main__":
    main()
