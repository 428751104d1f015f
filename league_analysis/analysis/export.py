"""Tabular exports of analysis results as pandas DataFrames."""

from typing import Dict, List, Sequence

import pandas as pd

from ..models.analysis_result import FarmingMetric, OverlapGroup
from ..models.profile import Profile
from ..models.topic import Metric
from .metric_resolver import resolve_rank


def farming_to_dataframe(metrics: Sequence[FarmingMetric]) -> pd.DataFrame:
    """One row per topic, in the given (organic index) order."""
    columns = [
        "topic_slug", "title", "farming_score", "organic_index",
        "exclusive_top_count", "top_count",
    ]
    rows = [{k: m.to_dict()[k] for k in columns} for m in metrics]
    return pd.DataFrame(rows, columns=columns)


def distribution_to_dataframe(distribution: Dict[int, int]) -> pd.DataFrame:
    df = pd.DataFrame(
        sorted(distribution.items()), columns=["topic_count", "profile_count"]
    )
    return df


def overlap_groups_to_dataframe(groups: Sequence[OverlapGroup]) -> pd.DataFrame:
    rows = [
        {
            "topics": g.key,
            "topic_count": len(g.topics),
            "size": g.size,
            "profiles": ", ".join(p.display_name for p in g.profiles),
        }
        for g in groups
    ]
    return pd.DataFrame(rows, columns=["topics", "topic_count", "size", "profiles"])


def profiles_to_dataframe(
    profiles: Sequence[Profile],
    topic_slugs: Sequence[str],
    metric: Metric = Metric.TOTAL,
) -> pd.DataFrame:
    """
    Ranked profile table: one row per profile (position preserved), one
    rank column per topic slug. Missing ranks are left empty.
    """
    rows: List[dict] = []
    for position, p in enumerate(profiles, start=1):
        row = {
            "position": position,
            "profile_id": p.profile_id,
            "handle": p.handle,
            "name": p.name,
            "topic_count": p.topic_count,
        }
        for slug in topic_slugs:
            row[slug] = resolve_rank(p.ranks.get(slug), metric)
        rows.append(row)

    columns = ["position", "profile_id", "handle", "name", "topic_count"] + list(topic_slugs)
    return pd.DataFrame(rows, columns=columns)
