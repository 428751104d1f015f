"""Shared builders and offline fetchers for the test suite."""

from typing import Any, Dict, Optional

import pytest

from league_analysis.fetchers.snapshot_fetcher import SnapshotFetcher
from league_analysis.fetchers.topic_fetcher import TopicFetcher
from league_analysis.models.leaderboard import LeaderboardEntry
from league_analysis.models.profile import Profile, TopicRanks
from league_analysis.models.topic import Period

BASE_URL = "http://test.local"


def make_entry(profile_id: str, slug: str, period: Period = Period.SEVEN_DAYS, **fields) -> LeaderboardEntry:
    return LeaderboardEntry(profile_id=profile_id, topic_slug=slug, period=period, **fields)


def make_profile(profile_id: str, ranks: Dict[str, Any], name: Optional[str] = None, handle: Optional[str] = None) -> Profile:
    """ranks maps slug -> rank_total (int) or a ready TopicRanks."""
    converted = {
        slug: r if isinstance(r, TopicRanks) else TopicRanks(rank_total=r)
        for slug, r in ranks.items()
    }
    return Profile(profile_id=profile_id, name=name, handle=handle or profile_id, ranks=converted)


def offline_fetchers(documents: Dict[str, Any]):
    """TopicFetcher / SnapshotFetcher subclasses that read from a url -> document dict."""
    requested = []

    class OfflineTopicFetcher(TopicFetcher):
        async def _get_json(self, url):
            requested.append(url)
            return documents.get(url)

    class OfflineSnapshotFetcher(SnapshotFetcher):
        async def _get_json(self, url):
            self._requests += 1
            requested.append(url)
            doc = documents.get(url)
            if isinstance(doc, Exception):
                raise doc
            return doc

    return OfflineTopicFetcher, OfflineSnapshotFetcher, requested


@pytest.fixture
def scenario_a_entries():
    """alpha = [u1 #1, u2 #2], beta = [u1 #5]."""
    return [
        make_entry("u1", "alpha", rank=1),
        make_entry("u2", "alpha", rank=2),
        make_entry("u1", "beta", rank=5),
    ]
