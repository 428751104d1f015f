"""Fetcher for leaderboard snapshots (per-topic dated files and global precomputed files)."""

import aiohttp
import asyncio
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, List, Optional, Sequence, Tuple

from ..models.leaderboard import LeaderboardEntry
from ..models.topic import League, Period, Topic
from ..config.environment import Environment
from ..config.settings import (
    BATCH_DELAY_SECONDS,
    BATCH_SIZE,
    GLOBAL_SNAPSHOT_PATH,
    LOOKBACK_DAYS,
    SNAPSHOT_PATH,
)
from .normalize import normalize_global_profiles, normalize_snapshot_entries

logger = logging.getLogger(__name__)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


class SnapshotFetcher:
    """Fetches leaderboard snapshots for one league."""

    def __init__(
        self,
        league: League,
        base_url: Optional[str] = None,
        lookback_days: int = LOOKBACK_DAYS,
    ):
        self.league = league
        self.base_url = (base_url or Environment.DATA_BASE_URL).rstrip("/")
        self.lookback_days = lookback_days
        self.session: Optional[aiohttp.ClientSession] = None
        # Stats
        self._requests = 0

    async def __aenter__(self):
        self.session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=Environment.REQUEST_TIMEOUT)
        )
        return self

    async def __aexit__(self, *args):
        if self.session:
            await self.session.close()

    async def _get_json(self, url: str) -> Optional[Any]:
        """GET a JSON document; None when it is missing or unreadable."""
        self._requests += 1
        try:
            async with self.session.get(url) as response:
                if response.status == 200:
                    return await response.json(content_type=None)
                logger.debug(f"Snapshot request returned {response.status} for {url}")
                return None
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.warning(f"Error fetching {url}: {e}")
            return None

    def snapshot_url(self, topic_slug: str, period: Period, day: date) -> str:
        return self.base_url + SNAPSHOT_PATH.format(
            slug=topic_slug,
            date=day.isoformat(),
            league=self.league.value,
            period=period.value,
        )

    def global_snapshot_url(self) -> str:
        return self.base_url + GLOBAL_SNAPSHOT_PATH.format(league=self.league.value)

    async def load_leaderboard(
        self,
        topic_slug: str,
        period: Period,
        day: date,
    ) -> List[LeaderboardEntry]:
        """Load one dated snapshot. A missing file yields no entries."""
        doc = await self._get_json(self.snapshot_url(topic_slug, period, day))
        if doc is None:
            return []
        return normalize_snapshot_entries(doc, topic_slug, period)

    async def find_latest_snapshot(
        self,
        topic_slug: str,
        period: Period,
        today: Optional[date] = None,
    ) -> Tuple[Optional[date], Optional[Any]]:
        """
        Probe backwards from today for the most recent snapshot.

        Days are tried newest first and the probe stops at the first hit, so at
        most `lookback_days` requests are made.

        Returns:
            (snapshot_date, raw_document), or (None, None) when nothing was found
        """
        today = today or utc_today()
        for offset in range(self.lookback_days):
            day = today - timedelta(days=offset)
            doc = await self._get_json(self.snapshot_url(topic_slug, period, day))
            if doc is not None:
                return day, doc
        return None, None

    async def load_latest_leaderboard(
        self,
        topic_slug: str,
        period: Period,
        today: Optional[date] = None,
    ) -> Optional[List[LeaderboardEntry]]:
        """
        Load the most recent snapshot of a topic within the lookback window.

        Returns None when the topic is currently inactive (no recent snapshot).
        """
        day, doc = await self.find_latest_snapshot(topic_slug, period, today)
        if day is None:
            logger.info(
                f"No {period.value} snapshot for {topic_slug} in the last "
                f"{self.lookback_days} days, treating topic as inactive"
            )
            return None

        entries = normalize_snapshot_entries(doc, topic_slug, period)
        logger.debug(f"{topic_slug}/{period.value}: {len(entries)} entries from {day}")
        return entries

    async def load_all_leaderboards(
        self,
        topics: Sequence[Topic],
        periods: Sequence[Period],
        today: Optional[date] = None,
    ) -> Tuple[List[LeaderboardEntry], List[str]]:
        """
        Load the latest snapshot of every topic for every period.

        Pairs are fetched concurrently in batches. A failure or a missing
        snapshot for one pair never aborts the others.

        Returns:
            (entries, failed) where failed lists "slug/period" keys that
            contributed nothing
        """
        today = today or utc_today()
        pairs = [(t.slug, p) for p in periods for t in topics]
        entries: List[LeaderboardEntry] = []
        failed: List[str] = []
        total = len(pairs)

        for i in range(0, total, BATCH_SIZE):
            batch = pairs[i : i + BATCH_SIZE]

            tasks = [self.load_latest_leaderboard(slug, period, today) for slug, period in batch]
            results = await asyncio.gather(*tasks, return_exceptions=True)

            for (slug, period), result in zip(batch, results):
                key = f"{slug}/{period.value}"
                if isinstance(result, Exception):
                    logger.warning(f"Failed to load {key}: {result}")
                    failed.append(key)
                elif result is None:
                    failed.append(key)
                else:
                    entries.extend(result)

            progress = min(i + BATCH_SIZE, total)
            logger.info(f"Loaded snapshots: {progress}/{total} topic periods")

            if i + BATCH_SIZE < total:
                await asyncio.sleep(BATCH_DELAY_SECONDS)

        if total and len(failed) == total:
            logger.error(f"No {self.league.value} snapshot could be loaded for any topic")

        return entries, failed

    async def load_global_snapshot(self) -> Tuple[List[LeaderboardEntry], Optional[str]]:
        """
        Load the global precomputed snapshot of the league.

        Returns:
            (entries, generation_date); no entries if the file is unavailable
        """
        doc = await self._get_json(self.global_snapshot_url())
        if doc is None:
            logger.error(f"Global {self.league.value} snapshot unavailable")
            return [], None

        entries, generation_date = normalize_global_profiles(doc)
        logger.info(f"Loaded {len(entries)} entries from global {self.league.value} snapshot")
        return entries, generation_date

    def get_stats(self) -> dict:
        """Get stats about fetching."""
        return {"requests": self._requests}
