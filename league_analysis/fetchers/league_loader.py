"""Loads a complete league snapshot (catalog + entries) with latest-request-wins semantics."""

import asyncio
import logging
from datetime import date
from typing import Optional, Sequence

from ..models.snapshot import LeagueSnapshot
from ..models.topic import Period, SourceKind
from ..config.settings import TOPIC_SNAPSHOT_PERIODS
from .normalize import normalize_topics, topics_from_entries
from .snapshot_fetcher import SnapshotFetcher
from .topic_fetcher import TopicCatalogError, TopicFetcher

logger = logging.getLogger(__name__)


class LatestRequestGate:
    """Generation counter: only the most recently started request may publish."""

    def __init__(self):
        self._generation = 0

    def begin(self) -> int:
        self._generation += 1
        return self._generation

    def is_current(self, token: int) -> bool:
        return token == self._generation


class LeagueLoader:
    """Loads league snapshots and keeps the latest accepted one."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        topic_fetcher_cls=TopicFetcher,
        snapshot_fetcher_cls=SnapshotFetcher,
    ):
        self.base_url = base_url
        self.topic_fetcher_cls = topic_fetcher_cls
        self.snapshot_fetcher_cls = snapshot_fetcher_cls
        self.gate = LatestRequestGate()
        self.latest: Optional[LeagueSnapshot] = None

    async def load(
        self,
        source_kind: SourceKind,
        periods: Optional[Sequence[Period]] = None,
        today: Optional[date] = None,
    ) -> LeagueSnapshot:
        """
        Load topics and leaderboard entries for a source.

        Topic-based sources probe one snapshot per topic and period (7d/30d by
        default). Precomputed sources read the single global file and fall
        back to deriving topics from it when the catalog is unavailable.

        Raises:
            TopicCatalogError: no topic metadata could be established at all.
        """
        league = source_kind.league

        async with self.topic_fetcher_cls(self.base_url) as topic_fetcher, \
                self.snapshot_fetcher_cls(league, self.base_url) as snapshot_fetcher:

            if source_kind.is_precomputed:
                doc, (entries, generation_date) = await asyncio.gather(
                    topic_fetcher.fetch_topics_document(league),
                    snapshot_fetcher.load_global_snapshot(),
                )
                if periods:
                    entries = [e for e in entries if e.period in periods]

                if doc is not None:
                    topics = normalize_topics(doc, source_kind)
                else:
                    logger.warning(
                        f"{league.value} topic catalog unavailable, deriving topics from snapshot"
                    )
                    topics = topics_from_entries(entries, league)
                    if not topics:
                        raise TopicCatalogError(
                            f"No topic metadata available for {source_kind.value}"
                        )

                return LeagueSnapshot(
                    source_kind=source_kind,
                    topics=topics,
                    entries=entries,
                    generation_date=generation_date,
                )

            topics = await topic_fetcher.load_topics(source_kind)
            periods = [
                p for p in (periods or [Period(v) for v in TOPIC_SNAPSHOT_PERIODS])
                if p.value in TOPIC_SNAPSHOT_PERIODS
            ]
            entries, failed = await snapshot_fetcher.load_all_leaderboards(
                topics, periods, today
            )

        logger.info(
            f"Loaded {len(entries)} entries for {len(topics)} topics "
            f"({len(failed)} topic periods without data)"
        )
        return LeagueSnapshot(
            source_kind=source_kind,
            topics=topics,
            entries=entries,
            failed_topics=failed,
        )

    async def refresh(
        self,
        source_kind: SourceKind,
        periods: Optional[Sequence[Period]] = None,
        today: Optional[date] = None,
    ) -> Optional[LeagueSnapshot]:
        """
        Load a snapshot and publish it as `latest` unless a newer refresh started meanwhile.

        Returns the snapshot, or None when this batch was superseded and discarded.
        """
        token = self.gate.begin()
        try:
            snapshot = await self.load(source_kind, periods, today)
        except TopicCatalogError:
            if not self.gate.is_current(token):
                logger.info(f"Ignoring catalog failure of superseded {source_kind.value} load")
                return None
            raise

        if not self.gate.is_current(token):
            logger.info(f"Discarding stale {source_kind.value} snapshot")
            return None

        self.latest = snapshot
        return snapshot
