"""Fetcher for league topic catalogs (the *_topics_raw.json documents)."""

import aiohttp
import asyncio
import logging
from typing import Any, List, Optional

from ..models.topic import League, SourceKind, Topic
from ..config.environment import Environment
from ..config.settings import TOPICS_PATH
from .normalize import normalize_topics

logger = logging.getLogger(__name__)


class TopicCatalogError(Exception):
    """Raised when no topic metadata can be loaded; nothing can be computed without it."""


class TopicFetcher:
    """Fetches and normalizes topic metadata for a league."""

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = (base_url or Environment.DATA_BASE_URL).rstrip("/")
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        self.session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=Environment.REQUEST_TIMEOUT)
        )
        return self

    async def __aexit__(self, *args):
        if self.session:
            await self.session.close()

    async def _get_json(self, url: str) -> Optional[Any]:
        """GET a JSON document; None on any HTTP, network or parse failure."""
        try:
            async with self.session.get(url) as response:
                if response.status == 200:
                    return await response.json(content_type=None)
                logger.warning(f"Topics request returned {response.status} for {url}")
                return None
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"Error fetching {url}: {e}")
            return None

    def topics_url(self, league: League) -> str:
        return self.base_url + TOPICS_PATH.format(league=league.value)

    async def fetch_topics_document(self, league: League) -> Optional[Any]:
        """Fetch the raw catalog document for a league."""
        return await self._get_json(self.topics_url(league))

    async def load_topics(self, source_kind: SourceKind) -> List[Topic]:
        """
        Load the eligible topics for a source kind.

        Raises:
            TopicCatalogError: the catalog document could not be fetched or parsed.
        """
        doc = await self.fetch_topics_document(source_kind.league)
        if doc is None:
            raise TopicCatalogError(
                f"Could not load topic catalog for {source_kind.league.value}"
            )

        topics = normalize_topics(doc, source_kind)
        logger.info(f"Loaded {len(topics)} eligible {source_kind.value} topics")
        return topics
