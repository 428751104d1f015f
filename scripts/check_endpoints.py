import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from league_analysis.fetchers.topic_fetcher import TopicFetcher
from league_analysis.fetchers.snapshot_fetcher import SnapshotFetcher
from league_analysis.models.topic import League


async def check_league_data():
    for league in League:
        async with TopicFetcher() as topics, SnapshotFetcher(league) as snapshots:
            doc = await topics.fetch_topics_document(league)
            print(f"{topics.topics_url(league)}: {'ok' if doc is not None else 'unavailable'}")

            entries, generation_date = await snapshots.load_global_snapshot()
            print(f"{snapshots.global_snapshot_url()}: {len(entries)} entries ({generation_date})")

if __name__ == "__main__":
    asyncio.run(check_league_data())
