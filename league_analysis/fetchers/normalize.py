"""Normalization of raw snapshot JSON into canonical Topic / LeaderboardEntry objects.

Each source ships its own field names:

- xeet topics: topicSlug / title / banner / isLeague, wrapped in {"data": [...]}
- wallchain topics: companyId / companyName / backgroundImageUrl / section
- per-topic snapshots: bare list or {"data": [...]}, identity in twitterId / id / handle
- global precomputed files: list of profiles (xeet) or {"profiles": [...]} (wallchain),
  each profile carrying a "topics" list of per-topic, per-period entries

Everything downstream of this module only sees the canonical dataclasses.
"""

import logging
import math
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..models.leaderboard import LeaderboardEntry
from ..models.topic import League, Period, SourceKind, Topic

logger = logging.getLogger(__name__)

# Identity precedence: platform user ids first, then handles
ID_FIELDS = ("userId", "twitterId", "id")
HANDLE_FIELDS = ("handle", "username", "twitter_handle")

# raw field -> LeaderboardEntry attribute
RANK_FIELD_MAP = {
    "rank": "rank",
    "rankTotal": "rank_total",
    "rankSignal": "rank_signal",
    "rankNoise": "rank_noise",
    "totalPoints": "total_points",
    "signalPoints": "signal_points",
    "noisePoints": "noise_points",
}
RAW_RANK_FIELDS = ("rank", "rankTotal", "rankSignal", "rankNoise")


def to_number(value: Any) -> Optional[float]:
    """Return a finite number, or None for anything non-numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _first_text(raw: Dict[str, Any], fields) -> Optional[str]:
    for f in fields:
        value = raw.get(f)
        if value is None or isinstance(value, bool):
            continue
        text = str(value).strip()
        if text:
            return text
    return None


def resolve_identity(raw: Dict[str, Any]) -> Optional[str]:
    """Stable profile identity: user id when present, else handle."""
    return _first_text(raw, ID_FIELDS) or _first_text(raw, HANDLE_FIELDS)


def unwrap_list(doc: Any, *keys: str) -> List[Any]:
    """Accept a bare list or a dict wrapping the list under one of `keys`."""
    if isinstance(doc, list):
        return doc
    if isinstance(doc, dict):
        for key in keys:
            value = doc.get(key)
            if isinstance(value, list):
                return value
    return []


# --- Topics ---


def normalize_xeet_topic(raw: Dict[str, Any], strict: bool = True) -> Optional[Topic]:
    """
    Normalize a xeet topic.

    strict=True keeps only topics flagged isLeague (topic-based analysis);
    strict=False only drops topics explicitly flagged isLeague=false.
    """
    is_league = raw.get("isLeague")
    if strict and not is_league:
        return None
    if not strict and is_league is False:
        return None

    slug = _first_text(raw, ("topicSlug",))
    if not slug:
        return None

    return Topic(
        slug=slug,
        title=raw.get("title") or slug,
        league=League.XEET,
        logo_url=raw.get("logoUrl"),
        description=raw.get("description"),
        banner_url=raw.get("banner"),
        end_date=raw.get("endDate"),
    )


def normalize_wallchain_topic(raw: Dict[str, Any]) -> Optional[Topic]:
    """Normalize a wallchain company entry; finished campaigns are dropped."""
    if raw.get("section") == "finished":
        return None

    slug = _first_text(raw, ("companyId",))
    if not slug:
        return None

    countdown = raw.get("countdown") or {}
    return Topic(
        slug=slug,
        title=raw.get("companyName") or slug,
        league=League.WALLCHAIN,
        logo_url=raw.get("logoUrl"),
        description=raw.get("description"),
        banner_url=raw.get("backgroundImageUrl"),
        end_date=countdown.get("endDate") if isinstance(countdown, dict) else None,
    )


def topic_normalizer(source_kind: SourceKind) -> Callable[[Dict[str, Any]], Optional[Topic]]:
    """Pick the normalizer matching the source kind."""
    if source_kind == SourceKind.XEET:
        return normalize_xeet_topic
    if source_kind == SourceKind.XEET_GLOBAL:
        return lambda raw: normalize_xeet_topic(raw, strict=False)
    return normalize_wallchain_topic


def normalize_topics(doc: Any, source_kind: SourceKind) -> List[Topic]:
    """Normalize a topics catalog document, deduplicating slugs (first wins)."""
    normalizer = topic_normalizer(source_kind)
    topics: List[Topic] = []
    seen = set()

    for raw in unwrap_list(doc, "data"):
        if not isinstance(raw, dict):
            continue
        topic = normalizer(raw)
        if topic is None or topic.slug in seen:
            continue
        seen.add(topic.slug)
        topics.append(topic)

    return topics


def topics_from_entries(entries: List[LeaderboardEntry], league: League) -> List[Topic]:
    """Fallback catalog built from the slugs found in the entries."""
    slugs = sorted({e.topic_slug for e in entries})
    return [Topic(slug=s, title=s, league=league) for s in slugs]


# --- Leaderboard entries ---


def _placement_fields(raw: Dict[str, Any]) -> Optional[Dict[str, Optional[float]]]:
    """
    Numeric rank and point fields of a raw record.

    Returns None when a rank field is present but is not a 1-based rank;
    unreadable point fields are only dropped.
    """
    fields = {}
    for f, attr in RANK_FIELD_MAP.items():
        value = to_number(raw.get(f))
        if f in RAW_RANK_FIELDS and raw.get(f) is not None and (value is None or value < 1):
            return None
        fields[attr] = value
    return fields


def normalize_snapshot_entries(
    doc: Any,
    topic_slug: str,
    period: Period,
) -> List[LeaderboardEntry]:
    """
    Normalize a per-topic snapshot.

    Entries without an identity or with an unreadable rank field are
    skipped. When an entry carries no rank at all, its 1-based position
    among the valid entries is used.
    """
    entries: List[LeaderboardEntry] = []
    skipped = 0

    for raw in unwrap_list(doc, "data"):
        if not isinstance(raw, dict):
            skipped += 1
            continue
        profile_id = resolve_identity(raw)
        if not profile_id:
            skipped += 1
            continue

        fields = _placement_fields(raw)
        if fields is None:
            skipped += 1
            continue
        if fields["rank"] is None:
            fields["rank"] = len(entries) + 1

        entries.append(
            LeaderboardEntry(
                profile_id=profile_id,
                topic_slug=topic_slug,
                period=period,
                handle=_first_text(raw, HANDLE_FIELDS),
                name=raw.get("name"),
                avatar_url=raw.get("avatarUrl"),
                **fields,
            )
        )

    if skipped:
        logger.debug(f"Skipped {skipped} malformed entries in {topic_slug}/{period.value}")

    return entries


def normalize_global_profiles(doc: Any) -> Tuple[List[LeaderboardEntry], Optional[str]]:
    """
    Normalize a global precomputed snapshot.

    Returns:
        (entries, generation_date)
    """
    generation_date = doc.get("generationDate") if isinstance(doc, dict) else None
    entries: List[LeaderboardEntry] = []
    skipped = 0

    for raw in unwrap_list(doc, "profiles", "data"):
        if not isinstance(raw, dict):
            skipped += 1
            continue
        profile_id = resolve_identity(raw)
        if not profile_id:
            skipped += 1
            continue

        for t in raw.get("topics") or []:
            if not isinstance(t, dict):
                skipped += 1
                continue
            slug = _first_text(t, ("topicSlug", "companyId"))
            try:
                period = Period(t.get("period"))
            except ValueError:
                period = None
            if not slug or period is None:
                skipped += 1
                continue
            fields = _placement_fields(t)
            if fields is None:
                skipped += 1
                continue

            entry = LeaderboardEntry(
                profile_id=profile_id,
                topic_slug=slug,
                period=period,
                handle=_first_text(raw, HANDLE_FIELDS),
                name=raw.get("name"),
                avatar_url=raw.get("avatarUrl"),
                **fields,
            )
            if not entry.has_placement:
                skipped += 1
                continue
            entries.append(entry)

    if skipped:
        logger.debug(f"Skipped {skipped} malformed records in global snapshot")

    return entries, generation_date
