"""Topic dataclass and the enums describing leagues, periods and metrics."""

from dataclasses import dataclass
from typing import Optional
from enum import Enum


class League(Enum):
    """Platform a topic belongs to. Slug namespaces never overlap across leagues."""

    XEET = "xeet"
    WALLCHAIN = "wallchain"


class SourceKind(Enum):
    """Where leaderboard snapshots come from."""

    XEET = "xeet"  # One snapshot per topic/period/date
    WALLCHAIN = "wallchain"
    XEET_GLOBAL = "xeet_global"  # Precomputed file with every profile's entries
    WALLCHAIN_GLOBAL = "wallchain_global"

    @property
    def league(self) -> League:
        return League(self.value.split("_")[0])

    @property
    def is_precomputed(self) -> bool:
        return self.value.endswith("_global")


class Period(Enum):
    """Aggregation window of a snapshot."""

    SEVEN_DAYS = "7d"
    THIRTY_DAYS = "30d"
    TOURNAMENT = "tournament"  # Current epoch


class Metric(Enum):
    """Rank field used for ranking. Values match the raw snapshot field names."""

    TOTAL = "rankTotal"
    SIGNAL = "rankSignal"
    NOISE = "rankNoise"


@dataclass
class Topic:
    """A ranked competition/category within a league."""

    slug: str  # Unique within a league
    title: str
    league: League

    logo_url: Optional[str] = None
    description: Optional[str] = None
    banner_url: Optional[str] = None
    end_date: Optional[str] = None

    @property
    def sort_title(self) -> str:
        return (self.title or self.slug).casefold()

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on title or slug."""
        q = query.strip().casefold()
        if not q:
            return True
        return q in (self.title or "").casefold() or q in self.slug.casefold()

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "slug": self.slug,
            "title": self.title,
            "league": self.league.value,
            "logo_url": self.logo_url,
            "description": self.description,
            "banner_url": self.banner_url,
            "end_date": self.end_date,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Topic":
        """Create from dictionary."""
        return cls(
            slug=data["slug"],
            title=data.get("title") or data["slug"],
            league=League(data["league"]),
            logo_url=data.get("logo_url"),
            description=data.get("description"),
            banner_url=data.get("banner_url"),
            end_date=data.get("end_date"),
        )
