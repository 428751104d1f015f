"""Aggregated cross-topic profile dataclasses."""

from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Set

from .leaderboard import LeaderboardEntry


@dataclass
class TopicRanks:
    """Rank and point fields of one profile in one topic, for the active period."""

    rank: Optional[float] = None
    rank_total: Optional[float] = None
    rank_signal: Optional[float] = None
    rank_noise: Optional[float] = None

    total_points: Optional[float] = None
    signal_points: Optional[float] = None
    noise_points: Optional[float] = None

    # Derived by the overlap analyzer
    ratio: Optional[float] = None  # noisePoints / signalPoints * 100
    ratio_rank: Optional[int] = None  # 1 = lowest noise-to-signal in the topic

    @classmethod
    def from_entry(cls, entry: LeaderboardEntry) -> "TopicRanks":
        return cls(
            rank=entry.rank,
            rank_total=entry.rank_total,
            rank_signal=entry.rank_signal,
            rank_noise=entry.rank_noise,
            total_points=entry.total_points,
            signal_points=entry.signal_points,
            noise_points=entry.noise_points,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "rank": self.rank,
            "rank_total": self.rank_total,
            "rank_signal": self.rank_signal,
            "rank_noise": self.rank_noise,
            "total_points": self.total_points,
            "signal_points": self.signal_points,
            "noise_points": self.noise_points,
            "ratio": self.ratio,
            "ratio_rank": self.ratio_rank,
        }


@dataclass
class Profile:
    """A unique account with its qualifying entries for one period."""

    profile_id: str
    handle: Optional[str] = None
    name: Optional[str] = None
    avatar_url: Optional[str] = None

    # topic slug -> ranks in that topic
    ranks: Dict[str, TopicRanks] = field(default_factory=dict)

    @property
    def topics(self) -> Set[str]:
        """Slugs in which the profile has a qualifying entry."""
        return set(self.ranks)

    @property
    def topic_count(self) -> int:
        return len(self.ranks)

    @property
    def display_name(self) -> str:
        return self.name or self.handle or self.profile_id

    @property
    def sort_name(self) -> str:
        """Case-insensitive key used for alphabetical tie-breaks."""
        return self.display_name.casefold()

    def with_ranks(self, ranks: Dict[str, TopicRanks]) -> "Profile":
        """Copy of this profile carrying a different rank mapping."""
        return replace(self, ranks=ranks)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "profile_id": self.profile_id,
            "handle": self.handle,
            "name": self.name,
            "avatar_url": self.avatar_url,
            "topics": sorted(self.ranks),
            "ranks": {slug: r.to_dict() for slug, r in self.ranks.items()},
        }


@dataclass
class CrossPeriodProfile:
    """One identity seen across the 7d and 30d periods."""

    profile_id: str
    seven_day: Optional[Profile] = None
    thirty_day: Optional[Profile] = None

    @property
    def display_name(self) -> str:
        for p in (self.seven_day, self.thirty_day):
            if p is not None and (p.name or p.handle):
                return p.display_name
        return self.profile_id

    @property
    def total_topic_count(self) -> int:
        return sum(p.topic_count for p in (self.seven_day, self.thirty_day) if p)
