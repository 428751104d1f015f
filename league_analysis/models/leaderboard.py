"""Leaderboard entry dataclass: one profile's placement in one topic snapshot."""

from dataclasses import dataclass
from typing import Optional

from .topic import Period

RANK_FIELDS = ("rank", "rank_total", "rank_signal", "rank_noise")
POINT_FIELDS = ("total_points", "signal_points", "noise_points")


@dataclass
class LeaderboardEntry:
    """Entry from a per-topic, per-period leaderboard snapshot."""

    profile_id: str  # Platform user id, else handle
    topic_slug: str
    period: Period

    handle: Optional[str] = None
    name: Optional[str] = None
    avatar_url: Optional[str] = None

    rank: Optional[float] = None  # Position in the snapshot (1-based)
    rank_total: Optional[float] = None
    rank_signal: Optional[float] = None
    rank_noise: Optional[float] = None

    total_points: Optional[float] = None
    signal_points: Optional[float] = None
    noise_points: Optional[float] = None

    @property
    def has_placement(self) -> bool:
        """Rank and points are never both absent on a valid entry."""
        return any(
            getattr(self, f) is not None for f in RANK_FIELDS + POINT_FIELDS
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "profile_id": self.profile_id,
            "topic_slug": self.topic_slug,
            "period": self.period.value,
            "handle": self.handle,
            "name": self.name,
            "avatar_url": self.avatar_url,
            "rank": self.rank,
            "rank_total": self.rank_total,
            "rank_signal": self.rank_signal,
            "rank_noise": self.rank_noise,
            "total_points": self.total_points,
            "signal_points": self.signal_points,
            "noise_points": self.noise_points,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LeaderboardEntry":
        """Create from dictionary."""
        return cls(
            profile_id=data["profile_id"],
            topic_slug=data["topic_slug"],
            period=Period(data["period"]),
            handle=data.get("handle"),
            name=data.get("name"),
            avatar_url=data.get("avatar_url"),
            rank=data.get("rank"),
            rank_total=data.get("rank_total"),
            rank_signal=data.get("rank_signal"),
            rank_noise=data.get("rank_noise"),
            total_points=data.get("total_points"),
            signal_points=data.get("signal_points"),
            noise_points=data.get("noise_points"),
        )
