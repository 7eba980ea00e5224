"""Data models for subgps."""

from dataclasses import dataclass, field
from typing import List, Optional

@dataclass(frozen=True)
class GeoFix:
    """A single decoded RMC reading. Lives only while one packet is processed."""
    time: str           # raw UTC time-of-day, HHMMSS[.sss]
    status: str
    latitude: float
    longitude: float
    speed: float        # km/h, unrounded
    course: float
    date: str           # YYYY-MM-DD

    @property
    def is_valid(self) -> bool:
        return self.status == "A"

@dataclass(frozen=True)
class Trackpoint:
    """A deduplicated fix pinned to a video-relative second."""
    latitude: float
    longitude: float
    speed: float
    course: float
    date: str
    sec: int

    def dedup_key(self) -> str:
        """Values as they will be rendered; two points with the same key look identical in the log."""
        return f"{self.latitude:.7f},{self.longitude:.7f},{self.speed:.1f},{self.course:.1f}"

@dataclass
class TrackResult:
    """Holds the output of a synchronization run."""
    speed_factor: float
    points: List[Trackpoint] = field(default_factory=list)
    first_fix_pts: Optional[float] = None
    packet_count: int = 0
