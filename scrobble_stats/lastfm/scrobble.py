from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .identity import track_id


@dataclass(frozen=True, slots=True)
class Scrobble:
    """A single Last.fm scrobble entry."""

    artist: str
    album: str
    title: str
    timestamp: datetime

    @property
    def id(self) -> str:
        return track_id(self.artist, self.title)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with an ISO-8601 timestamp, as stored in the cache."""
        return {
            "artist": self.artist,
            "album": self.album,
            "title": self.title,
            "timestamp": self.timestamp.isoformat(),
            "id": self.id,
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "Scrobble":
        return Scrobble(
            artist=data["artist"],
            album=data.get("album", ""),
            title=data["title"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )
