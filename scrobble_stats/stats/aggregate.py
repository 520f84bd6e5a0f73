from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..lastfm import Scrobble


@dataclass(slots=True)
class TrackAggregate:
    """All plays of one track, keyed by its content-addressable id.

    ``plays`` keeps ingestion order, which is not necessarily chronological.
    """

    id: str
    artist: str
    album: str
    title: str
    plays: list[datetime] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "artist": self.artist,
            "album": self.album,
            "title": self.title,
            "plays": [p.isoformat() for p in self.plays],
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "TrackAggregate":
        return TrackAggregate(
            id=data["id"],
            artist=data["artist"],
            album=data.get("album", ""),
            title=data["title"],
            plays=[datetime.fromisoformat(p) for p in data["plays"]],
        )


def aggregate_plays(scrobbles: Iterable[Scrobble]) -> dict[str, TrackAggregate]:
    """Group scrobbles by track id, one play timestamp per scrobble.

    Artist, album and title come from the first scrobble seen for an id.
    """
    agg: dict[str, TrackAggregate] = {}

    for s in scrobbles:
        key = s.id
        entry = agg.get(key)
        if entry is None:
            entry = agg[key] = TrackAggregate(id=key, artist=s.artist, album=s.album, title=s.title)
        entry.plays.append(s.timestamp)

    return agg
