import math
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from .aggregate import TrackAggregate

# A season-year needs at least this many in-season plays to count.
MIN_SEASON_YEAR_PLAYS = 2

# The seasonal pattern has to show up in at least this many season-years.
MIN_SEASON_YEARS = 2


class Season(Enum):
    SPRING = (3, 4, 5)
    SUMMER = (6, 7, 8)
    AUTUMN = (9, 10, 11)
    WINTER = (12, 1, 2)

    @property
    def months(self) -> tuple[int, ...]:
        return self.value

    @property
    def label(self) -> str:
        return self.name.lower()


def season_of(dt: datetime) -> Season:
    for season in Season:
        if dt.month in season.months:
            return season
    raise ValueError(f"month {dt.month} has no season")


def in_season(dt: datetime, season: Season) -> bool:
    return season_of(dt) is season


def season_year(dt: datetime) -> int:
    """Year a play is attributed to; December belongs to the next year's winter."""
    if dt.month == 12:
        return dt.year + 1
    return dt.year


def seasonal_weight(plays: Sequence[datetime], season: Season) -> float:
    """Share of plays that fall in ``season``, or 0 if the pattern does not recur.

    A season-year only counts when it has at least two in-season plays and
    those make up at least half (rounded up) of that year's plays. The track is
    seasonal when two or more season-years count.
    """
    if not plays:
        return 0.0

    in_season_plays = [p for p in plays if in_season(p, season)]
    total_by_year = Counter(season_year(p) for p in plays)
    season_by_year = Counter(season_year(p) for p in in_season_plays)

    qualifying_years = [
        year
        for year, count in season_by_year.items()
        if count >= MIN_SEASON_YEAR_PLAYS and count >= math.ceil(total_by_year[year] / 2)
    ]

    if len(qualifying_years) < MIN_SEASON_YEARS:
        return 0.0

    return len(in_season_plays) / len(plays)


@dataclass(frozen=True, slots=True)
class TrackStats:
    """A track aggregate enriched with play-window and seasonal metrics."""

    id: str
    artist: str
    album: str
    title: str
    plays: tuple[datetime, ...]
    first_play: datetime
    last_play: datetime
    spring_weight: float
    summer_weight: float
    autumn_weight: float
    winter_weight: float

    @property
    def play_count(self) -> int:
        return len(self.plays)

    @property
    def play_window_seconds(self) -> int:
        return int((self.last_play - self.first_play).total_seconds())

    def weight(self, season: Season) -> float:
        return getattr(self, f"{season.label}_weight")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "artist": self.artist,
            "album": self.album,
            "title": self.title,
            "plays": [p.isoformat() for p in self.plays],
            "firstPlay": self.first_play.isoformat(),
            "lastPlay": self.last_play.isoformat(),
            "playWindowSeconds": self.play_window_seconds,
            "springWeight": self.spring_weight,
            "summerWeight": self.summer_weight,
            "autumnWeight": self.autumn_weight,
            "winterWeight": self.winter_weight,
        }


def enrich(track: TrackAggregate) -> TrackStats:
    """Compute first/last play and the four seasonal weights for a track.

    Raises:
        ValueError: If the track has no plays
    """
    if not track.plays:
        raise ValueError(f"track {track.id} has no plays")

    return TrackStats(
        id=track.id,
        artist=track.artist,
        album=track.album,
        title=track.title,
        plays=tuple(track.plays),
        first_play=min(track.plays),
        last_play=max(track.plays),
        spring_weight=seasonal_weight(track.plays, Season.SPRING),
        summer_weight=seasonal_weight(track.plays, Season.SUMMER),
        autumn_weight=seasonal_weight(track.plays, Season.AUTUMN),
        winter_weight=seasonal_weight(track.plays, Season.WINTER),
    )
