import math
from collections.abc import Callable, Iterable, Sequence
from typing import Any, TypeVar

from .seasons import Season, TrackStats, in_season

T = TypeVar("T")

HEAVY_PLAY_THRESHOLD = 5
MULTIPLAY_THRESHOLD = 3


def top_n(items: Iterable[T], n: int, key: Callable[[T], Any]) -> list[T]:
    """Return the ``n`` items with the largest key, highest first.

    Items with equal keys keep their original relative order, and the earlier
    ones win when a tie straddles the cut-off.
    """
    if n <= 0:
        return []
    return sorted(items, key=key, reverse=True)[:n]


def intersection_of_ids(lists: Sequence[Sequence[TrackStats]]) -> list[str]:
    """Ids present in every list, in the order they appear in the first one."""
    if not lists:
        return []

    common = set.intersection(*({t.id for t in tracks} for tracks in lists))
    seen: set[str] = set()
    result: list[str] = []
    for t in lists[0]:
        if t.id in common and t.id not in seen:
            seen.add(t.id)
            result.append(t.id)
    return result


def is_heavily_played(track: TrackStats) -> bool:
    return track.play_count > HEAVY_PLAY_THRESHOLD


def is_multiplay(track: TrackStats) -> bool:
    return track.play_count > MULTIPLAY_THRESHOLD


def per_total_plays(track: TrackStats, season: Season) -> int:
    """Percentage (rounded down) of a track's plays that fall in ``season``."""
    if not track.plays:
        return 0
    in_season_plays = sum(1 for p in track.plays if in_season(p, season))
    return math.floor(in_season_plays / track.play_count * 100)
