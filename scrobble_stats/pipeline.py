import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .cache.memo import MemoCache
from .lastfm import Scrobble, read_scrobble_log
from .stats import TrackAggregate, TrackStats, aggregate_plays, enrich

log = logging.getLogger(__name__)

SCROBBLES_CACHE = "lastfm-data.json"
GROUPED_CACHE = "lastfm-grouped-scrobbles.json"


@dataclass(frozen=True)
class StatisticsBundle:
    """Per-track statistics plus the normalized scrobbles they came from."""

    stats: dict[str, TrackStats]
    scrobbles: list[Scrobble]

    def to_dict(self) -> dict[str, Any]:
        return {
            "stats": {key: track.to_dict() for key, track in self.stats.items()},
            "scrobbles": [s.to_dict() for s in self.scrobbles],
        }


def load_scrobbles(memo: MemoCache, data_file: str | Path) -> list[Scrobble]:
    """Parsed scrobble log, cached after the first read."""

    def compute() -> list[dict[str, Any]]:
        return [s.to_dict() for s in read_scrobble_log(data_file)]

    rows = memo.cached_json(SCROBBLES_CACHE, compute)
    return [Scrobble.from_dict(row) for row in rows]


def load_track_aggregates(memo: MemoCache, scrobbles: list[Scrobble]) -> dict[str, TrackAggregate]:
    """Plays grouped by track id, cached after the first aggregation."""

    def compute() -> dict[str, dict[str, Any]]:
        log.info("Processing data...")
        return {key: track.to_dict() for key, track in aggregate_plays(scrobbles).items()}

    grouped = memo.cached_json(GROUPED_CACHE, compute)
    return {key: TrackAggregate.from_dict(row) for key, row in grouped.items()}


def compute_statistics(memo: MemoCache, data_file: str | Path) -> StatisticsBundle:
    """Run the full ingestion pipeline and return the statistics bundle.

    Safe to call repeatedly: once both cache entries exist, neither the log
    nor the aggregation is processed again.
    """
    scrobbles = load_scrobbles(memo, data_file)
    aggregates = load_track_aggregates(memo, scrobbles)
    stats = {key: enrich(track) for key, track in aggregates.items()}
    log.debug("Computed statistics for %d tracks from %d scrobbles", len(stats), len(scrobbles))
    return StatisticsBundle(stats=stats, scrobbles=scrobbles)
