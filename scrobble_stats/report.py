import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from .pipeline import StatisticsBundle
from .stats import (
    Season,
    TrackStats,
    format_play_window,
    format_since,
    intersection_of_ids,
    is_heavily_played,
    is_multiplay,
    per_total_plays,
    top_n,
)

log = logging.getLogger(__name__)


class SeasonalOverlapError(RuntimeError):
    """Raised when the same tracks rank in every season's list."""

    def __init__(self, track_ids: list[str]):
        super().__init__(f"{len(track_ids)} tracks rank in every season: {', '.join(track_ids)}")
        self.track_ids = track_ids


@dataclass(frozen=True)
class SeasonalReport:
    most_played: list[TrackStats]
    seasonal: dict[Season, list[TrackStats]]
    biggest_play_window: list[TrackStats]


def load_multiplays(bundle: StatisticsBundle) -> list[TrackStats]:
    """Tracks played more than a handful of times, in bundle order."""
    return [t for t in bundle.stats.values() if is_multiplay(t)]


def top_seasonal(tracks: Iterable[TrackStats], season: Season, limit: int) -> list[TrackStats]:
    """Heavily played tracks ranked by their weight for ``season``, zero weights dropped."""
    heavy = [t for t in tracks if is_heavily_played(t)]
    return [t for t in top_n(heavy, limit, lambda t: t.weight(season)) if t.weight(season)]


def build_report(
    tracks: list[TrackStats],
    most_played_limit: int = 5,
    seasonal_limit: int = 20,
    play_window_limit: int = 10,
) -> SeasonalReport:
    """Rank tracks by plays, seasonal weight and play window.

    Raises:
        SeasonalOverlapError: If any track ranks in all four seasonal lists
    """
    seasonal = {season: top_seasonal(tracks, season, seasonal_limit) for season in Season}

    duplicates = intersection_of_ids(list(seasonal.values()))
    if duplicates:
        log_seasonal(seasonal)
        log.error("Tracks ranked in every season: %s", duplicates)
        raise SeasonalOverlapError(duplicates)

    return SeasonalReport(
        most_played=top_n(tracks, most_played_limit, lambda t: t.play_count),
        seasonal=seasonal,
        biggest_play_window=top_n(tracks, play_window_limit, lambda t: t.play_window_seconds),
    )


def track_name(track: TrackStats) -> str:
    return f"{track.artist} - {track.title}"


def log_seasonal(seasonal: dict[Season, list[TrackStats]]) -> None:
    for season, tracks in seasonal.items():
        log.info("Most played in %s:", season.label)
        for track in tracks:
            log.info(
                "  %s (%d%% of %d total plays)",
                track_name(track),
                per_total_plays(track, season),
                track.play_count,
            )


def log_report(report: SeasonalReport, now: datetime | None = None) -> None:
    log.info("Most played:")
    for track in report.most_played:
        log.info("  %s", track_name(track))
        log.info("    %d plays, last played %s", track.play_count, format_since(track.last_play, now))

    log_seasonal(report.seasonal)

    log.info("Biggest play window:")
    for track in report.biggest_play_window:
        log.info("  %s", track_name(track))
        log.info("    %s", format_play_window(track))
