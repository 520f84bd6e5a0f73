from .aggregate import TrackAggregate, aggregate_plays
from .duration import (
    DurationFormatError,
    format_interval,
    format_play_window,
    format_since,
)
from .ranking import (
    intersection_of_ids,
    is_heavily_played,
    is_multiplay,
    per_total_plays,
    top_n,
)
from .seasons import Season, TrackStats, enrich, season_year, seasonal_weight

__all__ = [
    "TrackAggregate",
    "aggregate_plays",
    "TrackStats",
    "Season",
    "enrich",
    "season_year",
    "seasonal_weight",
    "top_n",
    "intersection_of_ids",
    "is_heavily_played",
    "is_multiplay",
    "per_total_plays",
    "DurationFormatError",
    "format_interval",
    "format_since",
    "format_play_window",
]
