import logging
from datetime import datetime

from dateutil.relativedelta import relativedelta

from .seasons import TrackStats

log = logging.getLogger(__name__)

UNIT_ORDER = ("years", "months", "days", "hours", "minutes", "seconds")


class DurationFormatError(RuntimeError):
    """Raised when a duration renders to an empty string."""


def interval_to_duration(start: datetime, end: datetime) -> dict[str, int]:
    """Calendar-aware breakdown of the span between two instants."""
    if end < start:
        start, end = end, start
    delta = relativedelta(end, start)
    return {unit: int(getattr(delta, unit)) for unit in UNIT_ORDER}


def rounded_interval_units(duration: dict[str, int]) -> list[str]:
    """The most significant non-zero unit and the one after it.

    Spans under a minute, and empty spans, fall back to minutes and seconds.
    """
    biggest = next((i for i, unit in enumerate(UNIT_ORDER) if duration.get(unit, 0) != 0), None)
    if biggest is None or biggest >= len(UNIT_ORDER) - 1:
        biggest = len(UNIT_ORDER) - 2
    return [UNIT_ORDER[biggest], UNIT_ORDER[biggest + 1]]


def _format_unit(value: int, unit: str) -> str:
    if value == 1:
        return f"{value} {unit[:-1]}"
    return f"{value} {unit}"


def format_interval(start: datetime, end: datetime) -> str:
    """Render a span as its two most significant units, e.g. ``"1 year, 2 months"``.

    A zero second unit is left out (``"1 year"``), except for spans under a
    minute, which read ``"0 minutes, 45 seconds"``.

    Raises:
        DurationFormatError: If nothing could be rendered
    """
    duration = interval_to_duration(start, end)
    units = rounded_interval_units(duration)
    # A zero leading unit only happens in the minutes/seconds fallback, which keeps both.
    if duration[units[0]] != 0:
        units = [unit for unit in units if duration[unit] != 0]
    formatted = ", ".join(_format_unit(duration[unit], unit) for unit in units)

    if not formatted:
        log.error("Empty duration for %s with units %s", duration, units)
        raise DurationFormatError(f"could not format interval {start.isoformat()} - {end.isoformat()}")

    return formatted


def format_since(dt: datetime, now: datetime | None = None) -> str:
    return f"{format_interval(dt, now or datetime.now())} ago"


def format_play_window(track: TrackStats) -> str:
    return format_interval(track.first_play, track.last_play)
