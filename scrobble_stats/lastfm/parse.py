import csv
import logging
from collections.abc import Iterable, Sequence
from datetime import datetime
from pathlib import Path

from .scrobble import Scrobble

log = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%d %b %Y %H:%M"

# Anything earlier is a placeholder date from the export, not a real play.
EARLIEST_VALID_TIMESTAMP = datetime(2000, 2, 1)

FIELDS = ("artist", "album", "title", "timestamp")

_MONTHS = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}


class ScrobbleParseError(ValueError):
    """Raised when a timestamp does not match the export format."""


def parse_timestamp(value: str) -> datetime:
    """Parse a ``dd MMM yyyy HH:mm`` export timestamp into a naive local datetime.

    Month abbreviations are matched in English regardless of the process
    locale, which ``strptime``'s ``%b`` would not guarantee.

    Raises:
        ValueError: If the value does not match the format
    """
    parts = value.strip().split()
    if len(parts) != 4:
        raise ValueError(f"timestamp {value!r} does not match {TIMESTAMP_FORMAT!r}")

    day, month_name, year, clock = parts
    month = _MONTHS.get(month_name[:3].lower())
    if month is None or len(month_name) != 3:
        raise ValueError(f"unknown month {month_name!r} in timestamp {value!r}")

    hour, sep, minute = clock.partition(":")
    if not sep:
        raise ValueError(f"timestamp {value!r} does not match {TIMESTAMP_FORMAT!r}")

    return datetime(int(year), month, int(day), int(hour), int(minute))


def is_valid_scrobble(scrobble: Scrobble) -> bool:
    return scrobble.timestamp >= EARLIEST_VALID_TIMESTAMP


def parse_rows(rows: Iterable[Sequence[str]]) -> list[Scrobble]:
    """Turn raw ``artist, album, title, timestamp`` rows into scrobbles.

    Rows without a timestamp and rows dated before 2000-02-01 are dropped
    silently. A timestamp in any other format aborts the whole parse.

    Raises:
        ScrobbleParseError: If a timestamp cannot be parsed
    """
    scrobbles: list[Scrobble] = []
    skipped = 0

    for line_no, row in enumerate(rows, start=1):
        values = list(row) + [""] * (len(FIELDS) - len(row))
        artist, album, title, raw_ts = values[: len(FIELDS)]

        if not raw_ts or not raw_ts.strip():
            skipped += 1
            continue

        try:
            timestamp = parse_timestamp(raw_ts)
        except ValueError as e:
            raise ScrobbleParseError(f"row {line_no}: {e}") from e

        scrobble = Scrobble(artist=artist, album=album, title=title, timestamp=timestamp)
        if is_valid_scrobble(scrobble):
            scrobbles.append(scrobble)
        else:
            skipped += 1

    if skipped:
        log.debug("Skipped %d rows without a usable timestamp", skipped)

    return scrobbles


def read_scrobble_log(path: str | Path) -> list[Scrobble]:
    """Read a headerless Last.fm CSV export."""
    log.info("Reading scrobbles from %s", Path(path).name)
    with Path(path).open(newline="", encoding="utf-8") as f:
        return parse_rows(csv.reader(f))
