from .fetch import (
    disable_ipv4_only,
    enable_ipv4_only,
    fetch_history,
    write_scrobble_log,
)
from .identity import track_id
from .parse import ScrobbleParseError, parse_rows, read_scrobble_log
from .scrobble import Scrobble

__all__ = [
    "Scrobble",
    "ScrobbleParseError",
    "track_id",
    "parse_rows",
    "read_scrobble_log",
    "enable_ipv4_only",
    "disable_ipv4_only",
    "fetch_history",
    "write_scrobble_log",
]
