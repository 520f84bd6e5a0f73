import csv
import logging
import socket
import time
from datetime import datetime
from pathlib import Path
from typing import Any

import requests

from .scrobble import Scrobble

log = logging.getLogger(__name__)

_orig_getaddrinfo = socket.getaddrinfo
_ipv4_enabled = False

_MONTH_ABBREVIATIONS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _getaddrinfo_ipv4_only(host, port, family=0, type=0, proto=0, flags=0):
    return _orig_getaddrinfo(host, port, socket.AF_INET, type, proto, flags)


def enable_ipv4_only() -> None:
    """Enable IPv4-only mode (helps with flaky Last.fm IPv6)."""
    global _ipv4_enabled
    if not _ipv4_enabled:
        socket.getaddrinfo = _getaddrinfo_ipv4_only
        _ipv4_enabled = True


def disable_ipv4_only() -> None:
    """Restore dual-stack (IPv4 + IPv6) socket behavior."""
    global _ipv4_enabled
    if _ipv4_enabled:
        socket.getaddrinfo = _orig_getaddrinfo
        _ipv4_enabled = False


LASTFM_API_URL = "https://ws.audioscrobbler.com/2.0/"


def _make_api_request(params: dict[str, Any], max_retries: int) -> dict[str, Any] | None:
    """Make a Last.fm API request with retry logic."""
    retry_delay = 1

    for attempt in range(max_retries):
        try:
            resp = requests.get(LASTFM_API_URL, params=params, timeout=30)

            if resp.status_code >= 500:
                if attempt < max_retries - 1:
                    log.warning(
                        "Last.fm %d error, retrying in %ds (%d/%d)",
                        resp.status_code,
                        retry_delay,
                        attempt + 1,
                        max_retries,
                    )
                    time.sleep(retry_delay)
                    retry_delay *= 2
                    continue
                log.error("Last.fm API error %d, max retries reached", resp.status_code)
                return None

            resp.raise_for_status()
            return resp.json()

        except requests.exceptions.RequestException as e:
            if attempt < max_retries - 1:
                log.warning("Request failed: %s, retrying in %ds", e, retry_delay)
                time.sleep(retry_delay)
                retry_delay *= 2
                continue
            log.error("Request failed after %d retries: %s", max_retries, e)
            return None

    return None


def _text(value: Any) -> str:
    if isinstance(value, dict):
        return value.get("#text") or ""
    if isinstance(value, str):
        return value
    return ""


def _parse_tracks(tracks: list[dict[str, Any]]) -> list[Scrobble]:
    """Parse Last.fm API track objects into Scrobble instances."""
    scrobbles: list[Scrobble] = []

    for t in tracks:
        if t.get("@attr", {}).get("nowplaying") == "true":
            continue

        uts = t.get("date", {}).get("uts")
        if not uts:
            continue

        artist = _text(t.get("artist")).strip()
        title = (t.get("name") or "").strip()
        album = _text(t.get("album")).strip()

        if artist and title:
            scrobbles.append(
                Scrobble(
                    artist=artist,
                    album=album,
                    title=title,
                    timestamp=datetime.fromtimestamp(int(uts)),
                )
            )

    return scrobbles


def fetch_history(
    username: str,
    api_key: str,
    from_timestamp: int | None = None,
    max_pages: int | None = None,
    max_retries: int = 5,
) -> list[Scrobble]:
    """Fetch a user's full scrobble history from Last.fm, newest first."""
    all_scrobbles: list[Scrobble] = []
    page = 1

    while max_pages is None or page <= max_pages:
        params: dict[str, Any] = {
            "method": "user.getrecenttracks",
            "user": username,
            "api_key": api_key,
            "format": "json",
            "limit": 200,
            "page": page,
        }
        if from_timestamp is not None:
            params["from"] = str(from_timestamp)

        data = _make_api_request(params, max_retries)
        if data is None:
            break

        recenttracks = data.get("recenttracks", {})
        tracks = recenttracks.get("track", [])
        if isinstance(tracks, dict):
            tracks = [tracks]

        if not tracks:
            break

        all_scrobbles.extend(_parse_tracks(tracks))

        attr = recenttracks.get("@attr", {})
        total_pages = int(attr.get("totalPages", "0") or "0")
        log.info("Fetched page %d/%d (%d scrobbles)", page, total_pages, len(all_scrobbles))

        if total_pages > 0 and page >= total_pages:
            break

        page += 1

    return all_scrobbles


def format_timestamp(ts: datetime) -> str:
    """Render a timestamp in the export's ``dd MMM yyyy HH:mm`` form."""
    return f"{ts.day:02d} {_MONTH_ABBREVIATIONS[ts.month - 1]} {ts.year:04d} {ts.hour:02d}:{ts.minute:02d}"


def write_scrobble_log(path: str | Path, scrobbles: list[Scrobble]) -> None:
    """Write scrobbles as a headerless CSV readable by ``read_scrobble_log``."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        for s in scrobbles:
            writer.writerow([s.artist, s.album, s.title, format_timestamp(s.timestamp)])
    log.info("Wrote %d scrobbles to %s", len(scrobbles), target.name)
