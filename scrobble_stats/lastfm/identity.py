import hashlib
import json


def track_id(artist: str, title: str) -> str:
    """Return the content-addressable id of a track.

    SHA-256 hex digest of the compact JSON object ``{"artist": ..., "title": ...}``
    with keys in that order. Album and timestamp never take part, so every play
    of the same artist/title pair maps to the same id.
    """
    canonical = json.dumps(
        {"artist": artist, "title": title},
        separators=(",", ":"),
        ensure_ascii=False,
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
