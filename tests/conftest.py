from datetime import datetime

import pytest

from scrobble_stats.cache import MemoryCacheStore
from scrobble_stats.cache.memo import MemoCache
from scrobble_stats.stats import TrackAggregate, enrich


def make_track(plays, artist="Artist", title="Song", track_id=None):
    """Enriched track with the given play timestamps."""
    return enrich(
        TrackAggregate(
            id=track_id or f"{artist}|{title}",
            artist=artist,
            album="Album",
            title=title,
            plays=list(plays),
        )
    )


def dt(year, month, day=15, hour=12, minute=0):
    return datetime(year, month, day, hour, minute)


@pytest.fixture
def memo():
    return MemoCache(MemoryCacheStore())


@pytest.fixture
def scrobble_log(tmp_path):
    path = tmp_path / "lastfm-data.csv"
    path.write_text(
        "\n".join(
            [
                "Boards of Canada,Music Has the Right to Children,Roygbiv,12 Apr 2021 09:30",
                "Boards of Canada,Geogaddi,Roygbiv,03 May 2021 21:05",
                "Aphex Twin,Selected Ambient Works 85-92,Xtal,25 Dec 2020 18:00",
                "Aphex Twin,Selected Ambient Works 85-92,Xtal,",
                "Aphex Twin,Selected Ambient Works 85-92,Xtal,01 Jan 1999 00:00",
                "Boards of Canada,Music Has the Right to Children,Roygbiv,15 Jan 2021 08:00",
            ]
        )
        + "\n",
        encoding="utf-8",
    )
    return path
