from datetime import datetime

import pytest
import requests

from scrobble_stats.lastfm import fetch, read_scrobble_log
from scrobble_stats.lastfm.fetch import fetch_history, format_timestamp, write_scrobble_log


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


def _page(tracks, page, total_pages):
    return {"recenttracks": {"track": tracks, "@attr": {"page": str(page), "totalPages": str(total_pages)}}}


def _track(name, uts, artist="Bonobo", album="Migration", **extra):
    return {"name": name, "artist": {"#text": artist}, "album": {"#text": album}, "date": {"uts": str(uts)}, **extra}


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    monkeypatch.setattr(fetch.time, "sleep", lambda _: None)


def test_fetch_history_pages_until_last(monkeypatch):
    pages = {
        1: _page([_track("Kerala", 1620000000), _track("Bambro Koyo Ganda", 1610000000)], 1, 2),
        2: _page(_track("Migration", 1600000000), 2, 2),
    }
    requested = []

    def fake_get(url, params, timeout):
        requested.append(params["page"])
        return FakeResponse(pages[params["page"]])

    monkeypatch.setattr(fetch.requests, "get", fake_get)

    scrobbles = fetch_history("user", "key")

    assert requested == [1, 2]
    assert [s.title for s in scrobbles] == ["Kerala", "Bambro Koyo Ganda", "Migration"]
    assert scrobbles[0].timestamp == datetime.fromtimestamp(1620000000)
    assert scrobbles[0].album == "Migration"


def test_now_playing_and_undated_tracks_are_skipped(monkeypatch):
    tracks = [
        {"name": "Now", "artist": {"#text": "Bonobo"}, "@attr": {"nowplaying": "true"}},
        {"name": "Undated", "artist": {"#text": "Bonobo"}},
        _track("Dated", 1600000000, artist="Bonobo"),
        _track("No artist", 1600000000, artist=""),
    ]
    monkeypatch.setattr(fetch.requests, "get", lambda url, params, timeout: FakeResponse(_page(tracks, 1, 1)))

    assert [s.title for s in fetch_history("user", "key")] == ["Dated"]


def test_server_errors_are_retried(monkeypatch):
    responses = [FakeResponse(status_code=503), FakeResponse(_page([_track("Kerala", 1620000000)], 1, 1))]
    monkeypatch.setattr(fetch.requests, "get", lambda url, params, timeout: responses.pop(0))

    assert len(fetch_history("user", "key", max_retries=3)) == 1
    assert responses == []


def test_gives_up_after_max_retries(monkeypatch):
    def failing_get(url, params, timeout):
        raise requests.exceptions.ConnectionError("down")

    monkeypatch.setattr(fetch.requests, "get", failing_get)

    assert fetch_history("user", "key", max_retries=2) == []


def test_format_timestamp():
    assert format_timestamp(datetime(2021, 5, 3, 21, 5)) == "03 May 2021 21:05"


def test_written_log_reads_back(tmp_path):
    scrobbles = [
        fetch.Scrobble(artist="Bonobo", album="Black Sands, Remixed", title="Kiara", timestamp=datetime(2021, 5, 3, 21, 5)),
        fetch.Scrobble(artist="Bonobo", album="", title="Cirrus", timestamp=datetime(2013, 1, 20, 7, 45)),
    ]
    path = tmp_path / "out" / "lastfm-data.csv"

    write_scrobble_log(path, scrobbles)

    assert read_scrobble_log(path) == scrobbles
