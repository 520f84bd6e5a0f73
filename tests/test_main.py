import logging
from datetime import datetime

import pytest

from scrobble_stats import main
from scrobble_stats.config import Settings
from scrobble_stats.lastfm import Scrobble
from scrobble_stats.pipeline import GROUPED_CACHE, SCROBBLES_CACHE


def test_run_computes_and_caches(tmp_path, scrobble_log, caplog):
    settings = Settings(data_file=str(scrobble_log), cache_dir=str(tmp_path / "cache"))

    with caplog.at_level(logging.INFO):
        bundle = main.run(settings)

    assert len(bundle.scrobbles) == 4
    assert (tmp_path / "cache" / SCROBBLES_CACHE).exists()
    assert (tmp_path / "cache" / GROUPED_CACHE).exists()
    assert "Most played:" in caplog.text
    assert "Processing data..." in caplog.text


def test_export_writes_log(tmp_path, monkeypatch):
    fetched = [Scrobble(artist="Bonobo", album="Migration", title="Kerala", timestamp=datetime(2021, 5, 3, 21, 5))]
    monkeypatch.setattr(main, "fetch_history", lambda user, key, max_retries: fetched)
    monkeypatch.setattr(main, "enable_ipv4_only", lambda: None)

    data_file = tmp_path / "lastfm-data.csv"
    settings = Settings(
        data_file=str(data_file),
        cache_dir=str(tmp_path / "cache"),
        lastfm_user="someone",
        lastfm_api_key="secret",
    )

    main.export(settings)

    assert data_file.read_text(encoding="utf-8") == "Bonobo,Migration,Kerala,03 May 2021 21:05\n"


def _ipv4_settings(tmp_path):
    return Settings(
        data_file=str(tmp_path / "lastfm-data.csv"),
        cache_dir=str(tmp_path / "cache"),
        lastfm_user="someone",
        lastfm_api_key="secret",
        lastfm_force_ipv4=True,
    )


def test_export_restores_dual_stack(tmp_path, monkeypatch):
    calls = []
    monkeypatch.setattr(main, "enable_ipv4_only", lambda: calls.append("enable"))
    monkeypatch.setattr(main, "disable_ipv4_only", lambda: calls.append("disable"))
    monkeypatch.setattr(main, "fetch_history", lambda user, key, max_retries: [])

    main.export(_ipv4_settings(tmp_path))

    assert calls == ["enable", "disable"]


def test_export_restores_dual_stack_when_fetch_fails(tmp_path, monkeypatch):
    calls = []

    def failing_fetch(user, key, max_retries):
        raise RuntimeError("boom")

    monkeypatch.setattr(main, "enable_ipv4_only", lambda: calls.append("enable"))
    monkeypatch.setattr(main, "disable_ipv4_only", lambda: calls.append("disable"))
    monkeypatch.setattr(main, "fetch_history", failing_fetch)

    with pytest.raises(RuntimeError):
        main.export(_ipv4_settings(tmp_path))

    assert calls == ["enable", "disable"]
