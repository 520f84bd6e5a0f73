import pytest

from scrobble_stats.config import Settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "DATA_FILE",
        "CACHE_DIR",
        "CACHE_LOCKING",
        "LOG_LEVEL",
        "MOST_PLAYED_LIMIT",
        "SEASONAL_LIMIT",
        "PLAY_WINDOW_LIMIT",
        "LASTFM_USER",
        "LASTFM_API_KEY",
        "LASTFM_MAX_RETRIES",
        "LASTFM_FORCE_IPV4",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = Settings.from_env()

    assert settings.most_played_limit == 5
    assert settings.seasonal_limit == 20
    assert settings.play_window_limit == 10
    assert settings.log_level == "INFO"
    assert settings.cache_locking is True
    assert settings.data_file.endswith("lastfm-data.csv")


def test_overrides(clean_env, tmp_path):
    clean_env.setenv("DATA_FILE", str(tmp_path / "history.csv"))
    clean_env.setenv("CACHE_DIR", str(tmp_path / "cache"))
    clean_env.setenv("SEASONAL_LIMIT", "7")
    clean_env.setenv("LOG_LEVEL", "debug")
    clean_env.setenv("CACHE_LOCKING", "off")

    settings = Settings.from_env()

    assert settings.data_file == str(tmp_path / "history.csv")
    assert settings.cache_dir == str(tmp_path / "cache")
    assert settings.seasonal_limit == 7
    assert settings.log_level == "DEBUG"
    assert settings.cache_locking is False


def test_invalid_values_fall_back(clean_env):
    clean_env.setenv("MOST_PLAYED_LIMIT", "lots")
    clean_env.setenv("LOG_LEVEL", "chatty")

    settings = Settings.from_env()

    assert settings.most_played_limit == 5
    assert settings.log_level == "INFO"


def test_lastfm_credentials_required_for_export(clean_env):
    with pytest.raises(RuntimeError, match="LASTFM_USER"):
        Settings.from_env().require_lastfm_credentials()

    clean_env.setenv("LASTFM_USER", "someone")
    clean_env.setenv("LASTFM_API_KEY", "secret")
    Settings.from_env().require_lastfm_credentials()
