import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).parent.parent

load_dotenv(PROJECT_ROOT / ".env")

CACHE_DIR = Path(os.getenv("CACHE_DIR", str(PROJECT_ROOT / ".cache")))

DATA_FILE = Path(os.getenv("DATA_FILE", str(PROJECT_ROOT / "lastfm-data.csv")))


def _str_to_bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _str_to_int(val: str | None, default: int) -> int:
    try:
        return int(val) if val is not None else default
    except Exception:
        return default


@dataclass(frozen=True)
class Settings:
    """Application configuration loaded from environment variables."""

    data_file: str = str(DATA_FILE)
    cache_dir: str = str(CACHE_DIR)
    cache_locking: bool = True
    log_level: str = "INFO"
    most_played_limit: int = 5
    seasonal_limit: int = 20
    play_window_limit: int = 10
    lastfm_user: str = ""
    lastfm_api_key: str = ""
    lastfm_max_retries: int = 5
    lastfm_force_ipv4: bool = True

    def require_lastfm_credentials(self) -> None:
        """Raise if the Last.fm export credentials are missing."""
        if not self.lastfm_user or not self.lastfm_api_key:
            raise RuntimeError("LASTFM_USER and LASTFM_API_KEY must be set in environment or .env")

    @staticmethod
    def from_env() -> "Settings":
        """Load settings from environment variables."""
        data_file = os.getenv("DATA_FILE", str(DATA_FILE))
        cache_dir = os.getenv("CACHE_DIR", str(CACHE_DIR))
        cache_locking = _str_to_bool(os.getenv("CACHE_LOCKING"), True)

        log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        if log_level not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            log_level = "INFO"

        most_played_limit = _str_to_int(os.getenv("MOST_PLAYED_LIMIT"), 5)
        seasonal_limit = _str_to_int(os.getenv("SEASONAL_LIMIT"), 20)
        play_window_limit = _str_to_int(os.getenv("PLAY_WINDOW_LIMIT"), 10)

        lastfm_user = os.getenv("LASTFM_USER", "").strip()
        lastfm_api_key = os.getenv("LASTFM_API_KEY", "").strip()
        lastfm_max_retries = _str_to_int(os.getenv("LASTFM_MAX_RETRIES"), 5)
        lastfm_force_ipv4 = _str_to_bool(os.getenv("LASTFM_FORCE_IPV4"), True)

        return Settings(
            data_file=data_file,
            cache_dir=cache_dir,
            cache_locking=cache_locking,
            log_level=log_level,
            most_played_limit=most_played_limit,
            seasonal_limit=seasonal_limit,
            play_window_limit=play_window_limit,
            lastfm_user=lastfm_user,
            lastfm_api_key=lastfm_api_key,
            lastfm_max_retries=lastfm_max_retries,
            lastfm_force_ipv4=lastfm_force_ipv4,
        )


def configure_logging(level: str) -> None:
    """Configure logging with the specified level."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(levelname)s: %(message)s",
    )
