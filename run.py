from scrobble_stats.config import Settings, configure_logging
from scrobble_stats.main import export as _export
from scrobble_stats.main import run as _run


def run():
    """Entry point for scrobble-stats command."""
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    _run(settings)


def export():
    """Entry point for scrobble-stats-export command."""
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    _export(settings)


if __name__ == "__main__":
    run()
