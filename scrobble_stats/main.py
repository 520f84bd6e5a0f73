import logging

from .cache import FileCacheStore
from .config import Settings
from .context import build_context
from .lastfm import disable_ipv4_only, enable_ipv4_only, fetch_history, write_scrobble_log
from .pipeline import GROUPED_CACHE, SCROBBLES_CACHE, StatisticsBundle, compute_statistics
from .report import build_report, load_multiplays, log_report

log = logging.getLogger(__name__)


def run(settings: Settings) -> StatisticsBundle:
    """Compute statistics from the scrobble log and log the seasonal report."""
    ctx = build_context(settings)

    bundle = compute_statistics(ctx.memo, settings.data_file)
    tracks = load_multiplays(bundle)
    log.info(
        "Loaded %d scrobbles, %d tracks (%d with more than 3 plays)",
        len(bundle.scrobbles),
        len(bundle.stats),
        len(tracks),
    )

    report = build_report(
        tracks,
        most_played_limit=settings.most_played_limit,
        seasonal_limit=settings.seasonal_limit,
        play_window_limit=settings.play_window_limit,
    )
    log_report(report)

    ctx.memo.log_metrics("Statistics")
    return bundle


def export(settings: Settings) -> None:
    """Download the Last.fm history into the scrobble log."""
    settings.require_lastfm_credentials()
    if settings.lastfm_force_ipv4:
        enable_ipv4_only()

    log.info("Fetching scrobbles for '%s'...", settings.lastfm_user)
    try:
        scrobbles = fetch_history(
            settings.lastfm_user,
            settings.lastfm_api_key,
            max_retries=settings.lastfm_max_retries,
        )
    finally:
        if settings.lastfm_force_ipv4:
            disable_ipv4_only()

    if not scrobbles:
        log.warning("No scrobbles found. Exiting.")
        return

    write_scrobble_log(settings.data_file, scrobbles)

    store = FileCacheStore(settings.cache_dir)
    stale = [name for name in (SCROBBLES_CACHE, GROUPED_CACHE) if store.path_for(name).exists()]
    if stale:
        log.info("Cached results still in use, delete to rebuild: %s", ", ".join(stale))
