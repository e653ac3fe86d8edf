"""Wires feed watchers and the update sink together and runs them."""

import asyncio
import functools
import logging

import httpx

from rss_downloader.config import ConfigurationError, Settings
from rss_downloader.database import Database, PersistenceError
from rss_downloader.downloader import DEFAULT_TIMEOUT, download
from rss_downloader.feed_parser import fetch_feed
from rss_downloader.limiter import RequestLimiter
from rss_downloader.models import FeedConfig
from rss_downloader.notifier import push_notification
from rss_downloader.scheduler import CheckScheduler
from rss_downloader.sink import UpdateSink
from rss_downloader.watcher import FeedWatcher

logger = logging.getLogger(__name__)


def load_feeds(db: Database) -> list[FeedConfig]:
    """Read the feed registry. Any problem here is fatal at startup."""
    try:
        return db.get_feeds()
    except (PersistenceError, ValueError) as e:
        raise ConfigurationError(f"Error reading RSS feeds: {e}") from e


def build_watchers(
    settings: Settings,
    feeds: list[FeedConfig],
    limiter: RequestLimiter,
    events: asyncio.Queue,
    client: httpx.AsyncClient,
) -> list[FeedWatcher]:
    """Create one watcher per feed, all sharing the limiter, event queue and client."""
    scheduler = CheckScheduler(
        normal_interval=settings.check_interval,
        rapid_interval=settings.rapid_check_interval,
        rapid_duration=settings.rapid_check_duration,
    )
    fetch_items = functools.partial(fetch_feed, client)
    fetch_payload = functools.partial(download, client, target_dir=settings.target)
    return [
        FeedWatcher(
            feed,
            scheduler,
            limiter,
            events,
            fetch=fetch_items,
            download=fetch_payload,
            download_delay=settings.download_delay,
            check_immediately=settings.check_immediately,
        )
        for feed in feeds
    ]


async def start_polling(settings: Settings, db: Database) -> None:
    """Watch every registered feed until the process is stopped."""
    feeds = load_feeds(db)
    if not feeds:
        logger.warning("No feeds registered in %s", settings.db_file)

    limiter = RequestLimiter(settings.request_delay)
    # A one-slot queue: watchers wait for the sink instead of piling up events.
    events: asyncio.Queue = asyncio.Queue(maxsize=1)

    async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT) as client:
        notify = None
        if settings.update_notify_url:
            notify = functools.partial(push_notification, client, settings.update_notify_url)

        sink = UpdateSink(db, events, notify=notify)
        watchers = build_watchers(settings, feeds, limiter, events, client)
        logger.info("Poller started (%d feeds)", len(watchers))

        await asyncio.gather(sink.run(), *(w.run() for w in watchers))
