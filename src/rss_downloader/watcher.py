"""Per-feed watch loop: schedule, fetch, diff, download."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime

from rss_downloader.downloader import DownloadError
from rss_downloader.feed_parser import FetchError
from rss_downloader.limiter import RequestLimiter
from rss_downloader.models import FeedConfig, Item, TitleChangeEvent
from rss_downloader.scheduler import CheckScheduler

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Awaitable[list[Item]]]
Downloader = Callable[[str], Awaitable[object]]


def new_items(items: list[Item], last_title: str) -> list[Item]:
    """Return the items ahead of the one titled last_title.

    Items are newest first. If no item carries last_title, all of them are new.
    """
    fresh = []
    for item in items:
        if item.title == last_title:
            break
        fresh.append(item)
    return fresh


class FeedWatcher:
    """Watches a single feed for the lifetime of the process.

    The watcher sleeps until its next planned check, fetches the feed, starts
    a download task for every item newer than ``feed.last_title`` and puts a
    TitleChangeEvent on ``events`` when the newest title changes. Fetch and
    download failures are logged and never stop the loop.
    """

    def __init__(
        self,
        feed: FeedConfig,
        scheduler: CheckScheduler,
        limiter: RequestLimiter,
        events: asyncio.Queue,
        fetch: Fetcher,
        download: Downloader,
        download_delay: float = 0,
        check_immediately: bool = False,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.feed = feed
        self.scheduler = scheduler
        self.limiter = limiter
        self.events = events
        self._fetch = fetch
        self._download = download
        self.download_delay = download_delay
        self.check_immediately = check_immediately
        self._now = now
        self._downloads: set[asyncio.Task] = set()

    async def run(self) -> None:
        """Run the watch loop indefinitely."""
        feed = self.feed
        logger.info("[%s] Starting watch.", feed.name)

        if self.check_immediately:
            check_time = self._now()
        else:
            check_time = self.scheduler.first_check_time(
                self._now(), feed.day_of_week, feed.anchor_second
            )

        while True:
            await self._sleep_until(check_time)
            # Plan from the previous plan, not the wake-up time, so checks don't drift.
            check_time = self.scheduler.next_check_time(
                check_time, feed.day_of_week, feed.anchor_second
            )
            logger.debug("[%s] Next check at %s.", feed.name, check_time)
            await self.check()

    async def check(self) -> None:
        """Fetch the feed once and act on whatever is new."""
        feed = self.feed

        await self.limiter.acquire()
        logger.info("[%s] Checking for new items.", feed.name)
        try:
            items = await self._fetch(feed.url)
        except FetchError as e:
            logger.warning("[%s] Error fetching RSS: %s", feed.name, e)
            return
        except Exception as e:
            logger.warning("[%s] Unexpected error fetching RSS: %s", feed.name, e)
            return

        for item in new_items(items, feed.last_title):
            logger.info("[%s] Fetching %s.", feed.name, item.title)
            self._spawn_download(item)

        if items and items[0].title != feed.last_title:
            feed.last_title = items[0].title
            await self.events.put(TitleChangeEvent(feed.name, feed.last_title))

    async def wait_for_downloads(self) -> None:
        """Wait for every download started so far. Only tests need this."""
        while self._downloads:
            await asyncio.gather(*list(self._downloads))

    def _spawn_download(self, item: Item) -> None:
        task = asyncio.create_task(self._download_item(item))
        self._downloads.add(task)
        task.add_done_callback(self._downloads.discard)

    async def _download_item(self, item: Item) -> None:
        name = self.feed.name
        if self.download_delay > 0:
            # Give the origin time to finish publishing the payload.
            await asyncio.sleep(self.download_delay)

        await self.limiter.acquire()
        try:
            await self._download(item.link)
        except DownloadError as e:
            logger.warning("[%s] Error fetching %s: %s", name, item.link, e)
        except Exception as e:
            logger.warning("[%s] Unexpected error fetching %s: %s", name, item.link, e)
        else:
            logger.info("[%s] Fetched %s.", name, item.title)

    async def _sleep_until(self, moment: datetime) -> None:
        delay = (moment - self._now()).total_seconds()
        if delay > 0:
            await asyncio.sleep(delay)
