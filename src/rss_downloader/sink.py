"""Serialized persistence of title changes."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from rss_downloader.database import Database, PersistenceError
from rss_downloader.models import TitleChangeEvent
from rss_downloader.notifier import NotificationError

logger = logging.getLogger(__name__)

Notifier = Callable[[str], Awaitable[None]]


class UpdateSink:
    """Sole consumer of the title-change queue.

    Events are handled one at a time, so registry writes never overlap. Each
    handled event optionally fires a detached notification.
    """

    def __init__(
        self,
        db: Database,
        events: asyncio.Queue,
        notify: Notifier | None = None,
    ):
        self.db = db
        self.events = events
        self._notify = notify
        self._notifications: set[asyncio.Task] = set()

    async def run(self) -> None:
        """Drain the event queue indefinitely."""
        while True:
            event = await self.events.get()
            try:
                await self.handle(event)
            finally:
                self.events.task_done()

    async def handle(self, event: TitleChangeEvent) -> None:
        """Persist one title change and start its notification, if any."""
        try:
            await asyncio.to_thread(self.db.update_last_title, event.feed_name, event.new_title)
        except PersistenceError as e:
            # The watcher still holds the new title; its next change retries the write.
            logger.error("[%s] Error updating last title: %s", event.feed_name, e)
        else:
            logger.debug("[%s] Last title is now %s.", event.feed_name, event.new_title)

        if self._notify is not None:
            task = asyncio.create_task(self._push(event.feed_name))
            self._notifications.add(task)
            task.add_done_callback(self._notifications.discard)

    async def wait_for_notifications(self) -> None:
        """Wait for every notification started so far. Only tests need this."""
        while self._notifications:
            await asyncio.gather(*list(self._notifications))

    async def _push(self, feed_name: str) -> None:
        try:
            await self._notify(feed_name)
        except NotificationError as e:
            logger.warning("[%s] Error pushing update notification: %s", feed_name, e)
        except Exception as e:
            logger.warning("[%s] Unexpected error pushing update notification: %s", feed_name, e)
