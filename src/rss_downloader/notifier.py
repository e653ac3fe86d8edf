"""Update notification pushes."""

import httpx


class NotificationError(Exception):
    """Raised when a notification cannot be delivered."""


async def push_notification(client: httpx.AsyncClient, notify_url: str, feed_name: str) -> None:
    """POST the updated feed's name as form field ``text``. The response is ignored."""
    try:
        await client.post(notify_url, data={"text": feed_name})
    except httpx.HTTPError as e:
        raise NotificationError(f"Could not push notification for '{feed_name}': {e}") from e
