"""RSS/Atom feed fetching using feedparser."""

import logging
from urllib.parse import urlparse

import feedparser
import httpx

from rss_downloader.models import Item

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Raised when a feed cannot be fetched or parsed."""


async def fetch_feed(client: httpx.AsyncClient, url: str) -> list[Item]:
    """Fetch a feed and return its items in document order.

    Feeds list their newest entry first; callers rely on that order for
    change detection, so items are not re-sorted here. The body is fetched
    with the shared client, so its timeout bounds every fetch.

    Args:
        client: HTTP client to fetch with.
        url: The feed URL to fetch.

    Returns:
        Items with a title and a download link.

    Raises:
        FetchError: If the URL is invalid, unreachable, or not a valid feed.
    """
    _validate_url(url)

    try:
        response = await client.get(url, follow_redirects=True)
    except httpx.HTTPError as e:
        raise FetchError(f"Could not reach URL: {e}") from e

    if response.status_code >= 400:
        raise FetchError(f"Could not reach URL: HTTP {response.status_code}")

    return parse_feed(response.content, url)


def parse_feed(content: bytes, url: str = "") -> list[Item]:
    """Parse a fetched feed document into Items.

    Raises:
        FetchError: If the document is not a usable RSS or Atom feed.
    """
    parsed = feedparser.parse(content)

    if parsed.bozo and not parsed.entries:
        raise FetchError(
            f"URL does not point to a valid RSS or Atom feed: {parsed.get('bozo_exception')}"
        )

    if parsed.bozo:
        logger.debug("Feed %s has formatting issues: %s", url, parsed.get("bozo_exception"))

    return extract_items(parsed.entries)


def extract_items(entries: list) -> list[Item]:
    """Convert feedparser entries into Items, preserving their order."""
    return [
        Item(title=entry.get("title", ""), link=_entry_link(entry))
        for entry in entries
    ]


def _entry_link(entry) -> str:
    """Prefer the first enclosure (the payload) over the entry's page link."""
    for enclosure in entry.get("enclosures") or []:
        href = enclosure.get("href")
        if href:
            return href
    return entry.get("link") or ""


def _validate_url(url: str) -> None:
    """Validate that the URL has a valid format."""
    try:
        result = urlparse(url)
        if not result.scheme or not result.netloc:
            raise FetchError("Invalid URL format")
        if result.scheme not in ("http", "https"):
            raise FetchError("Invalid URL format: only http and https are supported")
    except ValueError:
        raise FetchError("Invalid URL format")
