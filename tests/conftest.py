"""Shared test fixtures for rss-downloader tests."""

import asyncio
import os
import tempfile
from datetime import datetime

import pytest

from rss_downloader.database import Database
from rss_downloader.limiter import RequestLimiter
from rss_downloader.models import FeedConfig, Item


SAMPLE_RSS_XML = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Test Podcast</title>
    <link>https://example.com</link>
    <description>A test podcast feed</description>
    <item>
      <title>Ep5</title>
      <link>https://example.com/episodes/5</link>
      <enclosure url="https://cdn.example.com/audio/ep5.mp3" length="1000" type="audio/mpeg"/>
      <pubDate>Mon, 16 Feb 2026 10:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Ep4</title>
      <link>https://example.com/episodes/ep4.mp3</link>
      <pubDate>Mon, 09 Feb 2026 10:00:00 GMT</pubDate>
    </item>
  </channel>
</rss>"""

SAMPLE_NOT_A_FEED_XML = """<?xml version="1.0" encoding="UTF-8"?>
<html>
  <body>This is not a feed
"""

# Monday 16 February 2026, midnight local time.
MONDAY = datetime(2026, 2, 16)


@pytest.fixture
def tmp_db_path():
    """Provide a temporary SQLite database path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        path = f.name
    yield path
    for suffix in ("", "-wal", "-shm"):
        try:
            os.unlink(path + suffix)
        except OSError:
            pass


@pytest.fixture
def db(tmp_db_path):
    """A connected registry on a temporary file."""
    database = Database(tmp_db_path)
    database.connect()
    yield database
    database.close()


@pytest.fixture
def sample_rss_xml():
    """Sample valid RSS 2.0 podcast XML."""
    return SAMPLE_RSS_XML


@pytest.fixture
def sample_not_a_feed_xml():
    """Sample XML that is not a feed."""
    return SAMPLE_NOT_A_FEED_XML


@pytest.fixture
def monday_feed():
    """A feed whose rapid window opens Monday at midnight."""
    return FeedConfig(
        name="show",
        url="https://example.com/feed.xml",
        day_of_week=1,
        anchor_second=0,
        last_title="Ep4",
    )


@pytest.fixture
def open_limiter():
    """A limiter that never makes anyone wait."""
    return RequestLimiter(0)


class FakeFetcher:
    """Stands in for the feed fetcher; returns canned items or raises."""

    def __init__(self, items=None, error=None):
        self.items = items or []
        self.error = error
        self.calls = []
        self.called = asyncio.Event()

    async def __call__(self, url):
        self.calls.append(url)
        self.called.set()
        if self.error is not None:
            raise self.error
        return list(self.items)


class FakeDownloader:
    """Records download URLs; raises for URLs listed in failures."""

    def __init__(self, failures=None):
        self.failures = failures or {}
        self.urls = []

    async def __call__(self, url):
        self.urls.append(url)
        if url in self.failures:
            raise self.failures[url]
        return url.rsplit("/", 1)[-1]


def items(*titles):
    """Build items whose links end in '<title>.mp3'."""
    return [Item(title=t, link=f"https://cdn.example.com/{t}.mp3") for t in titles]
