"""rss-downloader: watch RSS feeds and download new items as they appear."""

__version__ = "0.1.0"
