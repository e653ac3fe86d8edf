"""Data models for rss-downloader."""

from dataclasses import dataclass

SECONDS_PER_DAY = 86400


@dataclass
class FeedConfig:
    """A watched feed and its weekly rapid-check anchor.

    day_of_week follows the registry convention: Sunday is 0, Saturday is 6.
    """

    name: str
    url: str
    day_of_week: int
    anchor_second: int
    last_title: str = ""

    def __post_init__(self):
        if not 0 <= self.day_of_week <= 6:
            raise ValueError(
                f"Feed '{self.name}': day of week must be 0-6, got {self.day_of_week}"
            )
        if not 0 <= self.anchor_second < SECONDS_PER_DAY:
            raise ValueError(
                f"Feed '{self.name}': anchor second must be 0-{SECONDS_PER_DAY - 1}, "
                f"got {self.anchor_second}"
            )


@dataclass(frozen=True)
class Item:
    """A single entry from a fetched feed."""

    title: str
    link: str = ""


@dataclass(frozen=True)
class TitleChangeEvent:
    """Sent by a watcher when a feed's newest item changes."""

    feed_name: str
    new_title: str
