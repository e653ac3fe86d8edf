"""Process configuration for rss-downloader.

Every flag can also be set through an ``RSS_*`` environment variable; a flag
given on the command line wins.
"""

import argparse
import logging
import os
from dataclasses import dataclass

from rss_downloader.limiter import DEFAULT_REQUEST_DELAY
from rss_downloader.scheduler import (
    DEFAULT_CHECK_INTERVAL,
    DEFAULT_RAPID_CHECK_DURATION,
    DEFAULT_RAPID_CHECK_INTERVAL,
)

DEFAULT_DB_PATH = "feeds.db"
DEFAULT_DOWNLOAD_DELAY = 30

TRUTHY = ("1", "true", "yes", "on")


class ConfigurationError(Exception):
    """Raised when the process can't start with the given configuration."""


@dataclass(frozen=True)
class Settings:
    """Validated process configuration."""

    target: str
    db_file: str = DEFAULT_DB_PATH
    check_interval: int = DEFAULT_CHECK_INTERVAL
    rapid_check_interval: int = DEFAULT_RAPID_CHECK_INTERVAL
    rapid_check_duration: int = DEFAULT_RAPID_CHECK_DURATION
    download_delay: int = DEFAULT_DOWNLOAD_DELAY
    request_delay: int = DEFAULT_REQUEST_DELAY
    check_immediately: bool = False
    update_notify_url: str = ""
    log_level: str = "INFO"


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")


def _env_bool(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in TRUTHY


def build_parser() -> argparse.ArgumentParser:
    """Build the flag parser; each default comes from its RSS_* environment variable."""
    parser = argparse.ArgumentParser(
        prog="rss-downloader",
        description="Watch RSS feeds and download new items.",
    )
    parser.add_argument(
        "--db_file", default=os.environ.get("RSS_DB_PATH", DEFAULT_DB_PATH),
        help="filename of database to use",
    )
    parser.add_argument(
        "--target", default=os.environ.get("RSS_TARGET_DIR", ""),
        help="target directory to download to (required)",
    )
    parser.add_argument(
        "--check_interval", type=int,
        default=_env_int("RSS_CHECK_INTERVAL", DEFAULT_CHECK_INTERVAL),
        help="seconds between checks during normal operation",
    )
    parser.add_argument(
        "--rapid_check_interval", type=int,
        default=_env_int("RSS_RAPID_CHECK_INTERVAL", DEFAULT_RAPID_CHECK_INTERVAL),
        help="seconds between checks when we suspect there will be a new item",
    )
    parser.add_argument(
        "--rapid_check_duration", type=int,
        default=_env_int("RSS_RAPID_CHECK_DURATION", DEFAULT_RAPID_CHECK_DURATION),
        help="seconds that we suspect there will be a new item",
    )
    parser.add_argument(
        "--download_delay", type=int,
        default=_env_int("RSS_DOWNLOAD_DELAY", DEFAULT_DOWNLOAD_DELAY),
        help="seconds to wait before downloading the file",
    )
    parser.add_argument(
        "--request_delay", type=int,
        default=_env_int("RSS_REQUEST_DELAY", DEFAULT_REQUEST_DELAY),
        help="seconds to wait between requests",
    )
    parser.add_argument(
        "--check_immediately", action="store_true",
        default=_env_bool("RSS_CHECK_IMMEDIATELY"),
        help="if set, check immediately on startup",
    )
    parser.add_argument(
        "--update_notify_url", default=os.environ.get("RSS_UPDATE_NOTIFY_URL", ""),
        help="url to push update notifications to",
    )
    parser.add_argument(
        "--log_level", default=os.environ.get("RSS_LOG_LEVEL", "INFO"),
        help="log level (DEBUG, INFO, WARNING, ...)",
    )
    return parser


def load_settings(argv: list[str] | None = None) -> Settings:
    """Parse flags (and their environment defaults) into Settings.

    Raises:
        ConfigurationError: If a required value is missing or out of range.
    """
    args = build_parser().parse_args(argv)

    if not args.target:
        raise ConfigurationError("--target is required.")
    if not os.path.isdir(args.target):
        raise ConfigurationError(f"Target directory {args.target} does not exist.")

    for name in ("check_interval", "rapid_check_interval"):
        if getattr(args, name) <= 0:
            raise ConfigurationError(f"--{name} must be positive.")
    for name in ("rapid_check_duration", "download_delay", "request_delay"):
        if getattr(args, name) < 0:
            raise ConfigurationError(f"--{name} must not be negative.")

    log_level = args.log_level.upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigurationError(f"--log_level {args.log_level!r} is not a known level.")

    return Settings(
        target=args.target,
        db_file=args.db_file,
        check_interval=args.check_interval,
        rapid_check_interval=args.rapid_check_interval,
        rapid_check_duration=args.rapid_check_duration,
        download_delay=args.download_delay,
        request_delay=args.request_delay,
        check_immediately=args.check_immediately,
        update_notify_url=args.update_notify_url,
        log_level=log_level,
    )
