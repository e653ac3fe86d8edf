"""Entry point for rss-downloader: python -m rss_downloader"""

import asyncio
import logging
import sys

from rss_downloader.config import ConfigurationError, load_settings
from rss_downloader.database import Database, PersistenceError
from rss_downloader.poller import start_polling

logger = logging.getLogger("rss_downloader")


def configure_logging(level: str = "INFO") -> None:
    """Set up root logging and quiet the HTTP client loggers."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # Quiet noisy loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


async def run(argv: list[str] | None = None) -> None:
    """Initialize the registry and watch feeds until interrupted."""
    settings = load_settings(argv)
    configure_logging(settings.log_level)
    logger.info("Starting rss-downloader.")

    db = Database(settings.db_file)
    try:
        db.connect()
    except PersistenceError as e:
        raise ConfigurationError(str(e)) from e

    try:
        await start_polling(settings, db)
    finally:
        db.close()


def main(argv: list[str] | None = None) -> int:
    """Run rss-downloader and return the process exit status."""
    try:
        asyncio.run(run(argv))
    except ConfigurationError as e:
        configure_logging()
        logger.error("%s", e)
        return 1
    except KeyboardInterrupt:
        logger.info("Goodbye!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
