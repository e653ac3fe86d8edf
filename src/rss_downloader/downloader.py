"""Item payload downloads."""

import logging
from pathlib import Path
from urllib.parse import unquote, urlparse

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = httpx.Timeout(30.0, read=300.0)


class DownloadError(Exception):
    """Raised when an item cannot be downloaded."""


def filename_from_url(url: str) -> str:
    """Return the last path segment of url.

    Raises:
        DownloadError: If the URL has no path or its path ends in a slash.
    """
    path = urlparse(url).path
    if "/" not in path:
        raise DownloadError(f"Malformed url (no slash): {url!r}")
    filename = unquote(path.rsplit("/", 1)[1])
    if not filename:
        raise DownloadError(f"Malformed url (no filename): {url!r}")
    return filename


async def download(client: httpx.AsyncClient, url: str, target_dir: str | Path) -> Path:
    """Stream url into target_dir, named after the URL's last path segment.

    The body is written to a ".part" file that replaces the target only once
    the transfer completes, so a failed download leaves nothing behind. An
    existing file with the same name is overwritten.

    Returns:
        Path of the written file.

    Raises:
        DownloadError: On a malformed URL, an HTTP error status, or a network
            or filesystem failure.
    """
    target = Path(target_dir) / filename_from_url(url)
    partial = target.with_name(target.name + ".part")

    try:
        async with client.stream("GET", url, follow_redirects=True) as response:
            response.raise_for_status()
            with open(partial, "wb") as f:
                async for chunk in response.aiter_bytes():
                    f.write(chunk)
        partial.replace(target)
    except httpx.HTTPError as e:
        _discard(partial)
        raise DownloadError(f"Could not download {url}: {e}") from e
    except OSError as e:
        _discard(partial)
        raise DownloadError(f"Could not write {target}: {e}") from e

    logger.debug("Wrote %s", target)
    return target


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove partial download %s: %s", path, e)
