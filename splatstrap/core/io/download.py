"""
Installer Download Utilities.

Streams remote archives to disk with a retry loop and atomic replacement,
so an interrupted download never leaves a truncated file at the target.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

import requests

from ...exceptions import DownloadError
from ..logger.styles import LogStyle
from ..paths import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


def download_file(
    url: str,
    target: Path,
    retries: int = 3,
    delay: float = 5.0,
    timeout: float = 60.0,
) -> Path:
    """
    Downloads *url* to *target* with retries.

    Args:
        url (str): Remote location of the archive.
        target (Path): Destination file (parent directories are created).
        retries (int): Max number of download attempts.
        delay (float): Base delay (seconds) between retries (quadratic backoff on 429).
        timeout (float): Per-request socket timeout in seconds.

    Returns:
        Path: The completed target file.

    Raises:
        DownloadError: If all download attempts fail.
    """
    logger.info(f"{LogStyle.INDENT}{LogStyle.ARROW} {'Downloading':<18}: {url}")
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = target.with_name(f"{target.name}.tmp")

    for attempt in range(1, retries + 1):
        try:
            _stream_download(url, tmp_path, timeout=timeout)
            if tmp_path.stat().st_size == 0:
                raise ValueError("Downloaded file is empty")

            # Atomic move
            tmp_path.replace(target)
            logger.debug(f"{LogStyle.INDENT}{LogStyle.SUCCESS} Saved to {target}")
            return target

        except (requests.RequestException, ValueError, OSError) as e:
            if tmp_path.exists():
                tmp_path.unlink()

            if attempt == retries:
                logger.error(f"Download failed after {retries} attempts")
                raise DownloadError(f"Could not download {url}: {e}") from e

            actual_delay = _retry_delay(e, delay, attempt)
            logger.warning(
                f"Attempt {attempt}/{retries} failed: {e}. Retrying in {actual_delay}s..."
            )
            time.sleep(actual_delay)

    raise DownloadError(f"Could not download {url}")  # pragma: no cover


# PRIVATE HELPERS
def _retry_delay(exc: Exception, base_delay: float, attempt: int) -> float:
    """Compute retry delay with quadratic backoff for 429 responses."""
    response = getattr(exc, "response", None)
    if response is not None and response.status_code == 429:
        delay = base_delay * (attempt**2)
        logger.warning(f"Rate limited (429). Waiting {delay}s before retrying...")
        return delay
    return base_delay


def _stream_download(url: str, tmp_path: Path, timeout: float, chunk_size: int = 8192) -> None:
    """Executes the streaming GET request and writes to a temporary file."""
    headers = {
        "User-Agent": "splatstrap",
        "Accept": "application/octet-stream",
        "Accept-Encoding": "identity",
    }

    with requests.get(
        url, headers=headers, timeout=timeout, stream=True, allow_redirects=True
    ) as r:
        r.raise_for_status()

        content_type = r.headers.get("Content-type", "")
        if "text/html" in content_type:
            raise ValueError("Downloaded file is an HTML page, not the expected archive.")

        with open(tmp_path, "wb") as f:
            for chunk in r.iter_content(chunk_size=chunk_size):
                if chunk:
                    f.write(chunk)
