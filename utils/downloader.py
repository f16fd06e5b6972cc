"""
ENCAR Image Scraper - Downloader Module
Downloads a listing's images into a folder, skipping images it already has.
"""

import logging
import re
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List

import requests
from tqdm import tqdm

import config
from . import urls

# Set up logging
logging.basicConfig(level=getattr(logging, config.LOG_LEVEL), format=config.LOG_FORMAT)
logger = logging.getLogger(__name__)

EXISTING_IMAGE_RE = re.compile(config.EXISTING_IMAGE_PATTERN, re.I)


class DownloadOutcome(str, Enum):
    DOWNLOADED = "downloaded"
    SKIPPED_DUPLICATE_SOURCE = "skipped-duplicate-source"
    SKIPPED_EXISTING_FILE = "skipped-existing-file"
    FAILED = "failed"


@dataclass
class DownloadResult:
    """What happened to one position of the download list."""

    index: int
    url: str
    filename: str
    outcome: DownloadOutcome


@dataclass
class DownloadStats:
    """Counters for a single listing run."""

    downloaded: int = 0
    failed: int = 0
    skipped_duplicate_source: int = 0
    skipped_existing_file: int = 0
    results: List[DownloadResult] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return self.skipped_duplicate_source + self.skipped_existing_file

    def record(self, result: DownloadResult):
        self.results.append(result)
        if result.outcome is DownloadOutcome.DOWNLOADED:
            self.downloaded += 1
        elif result.outcome is DownloadOutcome.FAILED:
            self.failed += 1
        elif result.outcome is DownloadOutcome.SKIPPED_DUPLICATE_SOURCE:
            self.skipped_duplicate_source += 1
        else:
            self.skipped_existing_file += 1

    def as_dict(self) -> dict:
        return {
            "downloaded": self.downloaded,
            "failed": self.failed,
            "skipped": self.skipped,
            "skipped_duplicate_source": self.skipped_duplicate_source,
            "skipped_existing_file": self.skipped_existing_file,
        }


def image_filename(index: int, url: str) -> str:
    """Filename for the image at 1-based position `index`."""
    return f"image_{index}{urls.image_extension(url)}"


def find_existing_images(folder: Path) -> List[str]:
    """List image files from earlier runs (image_<n>.<ext>) in a folder."""
    if not folder.is_dir():
        return []
    return sorted(p.name for p in folder.iterdir() if EXISTING_IMAGE_RE.match(p.name))


def download_file(url: str, output_path: Path, session: requests.Session = None) -> bool:
    """
    Download a single file.

    The body is written only after a successful response, so a failed
    request never leaves a file behind.

    Args:
        url: The URL to download from
        output_path: The path to save the file to
        session: Optional requests Session

    Returns:
        True if successful, False otherwise
    """
    if session is None:
        session = requests.Session()

    try:
        response = session.get(url, timeout=config.DOWNLOAD_TIMEOUT)
        response.raise_for_status()
        content = response.content
    except requests.RequestException as e:
        logger.error(f"Failed to download {url}: {e}")
        return False

    try:
        output_path.write_bytes(content)
    except OSError as e:
        logger.error(f"Could not write {output_path}: {e}")
        # A truncated file would be skipped as existing on the next run
        output_path.unlink(missing_ok=True)
        return False

    logger.debug(f"Saved: {output_path}")
    return True


def download_listing_images(
    image_urls: List[str],
    folder: Path,
    session: requests.Session = None,
    delay: float = config.DOWNLOAD_DELAY,
    show_progress: bool = config.SHOW_PROGRESS,
) -> DownloadStats:
    """
    Download every image of a listing into `folder`.

    Position i of `image_urls` is always saved as image_<i>.<ext>. A position
    is skipped when an earlier position with the same clean URL was already
    attempted in this run, or when its file already exists on disk. Files
    are matched by name only; an existing image_3.jpg is kept even if it came
    from a different URL.

    Args:
        image_urls: Final ordered list of image URLs
        folder: Destination folder (created if missing)
        session: Optional requests Session
        delay: Pause in seconds after each attempted download
        show_progress: Show a tqdm progress bar

    Returns:
        DownloadStats with per-position results
    """
    folder.mkdir(parents=True, exist_ok=True)

    for name in find_existing_images(folder):
        logger.info(f"Found existing file: {name}")

    if session is None:
        session = requests.Session()

    stats = DownloadStats()
    seen_sources: Dict[str, str] = {}
    total = len(image_urls)

    logger.info("Starting download of images...")
    for index, src in enumerate(tqdm(image_urls, desc="Downloading images", disable=not show_progress), 1):
        clean_src = urls.clean_url(src)
        filename = image_filename(index, src)
        output_path = folder / filename

        if clean_src in seen_sources:
            logger.info(f"Skipping duplicate source: {filename} (same as {seen_sources[clean_src]})")
            stats.record(DownloadResult(index, src, filename, DownloadOutcome.SKIPPED_DUPLICATE_SOURCE))
            continue

        if output_path.exists():
            logger.info(f"Skipping existing file: {filename}")
            stats.record(DownloadResult(index, src, filename, DownloadOutcome.SKIPPED_EXISTING_FILE))
            continue

        logger.info(f"Downloading {index}/{total}: {filename}")
        # One attempt per clean URL, whether or not it succeeds
        seen_sources[clean_src] = filename
        if download_file(src, output_path, session):
            outcome = DownloadOutcome.DOWNLOADED
        else:
            outcome = DownloadOutcome.FAILED
        stats.record(DownloadResult(index, src, filename, outcome))

        if delay:
            time.sleep(delay)

    logger.info(
        f"Downloaded {stats.downloaded}/{total} images "
        f"({stats.failed} failed, {stats.skipped} skipped)"
    )
    return stats
