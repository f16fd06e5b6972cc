#!/usr/bin/env python3
"""
ENCAR Image Scraper - Main Script
Downloads every photo of a single encar.com listing.

Usage:
    python encar_scraper.py
    python encar_scraper.py --url "https://fem.encar.com/cars/detail/38817035" --folder sonata
    python encar_scraper.py --url "..." --folder sonata --static --no-open
    python encar_scraper.py --export-links car_links.csv
"""

import argparse
import logging
import sys
from dataclasses import dataclass, field
from enum import Enum
from functools import partial
from pathlib import Path
from typing import Callable, List

import requests

import config
from utils import discovery, downloader, link_recorder, synthesizer, urls
from utils.browser import PageLoadError, fetch_page, load_listing_page, open_folder

# Set up logging
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL),
    format=config.LOG_FORMAT,
)
logger = logging.getLogger(__name__)


class RunStatus(str, Enum):
    COMPLETED = "completed"
    NO_IMAGES = "no-images"


@dataclass
class RunSummary:
    """Result of scraping one listing."""

    url: str
    folder_name: str
    status: RunStatus
    image_urls: List[str] = field(default_factory=list)
    folder: Path | None = None
    stats: downloader.DownloadStats | None = None
    link_saved: bool = False

    def as_dict(self) -> dict:
        return {
            "url": self.url,
            "folder_name": self.folder_name,
            "status": self.status.value,
            "image_count": len(self.image_urls),
            "folder": str(self.folder) if self.folder else None,
            "stats": self.stats.as_dict() if self.stats else None,
            "link_saved": self.link_saved,
        }


def validate_inputs(url: str, folder_name: str):
    """
    Check the user supplied listing URL and folder name.

    Raises:
        ValueError: with a message meant for the user
    """
    if not folder_name:
        raise ValueError("Folder name cannot be empty!")
    if Path(folder_name).name != folder_name or ".." in folder_name:
        raise ValueError("Folder name must be a single folder inside the images folder!")
    if not urls.is_listing_url(url):
        raise ValueError("Please enter a valid Encar URL!")


def scrape_listing(
    url: str,
    folder_name: str,
    loader: Callable[[str], discovery.DocumentSnapshot] = load_listing_page,
    session: requests.Session = None,
    images_dir: Path = None,
    links_file: Path = None,
    open_when_done: bool = False,
    show_progress: bool = config.SHOW_PROGRESS,
) -> RunSummary:
    """
    Scrape all images of one listing.

    Args:
        url: Listing detail page URL
        folder_name: Folder created under images_dir
        loader: Callable returning a DocumentSnapshot for a URL
        session: Optional requests Session used for image downloads
        images_dir: Base images directory (default: config.IMAGES_DIR)
        links_file: Link log (default: config.LINKS_FILE)
        open_when_done: Open the folder once the downloads finish
        show_progress: Show a progress bar while downloading

    Returns:
        RunSummary of the run

    Raises:
        ValueError: invalid inputs, raised before any network activity
        PageLoadError: the listing page could not be loaded
    """
    validate_inputs(url, folder_name)
    images_dir = images_dir or config.IMAGES_DIR

    logger.info(f"Target URL: {url}")
    snapshot = loader(url)

    logger.info("Extracting image URLs...")
    discovered = discovery.discover_image_urls(snapshot)
    image_urls = synthesizer.complete_image_urls(discovered)

    if not image_urls:
        logger.error("No images found. Please check if the URL is correct or the page structure has changed.")
        return RunSummary(url, folder_name, RunStatus.NO_IMAGES)

    folder = images_dir / folder_name
    stats = downloader.download_listing_images(
        image_urls, folder, session=session, show_progress=show_progress
    )

    record = link_recorder.save_car_link(url, folder_name, links_file)

    if open_when_done:
        logger.info("Opening folder...")
        open_folder(folder)

    return RunSummary(
        url,
        folder_name,
        RunStatus.COMPLETED,
        image_urls=image_urls,
        folder=folder,
        stats=stats,
        link_saved=record is not None,
    )


def print_summary(summary: RunSummary):
    """Print the end-of-run report."""
    print("\n" + "=" * 60)
    if summary.status is RunStatus.NO_IMAGES:
        print("No images found for this listing.")
        print("=" * 60)
        return

    stats = summary.stats
    print("Download complete!")
    print("=" * 60)
    print(f"Successfully downloaded: {stats.downloaded} images")
    print(f"Failed downloads: {stats.failed} images")
    print(f"Skipped duplicates: {stats.skipped} images")
    if stats.skipped_duplicate_source:
        print(f"  - Duplicate sources: {stats.skipped_duplicate_source}")
    if stats.skipped_existing_file:
        print(f"  - Existing files: {stats.skipped_existing_file}")
    print(f"Images saved to: {summary.folder}")


def ask(question: str) -> str:
    try:
        return input(question).strip()
    except EOFError:
        return ""


def main(argv=None):
    """Main entry point for the scraper."""
    parser = argparse.ArgumentParser(
        description="ENCAR Image Scraper - Download all photos of a car listing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Prompt for the folder name and URL
  python encar_scraper.py

  # Download a listing into images/sonata
  python encar_scraper.py --url "https://fem.encar.com/cars/detail/38817035" --folder sonata

  # Export the recorded listings to CSV
  python encar_scraper.py --export-links car_links.csv
        """,
    )

    parser.add_argument("--url", type=str, help="Encar car detail page URL")
    parser.add_argument("--folder", type=str, help="Folder name (created inside the images folder)")
    parser.add_argument(
        "--images-dir",
        type=str,
        help=f"Base images directory (default: {config.IMAGES_DIR})",
    )
    parser.add_argument(
        "--links-file",
        type=str,
        help=f"Listing log file (default: {config.LINKS_FILE})",
    )
    parser.add_argument(
        "--static",
        action="store_true",
        help="Fetch the page without a browser (no JavaScript rendering)",
    )
    parser.add_argument("--headful", action="store_true", help="Show the browser window")
    parser.add_argument("--no-open", action="store_true", help="Do not open the folder when done")
    parser.add_argument("--no-progress", action="store_true", help="Hide the download progress bar")
    parser.add_argument("--export-links", type=str, metavar="CSV", help="Export recorded listings to CSV and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.images_dir:
        config.IMAGES_DIR = Path(args.images_dir)
    if args.links_file:
        config.LINKS_FILE = Path(args.links_file)

    if args.export_links:
        try:
            count = link_recorder.export_car_links_csv(Path(args.export_links))
        except (OSError, ValueError) as e:
            logger.error(f"Failed to export links: {e}")
            sys.exit(1)
        print(f"Exported {count} listings to {args.export_links}")
        return

    print("=" * 60)
    print("ENCAR Car Image Scraper")
    print("=" * 60)

    folder_name = args.folder if args.folder is not None else ask(
        "Enter the folder name (will be created inside 'images' folder): "
    )
    if not folder_name:
        print("Folder name cannot be empty!")
        sys.exit(1)

    url = args.url if args.url is not None else ask("Enter the Encar car detail page URL: ")

    try:
        validate_inputs(url, folder_name)
    except ValueError as e:
        print(e)
        sys.exit(1)

    print(f"\nTarget URL: {url}")
    print(f"Folder: {config.IMAGES_DIR / folder_name}\n")

    if args.static:
        loader = fetch_page
    else:
        loader = partial(load_listing_page, headless=not args.headful)

    try:
        summary = scrape_listing(
            url,
            folder_name,
            loader=loader,
            open_when_done=not args.no_open,
            show_progress=not args.no_progress,
        )
    except PageLoadError as e:
        logger.error(f"An error occurred: {e}")
        sys.exit(1)

    print_summary(summary)

    if summary.status is RunStatus.NO_IMAGES:
        sys.exit(1)


if __name__ == "__main__":
    main()
