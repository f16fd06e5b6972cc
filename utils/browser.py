"""
ENCAR Image Scraper - Page Loading Module
Loads a listing page and returns a DocumentSnapshot of it.
"""

import logging
import os
import subprocess
import sys
from pathlib import Path

import requests
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PWTimeout
from playwright.sync_api import sync_playwright

import config
from .discovery import DocumentSnapshot

logger = logging.getLogger(__name__)


class PageLoadError(RuntimeError):
    """The listing page could not be loaded or never finished rendering."""


def _close_gallery(page):
    """Close the photo gallery modal if it is open."""
    try:
        close_button = page.query_selector(config.GALLERY_CLOSE_SELECTOR)
        if close_button:
            close_button.click()
            page.wait_for_timeout(500)
    except PlaywrightError:
        logger.debug("Could not close gallery modal")


def load_listing_page(url: str, headless: bool = True) -> DocumentSnapshot:
    """
    Render a listing page in headless Chromium.

    Waits for the detail section and a short settle period so lazy
    galleries get a chance to attach their images. The browser is closed
    on every path.

    Raises:
        PageLoadError: the browser could not start, or navigation or the
            detail section timed out
    """
    try:
        with sync_playwright() as pw:
            browser = pw.chromium.launch(headless=headless, args=config.BROWSER_ARGS)
            try:
                page = browser.new_page()
                try:
                    logger.info("Navigating to page...")
                    page.goto(url, wait_until="networkidle", timeout=config.NAVIGATION_TIMEOUT)

                    logger.info("Waiting for detail information section...")
                    page.wait_for_selector(config.DETAIL_SELECTOR, timeout=config.DETAIL_WAIT_TIMEOUT)

                    page.wait_for_timeout(config.SETTLE_DELAY)
                    return DocumentSnapshot(page.content(), page.url)
                finally:
                    _close_gallery(page)
            finally:
                browser.close()
                logger.info("Browser closed")

    except PWTimeout as e:
        raise PageLoadError(f"Timed out loading {url}: {e}") from e
    except PlaywrightError as e:
        raise PageLoadError(f"Could not load {url}: {e}") from e


def fetch_page(url: str, session: requests.Session = None) -> DocumentSnapshot:
    """
    Fetch a listing page without rendering it.

    Only the server-rendered markup is available, which usually leaves the
    gallery to the markup scan and pattern synthesis.

    Raises:
        PageLoadError: the request failed
    """
    if session is None:
        session = requests.Session()

    try:
        response = session.get(url, headers=config.HEADERS, timeout=config.PAGE_TIMEOUT)
        response.raise_for_status()
    except requests.RequestException as e:
        raise PageLoadError(f"Failed to fetch {url}: {e}") from e

    return DocumentSnapshot(response.text, response.url or url)


def open_folder(folder: Path) -> bool:
    """Open a folder in the desktop file manager. Returns False on failure."""
    try:
        if sys.platform.startswith("win"):
            os.startfile(str(folder))
        else:
            opener = "open" if sys.platform == "darwin" else "xdg-open"
            subprocess.run([opener, str(folder)], check=True, capture_output=True)
        logger.info("Folder opened successfully!")
        return True
    except (OSError, subprocess.CalledProcessError) as e:
        logger.warning(f"Could not open folder automatically: {e}")
        logger.info(f"Please manually open: {folder}")
        return False
