"""
ENCAR Image Scraper - URL Helpers
Pure functions for comparing, rewriting and classifying image URLs.
"""

import posixpath
import re
from typing import Iterable, List
from urllib.parse import urlsplit

import config

THUMBNAIL_SIZE_RE = re.compile(config.THUMBNAIL_SIZE_PATTERN)
CAR_ID_RE = re.compile(r"/detail/(\d+)")


def clean_url(url: str) -> str:
    """Return the URL without its query string (everything before the first '?')."""
    return url.split("?", 1)[0]


def to_full_resolution(url: str) -> str:
    """Rewrite a thumbnail sizing fragment to the full resolution size."""
    return THUMBNAIL_SIZE_RE.sub(config.FULL_SIZE_QUERY, url, count=1)


def is_listing_image(url: str) -> bool:
    """Check that a URL points at the image CDN and is not the placeholder."""
    return bool(url) and config.CDN_HOST in url and config.PLACEHOLDER_NAME not in url


def unique(urls: Iterable[str]) -> List[str]:
    """Deduplicate by exact string, keeping first-seen order."""
    return list(dict.fromkeys(urls))


def filter_listing_images(urls: Iterable[str]) -> List[str]:
    """Deduplicate and keep only CDN images."""
    return [url for url in unique(urls) if is_listing_image(url)]


def image_extension(url: str) -> str:
    """
    Get the file extension of an image URL's path.

    The query string is ignored; returns an empty string when the path has
    no extension.
    """
    return posixpath.splitext(urlsplit(clean_url(url)).path)[1]


def extract_car_id(url: str) -> str:
    """Extract the numeric listing id following '/detail/', or 'unknown'."""
    match = CAR_ID_RE.search(url)
    return match.group(1) if match else "unknown"


def is_listing_url(url: str) -> bool:
    """Check that a listing URL belongs to the ENCAR site."""
    return bool(url) and config.SITE_DOMAIN in url
