"""
ENCAR Image Scraper - Image Discovery Module
Finds full resolution gallery image URLs in a loaded listing page.

Discovery runs a fixed sequence of independent extractors over a
DocumentSnapshot and merges their results in order, first seen wins.
"""

# Filter XMLParsedAsHTMLWarning before importing BeautifulSoup
import warnings
from bs4 import XMLParsedAsHTMLWarning
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)

import html
import logging
import re
from typing import Callable, Iterable, List, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup

import config
from . import urls

logger = logging.getLogger(__name__)

# Gallery images embedded anywhere in the markup, with an optional query
IMAGE_URL_RE = re.compile(
    r"https://ci\.encar\.com/carpicture/carpicture\d+/pic\d+/\d+_\d+\.jpg[^\"'\s]*"
)


class DocumentSnapshot:
    """
    A queryable view of a loaded page.

    Wraps the serialized markup together with its parsed tree so that
    extractors can either run CSS queries or scan the raw HTML.
    """

    def __init__(self, markup: str, base_url: str = ""):
        self.markup = markup
        self.base_url = base_url
        self.soup = BeautifulSoup(markup, "lxml")

    def select(self, selector: str) -> list:
        """Return the elements matching a CSS selector, in document order."""
        return self.soup.select(selector)

    def resolve(self, src: str) -> str:
        """Resolve a relative or protocol-relative source against the page URL."""
        if self.base_url:
            return urljoin(self.base_url, src)
        if src.startswith("//"):
            return "https:" + src
        return src


def _is_gallery_source(src: str | None) -> bool:
    return bool(src) and src != config.PLACEHOLDER_PATH and config.PICTURE_MARKER in src


def _image_source(img, marker: str) -> str | None:
    """Pick the first of src / data-src that references the marker."""
    for attr in ("src", config.LAZY_SOURCE_ATTR):
        src = img.get(attr)
        if src and marker in src:
            return src
    return None


def _collect(snapshot: DocumentSnapshot, images: Iterable, marker: str) -> List[str]:
    found = []
    for img in images:
        src = _image_source(img, marker)
        if _is_gallery_source(src):
            found.append(snapshot.resolve(src))
    return found


def extract_from_image_tags(snapshot: DocumentSnapshot) -> List[str]:
    """Strategy 1: any image whose src or lazy source points at the picture CDN."""
    marker = config.CDN_PICTURE_MARKER
    selector = f'img[src*="{marker}"], img[{config.LAZY_SOURCE_ATTR}*="{marker}"]'
    return _collect(snapshot, snapshot.select(selector), marker)


def extract_from_markup(snapshot: DocumentSnapshot) -> List[str]:
    """
    Strategy 2: scan the serialized HTML for gallery URLs.

    Catches images the lazy renderer has not attached to an element yet.
    Attribute values are entity-escaped in serialized markup, so matches
    are unescaped.
    """
    return [html.unescape(match) for match in IMAGE_URL_RE.findall(snapshot.markup)]


def extract_from_lazy_images(snapshot: DocumentSnapshot) -> List[str]:
    """Strategy 3: lazy loaded images carrying the CDN path in data-src."""
    found = []
    attr = config.LAZY_SOURCE_ATTR
    for img in snapshot.select(f'img[{attr}*="{config.CDN_PICTURE_MARKER}"]'):
        src = img.get(attr)
        if _is_gallery_source(src):
            found.append(snapshot.resolve(src))
    return found


def extract_from_slider(snapshot: DocumentSnapshot) -> List[str]:
    """Strategy 4: images inside the swiper carousel."""
    return _collect(snapshot, snapshot.select(config.SLIDER_IMAGE_SELECTOR), config.CDN_HOST)


def extract_from_buttons(snapshot: DocumentSnapshot) -> List[str]:
    """Strategy 5: thumbnails rendered inside buttons."""
    return _collect(snapshot, snapshot.select(config.BUTTON_IMAGE_SELECTOR), config.CDN_HOST)


EXTRACTORS: Tuple[Callable[[DocumentSnapshot], List[str]], ...] = (
    extract_from_image_tags,
    extract_from_markup,
    extract_from_lazy_images,
    extract_from_slider,
    extract_from_buttons,
)


def discover_image_urls(snapshot: DocumentSnapshot, extractors=EXTRACTORS) -> List[str]:
    """
    Discover all gallery image URLs in a listing page.

    Args:
        snapshot: The loaded page
        extractors: Extraction strategies, applied in order

    Returns:
        Unique full resolution image URLs in first-seen order
    """
    found = []
    for extractor in extractors:
        extracted = extractor(snapshot)
        logger.debug(f"{extractor.__name__}: {len(extracted)} candidates")
        found.extend(extracted)

    full_size = [urls.to_full_resolution(url) for url in urls.unique(found)]
    image_urls = [url for url in full_size if urls.is_listing_image(url)]

    logger.info(f"Found {len(image_urls)} unique images")
    return image_urls
