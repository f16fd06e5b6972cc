"""
ENCAR Image Scraper - Pattern Synthesizer
Fills in gallery images the page did not render, based on the URL pattern
of a discovered image.
"""

import logging
import re
from typing import List

import config
from . import urls

logger = logging.getLogger(__name__)

SEED_RE = re.compile(
    r"https://ci\.encar\.com/carpicture/carpicture\d+/pic\d+/(\d+)_\d+\.jpg"
)


def synthesize_candidates(image_urls: List[str]) -> List[str]:
    """
    Build candidate gallery URLs from the first discovered image.

    The numeric listing id is taken from the seed URL. The gallery segment
    is always config.SYNTHESIS_GALLERY, whatever the seed uses.

    Args:
        image_urls: Discovered image URLs (may be empty)

    Returns:
        Synthesized URLs not already present in image_urls
    """
    if not image_urls:
        return []

    match = SEED_RE.search(image_urls[0])
    if not match:
        logger.debug(f"Seed image does not match the gallery pattern: {image_urls[0]}")
        return []

    base_number = match.group(1)
    base_url = (
        f"https://{config.CDN_HOST}/carpicture/{config.SYNTHESIS_GALLERY}"
        f"/pic{base_number}/{base_number}"
    )

    existing = set(image_urls)
    candidates = []
    for i in range(1, config.SYNTHESIZED_IMAGE_COUNT + 1):
        generated_url = f"{base_url}_{i:03d}.jpg{config.SYNTHESIS_QUERY}"
        if generated_url not in existing:
            candidates.append(generated_url)

    return candidates


def complete_image_urls(image_urls: List[str], threshold: int = config.MIN_DISCOVERED_IMAGES) -> List[str]:
    """
    Produce the final download list.

    Synthesized candidates are appended only when fewer than `threshold`
    images were discovered. The result is deduplicated and filtered to CDN
    images again.
    """
    final_urls = list(image_urls)

    if len(image_urls) < threshold:
        logger.info("Trying to generate missing images based on URL pattern...")
        candidates = synthesize_candidates(image_urls)
        logger.info(f"Generated {len(candidates)} candidate images")
        final_urls.extend(candidates)

    final_urls = urls.filter_listing_images(final_urls)
    logger.info(f"Final count: {len(final_urls)} unique images")
    return final_urls
