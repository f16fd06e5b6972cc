"""
ENCAR Image Scraper - Utility Modules
"""

from .urls import clean_url, to_full_resolution, extract_car_id, is_listing_url
from .discovery import DocumentSnapshot, discover_image_urls
from .synthesizer import synthesize_candidates, complete_image_urls
from .downloader import DownloadOutcome, DownloadStats, download_listing_images
from .link_recorder import CarLinkRecord, save_car_link, load_car_links, export_car_links_csv

__all__ = [
    "clean_url",
    "to_full_resolution",
    "extract_car_id",
    "is_listing_url",
    "DocumentSnapshot",
    "discover_image_urls",
    "synthesize_candidates",
    "complete_image_urls",
    "DownloadOutcome",
    "DownloadStats",
    "download_listing_images",
    "CarLinkRecord",
    "save_car_link",
    "load_car_links",
    "export_car_links_csv",
]
