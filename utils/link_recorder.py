"""
ENCAR Image Scraper - Link Recorder
Keeps an append-only JSON log of every listing that was processed.
"""

import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List

import pandas as pd

import config
from .urls import extract_car_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CarLinkRecord:
    """One processed listing, as stored in car_links.json."""

    url: str
    folderName: str
    timestamp: str
    carId: str

    @classmethod
    def create(cls, url: str, folder_name: str, now: datetime = None) -> "CarLinkRecord":
        now = now or datetime.now(timezone.utc)
        timestamp = now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
        return cls(url=url, folderName=folder_name, timestamp=timestamp, carId=extract_car_id(url))


def load_car_links(links_file: Path = None) -> List[dict]:
    """
    Read the recorded links.

    Returns an empty list when the file does not exist yet. Unreadable or
    malformed files raise (OSError / ValueError).
    """
    links_file = links_file or config.LINKS_FILE
    if not links_file.exists():
        return []

    with open(links_file, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"{links_file} does not contain a JSON array")
    return data


def save_car_link(url: str, folder_name: str, links_file: Path = None) -> CarLinkRecord | None:
    """
    Append a record for a processed listing.

    Failures are logged and never raised, since the images are already on
    disk by the time a link is recorded.

    Returns:
        The stored record, or None if it could not be saved
    """
    links_file = links_file or config.LINKS_FILE

    try:
        car_links = load_car_links(links_file)
        record = CarLinkRecord.create(url, folder_name)
        car_links.append(asdict(record))

        with open(links_file, "w", encoding="utf-8") as f:
            json.dump(car_links, f, indent=2, ensure_ascii=False)

        logger.info(f"Car link saved to: {links_file}")
        return record

    except (OSError, ValueError) as e:
        logger.warning(f"Could not save car link: {e}")
        return None


def export_car_links_csv(output_file: Path, links_file: Path = None) -> int:
    """
    Export the recorded links to CSV.

    Returns:
        Number of exported records
    """
    car_links = load_car_links(links_file)
    df = pd.DataFrame(car_links, columns=["url", "folderName", "timestamp", "carId"])
    df.to_csv(output_file, index=False, encoding="utf-8")
    logger.info(f"CSV exported to: {output_file}")
    return len(df)
