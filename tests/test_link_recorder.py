import json
from datetime import datetime, timezone

import pandas as pd

from tests.fakes import LISTING_URL
from utils.link_recorder import CarLinkRecord, export_car_links_csv, load_car_links, save_car_link


def test_record_fields():
    now = datetime(2025, 8, 5, 15, 18, 5, 123456, tzinfo=timezone.utc)
    record = CarLinkRecord.create(LISTING_URL, "sonata", now=now)

    assert record.url == LISTING_URL
    assert record.folderName == "sonata"
    assert record.timestamp == "2025-08-05T15:18:05.123Z"
    assert record.carId == "38817035"


def test_unknown_car_id():
    assert CarLinkRecord.create("https://fem.encar.com/cars/list", "x").carId == "unknown"


def test_save_appends_to_array(workdir):
    links_file = workdir / "car_links.json"

    save_car_link(LISTING_URL, "first", links_file)
    save_car_link("https://fem.encar.com/cars/detail/1234", "second", links_file)

    data = json.loads(links_file.read_text(encoding="utf-8"))
    assert [r["folderName"] for r in data] == ["first", "second"]
    assert [r["carId"] for r in data] == ["38817035", "1234"]
    assert set(data[0]) == {"url", "folderName", "timestamp", "carId"}
    assert data[0]["timestamp"].endswith("Z")
    assert links_file.read_text(encoding="utf-8").startswith("[\n  {")


def test_save_uses_configured_file(workdir):
    save_car_link(LISTING_URL, "sonata")
    assert len(load_car_links(workdir / "car_links.json")) == 1


def test_save_reports_corrupt_store_without_raising(workdir):
    links_file = workdir / "car_links.json"
    links_file.write_text("{not json", encoding="utf-8")

    assert save_car_link(LISTING_URL, "sonata", links_file) is None
    assert links_file.read_text(encoding="utf-8") == "{not json"


def test_load_missing_store(workdir):
    assert load_car_links(workdir / "missing.json") == []


def test_export_csv(workdir):
    links_file = workdir / "car_links.json"
    save_car_link(LISTING_URL, "sonata", links_file)

    count = export_car_links_csv(workdir / "links.csv", links_file)

    df = pd.read_csv(workdir / "links.csv", dtype=str)
    assert count == 1
    assert list(df.columns) == ["url", "folderName", "timestamp", "carId"]
    assert df.loc[0, "carId"] == "38817035"
