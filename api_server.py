#!/usr/bin/env python3
"""
ENCAR Image Scraper - Simple HTTP API Server
Provides REST endpoints to trigger a listing scrape and browse the results.
"""

import logging
import os
from datetime import datetime

from flask import Flask, jsonify, request
from flask_cors import CORS

import config
import encar_scraper
from utils import downloader, link_recorder
from utils.browser import PageLoadError

# Initialize Flask app
app = Flask(__name__)
CORS(app)

# Configure logging
logging.basicConfig(level=getattr(logging, config.LOG_LEVEL), format=config.LOG_FORMAT)
logger = logging.getLogger(__name__)

# Page loader used by /scrape, replaceable in tests
app.config["PAGE_LOADER"] = encar_scraper.load_listing_page


@app.route("/health", methods=["GET"])
def health():
    """Health check endpoint."""
    return jsonify({
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "images_dir": str(config.IMAGES_DIR),
        "links_file": str(config.LINKS_FILE),
    })


@app.route("/links", methods=["GET"])
def links():
    """Get recorded listings, newest first."""
    limit = request.args.get("limit", type=int)
    if limit is not None and limit < 0:
        return jsonify({"error": "limit must not be negative"}), 400

    try:
        car_links = link_recorder.load_car_links()
    except (OSError, ValueError) as e:
        logger.error(f"Could not read car links: {e}")
        return jsonify({"error": "Could not read car links"}), 500

    car_links = list(reversed(car_links))
    if limit is not None:
        car_links = car_links[:limit]
    return jsonify(car_links), 200


@app.route("/images/<folder_name>", methods=["GET"])
def images(folder_name: str):
    """Get the image files of a listing folder."""
    folder = config.IMAGES_DIR / folder_name

    if os.path.basename(folder_name) != folder_name or not folder.is_dir():
        return jsonify({"error": f"Folder {folder_name} not found"}), 404

    return jsonify({
        "folder": folder_name,
        "images": downloader.find_existing_images(folder),
    }), 200


@app.route("/scrape", methods=["POST"])
def scrape():
    """
    Scrape one listing.

    Request body:
    {
        "url": "https://fem.encar.com/cars/detail/38817035",
        "folder": "sonata"
    }
    """
    data = request.get_json(silent=True) or {}
    url = (data.get("url") or "").strip()
    folder_name = (data.get("folder") or "").strip()

    try:
        summary = encar_scraper.scrape_listing(
            url,
            folder_name,
            loader=app.config["PAGE_LOADER"],
            show_progress=False,
        )
    except ValueError as e:
        return jsonify({"success": False, "message": str(e)}), 400
    except PageLoadError as e:
        logger.error(f"Page load failed: {e}")
        return jsonify({"success": False, "message": str(e)}), 504

    if summary.status is encar_scraper.RunStatus.NO_IMAGES:
        return jsonify({
            "success": False,
            "message": "No images found",
            "result": summary.as_dict(),
        }), 200

    return jsonify({
        "success": True,
        "message": "Scraping completed successfully",
        "result": summary.as_dict(),
    }), 200


if __name__ == "__main__":
    port = int(os.environ.get("PORT", config.API_PORT))
    app.run(
        host="0.0.0.0",
        port=port,
        debug=False
    )
