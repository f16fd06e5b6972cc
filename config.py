"""
ENCAR Image Scraper - Configuration Settings
"""

from pathlib import Path

# Base paths (relative to the working directory, created on demand)
IMAGES_DIR = Path("images")
LINKS_FILE = Path("car_links.json")

# ENCAR site
SITE_DOMAIN = "encar.com"
CDN_HOST = "ci.encar.com"
CDN_PICTURE_MARKER = "ci.encar.com/carpicture"
PICTURE_MARKER = "carpicture"

# Transparent filler image used by the lazy loader
PLACEHOLDER_PATH = "/assets/images/common/trans.gif"
PLACEHOLDER_NAME = "trans.gif"

# Image element selectors used by the discovery strategies
LAZY_SOURCE_ATTR = "data-src"
SLIDER_IMAGE_SELECTOR = ".swiper-slide img"
BUTTON_IMAGE_SELECTOR = "button img"

# Thumbnail sizing fragment and its full resolution replacement
THUMBNAIL_SIZE_PATTERN = r"rh=\d+&cw=\d+&ch=\d+"
FULL_SIZE_QUERY = "rh=696&cw=1160&ch=696"

# Pattern synthesis
# Below this many discovered images the gallery is assumed under-captured
MIN_DISCOVERED_IMAGES = 15
SYNTHESIZED_IMAGE_COUNT = 24
SYNTHESIS_GALLERY = "carpicture08"
SYNTHESIS_QUERY = (
    "?impolicy=heightRate&rh=696&cw=1160&ch=696&cg=Center"
    "&wtmk=https://ci.encar.com/wt_mark/w_mark_04.png&t=20250805151805"
)

# Download settings
DOWNLOAD_DELAY = 0.1  # seconds, after every attempted download
DOWNLOAD_TIMEOUT = None  # HTTP client default
EXISTING_IMAGE_PATTERN = r"^image_\d+\.(jpg|jpeg|png|gif)$"
SHOW_PROGRESS = True

# Browser settings
BROWSER_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]
NAVIGATION_TIMEOUT = 60000  # ms
DETAIL_WAIT_TIMEOUT = 30000  # ms
DETAIL_SELECTOR = "#detailInfomation"
SETTLE_DELAY = 3000  # ms
GALLERY_CLOSE_SELECTOR = '.DetailPhotoGallery_btn_close__M7WYe, [class*="btn_close"]'

# Static page fetch (no JavaScript rendering)
HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "ko-KR,ko;q=0.9,en-US;q=0.8,en;q=0.5",
}
PAGE_TIMEOUT = 30  # seconds

# Logging
LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# API server
API_PORT = 5000
