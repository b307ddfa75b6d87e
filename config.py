# config.py
import logging
import os

# Configure logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO))

# Remote configuration files (plain text, one line each)
BASE_URL_SOURCE = os.environ.get(
    "TOONSTREAM_BASE_URL_SOURCE",
    "https://raw.githubusercontent.com/senpaiorbit/toon_stream_api/refs/heads/main/src/baseurl.txt",
)
PROXY_URL_SOURCE = os.environ.get(
    "TOONSTREAM_PROXY_URL_SOURCE",
    "https://raw.githubusercontent.com/senpaiorbit/toon_stream_api/refs/heads/main/src/cf_proxy.txt",
)
FALLBACK_BASE_URL = os.environ.get("TOONSTREAM_FALLBACK_BASE_URL", "https://toonstream.dad")

# Seconds a resolved base/proxy URL stays fresh
CONFIG_CACHE_TTL = float(os.environ.get("CONFIG_CACHE_TTL", 300))

REQUEST_TIMEOUT = float(os.environ.get("REQUEST_TIMEOUT", 30.0))
IFRAME_TIMEOUT = 15.0
CONFIG_TIMEOUT = 10.0

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)

BROWSER_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Cache-Control": "max-age=0",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Sec-Fetch-User": "?1",
    "Upgrade-Insecure-Requests": "1",
}

CACHE_CONTROL = "public, s-maxage=300, stale-while-revalidate=600"

PREFERRED_IMAGE_SIZE = "w500"
MAX_CAST = 10

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
