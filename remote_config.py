# remote_config.py
"""
Resolution of the two remotely hosted settings every scrape depends on:
the site origin (base URL) and the optional proxy endpoint.

Both are single-line text files. Resolved values are kept in a ConfigCache
for CONFIG_CACHE_TTL seconds; a failed base URL fetch caches the fallback
origin and a failed proxy fetch caches None (direct fetching only).
"""
import logging
import re
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Optional

from httpx import AsyncClient, HTTPStatusError, RequestError

from config import (
    BASE_URL_SOURCE,
    CONFIG_CACHE_TTL,
    CONFIG_TIMEOUT,
    FALLBACK_BASE_URL,
    PROXY_URL_SOURCE,
)

logger = logging.getLogger(__name__)

BASE_URL_KEY = "base_url"
PROXY_URL_KEY = "proxy_url"


@dataclass
class CacheEntry:
    value: Optional[str]
    fetched_at: float  # epoch milliseconds


class ConfigCache:
    """Time-bounded memo of config values, keyed by name. None is a valid value."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def now_ms(self) -> float:
        return self._clock() * 1000

    def get(self, key: str) -> Optional[CacheEntry]:
        return self._entries.get(key)

    def set(self, key: str, value: Optional[str]) -> CacheEntry:
        entry = CacheEntry(value=value, fetched_at=self.now_ms())
        self._entries[key] = entry
        return entry

    def clear(self) -> None:
        self._entries.clear()

    async def get_or_refresh(self, key: str, ttl: float, refresh_fn: Callable[[], Awaitable[Optional[str]]]) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is not None and (self.now_ms() - entry.fetched_at) < ttl * 1000:
            return entry.value
        # Concurrent refreshes may race; the last writer wins.
        value = await refresh_fn()
        return self.set(key, value).value


# Process-wide cache used by the HTTP layer
default_config_cache = ConfigCache()


def clean_config_value(text: Optional[str]) -> str:
    """Trim whitespace and trailing slashes from a config file body."""
    if not text:
        return ""
    return re.sub(r"/+$", "", text.strip())


class RemoteConfigResolver:
    def __init__(
        self,
        client: AsyncClient,
        cache: Optional[ConfigCache] = None,
        base_url_source: str = BASE_URL_SOURCE,
        proxy_url_source: str = PROXY_URL_SOURCE,
        fallback_base_url: str = FALLBACK_BASE_URL,
        ttl: float = CONFIG_CACHE_TTL,
    ):
        self.client = client
        self.cache = cache if cache is not None else default_config_cache
        self.base_url_source = base_url_source
        self.proxy_url_source = proxy_url_source
        self.fallback_base_url = clean_config_value(fallback_base_url)
        self.ttl = ttl

    async def get_base_url(self) -> str:
        return await self.cache.get_or_refresh(BASE_URL_KEY, self.ttl, self._refresh_base_url)

    async def get_proxy_url(self) -> Optional[str]:
        return await self.cache.get_or_refresh(PROXY_URL_KEY, self.ttl, self._refresh_proxy_url)

    async def _fetch_text(self, source: str) -> str:
        response = await self.client.get(source, timeout=CONFIG_TIMEOUT)
        response.raise_for_status()
        return clean_config_value(response.text)

    async def _refresh_base_url(self) -> str:
        try:
            base_url = await self._fetch_text(self.base_url_source)
        except HTTPStatusError as e:
            logger.error(f"HTTP error {e.response.status_code} while fetching base URL from {self.base_url_source}")
        except RequestError as e:
            logger.error(f"Network error while fetching base URL: {e}")
        else:
            if base_url.startswith("http"):
                logger.info(f"Resolved base URL: {base_url}")
                return base_url
            logger.warning(f"Ignoring invalid base URL value: {base_url!r}")
        logger.info(f"Using fallback base URL: {self.fallback_base_url}")
        return self.fallback_base_url

    async def _refresh_proxy_url(self) -> Optional[str]:
        try:
            proxy_url = await self._fetch_text(self.proxy_url_source)
        except HTTPStatusError as e:
            logger.error(f"HTTP error {e.response.status_code} while fetching proxy URL from {self.proxy_url_source}")
            return None
        except RequestError as e:
            logger.error(f"Network error while fetching proxy URL: {e}")
            return None
        if not proxy_url:
            logger.info("Proxy URL file is empty, fetching directly")
            return None
        logger.info(f"Resolved proxy URL: {proxy_url}")
        return proxy_url
