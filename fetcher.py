# fetcher.py
import logging
from enum import Enum
from typing import Optional
from urllib.parse import quote, urlsplit

from httpx import AsyncClient, HTTPStatusError, RequestError

from config import BROWSER_HEADERS, REQUEST_TIMEOUT
from remote_config import RemoteConfigResolver

logger = logging.getLogger(__name__)


class ProxyStyle(str, Enum):
    URL = "url"    # {proxy}?url=<encoded target>
    PATH = "path"  # {proxy}/?path=<target path and query>


class FetchError(Exception):
    """Raised when neither the proxy nor the origin returned a usable page."""

    def __init__(self, message: str, status_code: Optional[int] = None, url: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.url = url


def build_proxy_url(proxy_url: str, target_url: str, style: ProxyStyle = ProxyStyle.URL) -> str:
    if style == ProxyStyle.PATH:
        parts = urlsplit(target_url)
        path = parts.path or "/"
        if parts.query:
            path = f"{path}?{parts.query}"
        return f"{proxy_url}/?path={path}"
    return f"{proxy_url}?url={quote(target_url, safe='')}"


async def fetch_page(
    client: AsyncClient,
    resolver: RemoteConfigResolver,
    target_url: str,
    referer_url: Optional[str] = None,
    proxy_style: ProxyStyle = ProxyStyle.URL,
    timeout: float = REQUEST_TIMEOUT,
) -> str:
    """
    Fetch target_url through the configured proxy, falling back to a direct
    request with browser-like headers. Raises FetchError when both fail.
    """
    proxy_url = await resolver.get_proxy_url()
    if proxy_url:
        proxy_request_url = build_proxy_url(proxy_url, target_url, proxy_style)
        try:
            response = await client.get(proxy_request_url, timeout=timeout)
            response.raise_for_status()
            if response.text:
                logger.info(f"Proxy fetch successful: {target_url}")
                return response.text
            logger.warning(f"Proxy returned an empty body for {target_url}, falling back to direct fetch")
        except HTTPStatusError as e:
            logger.warning(f"Proxy returned {e.response.status_code} for {target_url}, falling back to direct fetch")
        except RequestError as e:
            logger.warning(f"Proxy fetch failed for {target_url}: {e!r}")

    prefix = "Both proxy and direct fetch failed" if proxy_url else "Direct fetch failed"
    headers = dict(BROWSER_HEADERS)
    headers["Referer"] = referer_url or await resolver.get_base_url()
    try:
        response = await client.get(target_url, headers=headers, timeout=timeout)
        response.raise_for_status()
    except HTTPStatusError as e:
        status_code = e.response.status_code
        logger.error(f"HTTP error {status_code} while fetching {target_url}")
        raise FetchError(
            f"{prefix}: HTTP {status_code}: {e.response.reason_phrase}",
            status_code=status_code,
            url=target_url,
        ) from e
    except RequestError as e:
        logger.error(f"Network error while fetching {target_url}: {e!r}")
        raise FetchError(f"{prefix}: {e!r}", url=target_url) from e

    logger.info(f"Direct fetch successful: {target_url}")
    return response.text
