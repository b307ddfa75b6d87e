import httpx
import pytest

from fetcher import FetchError, ProxyStyle, build_proxy_url, fetch_page
from remote_config import BASE_URL_KEY, PROXY_URL_KEY, ConfigCache, RemoteConfigResolver

BASE_URL = "https://toon.test"
PROXY_URL = "https://proxy.test"
TARGET = f"{BASE_URL}/series/naruto/"


def seeded_resolver(client, proxy_url=PROXY_URL):
    cache = ConfigCache()
    cache.set(BASE_URL_KEY, BASE_URL)
    cache.set(PROXY_URL_KEY, proxy_url)
    return RemoteConfigResolver(client, cache)


def test_build_proxy_url():
    assert build_proxy_url(PROXY_URL, TARGET) == "https://proxy.test?url=https%3A%2F%2Ftoon.test%2Fseries%2Fnaruto%2F"
    assert build_proxy_url(PROXY_URL, f"{BASE_URL}/home/?s=one%20piece", ProxyStyle.PATH) == "https://proxy.test/?path=/home/?s=one%20piece"


@pytest.mark.asyncio
async def test_proxy_body_is_used_when_proxy_succeeds():
    seen = []

    def handler(request):
        seen.append(request.url.host)
        return httpx.Response(200, text="<html>from proxy</html>")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        html = await fetch_page(client, seeded_resolver(client), TARGET)
    assert html == "<html>from proxy</html>"
    assert seen == ["proxy.test"]


@pytest.mark.asyncio
async def test_proxy_error_falls_back_to_direct():
    seen = []

    def handler(request):
        seen.append(request)
        if request.url.host == "proxy.test":
            raise httpx.ConnectError("proxy down", request=request)
        return httpx.Response(200, text="<html>direct</html>")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        html = await fetch_page(client, seeded_resolver(client), TARGET)
    assert html == "<html>direct</html>"
    direct = seen[-1]
    assert str(direct.url) == TARGET
    assert direct.headers["Referer"] == BASE_URL
    assert "Mozilla" in direct.headers["User-Agent"]


@pytest.mark.asyncio
async def test_proxy_error_status_falls_back_to_direct():
    def handler(request):
        if request.url.host == "proxy.test":
            return httpx.Response(403, text="blocked")
        return httpx.Response(200, text="<html>direct</html>")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        assert await fetch_page(client, seeded_resolver(client), TARGET, referer_url="https://ref.test/") == "<html>direct</html>"


@pytest.mark.asyncio
async def test_both_paths_failing_raises_with_last_status():
    def handler(request):
        if request.url.host == "proxy.test":
            return httpx.Response(502, text="bad gateway")
        return httpx.Response(503, text="unavailable")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(FetchError) as excinfo:
            await fetch_page(client, seeded_resolver(client), TARGET)
    assert excinfo.value.status_code == 503
    assert "HTTP 503" in excinfo.value.message
    assert excinfo.value.message.startswith("Both proxy and direct fetch failed")
    assert excinfo.value.url == TARGET


@pytest.mark.asyncio
async def test_without_proxy_fetches_directly():
    seen = []

    def handler(request):
        seen.append(request.url.host)
        return httpx.Response(404, text="missing")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(FetchError) as excinfo:
            await fetch_page(client, seeded_resolver(client, proxy_url=None), TARGET)
    assert seen == ["toon.test"]
    assert excinfo.value.status_code == 404
    assert excinfo.value.message.startswith("Direct fetch failed")
