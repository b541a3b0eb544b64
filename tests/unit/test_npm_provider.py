import httpx
import pytest

from pkgexplorer.providers.downloads import NpmDownloadsProvider
from pkgexplorer.providers.npm import NpmRegistryProvider


def client_for(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_manifest_url_escapes_scope_slash():
    provider = NpmRegistryProvider("https://registry.test/")
    assert provider.manifest_url("react") == "https://registry.test/react"
    assert provider.manifest_url("@types/node") == "https://registry.test/@types%2Fnode"


def test_downloads_url_keeps_scoped_name():
    provider = NpmDownloadsProvider("https://api.test")
    assert provider.point_url("@types/node") == "https://api.test/downloads/point/last-week/@types/node"


@pytest.mark.asyncio
async def test_search_sends_weights_and_offset():
    seen = {}

    def handler(request):
        seen.update(request.url.params)
        return httpx.Response(200, json={"objects": [{"package": {"name": "react"}}], "total": 3})

    async with client_for(handler) as client:
        out = await NpmRegistryProvider("https://registry.test").search(
            client, "popularity:>1000", 21, offset=21, weights={"popularity": 1.0},
        )
    assert out == {"names": ["react"], "total": 3}
    assert seen["text"] == "popularity:>1000"
    assert seen["size"] == "21"
    assert seen["from"] == "21"
    assert seen["popularity"] == "1.0"


@pytest.mark.asyncio
async def test_search_non_2xx_raises():
    def handler(request):
        return httpx.Response(502, text="bad gateway")

    async with client_for(handler) as client:
        with pytest.raises(httpx.HTTPStatusError):
            await NpmRegistryProvider("https://registry.test").search(client, "x", 20)


@pytest.mark.asyncio
async def test_search_malformed_body_raises():
    def handler(request):
        return httpx.Response(200, text="<html>not json</html>")

    async with client_for(handler) as client:
        with pytest.raises(ValueError):
            await NpmRegistryProvider("https://registry.test").search(client, "x", 20)


@pytest.mark.asyncio
async def test_fetch_weekly():
    def handler(request):
        assert request.url.path == "/downloads/point/last-week/left-pad"
        return httpx.Response(200, json={"downloads": 2500, "package": "left-pad"})

    async with client_for(handler) as client:
        assert await NpmDownloadsProvider("https://api.test").fetch_weekly(client, "left-pad") == 2500


@pytest.mark.asyncio
async def test_fetch_weekly_missing_count_raises():
    def handler(request):
        return httpx.Response(200, json={"error": "package not found"})

    async with client_for(handler) as client:
        with pytest.raises(ValueError):
            await NpmDownloadsProvider("https://api.test").fetch_weekly(client, "nope")
