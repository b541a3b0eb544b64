# tests/conftest.py
import threading
from contextlib import contextmanager
from urllib.parse import unquote

import httpx

from pkgexplorer.models import PackageLinks, PackageRecord, QueryResult


def make_manifest(name, latest="1.0.0", **extra):
    manifest = {
        "name": name,
        "description": f"{name} description",
        "dist-tags": {"latest": latest} if latest else {},
        "versions": {latest: {"dependencies": {"a": "^1.0.0", "b": "^2.0.0"}}} if latest else {},
        "author": {"name": "Jane Doe"},
        "license": "MIT",
        "homepage": f"https://example.com/{name}",
        "repository": {"type": "git", "url": f"git+https://github.com/acme/{name}.git"},
    }
    manifest.update(extra)
    return manifest


def make_record(name, downloads=0):
    return PackageRecord(
        name=name, version="1.0.0", description="", author="Unknown",
        license="MIT", dependency_count=0, weekly_downloads=downloads,
        links=PackageLinks(registry_page=f"https://www.npmjs.com/package/{name}"),
    )


class FakeRegistry:
    """In-memory npm registry + downloads API served through httpx.MockTransport."""

    def __init__(self, names=(), total=None, downloads=None, manifests=None):
        self.names = list(names)
        self.total = len(self.names) if total is None else total
        self.downloads = dict(downloads or {})
        self.manifests = dict(manifests or {})
        self.fail_search = False
        self.fail_manifest = set()
        self.fail_downloads = set()
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = unquote(request.url.path)
        if path == "/-/v1/search":
            if self.fail_search:
                return httpx.Response(503, json={"error": "unavailable"})
            objects = [{"package": {"name": n}} for n in self.names]
            return httpx.Response(200, json={"objects": objects, "total": self.total})
        if path.startswith("/downloads/point/last-week/"):
            name = path[len("/downloads/point/last-week/"):]
            if name in self.fail_downloads:
                return httpx.Response(500, json={"error": "boom"})
            return httpx.Response(200, json={"downloads": self.downloads.get(name, 0), "package": name})
        name = path.lstrip("/")
        if name in self.fail_manifest:
            return httpx.Response(404, json={"error": "Not found"})
        return httpx.Response(200, json=self.manifests.get(name) or make_manifest(name))

    def client_factory(self):
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


class FakeAggregator:
    def __init__(self, result=None, error=None):
        self.result = result if result is not None else QueryResult()
        self.error = error
        self.modes = []

    async def query_packages(self, mode):
        self.modes.append(mode)
        if self.error:
            raise self.error
        return self.result


@contextmanager
def run_server(aggregator=None, host="127.0.0.1"):
    """Run the explorer HTTP server on a free port with a stand-in aggregator."""
    import pkgexplorer.app as app

    original = app.AGGREGATOR
    if aggregator is not None:
        app.AGGREGATOR = aggregator
    httpd = app.ThreadingHTTPServer((host, 0), app.Handler)
    t = threading.Thread(target=httpd.serve_forever, daemon=True)
    t.start()
    try:
        yield (httpd, f"http://{host}:{httpd.server_address[1]}")
    finally:
        httpd.shutdown()
        t.join()
        httpd.server_close()
        app.AGGREGATOR = original
