import os
import json
import asyncio
import urllib.parse
import mimetypes
import re
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pkgexplorer.config import HOST, PORT, UI_DIR, ALLOWED_ORIGIN, TOP_PAGE_SIZE
from pkgexplorer.models import FrameworkQuery, SearchQuery, TopQuery
from pkgexplorer.providers.npm import NpmRegistryProvider
from pkgexplorer.providers.downloads import NpmDownloadsProvider
from pkgexplorer.utils.strategies import WeeklyDownloadsSort, UpstreamOrder
from pkgexplorer.services.aggregator import Aggregator
from pkgexplorer.utils.logging_setup import configure_logging_from_env

logger = configure_logging_from_env(__name__)

MAX_QUERY_LEN = 200

def clamp(n, lo, hi): return max(lo, min(hi, n))

class InvalidQuery(ValueError):
    pass

def bootstrap():
    return Aggregator(
        NpmRegistryProvider(),
        NpmDownloadsProvider(),
        top_sorter=WeeklyDownloadsSort(desc=True),
        search_sorter=UpstreamOrder(),
    )

AGGREGATOR = bootstrap()  # stateless; each request runs its own event loop

def mode_from_query(qs: dict):
    """Pick the query mode from parsed query-string values: q, then framework, then top."""
    text = (qs.get("q", [""])[0]).strip()
    framework = (qs.get("framework", [""])[0]).strip()
    for value in (text, framework):
        if len(value) > MAX_QUERY_LEN:
            raise InvalidQuery(value[:20])
    if text:
        return SearchQuery(text)
    if framework:
        return FrameworkQuery(framework)
    try:
        page = int(qs.get("page", ["1"])[0])
    except ValueError:
        page = 1
    return TopQuery(page=clamp(page, 1, 1000), page_size=TOP_PAGE_SIZE)

class Handler(BaseHTTPRequestHandler):
    def log_message(self, fmt, *args):
        logger.debug("access %s - %s", self.client_address[0], fmt % args)

    def _allow_origin(self) -> str:
        origin = self.headers.get("Origin", "")
        return origin if re.match(r"^http://localhost:\d+$", origin) else ALLOWED_ORIGIN

    def _send_json(self, status: int, payload: dict):
        try:
            body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
            self.send_response(status)
            self.send_header("Content-Type", "application/json; charset=utf-8")
            self.send_header("Access-Control-Allow-Origin", self._allow_origin())
            self.send_header("Access-Control-Allow-Headers", "Content-Type")
            self.send_header("Access-Control-Allow-Methods", "GET, OPTIONS")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)
        except Exception as e:
            logger.error("http_send_fail status=%d err=%s", status, e, exc_info=True)

    def do_OPTIONS(self):
        try:
            self.send_response(204)
            self.send_header("Access-Control-Allow-Origin", self._allow_origin())
            self.send_header("Access-Control-Allow-Headers", "Content-Type")
            self.send_header("Access-Control-Allow-Methods", "GET, OPTIONS")
            self.end_headers()
        except Exception as e:
            logger.error("http_options_fail err=%s", e, exc_info=True)

    def do_GET(self):
        parsed = urllib.parse.urlparse(self.path)

        try:
            if parsed.path == "/health":
                return self._send_json(200, {"status": "ok"})

            if parsed.path == "/packages":
                return self._packages(parsed.query)

            return self._serve_static(parsed.path)
        except Exception as e:
            logger.error("request_unhandled_error path=%s err=%s", parsed.path, e, exc_info=True)
            return self._send_json(500, {"error": "internal_error"})

    def _packages(self, query: str):
        qs = urllib.parse.parse_qs(query or "")
        try:
            mode = mode_from_query(qs)
        except InvalidQuery:
            return self._send_json(400, {"error": "invalid_query", "objects": []})

        try:
            result = asyncio.run(AGGREGATOR.query_packages(mode))
        except Exception as e:
            logger.error("packages_fail mode=%r err=%s", mode, e, exc_info=True)
            return self._send_json(500, {"error": "Failed to fetch packages", "objects": []})

        logger.info("packages_ok mode=%r count=%d has_more=%s", mode, len(result.records), result.has_more)
        return self._send_json(200, result.to_payload())

    def _serve_static(self, path: str):
        try:
            if not os.path.isdir(UI_DIR):
                return self._send_json(404, {"error": "ui_not_built"})
            root = os.path.realpath(UI_DIR)
            if path in ("/", ""):
                file_path = os.path.join(root, "index.html")
            else:
                file_path = os.path.realpath(os.path.join(root, path.lstrip("/")))
                if not file_path.startswith(root + os.sep) or not os.path.isfile(file_path):
                    file_path = os.path.join(root, "index.html")
            if not os.path.exists(file_path):
                return self._send_json(404, {"error": "not_found"})
            ctype, _ = mimetypes.guess_type(file_path)
            with open(file_path, "rb") as f:
                data = f.read()
            self.send_response(200)
            self.send_header("Content-Type", ctype or "application/octet-stream")
            self.send_header("Content-Length", str(len(data)))
            self.end_headers()
            self.wfile.write(data)
        except Exception as e:
            logger.error("static_serve_fail path=%s err=%s", path, e, exc_info=True)
            return self._send_json(500, {"error": "static_serve_error"})

def main():
    httpd = None
    try:
        httpd = ThreadingHTTPServer((HOST, PORT), Handler)
        logger.info("server_start host=%s port=%d", HOST, PORT)
        httpd.serve_forever()
    except KeyboardInterrupt:
        pass
    except Exception as e:
        logger.critical("server_crash err=%s", e, exc_info=True)
        raise
    finally:
        if httpd is not None:
            httpd.server_close()

if __name__ == "__main__":
    main()
