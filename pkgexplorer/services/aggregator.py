from __future__ import annotations
import asyncio
from typing import Callable, Dict, List, Optional

import httpx

from pkgexplorer.config import HTTP_TIMEOUT, PACKAGE_PAGE_URL, SEARCH_PAGE_SIZE, TOP_PAGE_SIZE
from pkgexplorer.models import (
    FrameworkQuery, PackageRecord, QueryMode, QueryResult, SearchQuery, TopQuery,
)
from pkgexplorer.providers.base import DownloadsProvider, RegistryProvider
from pkgexplorer.utils.strategies import SortStrategy, UpstreamOrder, WeeklyDownloadsSort
from pkgexplorer.utils.validation import build_record
from pkgexplorer.utils.logging_setup import configure_logging_from_env

logger = configure_logging_from_env(__name__)

TOP_QUERY_TEXT = "popularity:>1000"
TOP_QUERY_WEIGHTS = {"quality": 0.0, "popularity": 1.0, "maintenance": 0.0}

FRAMEWORK_QUERIES: Dict[str, str] = {
    "nextjs": "keywords:nextjs",
    "vuejs": "keywords:vue",
    "react": "keywords:react",
    "ui": "keywords:ui",
    "testing": "keywords:testing",
    "utilities": "keywords:utilities",
}


def default_client_factory() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=HTTP_TIMEOUT, follow_redirects=True)


class Aggregator:
    """Answers package queries by listing candidates and enriching each one.

    Every query opens its own HTTP client and keeps no state between calls.
    A failed listing call degrades to an empty result; a failed enrichment
    only drops that candidate.
    """

    def __init__(
        self,
        registry: RegistryProvider,
        downloads: DownloadsProvider,
        top_sorter: Optional[SortStrategy] = None,
        search_sorter: Optional[SortStrategy] = None,
        client_factory: Callable[[], httpx.AsyncClient] = default_client_factory,
        top_page_size: int = TOP_PAGE_SIZE,
        search_page_size: int = SEARCH_PAGE_SIZE,
        page_url: str = PACKAGE_PAGE_URL,
    ):
        self._registry = registry
        self._downloads = downloads
        self._top_sorter = top_sorter or WeeklyDownloadsSort(desc=True)
        self._search_sorter = search_sorter or UpstreamOrder()
        self._client_factory = client_factory
        self._top_page_size = top_page_size
        self._search_page_size = search_page_size
        self._page_url = page_url

    async def query_packages(self, mode: QueryMode) -> QueryResult:
        if isinstance(mode, TopQuery):
            return await self.top(mode.page, mode.page_size)
        if isinstance(mode, SearchQuery):
            return await self.search(mode.text)
        if isinstance(mode, FrameworkQuery):
            return await self.framework(mode.key)
        raise TypeError(f"unsupported query mode: {mode!r}")

    async def top(self, page: int = 1, page_size: Optional[int] = None) -> QueryResult:
        page = max(1, page)
        size = page_size or self._top_page_size
        async with self._client_factory() as client:
            try:
                listing = await self._registry.search(
                    client, TOP_QUERY_TEXT, size,
                    offset=(page - 1) * size, weights=TOP_QUERY_WEIGHTS,
                )
            except Exception as e:
                logger.error("top_listing_fail page=%d size=%d err=%s", page, size, e, exc_info=True)
                return QueryResult()
            records = await self._enrich_all(client, listing["names"])

        return QueryResult(
            records=self._top_sorter.sort(records),
            has_more=listing["total"] > page * size,
        )

    async def search(self, text: str) -> QueryResult:
        async with self._client_factory() as client:
            try:
                listing = await self._registry.search(client, text, self._search_page_size)
            except Exception as e:
                logger.error("search_listing_fail text=%r err=%s", text, e, exc_info=True)
                return QueryResult()
            records = await self._enrich_all(client, listing["names"])

        return QueryResult(records=self._search_sorter.sort(records), has_more=False)

    async def framework(self, key: str) -> QueryResult:
        text = FRAMEWORK_QUERIES.get(key, key)
        logger.info("framework_query key=%s text=%r", key, text)
        return await self.search(text)

    async def _enrich_all(self, client: httpx.AsyncClient, names: List[str]) -> List[PackageRecord]:
        results = await asyncio.gather(*(self._enrich(client, n) for n in names))
        records = [r for r in results if r is not None]
        if len(records) < len(names):
            logger.info("enrich_dropped kept=%d dropped=%d", len(records), len(names) - len(records))
        return records

    async def _enrich(self, client: httpx.AsyncClient, name: str) -> Optional[PackageRecord]:
        manifest, downloads = await asyncio.gather(
            self._registry.fetch_manifest(client, name),
            self._downloads.fetch_weekly(client, name),
            return_exceptions=True,
        )
        for part, result in (("manifest", manifest), ("downloads", downloads)):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning("enrich_fail name=%s part=%s err=%s", name, part, result)
                return None

        try:
            record = build_record(name, manifest, downloads, self._page_url)
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning("enrich_fail name=%s part=manifest err=%s", name, e)
            return None
        if record is None:
            logger.warning("enrich_fail name=%s err=missing latest version", name)
        return record
