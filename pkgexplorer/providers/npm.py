import urllib.parse
from typing import Any, Dict, Optional

import httpx

from pkgexplorer.providers.base import RegistryProvider
from pkgexplorer.config import REGISTRY_URL
from pkgexplorer.utils.validation import normalize_search
from pkgexplorer.utils.logging_setup import configure_logging_from_env

logger = configure_logging_from_env(__name__)

class NpmRegistryProvider(RegistryProvider):
    def __init__(self, base_url: str = REGISTRY_URL):
        self.base_url = base_url.rstrip("/")
        logger.debug("NpmRegistryProvider initialized | base_url=%s", self.base_url)

    def manifest_url(self, name: str) -> str:
        # scoped names: @scope/pkg -> @scope%2Fpkg
        return f"{self.base_url}/{urllib.parse.quote(name, safe='@')}"

    async def _get_json(self, client: httpx.AsyncClient, url: str, params: Optional[Dict] = None) -> Any:
        response = await client.get(url, params=params)
        response.raise_for_status()
        logger.debug("Registry response url=%s bytes=%d", response.url, len(response.content))
        return response.json()

    async def search(
        self,
        client: httpx.AsyncClient,
        text: str,
        size: int,
        offset: int = 0,
        weights: Optional[Dict[str, float]] = None,
    ) -> Dict:
        params: Dict[str, Any] = {"text": text, "size": size}
        if offset:
            params["from"] = offset
        if weights:
            params.update(weights)
        logger.info("Registry search | text=%r, size=%s, from=%s", text, size, offset)
        data = await self._get_json(client, f"{self.base_url}/-/v1/search", params)
        return normalize_search(data)

    async def fetch_manifest(self, client: httpx.AsyncClient, name: str) -> Dict:
        data = await self._get_json(client, self.manifest_url(name))
        if not isinstance(data, dict):
            raise ValueError(f"manifest for {name!r} is not an object")
        return data
