import httpx

from pkgexplorer.providers.base import DownloadsProvider
from pkgexplorer.config import DOWNLOADS_API_URL
from pkgexplorer.utils.validation import normalize_downloads
from pkgexplorer.utils.logging_setup import configure_logging_from_env

logger = configure_logging_from_env(__name__)

class NpmDownloadsProvider(DownloadsProvider):
    def __init__(self, base_url: str = DOWNLOADS_API_URL, period: str = "last-week"):
        self.base_url = base_url.rstrip("/")
        self.period = period

    def point_url(self, name: str) -> str:
        # the downloads API takes scoped names unescaped
        return f"{self.base_url}/downloads/point/{self.period}/{name}"

    async def fetch_weekly(self, client: httpx.AsyncClient, name: str) -> int:
        response = await client.get(self.point_url(name))
        response.raise_for_status()
        downloads = normalize_downloads(response.json())
        logger.debug("Downloads | name=%s, period=%s, downloads=%d", name, self.period, downloads)
        return downloads
