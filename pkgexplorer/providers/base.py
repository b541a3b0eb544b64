from abc import ABC, abstractmethod

class RegistryProvider(ABC):
    @abstractmethod
    async def search(self, client, text, size, offset=0, weights=None):
        """Return {"names": [...], "total": int} for a registry search."""

    @abstractmethod
    async def fetch_manifest(self, client, name):
        """Return the full package manifest."""

class DownloadsProvider(ABC):
    @abstractmethod
    async def fetch_weekly(self, client, name):
        """Return the last-week download count."""
