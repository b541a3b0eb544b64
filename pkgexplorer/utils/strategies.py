from __future__ import annotations
from typing import List, Protocol
from pkgexplorer.models import PackageRecord

class SortStrategy(Protocol):
    def sort(self, records: List[PackageRecord]) -> List[PackageRecord]: ...

class WeeklyDownloadsSort(SortStrategy):
    def __init__(self, desc: bool = True):
        self._desc = desc

    def sort(self, records: List[PackageRecord]) -> List[PackageRecord]:
        return sorted(records, key=lambda r: int(r.weekly_downloads), reverse=self._desc)

class UpstreamOrder(SortStrategy):
    """Keeps the registry's relevance order."""

    def sort(self, records: List[PackageRecord]) -> List[PackageRecord]:
        return list(records)
