from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union


@dataclass(frozen=True)
class PackageLinks:
    registry_page: str
    homepage: Optional[str] = None
    repository: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        out = {"registryPage": self.registry_page}
        if self.homepage:
            out["homepage"] = self.homepage
        if self.repository:
            out["repository"] = self.repository
        return out


@dataclass(frozen=True)
class PackageRecord:
    """One enriched package, as served to the explorer UI."""

    name: str
    version: str
    description: str
    author: str
    license: str
    dependency_count: int
    weekly_downloads: int
    links: PackageLinks

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "author": self.author,
            "license": self.license,
            "dependencyCount": self.dependency_count,
            "weeklyDownloads": self.weekly_downloads,
            "links": self.links.to_dict(),
        }


@dataclass(frozen=True)
class TopQuery:
    page: int = 1
    page_size: Optional[int] = None


@dataclass(frozen=True)
class SearchQuery:
    text: str


@dataclass(frozen=True)
class FrameworkQuery:
    key: str


QueryMode = Union[TopQuery, SearchQuery, FrameworkQuery]


@dataclass
class QueryResult:
    records: List[PackageRecord] = field(default_factory=list)
    has_more: bool = False

    def to_payload(self) -> Dict:
        return {
            "objects": [{"package": r.to_dict()} for r in self.records],
            "hasMore": self.has_more,
        }
