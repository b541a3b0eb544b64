import re
from typing import Any, Dict, List, Optional

from pkgexplorer.models import PackageLinks, PackageRecord

UNKNOWN_AUTHOR = "Unknown"
UNKNOWN_LICENSE = "Not specified"


def normalize_repository_url(raw: Any) -> Optional[str]:
    # accepts "git+https://..." or {"type": "git", "url": "..."}
    if isinstance(raw, dict):
        raw = raw.get("url")
    if not isinstance(raw, str) or not raw.strip():
        return None
    url = raw.strip()
    url = re.sub(r'^git\+ssh://git@', 'https://', url)
    url = re.sub(r'^git\+', '', url)
    url = re.sub(r'^git://', 'https://', url)
    url = re.sub(r'(\.git)+$', '', url)
    return url


def normalize_author(raw: Any) -> str:
    if isinstance(raw, dict):
        raw = raw.get("name")
    if isinstance(raw, str) and raw.strip():
        return raw.strip()
    return UNKNOWN_AUTHOR


def normalize_license(raw: Any) -> str:
    # old manifests carry {"type": "MIT", "url": "..."}
    if isinstance(raw, dict):
        raw = raw.get("type")
    if isinstance(raw, str) and raw.strip():
        return raw.strip()
    return UNKNOWN_LICENSE


def normalize_search(data) -> Dict:
    """Reduce a registry search response to candidate names and the total hit count.

    Raises ValueError when the body does not look like a search response.
    """
    if not isinstance(data, dict) or not isinstance(data.get("objects"), list):
        raise ValueError("search response has no objects list")
    names: List[str] = []
    for obj in data["objects"]:
        name = ((obj or {}).get("package") or {}).get("name")
        if isinstance(name, str) and name:
            names.append(name)
    total = data.get("total")
    if isinstance(total, bool) or not isinstance(total, int):
        total = len(names)
    return {"names": names, "total": total}


def normalize_downloads(data) -> int:
    downloads = data.get("downloads") if isinstance(data, dict) else None
    if isinstance(downloads, bool) or not isinstance(downloads, int) or downloads < 0:
        raise ValueError(f"invalid downloads value: {downloads!r}")
    return downloads


def build_record(name: str, manifest: Dict, weekly_downloads: int, page_url: str) -> Optional[PackageRecord]:
    """Merge a manifest and a download count into a PackageRecord.

    Returns None when the manifest has no resolvable latest version.
    """
    latest = (manifest.get("dist-tags") or {}).get("latest")
    version_data = (manifest.get("versions") or {}).get(latest) if latest else None
    if not latest or not isinstance(version_data, dict):
        return None

    homepage = manifest.get("homepage")
    return PackageRecord(
        name=name,
        version=latest,
        description=manifest.get("description") or "",
        author=normalize_author(manifest.get("author")),
        license=normalize_license(manifest.get("license")),
        dependency_count=len(version_data.get("dependencies") or {}),
        weekly_downloads=weekly_downloads,
        links=PackageLinks(
            registry_page=f"{page_url}/{name}",
            homepage=homepage if isinstance(homepage, str) and homepage else None,
            repository=normalize_repository_url(manifest.get("repository")),
        ),
    )
