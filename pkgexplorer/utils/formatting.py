import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')

INSTALL_TEMPLATES = {
    "npm": "npm install {name}",
    "yarn": "yarn add {name}",
    "pnpm": "pnpm add {name}",
}


def _one_decimal(value: float) -> str:
    # ties round up on the float's exact binary value, as JS toFixed does
    return str(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def format_downloads(downloads: Union[int, str, None]) -> str:
    """Compact display form of a download count: 1500000 -> "1.5M", 2500 -> "2.5K"."""
    if isinstance(downloads, bool):
        return "0"
    if isinstance(downloads, int):
        num = downloads
    else:
        m = _LEADING_INT.match(str(downloads or ""))
        if not m:
            return "0"
        num = int(m.group(1))

    if num >= 1_000_000:
        return f"{_one_decimal(num / 1_000_000)}M"
    if num >= 1_000:
        return f"{_one_decimal(num / 1_000)}K"
    return str(num)


def install_command(package_name: str, package_manager: str = "npm") -> str:
    template = INSTALL_TEMPLATES.get(package_manager, INSTALL_TEMPLATES["npm"])
    return template.format(name=package_name)
