# pkgexplorer/config.py
import os
from pathlib import Path
from dotenv import load_dotenv, find_dotenv

PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Project root .env first; the process env wins so deployments can override it
load_dotenv(PROJECT_ROOT / ".env", override=False)
load_dotenv(find_dotenv(usecwd=True), override=False)

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8080"))

REGISTRY_URL = os.getenv("REGISTRY_URL", "https://registry.npmjs.org").rstrip("/")
DOWNLOADS_API_URL = os.getenv("DOWNLOADS_API_URL", "https://api.npmjs.org").rstrip("/")
PACKAGE_PAGE_URL = os.getenv("PACKAGE_PAGE_URL", "https://www.npmjs.com/package").rstrip("/")

TOP_PAGE_SIZE = int(os.getenv("TOP_PAGE_SIZE", "21"))
SEARCH_PAGE_SIZE = int(os.getenv("SEARCH_PAGE_SIZE", "20"))

# httpx default is 5 seconds
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "5.0"))

UI_DIR = os.getenv("UI_DIR", os.path.join(os.path.dirname(__file__), "../ui_build"))
ALLOWED_ORIGIN = os.getenv("ALLOWED_ORIGIN", "http://localhost:3000")
