"""Configuration: env, remote store endpoints, fallback data paths."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Base paths (project root = parent of recordkeeper package)
PACKAGE_DIR = Path(__file__).resolve().parent
BASE_DIR = PACKAGE_DIR.parent

# Load .env from project root so RECORDKEEPER_* overrides are set
load_dotenv(BASE_DIR / ".env")

# Static files served alongside the app (second tier); mounted at /data
PUBLIC_DIR = Path(os.getenv("RECORDKEEPER_PUBLIC_DIR", str(BASE_DIR / "public")))
STATIC_DATA_DIR = PUBLIC_DIR / "data"
# JSON shipped inside the package (third tier)
BUNDLED_DATA_DIR = PACKAGE_DIR / "data"

# API
API_HOST = os.getenv("RECORDKEEPER_API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("RECORDKEEPER_API_PORT", "8000"))

# Remote store (json-server style mock, one per collection)
CONTACTS_REMOTE_URL = os.getenv("RECORDKEEPER_CONTACTS_URL", "http://localhost:3002")
MOVIES_REMOTE_URL = os.getenv("RECORDKEEPER_MOVIES_URL", "http://localhost:3001")
HTTP_TIMEOUT_SEC = float(os.getenv("RECORDKEEPER_HTTP_TIMEOUT", "5"))

# Contacts region filter
REGION_NAME = os.getenv("RECORDKEEPER_REGION", "Indiana")

LOG_LEVEL = os.getenv("RECORDKEEPER_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(levelname)s: %(name)s: %(message)s"
