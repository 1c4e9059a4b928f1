"""Config interface: loads .env and exposes all settings. .env is the source; this module is the interface."""

import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Project root (directory containing config.py)
ROOT = Path(__file__).resolve().parent
load_dotenv(ROOT / ".env")


def ensure_root_path() -> None:
    """Ensure project root is on sys.path (for entry points: collect, scrape_tools)."""
    root_str = str(ROOT)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "")  # empty = stderr only

# --- Shutdown ---
SHUTDOWN_ACTION_TIMEOUT = float(os.getenv("SHUTDOWN_ACTION_TIMEOUT", "30"))  # seconds per save action; <= 0 disables
SHUTDOWN_FAIL_FAST = _env_bool("SHUTDOWN_FAIL_FAST", "true")
# Relative to the working directory of the process, not ROOT
UNSAVED_PLACES_PATH = Path(os.getenv("UNSAVED_PLACES_PATH", "unsavedPlaces.json"))

# --- HTTP ---
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "30"))
HTTP_USER_AGENT = os.getenv("HTTP_USER_AGENT", "places-toolkit/0.1")

# --- Collector ---
DEFAULT_RECORD_KEY = os.getenv("DEFAULT_RECORD_KEY", "id")
COLLECT_BATCH_SIZE = int(os.getenv("COLLECT_BATCH_SIZE", "50"))

# --- Formatting ---
YAML_INDENT = int(os.getenv("YAML_INDENT", "2"))
RANDOM_STRING_LENGTH = 256

MONTH_MAP = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
