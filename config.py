import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Global Config
API_URL = os.getenv("SOLIDGYM_API_URL", "http://localhost:5000").rstrip("/")
REQUEST_TIMEOUT = float(os.getenv("SOLIDGYM_TIMEOUT", 30))
LOG_LEVEL = os.getenv("SOLIDGYM_LOG_LEVEL", "INFO").upper()

# Durable client storage (auth token + dark mode flag)
STORAGE_FILE = Path(os.getenv("SOLIDGYM_STORAGE_FILE", str(Path.home() / ".solidgym_client.json")))

APP_NAME = "SOLID GYM"

# UI behaviour
SEARCH_DEBOUNCE_MS = 300
ALERT_TIMEOUT_MS = 5000
ROWS_PER_PAGE_OPTIONS = (5, 10, 25, 50)
DEFAULT_ROWS_PER_PAGE = 10

# Theme defaults
DEFAULT_THEME_MODE = "dark"
DEFAULT_PRIMARY_COLOR = "#1976d2"
DEFAULT_SECONDARY_COLOR = "#dc004e"

# Currency shown on billing screens and reports
CURRENCY = os.getenv("SOLIDGYM_CURRENCY", "PKR")
