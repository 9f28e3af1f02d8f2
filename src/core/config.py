"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(
    os.environ.get("PAYROLL_DB_PATH", str(PROJECT_ROOT / "data" / "db" / "payroll.db"))
)

# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.environ.get("LOG_FILE", "")

# =============================================================================
# MATCHING CONFIGURATION
# =============================================================================

# Stored in place of a client name when a human rejects a match
REJECTED_MATCH_MARKER = "__REJECTED__"

# Client names are compared on their first N words ("Name Surname Cash" -> "name surname")
DEFAULT_MATCH_WORDS = 2

# Surname / first-name strategies ignore tokens this short or shorter
MIN_PARTIAL_NAME_LENGTH = 3

NORMALIZE_CACHE_SIZE = 1000

# =============================================================================
# CALENDAR CONFIGURATION
# =============================================================================

RED_CANCELLED_COLOR = "11"  # Cancelled, not owed
GREY_CANCELLED_COLOR = "8"  # Cancelled, client pays at next visit
UNTITLED_EVENT_TITLE = "Χωρίς τίτλο"

# =============================================================================
# PRICING
# =============================================================================

PRICE_SPLIT_TOLERANCE = 0.01
MAX_SESSION_PRICE = 1000.0
MAX_SUPERVISION_PRICE = 500.0

# =============================================================================
# SUPERVISION
# =============================================================================

SUPERVISION_KEYWORDS = ["Εποπτεία", "Supervision", "εποπτεια", "supervision"]
SUPERVISION_ENABLED = os.environ.get("SUPERVISION_ENABLED", "true").lower() == "true"
SUPERVISION_PRICE = float(os.environ.get("SUPERVISION_PRICE", "0"))
SUPERVISION_EMPLOYEE_PRICE = float(os.environ.get("SUPERVISION_EMPLOYEE_PRICE", "0"))
SUPERVISION_COMPANY_PRICE = float(os.environ.get("SUPERVISION_COMPANY_PRICE", "0"))

# =============================================================================
# API CONFIGURATION
# =============================================================================

PAYROLL_API_KEY = os.environ.get("PAYROLL_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
API_VERSION = "1.0.0"
