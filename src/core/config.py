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
DB_PATH = PROJECT_ROOT / "data" / "db" / "crm-dashboard.db"
OUTPUT_DIR = PROJECT_ROOT / "output"

# =============================================================================
# DATA BACKEND (from environment)
# =============================================================================

BACKEND_URL = os.environ.get("BACKEND_URL", "").rstrip("/")
BACKEND_API_KEY = os.environ.get("BACKEND_API_KEY", "")
BACKEND_TIMEOUT_SECONDS = float(os.environ.get("BACKEND_TIMEOUT_SECONDS", "10"))

# =============================================================================
# TABLES
# =============================================================================

WORK_ITEMS_TABLE = "tasks"
LEAVE_SPANS_TABLE = "leave_requests"
LEADS_TABLE = "leads"
DEALS_TABLE = "deals"
PAYROLL_TABLE = "payroll"

# Joined employee name comes back as {"employee": {"full_name": ...}}
LEAVE_SPANS_SELECT = "*, employee:employees(full_name)"

# =============================================================================
# CALENDAR CONFIGURATION
# =============================================================================

MAX_ITEMS_PER_DAY = int(os.environ.get("MAX_ITEMS_PER_DAY", "3"))
WEEKDAY_HEADERS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

# =============================================================================
# CRM VOCABULARIES
# =============================================================================

LEAD_STATUSES = ["new", "contacted", "qualified", "proposal", "negotiation", "won", "lost"]
DEAL_STAGES = ["prospecting", "qualification", "proposal", "negotiation", "closed_won", "closed_lost"]
CLOSED_DEAL_STAGES = {"closed_won", "closed_lost"}

# =============================================================================
# REPORT CONFIGURATION
# =============================================================================

WORK_ITEM_HEADERS = ["Due Date", "Title", "Status", "Priority", "ID"]
LEAVE_SPAN_HEADERS = ["Employee", "Start Date", "End Date", "Days", "Type", "Status", "ID"]

# =============================================================================
# API CONFIGURATION
# =============================================================================

CRM_API_KEY = os.environ.get("CRM_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
API_VERSION = "1.0.0"
