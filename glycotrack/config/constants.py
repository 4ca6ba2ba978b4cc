"""
Application Constants and Configuration Values

This module contains fixed values shared across the application. Values that
depend on the deployment (keys, URLs, limits) live in ``settings.py``.
"""
from pathlib import Path

# Application paths
APP_DIR = Path(__file__).parent.parent
ROOT_DIR = APP_DIR.parent

# Anthropic Messages API
ANTHROPIC_BASE_URL = "https://api.anthropic.com"
ANTHROPIC_MESSAGES_PATH = "/v1/messages"
ANTHROPIC_API_VERSION = "2023-06-01"
DEFAULT_ANTHROPIC_MODEL = "claude-3-5-haiku-20241022"
DEFAULT_LLM_TIMEOUT_SECONDS = 60.0
REPORT_SUMMARY_MAX_TOKENS = 350
TREND_SUMMARY_MAX_TOKENS = 250
LLM_TEMPERATURE = 0.2

# Server defaults
DEFAULT_PORT = 4000
DEFAULT_HBA1C_HISTORY_LIMIT = 50
DEFAULT_SUMMARY_HISTORY_LIMIT = 5

# Plausible HbA1c percentage range, both bounds exclusive
HBA1C_MIN_PERCENT = 0.0
HBA1C_MAX_PERCENT = 25.0

# Storage tables
REPORTS_TABLE = "reports"
SUMMARIES_TABLE = "ai_summaries"
READINGS_TABLE = "hba1c_readings"

# User-facing fallback messages
NO_HISTORY_MESSAGE = "No HbA1c history saved yet. Upload reports with dates to see trends."
NO_MODEL_RESPONSE_MESSAGE = "No response from model."
DEFAULT_ADVICE_MESSAGE = "Consult your healthcare provider for personalized advice based on the report."
NO_TREND_SUMMARY_MESSAGE = "No trend summary."
MISSING_VALUE_PLACEHOLDER = "n/a"
