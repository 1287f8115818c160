"""
System-wide constants for the evaluation service.
"""

from enum import Enum


# =============================================================================
# Enums
# =============================================================================


class ResourceType(str, Enum):
    """Step context discriminators understood by the step deriver."""

    FLOW = "flow"
    FLOW_METHOD = "flow-method"
    FLOW_HTTP = "flow-http"
    FLOW_SQL = "flow-sql"
    API = "api"
    API_METHOD = "api-method"
    API_HTTP = "api-http"
    API_SQL = "api-sql"
    HTTP_CALL = "http-call"
    SQL_SUMMARY = "sql-summary"


# =============================================================================
# API Constants
# =============================================================================

# The Electron renderer posts to /api/evaluate, so routes are not versioned
API_PREFIX = "/api"
SERVICE_NAME = "playwright-converter-evaluation"
SERVICE_VERSION = "1.0.0"

# =============================================================================
# Coverage Constants
# =============================================================================

DEFAULT_FLOW_LABEL = "Flow helper"
DEFAULT_API_LABEL = "API helper"
DEFAULT_HTTP_METHOD = "REQUEST"
DYNAMIC_URL = "(dynamic URL)"
DEFAULT_STEP_SOURCE = "spec-step"

FLOW_SUMMARY_FALLBACK = "Flow helper orchestrates supporting actions."
API_SUMMARY_FALLBACK = "API helper encapsulates external integrations."

SUMMARY_SEPARATOR = " • "
SQL_SUMMARY_BULLET = "• "
ELLIPSIS = "…"

# Sample sizes used in coverage summaries
FLOW_FUNCTION_SAMPLE = 5
FLOW_HTTP_SAMPLE = 3
API_METHOD_SAMPLE = 3
API_HTTP_SAMPLE = 2
API_EXPORT_SAMPLE = 4

HEADLINE_MAX_LENGTH = 140

# =============================================================================
# Evaluation Constants
# =============================================================================

MISSING_ASSERTION_WEIGHT = 20
EMPTY_STEPS_WEIGHT = 40
MAX_RISK_SCORE = 100
MAX_HELPER_FEEDBACK = 3

ASSERTION_KEYWORDS = ("expect", "assert")

ADD_STEPS_IMPROVEMENT = "Add test steps so the evaluation has concrete actions to review."
API_KEY_RECEIVED_IMPROVEMENT = (
    "API key received by companion service. "
    "Forward it to the chosen provider for real evaluations."
)
API_KEY_MISSING_IMPROVEMENT = (
    "No API key received. Configure a provider key in the app to enable real AI calls."
)

HELPER_FEEDBACK_ISSUE = "No live AI analysis available in placeholder service."
HELPER_FEEDBACK_RECOMMENDATION = "Implement provider integration to get tailored feedback."
