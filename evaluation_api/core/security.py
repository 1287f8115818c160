"""
Credential handling utilities.

Provider keys arrive with every evaluation request and are never stored or
logged; only their presence and a short fingerprint are exposed.
"""

import hashlib
import secrets
from typing import Any, Mapping, Optional


def generate_request_id() -> str:
    """
    Generate a unique request ID for tracing.

    Returns:
        A random 8-byte hex string prefixed with 'req_'
    """
    return f"req_{secrets.token_hex(8)}"


def extract_api_key(credentials: Optional[Mapping[str, Any]]) -> Optional[str]:
    """
    Return the trimmed provider API key, or None when absent or blank.

    Args:
        credentials: The ``credentials`` object of an evaluation request
    """
    if not isinstance(credentials, Mapping):
        return None
    api_key = credentials.get("apiKey")
    if not isinstance(api_key, str):
        return None
    return api_key.strip() or None


def fingerprint_api_key(api_key: str) -> str:
    """
    Short, non-reversible fingerprint of an API key for log correlation.

    Args:
        api_key: The API key to fingerprint

    Returns:
        First 12 hex characters of the SHA-256 hash
    """
    return hashlib.sha256(api_key.encode()).hexdigest()[:12]
