"""
Pytest configuration and fixtures.
"""

from typing import Any, AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from evaluation_api.main import app


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def login_test_case() -> dict[str, Any]:
    """Two plain steps, only the second one asserting."""
    return {
        "title": "Login Test",
        "steps": [
            {"action": "Open login page", "expectedResult": "Page loads"},
            {"action": "Submit form", "expectedResult": "Expect success"},
        ],
    }


@pytest.fixture
def checkout_test_case() -> dict[str, Any]:
    """A test case exercising flows, APIs, HTTP and SQL through step context and supporting context."""
    return {
        "title": "Checkout",
        "steps": [
            {
                "index": 1,
                "action": "Log in as buyer.\nUses the shared login flow.",
                "expectedResult": "expect dashboard",
                "context": {
                    "resourceType": "flow-method",
                    "resourcePath": "LoginFlow",
                    "details": {"methodName": "signIn", "objectName": "loginFlow", "line": 12},
                },
            },
            {
                "index": 2,
                "action": "POST credentials",
                "expectedResult": "assert 200",
                "context": {
                    "resourceType": "flow-http",
                    "resourcePath": "LoginFlow",
                    "details": {"method": "post", "url": "/api/login", "payload": '{"user":"a"}'},
                },
            },
            {
                "index": 3,
                "action": "Create order through the orders API",
                "expectedResult": "expect order id",
                "context": {
                    "resourceType": "api",
                    "resourcePath": "OrdersApi",
                    "endpoint": "/api/orders",
                    "details": {
                        "exports": ["createOrder", "getOrder"],
                        "httpCalls": [{"method": "post", "url": "/api/orders"}],
                        "sqlSamples": ["SELECT * FROM orders"],
                    },
                },
            },
            {
                "index": 4,
                "action": "• LoginFlow: SELECT * FROM users\n• bad line without colon",
                "expectedResult": "expect rows",
                "context": {"resourceType": "sql-summary"},
            },
        ],
        "supportingContext": {
            "flows": [
                {
                    "label": "LoginFlow",
                    "summary": "Authenticates a user",
                    "functionNames": ["signIn", "signOut"],
                }
            ],
            "apis": [{"name": "OrdersApi", "label": "OrdersApi"}],
            "httpCalls": [{"method": "POST", "url": "/api/login", "source": "LoginSpec"}],
            "sqlQueries": [{"query": "SELECT * FROM users", "origin": "Fixtures"}],
        },
    }
