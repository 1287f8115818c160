"""
Unit tests for the evaluation endpoint.
"""

import json
from typing import Any, AsyncIterator, Optional

import pytest
from httpx import AsyncClient

from evaluation_api.api.deps import get_evaluation_service
from evaluation_api.core.config import settings
from evaluation_api.core.constants import API_KEY_MISSING_IMPROVEMENT
from evaluation_api.domain.evaluation import EvaluationRequest
from evaluation_api.main import app


class ExplodingService:
    def evaluate(self, request: Optional[EvaluationRequest]) -> dict[str, Any]:
        raise RuntimeError("plan builder exploded")


@pytest.mark.asyncio
async def test_evaluate_success(async_client: AsyncClient, login_test_case: dict) -> None:
    """Test a complete evaluation round trip."""
    response = await async_client.post(
        "/api/evaluate",
        json={"providerId": "openai", "credentials": {"apiKey": "sk-1"}, "testCase": login_test_case},
    )
    assert response.status_code == 200

    data = response.json()
    assert data["providerId"] == "openai"
    assert data["risk_score"] == 20
    assert len(data["missing_assertions"]) == 1
    assert data["comprehensive_plan"]["coverage"]["specSteps"] == 2
    assert data["comprehensive_plan"]["spec"]["steps"][0]["headline"] == "Open login page"


@pytest.mark.asyncio
async def test_evaluate_checkout_plan(async_client: AsyncClient, checkout_test_case: dict) -> None:
    response = await async_client.post(
        "/api/evaluate",
        json={"providerId": "anthropic", "testCase": checkout_test_case},
    )
    assert response.status_code == 200

    plan = response.json()["comprehensive_plan"]
    assert plan["functionalHighlights"] == ["Flow: LoginFlow", "API: OrdersApi"]
    assert plan["sqlQueries"][0]["origin"] == "Fixtures, LoginFlow"


@pytest.mark.asyncio
async def test_evaluate_requires_provider(async_client: AsyncClient, login_test_case: dict) -> None:
    """Test missing providerId returns 400."""
    response = await async_client.post("/api/evaluate", json={"testCase": login_test_case})

    assert response.status_code == 400
    assert response.json() == {"error": "providerId is required"}


@pytest.mark.asyncio
async def test_evaluate_requires_title(async_client: AsyncClient) -> None:
    """Test a test case without a title returns 400."""
    response = await async_client.post(
        "/api/evaluate",
        json={"providerId": "openai", "testCase": {"steps": []}},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "testCase with a title is required"}


@pytest.mark.asyncio
async def test_evaluate_empty_body(async_client: AsyncClient) -> None:
    response = await async_client.post("/api/evaluate")

    assert response.status_code == 400
    assert response.json() == {"error": "providerId is required"}


@pytest.mark.asyncio
async def test_evaluate_unexpected_error(async_client: AsyncClient, login_test_case: dict) -> None:
    """Test unexpected failures map to a 500 with details."""
    app.dependency_overrides[get_evaluation_service] = ExplodingService
    try:
        response = await async_client.post(
            "/api/evaluate",
            json={"providerId": "openai", "testCase": login_test_case},
        )
    finally:
        app.dependency_overrides.pop(get_evaluation_service, None)

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error", "details": "plan builder exploded"}


@pytest.mark.asyncio
async def test_evaluate_body_too_large(
    async_client: AsyncClient,
    login_test_case: dict,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Test bodies over the configured limit are rejected with 413."""
    monkeypatch.setattr(settings.evaluation, "max_request_bytes", 64)

    response = await async_client.post(
        "/api/evaluate",
        json={"providerId": "openai", "testCase": login_test_case},
    )

    assert response.status_code == 413
    assert response.json() == {"error": "Request body too large"}


@pytest.mark.asyncio
async def test_cors_allows_any_origin(async_client: AsyncClient) -> None:
    response = await async_client.get("/api/health", headers={"Origin": "http://localhost:3000"})

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


async def _chunked(payload: bytes, size: int = 16) -> AsyncIterator[bytes]:
    for start in range(0, len(payload), size):
        yield payload[start:start + size]


@pytest.mark.asyncio
async def test_evaluate_non_object_test_case(async_client: AsyncClient) -> None:
    """Test a testCase that is not an object is treated as missing its title."""
    response = await async_client.post(
        "/api/evaluate",
        json={"providerId": "openai", "testCase": "Login"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "testCase with a title is required"}


@pytest.mark.asyncio
async def test_evaluate_accepts_non_string_provider(async_client: AsyncClient, login_test_case: dict) -> None:
    response = await async_client.post(
        "/api/evaluate",
        json={"providerId": 7, "testCase": login_test_case},
    )

    assert response.status_code == 200
    assert response.json()["providerId"] == 7


@pytest.mark.asyncio
async def test_evaluate_ignores_non_object_credentials(async_client: AsyncClient, login_test_case: dict) -> None:
    response = await async_client.post(
        "/api/evaluate",
        json={"providerId": "openai", "credentials": "k", "testCase": login_test_case},
    )

    assert response.status_code == 200
    assert response.json()["suggested_improvements"] == [API_KEY_MISSING_IMPROVEMENT]


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [b"[1, 2]", b'"Login"', b"{not json"])
async def test_evaluate_unusable_body(async_client: AsyncClient, body: bytes) -> None:
    """Test bodies that are not JSON objects get the providerId 400."""
    response = await async_client.post(
        "/api/evaluate",
        content=body,
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "providerId is required"}


@pytest.mark.asyncio
async def test_evaluate_chunked_body_too_large(
    async_client: AsyncClient,
    login_test_case: dict,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Test a streamed body without Content-Length is still bounded."""
    monkeypatch.setattr(settings.evaluation, "max_request_bytes", 64)
    payload = json.dumps({"providerId": "openai", "testCase": login_test_case}).encode()

    response = await async_client.post(
        "/api/evaluate",
        content=_chunked(payload),
        headers={"Content-Type": "application/json"},
    )

    assert "content-length" not in response.request.headers
    assert response.status_code == 413
    assert response.json() == {"error": "Request body too large"}


@pytest.mark.asyncio
async def test_evaluate_chunked_body_within_limit(async_client: AsyncClient, login_test_case: dict) -> None:
    payload = json.dumps({"providerId": "openai", "testCase": login_test_case}).encode()

    response = await async_client.post(
        "/api/evaluate",
        content=_chunked(payload),
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 200
    assert response.json()["comprehensive_plan"]["coverage"]["specSteps"] == 2
