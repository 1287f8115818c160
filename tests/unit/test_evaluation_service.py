"""
Tests for the placeholder evaluation service.
"""

import pytest

from evaluation_api.core.constants import (
    ADD_STEPS_IMPROVEMENT,
    API_KEY_MISSING_IMPROVEMENT,
    API_KEY_RECEIVED_IMPROVEMENT,
)
from evaluation_api.core.exceptions import InvalidRequestError
from evaluation_api.domain.evaluation import EvaluationRequest
from evaluation_api.services.evaluation_service import (
    EvaluationService,
    build_helper_feedback,
    calculate_risk_score,
    find_missing_assertions,
)


@pytest.fixture
def service() -> EvaluationService:
    return EvaluationService()


def _request(test_case, provider_id="openai", credentials=None) -> EvaluationRequest:
    return EvaluationRequest.model_validate(
        {"providerId": provider_id, "credentials": credentials, "testCase": test_case}
    )


class TestRuleChecks:
    """Tests for the deterministic rule helpers."""

    def test_missing_assertions(self):
        warnings = find_missing_assertions(
            [
                {"index": 4, "expectedResult": "Page loads"},
                {"expectedResult": "EXPECT banner"},
                {"expectedResult": "Should assert total"},
                {},
            ]
        )

        assert warnings == [
            "Step 4 is missing an explicit assertion in the expected result.",
            "Step 4 is missing an explicit assertion in the expected result.",
        ]

    def test_risk_score(self):
        assert calculate_risk_score(1, 2) == 20
        assert calculate_risk_score(0, 0) == 40
        assert calculate_risk_score(9, 9) == 100

    def test_helper_feedback(self):
        feedback = build_helper_feedback(
            {"apis": [{"name": "A"}, {"id": "b-id"}, {}, {"name": "D"}]}
        )

        assert [item["name"] for item in feedback] == ["A", "b-id", "Helper"]
        assert build_helper_feedback({"apis": "nope"}) == []
        assert build_helper_feedback(None) == []


class TestEvaluationService:
    """Tests for EvaluationService.evaluate."""

    def test_login_case(self, service, login_test_case):
        result = service.evaluate(_request(login_test_case))

        assert result["providerId"] == "openai"
        assert result["risk_score"] == 20
        assert result["missing_assertions"] == [
            "Step 1 is missing an explicit assertion in the expected result."
        ]
        assert result["suggested_improvements"] == [API_KEY_MISSING_IMPROVEMENT]
        assert result["helper_feedback"] == []

        plan = result["comprehensive_plan"]
        assert plan["coverage"]["specSteps"] == 2
        assert plan["spec"]["steps"][0]["headline"] == "Open login page"
        assert result["summary"] == plan["summary"]

    def test_empty_steps(self, service):
        result = service.evaluate(_request({"title": "Empty", "steps": []}))

        assert result["risk_score"] == 40
        assert result["missing_assertions"] == []
        assert result["suggested_improvements"][0] == ADD_STEPS_IMPROVEMENT
        assert result["comprehensive_plan"]["coverage"]["specSteps"] == 0

    def test_api_key_received(self, service, login_test_case):
        result = service.evaluate(_request(login_test_case, credentials={"apiKey": "  sk-test  "}))

        assert result["suggested_improvements"] == [API_KEY_RECEIVED_IMPROVEMENT]

    def test_blank_api_key_counts_as_missing(self, service, login_test_case):
        result = service.evaluate(_request(login_test_case, credentials={"apiKey": "   "}))

        assert result["suggested_improvements"] == [API_KEY_MISSING_IMPROVEMENT]

    def test_checkout_case(self, service, checkout_test_case):
        result = service.evaluate(_request(checkout_test_case))

        assert result["risk_score"] == 0
        assert result["missing_assertions"] == []
        assert result["helper_feedback"][0]["name"] == "OrdersApi"
        assert result["comprehensive_plan"]["coverage"]["flows"] == 1

    def test_missing_provider(self, service, login_test_case):
        with pytest.raises(InvalidRequestError) as exc_info:
            service.evaluate(_request(login_test_case, provider_id=None))

        assert exc_info.value.message == "providerId is required"
        assert exc_info.value.status_code == 400

    def test_missing_body(self, service):
        with pytest.raises(InvalidRequestError):
            service.evaluate(None)

    def test_missing_title(self, service):
        with pytest.raises(InvalidRequestError) as exc_info:
            service.evaluate(_request({"steps": []}))

        assert exc_info.value.message == "testCase with a title is required"

    def test_non_object_test_case(self, service):
        with pytest.raises(InvalidRequestError) as exc_info:
            service.evaluate(_request("Login"))

        assert exc_info.value.message == "testCase with a title is required"

    def test_truthy_non_string_provider(self, service, login_test_case):
        result = service.evaluate(_request(login_test_case, provider_id=7, credentials="k"))

        assert result["providerId"] == 7
        assert result["suggested_improvements"] == [API_KEY_MISSING_IMPROVEMENT]
