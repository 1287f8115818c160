"""
Placeholder test-case evaluation.

Applies deterministic rule checks to a test case and embeds its
comprehensive coverage plan. No AI provider is contacted.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from evaluation_api.core.constants import (
    ADD_STEPS_IMPROVEMENT,
    API_KEY_MISSING_IMPROVEMENT,
    API_KEY_RECEIVED_IMPROVEMENT,
    ASSERTION_KEYWORDS,
    EMPTY_STEPS_WEIGHT,
    HELPER_FEEDBACK_ISSUE,
    HELPER_FEEDBACK_RECOMMENDATION,
    MAX_HELPER_FEEDBACK,
    MAX_RISK_SCORE,
    MISSING_ASSERTION_WEIGHT,
)
from evaluation_api.core.exceptions import InvalidRequestError
from evaluation_api.core.logging import get_logger
from evaluation_api.core.security import extract_api_key, fingerprint_api_key
from evaluation_api.coverage.plan_builder import build_comprehensive_plan
from evaluation_api.domain.evaluation import EvaluationRequest

logger = get_logger(__name__)


def find_missing_assertions(steps: list[Any]) -> list[str]:
    """
    Flag steps whose expected result never mentions an assertion.

    Steps without an ``index`` are reported by their 1-based position.
    """
    warnings = []
    for position, step in enumerate(steps, start=1):
        data = step if isinstance(step, Mapping) else {}
        expected = str(data.get("expectedResult") or "").lower()
        if not any(keyword in expected for keyword in ASSERTION_KEYWORDS):
            step_number = data.get("index") or position
            warnings.append(
                f"Step {step_number} is missing an explicit assertion in the expected result."
            )
    return warnings


def calculate_risk_score(missing_assertion_count: int, step_count: int) -> int:
    score = missing_assertion_count * MISSING_ASSERTION_WEIGHT
    if step_count == 0:
        score += EMPTY_STEPS_WEIGHT
    return min(MAX_RISK_SCORE, score)


def build_helper_feedback(supporting_context: Any) -> list[dict[str, str]]:
    apis = supporting_context.get("apis") if isinstance(supporting_context, Mapping) else None
    if not isinstance(apis, list):
        return []
    feedback = []
    for helper in apis[:MAX_HELPER_FEEDBACK]:
        data = helper if isinstance(helper, Mapping) else {}
        feedback.append(
            {
                "name": str(data.get("name") or data.get("id") or "Helper"),
                "issue": HELPER_FEEDBACK_ISSUE,
                "recommendation": HELPER_FEEDBACK_RECOMMENDATION,
            }
        )
    return feedback


class EvaluationService:
    """
    Service producing the placeholder evaluation of a test case.
    """

    def evaluate(self, request: Optional[EvaluationRequest]) -> dict[str, Any]:
        """
        Evaluate a test case.

        Args:
            request: Parsed request body (None when the body was empty)

        Returns:
            Evaluation payload including ``comprehensive_plan``

        Raises:
            InvalidRequestError: If providerId or a titled testCase is missing
        """
        if request is None or not request.provider_id:
            raise InvalidRequestError("providerId is required", field="providerId")

        test_case = request.test_case
        if not isinstance(test_case, Mapping) or not test_case.get("title"):
            raise InvalidRequestError("testCase with a title is required", field="testCase")

        steps = test_case.get("steps")
        steps = steps if isinstance(steps, list) else []

        missing_assertions = find_missing_assertions(steps)
        improvements = []
        if not steps:
            improvements.append(ADD_STEPS_IMPROVEMENT)

        api_key = extract_api_key(request.credentials)
        if api_key:
            improvements.append(API_KEY_RECEIVED_IMPROVEMENT)
        else:
            improvements.append(API_KEY_MISSING_IMPROVEMENT)

        plan = build_comprehensive_plan(test_case)
        risk_score = calculate_risk_score(len(missing_assertions), len(steps))

        logger.info(
            "Evaluation complete",
            provider_id=request.provider_id,
            api_key_fingerprint=fingerprint_api_key(api_key) if api_key else None,
            steps=len(steps),
            missing_assertions=len(missing_assertions),
            risk_score=risk_score,
        )

        return {
            "providerId": request.provider_id,
            "summary": plan["summary"],
            "risk_score": risk_score,
            "missing_assertions": missing_assertions,
            "suggested_improvements": improvements,
            "helper_feedback": build_helper_feedback(test_case.get("supportingContext")),
            "comprehensive_plan": plan,
        }
