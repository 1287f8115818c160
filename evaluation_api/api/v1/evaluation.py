"""
Test case evaluation endpoint.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends

from evaluation_api.api.deps import get_evaluation_service
from evaluation_api.core.exceptions import EvaluationServiceError, InternalServiceError
from evaluation_api.core.logging import LogContext, get_logger
from evaluation_api.core.security import generate_request_id
from evaluation_api.domain.evaluation import EvaluationRequest
from evaluation_api.services.evaluation_service import EvaluationService

logger = get_logger(__name__)

router = APIRouter()


@router.post("/evaluate")
async def evaluate_test_case(
    payload: Optional[EvaluationRequest] = None,
    evaluation_service: EvaluationService = Depends(get_evaluation_service),
) -> dict[str, Any]:
    """
    Evaluate a converted test case.

    Returns rule-based findings (missing assertions, risk score, suggested
    improvements) together with the comprehensive coverage plan.
    """
    provider_id = payload.provider_id if payload is not None else None
    with LogContext(request_id=generate_request_id(), provider_id=provider_id):
        try:
            return evaluation_service.evaluate(payload)
        except EvaluationServiceError:
            raise
        except Exception as e:
            logger.exception("Evaluation handler error", error=str(e))
            raise InternalServiceError(str(e)) from e
