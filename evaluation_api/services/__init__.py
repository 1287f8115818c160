"""
Service layer implementations.
"""

from evaluation_api.services.evaluation_service import EvaluationService

__all__ = ["EvaluationService"]
