"""
Domain models.
"""

from evaluation_api.domain.evaluation import EvaluationRequest

__all__ = ["EvaluationRequest"]
