"""
FastAPI dependencies.

Routes receive services through ``Depends`` so tests can swap them with
``app.dependency_overrides``.
"""

from typing import Optional

from evaluation_api.services.evaluation_service import EvaluationService


class ServiceContainer:
    """Process-wide holder for the (stateless) services."""

    _instance: Optional["ServiceContainer"] = None

    def __init__(self) -> None:
        self._evaluation_service: Optional[EvaluationService] = None

    @classmethod
    def get_instance(cls) -> "ServiceContainer":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def initialize(self) -> None:
        """Create services on first use; later calls are no-ops."""
        if self._evaluation_service is None:
            self._evaluation_service = EvaluationService()

    @property
    def evaluation_service(self) -> EvaluationService:
        self.initialize()
        return self._evaluation_service


container = ServiceContainer.get_instance()


def get_evaluation_service() -> EvaluationService:
    return container.evaluation_service
